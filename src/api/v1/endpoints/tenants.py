"""Endpoints for provisioning tenants (companies)."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_current_user, get_db_session
from src.db.models.user import ROLE_ADMIN, User
from src.plans.catalog import serialize_limit
from src.plans.resolver import resolve
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.tenant_repo import TenantRepo
from src.repositories.user_repo import UserRepo


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("/create")
async def create_tenant(
    name: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    if user.tenant_id is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already belongs to a company",
        )

    tenant = await TenantRepo(db).create(name)
    subscription = await SubscriptionRepo(db).create_default(tenant.id)
    await UserRepo(db).attach_to_tenant(user, tenant.id, ROLE_ADMIN)
    logger.info(f"Provisioned tenant {tenant.id} for user {user.id}")

    effective = resolve(subscription)
    return {
        "tenant_id": str(tenant.id),
        "name": tenant.name,
        "plan_id": effective.plan_id,
        "plan_name": effective.name,
        "status": subscription.status,
        "limits": {
            resource: serialize_limit(limit)
            for resource, limit in effective.plan.limits.items()
        },
    }
