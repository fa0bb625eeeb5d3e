"""Super-administrator plan override endpoints."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_current_user, get_db_session
from src.db.models.user import User
from src.plans.capabilities import is_super_admin
from src.plans.catalog import lookup
from src.plans.resolver import resolve
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.tenant_repo import TenantRepo
from src.schemas.plan import PlanOverrideRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/tenants/{tenant_id}/override")
async def set_plan_override(
    tenant_id: UUID,
    body: PlanOverrideRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    if not is_super_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    plan_id = None
    if body.plan is not None:
        plan = lookup(body.plan)
        if plan is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid plan")
        plan_id = plan.id

    repo = SubscriptionRepo(db)
    subscription = await repo.get(tenant_id)
    if subscription is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")

    subscription = await repo.set_override(subscription, plan_id, body.reason, user.id)
    logger.info(
        f"Super admin {user.id} set plan override for tenant {tenant_id} "
        f"to {plan_id!r} (reason: {body.reason!r})"
    )

    effective = resolve(subscription)
    return {
        "success": True,
        "plan": plan_id,
        "effective_plan_id": effective.plan_id,
        "override_reason": subscription.override_reason,
        "override_at": subscription.override_at.isoformat() if subscription.override_at else None,
    }


@router.post("/tenants/{tenant_id}/lifetime")
async def set_lifetime_access(
    tenant_id: UUID,
    enabled: bool,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Grant or revoke company-wide lifetime access to the top tier."""
    if not is_super_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    repo = TenantRepo(db)
    tenant = await repo.get(tenant_id)
    if tenant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")

    await repo.set_lifetime_access(tenant, enabled)
    logger.info(f"Super admin {user.id} set lifetime access for tenant {tenant_id} to {enabled}")
    return {"success": True, "tenant_id": str(tenant_id), "lifetime_access": enabled}
