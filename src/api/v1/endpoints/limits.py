"""Endpoints exposing the effective plan, limits and usage."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_current_user, get_db_session, require_company
from src.db.models.user import User
from src.plans.capabilities import has_full_access
from src.plans.catalog import serialize_limit
from src.plans.entitlements import can_add_resource, can_use_feature
from src.plans.resolver import (
    SOURCE_LIFETIME,
    STATUS_NONE,
    full_access_plan,
    lifetime_access_plan,
    resolve,
)
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.tenant_repo import TenantRepo
from src.repositories.usage_repo import UsageRepo


router = APIRouter(prefix="/limits", tags=["limits"])


@router.get("/current")
async def current_limits(
    tenant_id: UUID = Depends(require_company),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    tenants = TenantRepo(db)
    subscription = await SubscriptionRepo(db).get(tenant_id)
    full_access = has_full_access(user)
    lifetime = await tenants.has_lifetime_access(tenant_id)
    if full_access:
        effective = full_access_plan()
    elif lifetime:
        effective = lifetime_access_plan()
    else:
        effective = resolve(subscription)

    if lifetime:
        status = SOURCE_LIFETIME
    else:
        status = subscription.status if subscription else STATUS_NONE

    usage = await UsageRepo(db).snapshot(tenant_id)
    flags = await tenants.get_feature_flags(tenant_id)
    checks = {
        resource: can_add_resource(effective, resource, count)
        for resource, count in usage.items()
    }

    return {
        "subscribed": subscription is not None,
        "plan_id": effective.plan_id,
        "plan_name": effective.name,
        "plan_source": effective.source,
        "is_overridden": effective.is_overridden,
        "has_full_access": full_access or lifetime,
        "lifetime_access": lifetime,
        "status": status,
        "billing_cycle": subscription.billing_cycle if subscription else None,
        "period_end": (
            str(subscription.current_period_end)
            if subscription and subscription.current_period_end
            else None
        ),
        "limits": {
            resource: serialize_limit(check.limit) for resource, check in checks.items()
        },
        "remaining": {
            resource: serialize_limit(check.remaining) for resource, check in checks.items()
        },
        "usage": usage,
        "can_add": {resource: check.allowed for resource, check in checks.items()},
        "features": {
            feature: can_use_feature(effective, feature, flags)
            for feature in effective.plan.features
        },
        "nav": list(effective.plan.nav),
    }
