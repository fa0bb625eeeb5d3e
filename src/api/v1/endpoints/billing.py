"""Endpoints for managing tenant subscriptions."""
from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_current_user, get_db_session, require_company
from src.db.models.subscription import SUBSCRIPTION_STATUSES
from src.db.models.user import ROLE_ADMIN, User
from src.plans.catalog import DEFAULT_PLAN_ID, lookup, serialize_limit
from src.plans.resolver import resolve
from src.repositories.subscription_repo import SubscriptionRepo
from src.services.rate_limit import check_rate_limit


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["billing"])


def _require_admin(user: User) -> None:
    if user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can manage billing",
        )


async def _load_subscription(repo: SubscriptionRepo, tenant_id: UUID):
    subscription = await repo.get(tenant_id)
    if subscription is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No subscription found for this company",
        )
    return subscription


def _subscription_response(subscription):
    effective = resolve(subscription)
    return {
        "status": "ok",
        "assigned_plan_id": subscription.assigned_plan_id,
        "plan_id": effective.plan_id,
        "plan_name": effective.name,
        "plan_source": effective.source,
        "subscription_status": subscription.status,
        "billing_cycle": subscription.billing_cycle,
        "period_start": (
            str(subscription.current_period_start) if subscription.current_period_start else None
        ),
        "period_end": (
            str(subscription.current_period_end) if subscription.current_period_end else None
        ),
        "limits": {
            resource: serialize_limit(limit)
            for resource, limit in effective.plan.limits.items()
        },
    }


@router.post("/subscribe")
async def subscribe(
    plan_id: str,
    cycle: str = "monthly",
    tenant_id: UUID = Depends(require_company),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Record a completed checkout for ``plan_id``."""
    _require_admin(user)

    if cycle not in {"monthly", "annual"}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid billing cycle",
        )

    await check_rate_limit(str(tenant_id), scope="billing")

    plan = lookup(plan_id)
    if plan is None or plan.id == DEFAULT_PLAN_ID:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Plan not found",
        )

    start = date.today()
    delta = relativedelta(months=1) if cycle == "monthly" else relativedelta(years=1)
    end = start + delta

    repo = SubscriptionRepo(db)
    subscription = await _load_subscription(repo, tenant_id)
    subscription = await repo.assign_plan(subscription, plan.id, cycle, start, end)
    logger.info(f"Tenant {tenant_id} subscribed to {plan.id} ({cycle})")
    return _subscription_response(subscription)


@router.post("/status")
async def update_status(
    new_status: str,
    tenant_id: UUID = Depends(require_company),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Apply a subscription lifecycle transition; cancelling keeps the assigned plan."""
    _require_admin(user)

    if new_status not in SUBSCRIPTION_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid subscription status",
        )

    repo = SubscriptionRepo(db)
    subscription = await _load_subscription(repo, tenant_id)
    previous = subscription.status
    subscription = await repo.set_status(subscription, new_status)
    logger.info(f"Tenant {tenant_id} subscription status {previous} -> {new_status}")
    return _subscription_response(subscription)
