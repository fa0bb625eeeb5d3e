"""Repository utilities for tenant subscriptions."""
from __future__ import annotations

import datetime as dt
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.subscription import Subscription
from src.plans.catalog import DEFAULT_PLAN_ID


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class SubscriptionRepo:
    """Data-access helpers for :class:`Subscription`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, tenant_id: UUID, for_update: bool = False) -> Subscription | None:
        query = select(Subscription).where(Subscription.tenant_id == tenant_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalars().first()

    @asynccontextmanager
    async def locked(self, tenant_id: UUID) -> AsyncIterator[None]:
        """
        Hold the tenant's subscription row lock for the rest of the transaction.

        Concurrent count-then-insert sequences for the same tenant queue up
        behind this lock. Backends without row locks (SQLite) already
        serialise writers.
        """
        await self.get(tenant_id, for_update=True)
        yield

    async def create_default(self, tenant_id: UUID) -> Subscription:
        subscription = Subscription(
            tenant_id=tenant_id,
            assigned_plan_id=DEFAULT_PLAN_ID,
            status="none",
            billing_cycle="monthly",
            updated_at=_now(),
        )
        self.session.add(subscription)
        await self.session.flush()
        return subscription

    async def assign_plan(
        self,
        subscription: Subscription,
        plan_id: str,
        billing_cycle: str,
        period_start: dt.date,
        period_end: dt.date,
        status: str = "active",
    ) -> Subscription:
        subscription.assigned_plan_id = plan_id
        subscription.billing_cycle = billing_cycle
        subscription.current_period_start = period_start
        subscription.current_period_end = period_end
        subscription.status = status
        subscription.updated_at = _now()
        self.session.add(subscription)
        await self.session.flush()
        return subscription

    async def set_status(self, subscription: Subscription, status: str) -> Subscription:
        subscription.status = status
        subscription.updated_at = _now()
        self.session.add(subscription)
        await self.session.flush()
        return subscription

    async def set_override(
        self,
        subscription: Subscription,
        plan_id: Optional[str],
        reason: Optional[str],
        by_user_id: UUID,
    ) -> Subscription:
        """Set or clear (``plan_id=None``) the administrator override."""
        subscription.override_plan_id = plan_id
        subscription.override_reason = reason
        subscription.override_by = by_user_id
        subscription.override_at = _now() if plan_id else None
        subscription.updated_at = _now()
        self.session.add(subscription)
        await self.session.flush()
        return subscription
