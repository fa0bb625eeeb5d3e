"""Usage gate wrapping plan-limited mutations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional
from uuid import UUID

from fastapi import status

from src.core.exceptions import EntitlementDenied
from src.plans.capabilities import Caller, has_full_access
from src.plans.catalog import lookup, serialize_limit
from src.plans.entitlements import (
    ResourceCheck,
    can_add_resource,
    can_use_feature,
    feature_locked_message,
    limit_reached_message,
    suggest_upgrade,
)
from src.plans.resolver import (
    EffectivePlan,
    full_access_plan,
    lifetime_access_plan,
    resolve,
)


logger = logging.getLogger(__name__)

LIMIT_REACHED = "LIMIT_REACHED"
FEATURE_LOCKED = "FEATURE_LOCKED"
NO_SUBSCRIPTION = "NO_SUBSCRIPTION"


@dataclass
class GateDecision:
    """Result of one pass through the gate; ``body`` is set on denial."""

    proceed: bool
    http_status: int = status.HTTP_200_OK
    message: Optional[str] = None
    body: Dict[str, Any] = field(default_factory=dict)
    effective_plan: Optional[EffectivePlan] = None
    check: Optional[ResourceCheck] = None
    result: Any = None

    def raise_for_denial(self) -> None:
        if not self.proceed:
            raise EntitlementDenied(self.http_status, self.message or "Not permitted", self.body)


class UsageGate:
    """
    Allow or deny a gated action for a tenant.

    Every call re-reads the subscription and the live counts; nothing is
    cached between requests, so upgrades and override changes apply on the
    next request.
    """

    def __init__(self, subscriptions, usage, tenants=None) -> None:
        self.subscriptions = subscriptions
        self.usage = usage
        self.tenants = tenants

    async def _effective_plan(
        self, tenant_id: UUID, caller: Optional[Caller]
    ) -> tuple[Optional[EffectivePlan], Optional[GateDecision]]:
        if has_full_access(caller):
            return full_access_plan(), None
        if self.tenants is not None and await self.tenants.has_lifetime_access(tenant_id):
            return lifetime_access_plan(), None

        subscription = await self.subscriptions.get(tenant_id)
        if subscription is None:
            logger.warning(f"Tenant {tenant_id} has no subscription record; denying")
            return None, GateDecision(
                proceed=False,
                http_status=status.HTTP_400_BAD_REQUEST,
                message="No subscription found for this company",
                body={"code": NO_SUBSCRIPTION},
            )
        return resolve(subscription), None

    async def guard(
        self, tenant_id: UUID, resource: str, caller: Optional[Caller] = None
    ) -> GateDecision:
        """Decide whether the tenant may create one more ``resource`` row."""

        effective, denied = await self._effective_plan(tenant_id, caller)
        if denied is not None:
            return denied

        current = await self.usage.count(tenant_id, resource)
        check = can_add_resource(effective, resource, current)
        if check.allowed:
            return GateDecision(proceed=True, effective_plan=effective, check=check)

        upgrade = suggest_upgrade(effective.plan, resource=resource, current_count=current)
        message = limit_reached_message(check, effective.name)
        logger.info(
            f"Tenant {tenant_id} at {resource} limit {check.current_count}/{check.limit} "
            f"on plan {effective.plan_id}"
        )
        return GateDecision(
            proceed=False,
            http_status=status.HTTP_403_FORBIDDEN,
            message=message,
            body={
                "code": LIMIT_REACHED,
                "currentUsage": check.current_count,
                "limit": serialize_limit(check.limit),
                "upgradeRequired": upgrade,
            },
            effective_plan=effective,
            check=check,
        )

    async def guard_feature(
        self, tenant_id: UUID, feature: str, caller: Optional[Caller] = None
    ) -> GateDecision:
        """Decide whether the tenant's plan includes ``feature``."""

        effective, denied = await self._effective_plan(tenant_id, caller)
        if denied is not None:
            return denied

        flags = await self.tenants.get_feature_flags(tenant_id) if self.tenants else None
        if can_use_feature(effective, feature, flags):
            return GateDecision(proceed=True, effective_plan=effective)

        upgrade = suggest_upgrade(effective.plan, feature=feature)
        upgrade_plan = lookup(upgrade)
        return GateDecision(
            proceed=False,
            http_status=status.HTTP_403_FORBIDDEN,
            message=feature_locked_message(feature, upgrade_plan.name if upgrade_plan else None),
            body={"code": FEATURE_LOCKED, "feature": feature, "upgradeRequired": upgrade},
            effective_plan=effective,
        )

    async def create_within_limit(
        self,
        tenant_id: UUID,
        resource: str,
        action: Callable[[], Awaitable[Any]],
        caller: Optional[Caller] = None,
    ) -> GateDecision:
        """
        Run ``action`` only if the limit allows it, holding the tenant lock
        from the count through the insert.
        """
        async with self.subscriptions.locked(tenant_id):
            decision = await self.guard(tenant_id, resource, caller=caller)
            if decision.proceed:
                decision.result = await action()
            return decision
