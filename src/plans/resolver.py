"""Resolve a tenant's stored subscription state into the plan actually enforced."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from src.plans.catalog import (
    PlanDefinition,
    get_default_plan,
    list_plans,
    lookup,
)


logger = logging.getLogger(__name__)

SOURCE_OVERRIDE = "override"
SOURCE_SUBSCRIPTION = "subscription"
SOURCE_DEFAULT = "default"
SOURCE_FULL_ACCESS = "full_access"
SOURCE_LIFETIME = "lifetime"

STATUS_NONE = "none"


class SubscriptionState(Protocol):
    """Fields of a tenant subscription the resolver reads."""

    assigned_plan_id: Optional[str]
    override_plan_id: Optional[str]
    status: Optional[str]


@dataclass(frozen=True)
class EffectivePlan:
    """The plan enforced for a tenant after override precedence is applied."""

    plan: PlanDefinition
    source: str
    is_overridden: bool
    subscription_status: str

    @property
    def plan_id(self) -> str:
        return self.plan.id

    @property
    def name(self) -> str:
        return self.plan.name


def resolve(subscription: Optional[SubscriptionState]) -> EffectivePlan:
    """
    Compute the effective plan for ``subscription``.

    A non-empty override always wins, whatever the subscription status; a
    cancelled tenant with a comped override keeps the override. Otherwise the
    assigned plan applies. Ids missing from the catalog degrade to the default
    plan instead of raising, so entitlement checks never fail on bad billing
    data.
    """
    if subscription is None:
        return EffectivePlan(
            plan=get_default_plan(),
            source=SOURCE_DEFAULT,
            is_overridden=False,
            subscription_status=STATUS_NONE,
        )

    status = subscription.status or STATUS_NONE
    override_id = subscription.override_plan_id or None

    if override_id is not None:
        plan = lookup(override_id)
        if plan is not None:
            return EffectivePlan(plan, SOURCE_OVERRIDE, True, status)
        logger.warning(f"Override plan '{override_id}' is not in the catalog; using default plan")
        return EffectivePlan(get_default_plan(), SOURCE_DEFAULT, True, status)

    plan = lookup(subscription.assigned_plan_id)
    if plan is not None:
        return EffectivePlan(plan, SOURCE_SUBSCRIPTION, False, status)

    if subscription.assigned_plan_id:
        logger.warning(
            f"Assigned plan '{subscription.assigned_plan_id}' is not in the catalog; "
            "using default plan"
        )
    return EffectivePlan(get_default_plan(), SOURCE_DEFAULT, False, status)


def full_access_plan() -> EffectivePlan:
    """Top-tier plan handed to callers whose identity bypasses plan logic."""
    return EffectivePlan(
        plan=list_plans()[-1],
        source=SOURCE_FULL_ACCESS,
        is_overridden=False,
        subscription_status="active",
    )


def lifetime_access_plan() -> EffectivePlan:
    """Top-tier plan for companies granted lifetime access."""
    return EffectivePlan(
        plan=list_plans()[-1],
        source=SOURCE_LIFETIME,
        is_overridden=False,
        subscription_status=SOURCE_LIFETIME,
    )
