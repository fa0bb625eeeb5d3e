"""Feature and resource-limit predicates over an already resolved plan."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from src.plans.catalog import (
    FEATURES,
    UNLIMITED,
    Limit,
    PlanDefinition,
    higher_tiers,
)
from src.plans.resolver import EffectivePlan


logger = logging.getLogger(__name__)

# Policy for feature names the catalog does not define: deny.
UNKNOWN_FEATURE_ALLOWED = False

RESOURCE_LABELS = {
    "properties": ("property", "properties"),
    "team_members": ("team member", "team members"),
    "social_platforms": ("social platform", "social platforms"),
}

FEATURE_LABELS = {
    "showings": "Showings",
    "invoices": "Invoices",
    "analytics": "Analytics",
    "automations": "Automations",
    "payment_processing": "Payment Processing",
    "custom_integrations": "Custom Integrations",
    "tenant_portal": "Tenant Portal",
    "social": "Social Media",
}


@dataclass(frozen=True)
class ResourceCheck:
    """Outcome of asking whether one more ``resource`` row may be created."""

    resource: str
    allowed: bool
    current_count: int
    limit: Limit
    remaining: Limit

    @property
    def is_unlimited(self) -> bool:
        return self.limit is UNLIMITED


def can_use_feature(
    effective_plan: EffectivePlan,
    feature: str,
    feature_flags: Optional[Mapping[str, object]] = None,
) -> bool:
    """
    Return whether ``feature`` is enabled for the effective plan.

    A tenant feature flag explicitly set to ``True`` grants the feature on any
    plan. Names the catalog does not know resolve to
    :data:`UNKNOWN_FEATURE_ALLOWED`.
    """
    if feature_flags and feature_flags.get(feature) is True:
        return True

    enabled = effective_plan.plan.has_feature(feature)
    if enabled is None:
        logger.warning(f"Unknown feature '{feature}' requested; applying default policy")
        return UNKNOWN_FEATURE_ALLOWED
    return enabled


def can_add_resource(
    effective_plan: EffectivePlan, resource: str, current_count: int
) -> ResourceCheck:
    """Check ``current_count`` against the effective plan's limit for ``resource``."""
    limit = effective_plan.plan.limit_for(resource)
    if limit is None:
        logger.warning(f"No limit defined for resource '{resource}'; denying")
        limit = 0

    if limit is UNLIMITED:
        return ResourceCheck(resource, True, current_count, UNLIMITED, UNLIMITED)

    return ResourceCheck(
        resource=resource,
        allowed=current_count < limit,
        current_count=current_count,
        limit=limit,
        remaining=max(limit - current_count, 0),
    )


def suggest_upgrade(
    plan: PlanDefinition,
    resource: Optional[str] = None,
    current_count: int = 0,
    feature: Optional[str] = None,
) -> Optional[str]:
    """Return the id of the cheapest higher tier that would permit the action."""
    for candidate in higher_tiers(plan):
        if resource is not None:
            limit = candidate.limit_for(resource)
            if limit is UNLIMITED or (limit is not None and current_count < limit):
                return candidate.id
        elif feature is not None and candidate.has_feature(feature):
            return candidate.id
    return None


def limit_reached_message(check: ResourceCheck, plan_name: str) -> str:
    singular, plural = RESOURCE_LABELS.get(check.resource, (check.resource, check.resource))
    noun = singular if check.limit == 1 else plural
    return (
        f"You've reached the {noun} limit ({check.current_count}/{check.limit}) "
        f"on your {plan_name} plan. Upgrade to add more."
    )


def feature_locked_message(feature: str, upgrade_name: Optional[str]) -> str:
    label = FEATURE_LABELS.get(feature, feature)
    if feature not in FEATURES:
        return f"{label} is not a recognised feature."
    if upgrade_name is None:
        return f"{label} is not available on your current plan."
    return f"{label} is not available on your current plan. Upgrade to {upgrade_name} to unlock."
