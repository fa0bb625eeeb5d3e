"""Compiled-in subscription plan catalog."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union


class Unlimited(enum.Enum):
    """Sentinel type for limits with no numeric cap."""

    UNLIMITED = "unlimited"

    def __repr__(self) -> str:
        return "UNLIMITED"


UNLIMITED = Unlimited.UNLIMITED

Limit = Union[int, Unlimited]

RESOURCE_PROPERTIES = "properties"
RESOURCE_TEAM_MEMBERS = "team_members"
RESOURCE_SOCIAL_PLATFORMS = "social_platforms"
RESOURCES = (RESOURCE_PROPERTIES, RESOURCE_TEAM_MEMBERS, RESOURCE_SOCIAL_PLATFORMS)

FEATURES = (
    "dashboard",
    "properties",
    "applications",
    "documents",
    "basic_reporting",
    "email_support",
    "areas",
    "approvals",
    "leases",
    "maintenance",
    "showings",
    "invoices",
    "analytics",
    "activity",
    "automations",
    "social",
    "tenant_portal",
    "payment_processing",
    "custom_integrations",
    "priority_support",
)

DEFAULT_PLAN_ID = "free"


@dataclass(frozen=True)
class PlanDefinition:
    """A subscription tier with its resource limits and feature map."""

    id: str
    name: str
    tier: int
    monthly_price_cents: int
    limits: Mapping[str, Limit]
    features: Mapping[str, bool]
    nav: tuple[str, ...] = field(default=())

    def limit_for(self, resource: str) -> Optional[Limit]:
        return self.limits.get(resource)

    def has_feature(self, feature: str) -> Optional[bool]:
        """Return the plan's flag for ``feature``, or None when it is not a known feature."""
        return self.features.get(feature)


def _features(*enabled: str) -> Mapping[str, bool]:
    unknown = set(enabled) - set(FEATURES)
    if unknown:
        raise ValueError(f"Unknown plan features: {sorted(unknown)}")
    return MappingProxyType({name: name in enabled for name in FEATURES})


def _limits(properties: Limit, team_members: Limit, social_platforms: Limit) -> Mapping[str, Limit]:
    return MappingProxyType(
        {
            RESOURCE_PROPERTIES: properties,
            RESOURCE_TEAM_MEMBERS: team_members,
            RESOURCE_SOCIAL_PLATFORMS: social_platforms,
        }
    )


_AGENT_PRO_FEATURES = (
    "dashboard",
    "properties",
    "applications",
    "documents",
    "basic_reporting",
    "email_support",
    "social",
)

_AGENCY_GROWTH_FEATURES = _AGENT_PRO_FEATURES + (
    "areas",
    "approvals",
    "leases",
    "maintenance",
    "showings",
    "invoices",
    "analytics",
    "activity",
    "automations",
    "tenant_portal",
    "payment_processing",
)

_FULL_NAV = (
    "dashboard",
    "areas",
    "properties",
    "applications",
    "approvals",
    "leases",
    "maintenance",
    "showings",
    "invoices",
    "documents",
    "analytics",
    "activity",
    "social",
    "automations",
    "settings",
)

_PLANS = (
    PlanDefinition(
        id=DEFAULT_PLAN_ID,
        name="No Plan",
        tier=0,
        monthly_price_cents=0,
        limits=_limits(properties=0, team_members=1, social_platforms=0),
        features=_features("dashboard"),
        nav=("dashboard", "settings"),
    ),
    PlanDefinition(
        id="agent_pro",
        name="Agent Pro",
        tier=1,
        monthly_price_cents=14900,
        limits=_limits(properties=25, team_members=1, social_platforms=2),
        features=_features(*_AGENT_PRO_FEATURES),
        nav=("dashboard", "properties", "applications", "documents", "social", "settings"),
    ),
    PlanDefinition(
        id="agency_growth",
        name="Agency Growth",
        tier=2,
        monthly_price_cents=28900,
        limits=_limits(properties=100, team_members=5, social_platforms=8),
        features=_features(*_AGENCY_GROWTH_FEATURES),
        nav=_FULL_NAV,
    ),
    PlanDefinition(
        id="brokerage_command",
        name="Brokerage Command",
        tier=3,
        monthly_price_cents=49900,
        limits=_limits(
            properties=UNLIMITED, team_members=UNLIMITED, social_platforms=UNLIMITED
        ),
        features=_features(*FEATURES),
        nav=_FULL_NAV,
    ),
)

PLAN_CATALOG: Mapping[str, PlanDefinition] = MappingProxyType({plan.id: plan for plan in _PLANS})

# Ids written by earlier checkout and override flows.
PLAN_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "essentials": "agent_pro",
        "professional": "agency_growth",
        "enterprise": "brokerage_command",
    }
)


def normalize_plan_id(plan_id: Optional[str]) -> Optional[str]:
    """Map legacy aliases onto catalog ids; unknown ids are returned unchanged."""
    if not plan_id:
        return None
    return PLAN_ALIASES.get(plan_id, plan_id)


def lookup(plan_id: Optional[str]) -> Optional[PlanDefinition]:
    """Return the plan for ``plan_id`` (aliases allowed), or None if it is not in the catalog."""
    normalized = normalize_plan_id(plan_id)
    if normalized is None:
        return None
    return PLAN_CATALOG.get(normalized)


def is_known_plan(plan_id: Optional[str]) -> bool:
    return lookup(plan_id) is not None


def get_default_plan() -> PlanDefinition:
    return PLAN_CATALOG[DEFAULT_PLAN_ID]


def list_plans() -> list[PlanDefinition]:
    """All plans, cheapest tier first."""
    return sorted(PLAN_CATALOG.values(), key=lambda plan: plan.tier)


def higher_tiers(plan: PlanDefinition) -> list[PlanDefinition]:
    return [candidate for candidate in list_plans() if candidate.tier > plan.tier]


def serialize_limit(limit: Optional[Limit]) -> Union[int, str, None]:
    """JSON-friendly form of a limit; the sentinel becomes ``"unlimited"``."""
    if limit is UNLIMITED:
        return UNLIMITED.value
    return limit
