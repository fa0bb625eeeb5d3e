from __future__ import annotations

import dataclasses

import pytest

from src.plans.catalog import (
    DEFAULT_PLAN_ID,
    FEATURES,
    PLAN_ALIASES,
    PLAN_CATALOG,
    RESOURCES,
    UNLIMITED,
    get_default_plan,
    higher_tiers,
    is_known_plan,
    list_plans,
    lookup,
    serialize_limit,
)


@pytest.mark.parametrize("plan_id", sorted(PLAN_CATALOG))
def test_lookup_returns_catalog_entry_unchanged(plan_id):
    plan = PLAN_CATALOG[plan_id]
    assert lookup(plan.id) is plan


def test_lookup_unknown_or_empty_id_returns_none():
    assert lookup("platinum") is None
    assert lookup("") is None
    assert lookup(None) is None
    assert not is_known_plan("platinum")


@pytest.mark.parametrize("alias, target", sorted(PLAN_ALIASES.items()))
def test_legacy_aliases_resolve_to_current_plans(alias, target):
    assert lookup(alias) is PLAN_CATALOG[target]


def test_every_plan_defines_every_resource_and_feature():
    for plan in list_plans():
        assert set(plan.limits) == set(RESOURCES)
        assert set(plan.features) == set(FEATURES)


def test_default_plan_is_lowest_tier():
    assert get_default_plan().id == DEFAULT_PLAN_ID
    assert list_plans()[0] is get_default_plan()


def test_published_limits():
    assert lookup("agent_pro").limits["properties"] == 25
    assert lookup("agent_pro").limits["team_members"] == 1
    assert lookup("agency_growth").limits["properties"] == 100
    assert lookup("agency_growth").limits["team_members"] == 5
    assert lookup("brokerage_command").limits["properties"] is UNLIMITED


@pytest.mark.parametrize(
    "plan_id, expected",
    [
        ("free", 0),
        ("agent_pro", 2),
        ("agency_growth", 8),
        ("brokerage_command", UNLIMITED),
    ],
)
def test_social_platform_limits(plan_id, expected):
    assert lookup(plan_id).limits["social_platforms"] == expected


def test_unlimited_sentinel_is_not_an_integer():
    assert UNLIMITED != 0
    assert not isinstance(UNLIMITED, int)
    assert serialize_limit(UNLIMITED) == "unlimited"
    assert serialize_limit(0) == 0


def test_catalog_cannot_be_mutated():
    plan = lookup("agent_pro")
    with pytest.raises(TypeError):
        PLAN_CATALOG["agent_pro"] = plan
    with pytest.raises(TypeError):
        plan.limits["properties"] = 1000
    with pytest.raises(dataclasses.FrozenInstanceError):
        plan.name = "Renamed"


def test_higher_tiers_are_ordered():
    ids = [plan.id for plan in higher_tiers(lookup("agent_pro"))]
    assert ids == ["agency_growth", "brokerage_command"]
    assert higher_tiers(lookup("brokerage_command")) == []
