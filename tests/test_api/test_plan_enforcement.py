from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi import status
from sqlalchemy import func, select

from conftest import API_PREFIX, build_auth_header, seed_company, seed_user
from src.core.config import settings
from src.db.models.property import Property


PROPERTY = {"address": "12 Harbour Road", "city": "Leeds", "bedrooms": 3}


async def _property_count(session, tenant_id) -> int:
    result = await session.execute(
        select(func.count()).select_from(Property).where(Property.tenant_id == tenant_id)
    )
    return int(result.scalar_one())


@pytest.mark.asyncio
async def test_create_property_blocked_at_plan_limit(client, test_db):
    tenant, admin = await seed_company(test_db, assigned_plan_id="agent_pro", properties=25)

    response = await client.post(
        f"{API_PREFIX}/properties",
        json=PROPERTY,
        headers=build_auth_header(admin.id),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN, response.text
    body = response.json()
    assert body["code"] == "LIMIT_REACHED"
    assert body["currentUsage"] == 25
    assert body["limit"] == 25
    assert body["upgradeRequired"] == "agency_growth"
    assert "(25/25)" in body["message"]
    assert await _property_count(test_db, tenant.id) == 25


@pytest.mark.asyncio
async def test_create_property_allowed_below_limit(client, test_db):
    tenant, admin = await seed_company(test_db, assigned_plan_id="agent_pro", properties=24)

    response = await client.post(
        f"{API_PREFIX}/properties",
        json=PROPERTY,
        headers=build_auth_header(admin.id),
    )

    assert response.status_code == status.HTTP_201_CREATED, response.text
    assert response.json()["tenant_id"] == str(tenant.id)
    assert response.json()["status"] == "available"
    assert await _property_count(test_db, tenant.id) == 25


@pytest.mark.asyncio
async def test_override_plan_lifts_limit(client, test_db):
    _, admin = await seed_company(
        test_db,
        assigned_plan_id="agent_pro",
        override_plan_id="brokerage_command",
        properties=25,
    )

    response = await client.post(
        f"{API_PREFIX}/properties",
        json=PROPERTY,
        headers=build_auth_header(admin.id),
    )

    assert response.status_code == status.HTTP_201_CREATED, response.text


@pytest.mark.asyncio
async def test_cancelled_subscription_keeps_assigned_limits(client, test_db):
    _, admin = await seed_company(
        test_db, assigned_plan_id="agency_growth", status="cancelled", properties=30
    )

    response = await client.post(
        f"{API_PREFIX}/properties",
        json=PROPERTY,
        headers=build_auth_header(admin.id),
    )

    assert response.status_code == status.HTTP_201_CREATED, response.text


@pytest.mark.asyncio
async def test_unknown_assigned_plan_falls_back_to_default(client, test_db):
    _, admin = await seed_company(test_db, assigned_plan_id="platinum_legacy")

    response = await client.post(
        f"{API_PREFIX}/properties",
        json=PROPERTY,
        headers=build_auth_header(admin.id),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["limit"] == 0
    assert response.json()["upgradeRequired"] == "agent_pro"


@pytest.mark.asyncio
async def test_user_without_company_is_rejected_before_plan_lookup(client, test_db):
    user = await seed_user(test_db)

    response = await client.post(
        f"{API_PREFIX}/properties",
        json=PROPERTY,
        headers=build_auth_header(user.id),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "No company found"


@pytest.mark.asyncio
async def test_company_without_subscription_fails_closed(client, test_db):
    _, admin = await seed_company(test_db, with_subscription=False)

    response = await client.post(
        f"{API_PREFIX}/properties",
        json=PROPERTY,
        headers=build_auth_header(admin.id),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "NO_SUBSCRIPTION"


@pytest.mark.asyncio
async def test_partner_account_bypasses_limits(client, test_db):
    tenant, _ = await seed_company(test_db, assigned_plan_id="free")
    partner = await seed_user(test_db, tenant_id=tenant.id, is_partner=True, partner_type="broker")

    response = await client.post(
        f"{API_PREFIX}/properties",
        json=PROPERTY,
        headers=build_auth_header(partner.id),
    )

    assert response.status_code == status.HTTP_201_CREATED, response.text


@pytest.mark.asyncio
async def test_unknown_user_is_unauthorized(client, test_db):
    response = await client.get(
        f"{API_PREFIX}/properties",
        headers=build_auth_header(uuid4()),
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_invalid_token_is_unauthorized(client, test_db):
    response = await client.get(
        f"{API_PREFIX}/properties",
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Invalid token"


@pytest.mark.asyncio
async def test_duplicate_idempotency_key_is_rejected(client, test_db, fake_redis):
    tenant, admin = await seed_company(test_db, assigned_plan_id="agent_pro")

    headers = build_auth_header(admin.id)
    headers["Idempotency-Key"] = "dup-key"

    first = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert first.status_code == status.HTTP_201_CREATED

    second = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert second.status_code == status.HTTP_409_CONFLICT
    assert second.json()["message"] == "Duplicate request (idempotency)"
    assert await _property_count(test_db, tenant.id) == 1
    assert fake_redis.store[f"idemp:properties:{tenant.id}:dup-key:ttl"] == (
        settings.limits.idempotency_ttl_seconds
    )


@pytest.mark.asyncio
async def test_rate_limit_blocks_second_request_within_window(client, test_db, monkeypatch):
    _, admin = await seed_company(test_db, assigned_plan_id="agent_pro")
    monkeypatch.setattr(settings.limits, "rate_limit_rpm", 1)

    headers = build_auth_header(admin.id)

    first = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert first.status_code == status.HTTP_201_CREATED

    second = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert second.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert second.json()["message"] == "Rate limit exceeded"


@pytest.mark.asyncio
async def test_list_properties_is_scoped_to_company(client, test_db):
    tenant, admin = await seed_company(test_db, properties=2)
    await seed_company(test_db, properties=3)

    response = await client.get(
        f"{API_PREFIX}/properties",
        headers=build_auth_header(admin.id),
    )

    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 2
    assert {item["tenant_id"] for item in response.json()} == {str(tenant.id)}


@pytest.mark.asyncio
async def test_denied_request_releases_idempotency_key(client, test_db, fake_redis):
    tenant, admin = await seed_company(test_db, assigned_plan_id="agent_pro", properties=25)

    headers = build_auth_header(admin.id)
    headers["Idempotency-Key"] = "k1"

    denied = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert denied.status_code == status.HTTP_403_FORBIDDEN
    assert f"idemp:properties:{tenant.id}:k1" not in fake_redis.store

    upgrade = await client.post(
        f"{API_PREFIX}/billing/subscribe",
        params={"plan_id": "agency_growth"},
        headers=build_auth_header(admin.id),
    )
    assert upgrade.status_code == status.HTTP_200_OK

    retry = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert retry.status_code == status.HTTP_201_CREATED, retry.text
    assert await _property_count(test_db, tenant.id) == 26

    replay = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert replay.status_code == status.HTTP_409_CONFLICT


@pytest.mark.asyncio
async def test_rate_limits_are_counted_per_route(client, test_db, monkeypatch):
    _, admin = await seed_company(test_db, assigned_plan_id="agency_growth")
    monkeypatch.setattr(settings.limits, "route_limits", {"properties": 1})
    headers = build_auth_header(admin.id)

    first = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert first.status_code == status.HTTP_201_CREATED

    throttled = await client.post(f"{API_PREFIX}/properties", json=PROPERTY, headers=headers)
    assert throttled.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    other_route = await client.post(
        f"{API_PREFIX}/team/members",
        json={"email": "colleague@example.com"},
        headers=headers,
    )
    assert other_route.status_code == status.HTTP_201_CREATED, other_route.text
