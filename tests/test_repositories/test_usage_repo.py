from __future__ import annotations

import pytest

from conftest import seed_company
from src.repositories.social_account_repo import SocialAccountRepo
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.tenant_repo import TenantRepo
from src.repositories.usage_repo import UsageRepo
from src.services.gate import UsageGate


@pytest.mark.asyncio
async def test_snapshot_counts_every_limited_resource(test_db):
    tenant, _ = await seed_company(test_db, properties=4, social_accounts=2)

    snapshot = await UsageRepo(test_db).snapshot(tenant.id)

    assert snapshot == {"properties": 4, "team_members": 1, "social_platforms": 2}


@pytest.mark.asyncio
async def test_disconnected_social_accounts_free_their_slot(test_db):
    tenant, _ = await seed_company(test_db, social_accounts=2)
    repo = SocialAccountRepo(test_db)

    first = (await repo.list_for_tenant(tenant.id))[0]
    await repo.disconnect(first)

    assert await UsageRepo(test_db).count(tenant.id, "social_platforms") == 1


@pytest.mark.asyncio
async def test_unknown_resource_counts_zero_and_is_denied(test_db):
    tenant, _ = await seed_company(test_db, assigned_plan_id="brokerage_command")
    usage = UsageRepo(test_db)

    assert await usage.count(tenant.id, "helicopters") == 0

    gate = UsageGate(SubscriptionRepo(test_db), usage, TenantRepo(test_db))
    decision = await gate.guard(tenant.id, "helicopters")

    assert decision.proceed is False
    assert decision.http_status == 403
    assert decision.body["code"] == "LIMIT_REACHED"
