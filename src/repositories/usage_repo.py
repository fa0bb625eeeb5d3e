"""Repository helpers for live resource usage."""
from __future__ import annotations

import logging
from typing import Dict
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.plans.catalog import (
    RESOURCE_PROPERTIES,
    RESOURCE_SOCIAL_PLATFORMS,
    RESOURCE_TEAM_MEMBERS,
    RESOURCES,
)
from src.repositories.property_repo import PropertyRepo
from src.repositories.social_account_repo import SocialAccountRepo
from src.repositories.user_repo import UserRepo


logger = logging.getLogger(__name__)


class UsageRepo:
    """Counts the live rows a tenant owns for each plan-limited resource."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._counters = {
            RESOURCE_PROPERTIES: PropertyRepo(session).count_for_tenant,
            RESOURCE_TEAM_MEMBERS: UserRepo(session).count_for_tenant,
            RESOURCE_SOCIAL_PLATFORMS: SocialAccountRepo(session).count_for_tenant,
        }

    async def count(self, tenant_id: UUID, resource: str) -> int:
        """
        Return the current number of ``resource`` rows owned by the tenant.

        Resources without a counter report 0; the evaluator denies them
        because no plan defines a limit for them.
        """
        counter = self._counters.get(resource)
        if counter is None:
            logger.warning(f"No usage counter for resource '{resource}'")
            return 0
        return await counter(tenant_id)

    async def snapshot(self, tenant_id: UUID) -> Dict[str, int]:
        """Return counts for every limited resource."""

        return {resource: await self.count(tenant_id, resource) for resource in RESOURCES}
