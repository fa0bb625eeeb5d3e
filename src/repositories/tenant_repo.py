"""Repository for tenant records."""
from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.tenant import Tenant


class TenantRepo:
    """Data-access helpers for :class:`Tenant`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, tenant_id: UUID) -> Tenant | None:
        result = await self.session.execute(
            select(Tenant).where(Tenant.id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str) -> Tenant:
        tenant = Tenant(name=name, feature_flags={}, lifetime_access=False)
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant

    async def get_feature_flags(self, tenant_id: UUID) -> Dict[str, Any]:
        result = await self.session.execute(
            select(Tenant.feature_flags).where(Tenant.id == tenant_id)
        )
        return result.scalar_one_or_none() or {}

    async def has_lifetime_access(self, tenant_id: UUID) -> bool:
        result = await self.session.execute(
            select(Tenant.lifetime_access).where(Tenant.id == tenant_id)
        )
        return bool(result.scalar_one_or_none())

    async def set_lifetime_access(self, tenant: Tenant, enabled: bool) -> Tenant:
        tenant.lifetime_access = enabled
        self.session.add(tenant)
        await self.session.flush()
        return tenant
