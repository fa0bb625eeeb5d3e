"""Repository utilities for working with Property records."""
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.property import Property


class PropertyRepo:
    """Simple data-access helper for Property entities."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, property_id: UUID) -> Optional[Property]:
        result = await self.session.execute(
            select(Property).where(Property.id == property_id)
        )
        return result.scalar_one_or_none()

    async def list_for_tenant(self, tenant_id: UUID) -> list[Property]:
        result = await self.session.execute(
            select(Property)
            .where(Property.tenant_id == tenant_id)
            .order_by(Property.created_at)
        )
        return list(result.scalars().all())

    async def create(self, tenant_id: UUID, **fields) -> Property:
        prop = Property(tenant_id=tenant_id, **fields)
        self.session.add(prop)
        await self.session.flush()
        await self.session.refresh(prop)
        return prop

    async def count_for_tenant(self, tenant_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Property).where(Property.tenant_id == tenant_id)
        )
        value = result.scalar_one()
        return int(value or 0)
