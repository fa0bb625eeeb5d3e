"""Repository utilities for connected social accounts."""
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.social_account import SOCIAL_ACTIVE, SOCIAL_DISCONNECTED, SocialAccount


class SocialAccountRepo:
    """Data-access helpers for :class:`SocialAccount`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, tenant_id: UUID, account_id: UUID) -> Optional[SocialAccount]:
        result = await self.session.execute(
            select(SocialAccount).where(
                SocialAccount.id == account_id, SocialAccount.tenant_id == tenant_id
            )
        )
        return result.scalar_one_or_none()

    async def list_for_tenant(self, tenant_id: UUID) -> list[SocialAccount]:
        result = await self.session.execute(
            select(SocialAccount)
            .where(SocialAccount.tenant_id == tenant_id)
            .order_by(SocialAccount.created_at)
        )
        return list(result.scalars().all())

    async def create(self, tenant_id: UUID, platform: str, handle: str) -> SocialAccount:
        account = SocialAccount(tenant_id=tenant_id, platform=platform, handle=handle)
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def disconnect(self, account: SocialAccount) -> SocialAccount:
        account.status = SOCIAL_DISCONNECTED
        self.session.add(account)
        await self.session.flush()
        return account

    async def count_for_tenant(self, tenant_id: UUID) -> int:
        """Active connections only; disconnected accounts free their slot."""
        result = await self.session.execute(
            select(func.count())
            .select_from(SocialAccount)
            .where(SocialAccount.tenant_id == tenant_id, SocialAccount.status == SOCIAL_ACTIVE)
        )
        return int(result.scalar_one() or 0)
