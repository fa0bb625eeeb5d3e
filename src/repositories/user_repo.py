"""Repository utilities for user (team member) records."""
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.user import ROLE_MEMBER, User


class UserRepo:
    """Data-access helpers for :class:`User`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UUID) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def list_for_tenant(self, tenant_id: UUID) -> list[User]:
        result = await self.session.execute(
            select(User).where(User.tenant_id == tenant_id).order_by(User.email)
        )
        return list(result.scalars().all())

    async def create(
        self,
        email: str,
        tenant_id: Optional[UUID] = None,
        role: str = ROLE_MEMBER,
        full_name: Optional[str] = None,
    ) -> User:
        user = User(email=email, tenant_id=tenant_id, role=role, full_name=full_name)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def attach_to_tenant(self, user: User, tenant_id: UUID, role: str) -> User:
        user.tenant_id = tenant_id
        user.role = role
        self.session.add(user)
        await self.session.flush()
        return user

    async def count_for_tenant(self, tenant_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(User).where(User.tenant_id == tenant_id)
        )
        value = result.scalar_one()
        return int(value or 0)
