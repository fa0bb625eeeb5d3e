"""Shared FastAPI dependencies."""
from __future__ import annotations

from typing import AsyncGenerator
from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.jwt import require_auth
from src.db.models.user import User
from src.db.session import get_db
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.tenant_repo import TenantRepo
from src.repositories.usage_repo import UsageRepo
from src.repositories.user_repo import UserRepo
from src.services.gate import UsageGate


async def get_db_session(
    session: AsyncSession = Depends(get_db),
) -> AsyncGenerator[AsyncSession, None]:
    yield session


async def get_current_user(
    auth=Depends(require_auth), db: AsyncSession = Depends(get_db_session)
) -> User:
    user = await UserRepo(db).get(auth["user_id"])
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user


async def require_company(user: User = Depends(get_current_user)) -> UUID:
    """Return the caller's company id; callers without one are rejected before any plan lookup."""
    if user.tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No company found",
        )
    return user.tenant_id


def get_usage_gate(db: AsyncSession = Depends(get_db_session)) -> UsageGate:
    return UsageGate(
        subscriptions=SubscriptionRepo(db),
        usage=UsageRepo(db),
        tenants=TenantRepo(db),
    )
