"""
Pytest configuration for the application
"""
import os
from typing import AsyncGenerator, Dict, Optional
from uuid import UUID

# Point the application at SQLite before any application module is imported.
os.environ["ENV"] = "test"
os.environ["DATABASE_URI"] = "sqlite+aiosqlite:///./test_app.db"

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from main import create_application
from src.auth.jwt import create_access_token
from src.core.config import settings
from src.db.base import Base
from src.db.models.property import Property
from src.db.models.social_account import SocialAccount
from src.db.models.subscription import Subscription
from src.db.models.tenant import Tenant
from src.db.models.user import ROLE_ADMIN, User
from src.db.session import get_db
from src.services import rate_limit as rate_limit_service


API_PREFIX = f"{settings.API_PREFIX}/v1"


class FakeRedis:
    """Minimal async Redis stub for rate limiting and idempotency tests."""

    def __init__(self) -> None:
        self.store: Dict[str, int | str] = {}

    async def incr(self, key: str) -> int:
        current = int(self.store.get(key, 0)) + 1
        self.store[key] = current
        return current

    async def expire(self, key: str, seconds: int) -> None:
        self.store.setdefault(f"{key}:ttl", seconds)

    async def set(self, key: str, value: str, ex: int | None = None, nx: bool = False) -> bool:
        if nx and key in self.store:
            return False
        self.store[key] = value
        if ex is not None:
            self.store[f"{key}:ttl"] = ex
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            removed += int(self.store.pop(key, None) is not None)
            self.store.pop(f"{key}:ttl", None)
        return removed

    async def aclose(self) -> None:
        return None


@pytest.fixture
def fake_redis(monkeypatch) -> FakeRedis:
    """Patch the rate limit module to use an in-memory Redis stub."""

    fake = FakeRedis()
    monkeypatch.setattr(rate_limit_service, "_redis_client", fake, raising=False)
    yield fake
    monkeypatch.setattr(rate_limit_service, "_redis_client", None, raising=False)


@pytest_asyncio.fixture
async def test_db_engine(tmp_path):
    """
    Create a fresh SQLite database per test.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_db_engine) -> async_sessionmaker:
    return async_sessionmaker(test_db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_app(session_factory, fake_redis) -> AsyncGenerator[FastAPI, None]:
    """
    Create a FastAPI test application backed by the per-test database.
    """
    app = create_application()

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    async with LifespanManager(app):
        yield app


@pytest_asyncio.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Session used by tests to seed and inspect rows.
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Create an async HTTP client for testing.
    """
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as client:
        yield client


def build_auth_header(user_id: UUID) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


async def seed_company(
    session: AsyncSession,
    *,
    assigned_plan_id: str = "agent_pro",
    override_plan_id: Optional[str] = None,
    status: str = "active",
    properties: int = 0,
    feature_flags: Optional[dict] = None,
    lifetime_access: bool = False,
    social_accounts: int = 0,
    with_subscription: bool = True,
    email: Optional[str] = None,
) -> tuple[Tenant, User]:
    """Create a company with an admin user, a subscription and usage rows."""

    tenant = Tenant(
        name="Acme Realty",
        feature_flags=feature_flags or {},
        lifetime_access=lifetime_access,
    )
    session.add(tenant)
    await session.flush()

    admin = User(
        email=email or f"admin-{tenant.id.hex[:8]}@example.com",
        tenant_id=tenant.id,
        role=ROLE_ADMIN,
    )
    session.add(admin)

    if with_subscription:
        session.add(
            Subscription(
                tenant_id=tenant.id,
                assigned_plan_id=assigned_plan_id,
                override_plan_id=override_plan_id,
                status=status,
                billing_cycle="monthly",
            )
        )

    session.add_all(
        [Property(tenant_id=tenant.id, address=f"{n} Main St") for n in range(properties)]
    )
    session.add_all(
        [
            SocialAccount(tenant_id=tenant.id, platform="instagram", handle=f"acme{n}")
            for n in range(social_accounts)
        ]
    )
    await session.commit()
    return tenant, admin


async def seed_user(session: AsyncSession, **fields) -> User:
    fields.setdefault("email", f"user-{os.urandom(4).hex()}@example.com")
    user = User(**fields)
    session.add(user)
    await session.commit()
    return user
