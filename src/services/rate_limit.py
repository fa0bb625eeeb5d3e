"""
Per-tenant request throttling and idempotent creation, backed by Redis.

Throttling uses fixed windows keyed by route scope, so a burst of property
imports does not eat into the billing budget. Idempotency keys are claimed for
the duration of a create and released again when the create fails or is
denied by the plan, so a tenant can retry the same request after upgrading.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis.asyncio as redis
from fastapi import HTTPException, status

from src.core.config import settings


logger = logging.getLogger(__name__)

_redis_client: redis.Redis | None = None


async def _get_client() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(str(settings.REDIS_URI), decode_responses=True)
    return _redis_client


def route_limit(scope: str) -> int:
    """Requests allowed per window for ``scope``; unlisted scopes share the default."""
    return settings.limits.route_limits.get(scope, settings.RATE_LIMIT_RPM)


async def check_rate_limit(tenant_id: str, scope: str = "default") -> None:
    """Count this request in the tenant's current window for ``scope``; 429 once over."""

    window_seconds = settings.limits.rate_limit_window_seconds
    window = int(time.time() // window_seconds)
    key = f"rl:{scope}:{tenant_id}:{window}"

    client = await _get_client()
    current = await client.incr(key)
    if current == 1:
        await client.expire(key, window_seconds)

    limit = route_limit(scope)
    if current > limit:
        logger.info(f"Tenant {tenant_id} throttled on {scope} ({current}/{limit})")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded",
        )


def _idempotency_key(tenant_id: str, scope: str, key: str) -> str:
    return f"idemp:{scope}:{tenant_id}:{key}"


@asynccontextmanager
async def idempotent_request(
    tenant_id: str, key: Optional[str], scope: str = "default"
) -> AsyncIterator[None]:
    """
    Claim ``key`` for the wrapped create.

    A second request with the same key gets 409 while the claim stands. Any
    exception leaving the block, including a plan denial, releases the claim.
    Requests without a key are not deduplicated.
    """
    if not key:
        yield
        return

    client = await _get_client()
    redis_key = _idempotency_key(tenant_id, scope, key)
    claimed = await client.set(
        redis_key, "1", ex=settings.limits.idempotency_ttl_seconds, nx=True
    )
    if not claimed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Duplicate request (idempotency)",
        )

    try:
        yield
    except Exception:
        await client.delete(redis_key)
        logger.debug(f"Released idempotency key {redis_key}")
        raise


async def close_client() -> None:
    """Release the Redis connection pool on shutdown."""

    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
