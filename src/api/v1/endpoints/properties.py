"""Endpoints for managing properties under the plan's property limit."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_current_user, get_db_session, get_usage_gate, require_company
from src.db.models.user import User
from src.plans.catalog import RESOURCE_PROPERTIES
from src.repositories.property_repo import PropertyRepo
from src.schemas.property import PropertyCreate, PropertyRead
from src.services.gate import UsageGate
from src.services.rate_limit import check_rate_limit, idempotent_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=list[PropertyRead])
async def list_properties(
    tenant_id: UUID = Depends(require_company),
    db: AsyncSession = Depends(get_db_session),
):
    return await PropertyRepo(db).list_for_tenant(tenant_id)


@router.post("", response_model=PropertyRead, status_code=status.HTTP_201_CREATED)
async def create_property(
    body: PropertyCreate,
    tenant_id: UUID = Depends(require_company),
    user: User = Depends(get_current_user),
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    gate: UsageGate = Depends(get_usage_gate),
    db: AsyncSession = Depends(get_db_session),
):
    await check_rate_limit(str(tenant_id), scope="properties")

    repo = PropertyRepo(db)
    async with idempotent_request(str(tenant_id), idempotency_key, scope="properties"):
        decision = await gate.create_within_limit(
            tenant_id,
            RESOURCE_PROPERTIES,
            lambda: repo.create(tenant_id, **body.model_dump()),
            caller=user,
        )
        decision.raise_for_denial()

    logger.info(f"User {user.id} created property {decision.result.id} for tenant {tenant_id}")
    return decision.result
