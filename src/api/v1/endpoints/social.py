"""Endpoints for connecting social platforms under the plan's platform limit."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_current_user, get_db_session, get_usage_gate, require_company
from src.db.models.user import User
from src.plans.catalog import RESOURCE_SOCIAL_PLATFORMS
from src.repositories.social_account_repo import SocialAccountRepo
from src.schemas.social import SocialAccountCreate, SocialAccountRead
from src.services.gate import UsageGate
from src.services.rate_limit import check_rate_limit


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/social", tags=["social"])


@router.get("/accounts", response_model=list[SocialAccountRead])
async def list_accounts(
    tenant_id: UUID = Depends(require_company),
    db: AsyncSession = Depends(get_db_session),
):
    return await SocialAccountRepo(db).list_for_tenant(tenant_id)


@router.post("/accounts", response_model=SocialAccountRead, status_code=status.HTTP_201_CREATED)
async def connect_account(
    body: SocialAccountCreate,
    tenant_id: UUID = Depends(require_company),
    user: User = Depends(get_current_user),
    gate: UsageGate = Depends(get_usage_gate),
    db: AsyncSession = Depends(get_db_session),
):
    await check_rate_limit(str(tenant_id), scope="social")

    repo = SocialAccountRepo(db)
    try:
        decision = await gate.create_within_limit(
            tenant_id,
            RESOURCE_SOCIAL_PLATFORMS,
            lambda: repo.create(tenant_id, body.platform, body.handle),
            caller=user,
        )
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Account already connected",
        ) from exc
    decision.raise_for_denial()

    logger.info(f"Tenant {tenant_id} connected {body.platform} account {decision.result.id}")
    return decision.result


@router.post("/accounts/{account_id}/disconnect", response_model=SocialAccountRead)
async def disconnect_account(
    account_id: UUID,
    tenant_id: UUID = Depends(require_company),
    db: AsyncSession = Depends(get_db_session),
):
    repo = SocialAccountRepo(db)
    account = await repo.get(tenant_id, account_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return await repo.disconnect(account)
