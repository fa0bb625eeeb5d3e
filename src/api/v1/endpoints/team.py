"""Endpoints for team membership under the plan's seat limit."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_current_user, get_db_session, get_usage_gate, require_company
from src.db.models.user import ROLE_ADMIN, User
from src.plans.catalog import RESOURCE_TEAM_MEMBERS
from src.repositories.user_repo import UserRepo
from src.schemas.team import TeamMemberCreate, TeamMemberRead
from src.services.gate import UsageGate
from src.services.rate_limit import check_rate_limit


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team", tags=["team"])


@router.get("/members", response_model=list[TeamMemberRead])
async def list_members(
    tenant_id: UUID = Depends(require_company),
    db: AsyncSession = Depends(get_db_session),
):
    return await UserRepo(db).list_for_tenant(tenant_id)


@router.post("/members", response_model=TeamMemberRead, status_code=status.HTTP_201_CREATED)
async def add_member(
    body: TeamMemberCreate,
    tenant_id: UUID = Depends(require_company),
    user: User = Depends(get_current_user),
    gate: UsageGate = Depends(get_usage_gate),
    db: AsyncSession = Depends(get_db_session),
):
    if user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can invite team members",
        )
    await check_rate_limit(str(tenant_id), scope="team")

    repo = UserRepo(db)
    existing = await repo.get_by_email(body.email)
    if existing is not None and existing.tenant_id is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already belongs to a company",
        )

    async def _add():
        if existing is not None:
            return await repo.attach_to_tenant(existing, tenant_id, body.role)
        return await repo.create(
            body.email, tenant_id=tenant_id, role=body.role, full_name=body.full_name
        )

    decision = await gate.create_within_limit(
        tenant_id, RESOURCE_TEAM_MEMBERS, _add, caller=user
    )
    decision.raise_for_denial()

    logger.info(f"User {user.id} added {decision.result.id} to tenant {tenant_id}")
    return decision.result
