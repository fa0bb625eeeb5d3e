"""Feature entitlement checks."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.deps import get_current_user, get_usage_gate, require_company
from src.db.models.user import User
from src.services.gate import UsageGate


router = APIRouter(prefix="/entitlements", tags=["entitlements"])


@router.get("/features/{feature}")
async def check_feature(
    feature: str,
    tenant_id: UUID = Depends(require_company),
    user: User = Depends(get_current_user),
    gate: UsageGate = Depends(get_usage_gate),
):
    decision = await gate.guard_feature(tenant_id, feature, caller=user)
    decision.raise_for_denial()
    return {
        "feature": feature,
        "allowed": True,
        "plan_id": decision.effective_plan.plan_id,
    }
