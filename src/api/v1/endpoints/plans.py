"""Public plan catalog listing."""
from __future__ import annotations

from fastapi import APIRouter

from src.plans.catalog import list_plans, serialize_limit


router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("")
async def get_plans():
    return [
        {
            "id": plan.id,
            "name": plan.name,
            "tier": plan.tier,
            "monthly_price_cents": plan.monthly_price_cents,
            "limits": {
                resource: serialize_limit(limit) for resource, limit in plan.limits.items()
            },
            "features": dict(plan.features),
            "nav": list(plan.nav),
        }
        for plan in list_plans()
    ]
