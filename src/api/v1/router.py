"""Version 1 API router."""
from fastapi import APIRouter

from src.api.v1.endpoints import (
    admin,
    billing,
    entitlements,
    limits,
    plans,
    properties,
    social,
    team,
    tenants,
)


api_router = APIRouter()
api_router.include_router(tenants.router)
api_router.include_router(plans.router)
api_router.include_router(limits.router)
api_router.include_router(properties.router)
api_router.include_router(team.router)
api_router.include_router(social.router)
api_router.include_router(entitlements.router)
api_router.include_router(billing.router)
api_router.include_router(admin.router)
