"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    categories,
    category_relationships,
    health,
    org_units,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(org_units.router, prefix="/org-units", tags=["org-units"])
api_router.include_router(
    category_relationships.router,
    prefix="/hierarchy/categories/relationships",
    tags=["category-relationships"],
)
api_router.include_router(categories.router, prefix="/hierarchy", tags=["categories"])
