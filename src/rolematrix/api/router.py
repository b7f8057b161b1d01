"""Top-level routes: probes and metadata at the root, features under /api/v1."""

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from rolematrix import __version__
from rolematrix.api.dependencies import Store
from rolematrix.modules import discover_modules


API_V1_PREFIX = "/api/v1"


class LivenessResponse(BaseModel):
    status: str


meta_router = APIRouter(tags=["health"])


@meta_router.get("/health/live", response_model=LivenessResponse, summary="Liveness probe")
async def liveness() -> LivenessResponse:
    """200 while the process is serving requests."""
    return LivenessResponse(status="alive")


@meta_router.get("/info", summary="Application info")
async def info(request: Request, store: Store) -> dict[str, Any]:
    """Version, environment and the shape of the loaded permission model."""
    settings = request.app.state.settings
    return {
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "roles": list(store.roles),
        "actions": list(store.actions),
        "modules": len(store.hierarchy.modules),
    }


v1_router = APIRouter(prefix=API_V1_PREFIX)
for feature_router in discover_modules():
    v1_router.include_router(feature_router)

api_router = APIRouter()
api_router.include_router(meta_router)
api_router.include_router(v1_router)
