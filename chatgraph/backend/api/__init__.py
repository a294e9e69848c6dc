"""API routers for the chatgraph backend."""

from fastapi import APIRouter

from chatgraph.backend.api.workspaces import router as workspaces_router

# Main API router that aggregates all sub-routers
router = APIRouter()

router.include_router(workspaces_router, prefix="/workspaces", tags=["workspaces"])

__all__ = ["router"]
