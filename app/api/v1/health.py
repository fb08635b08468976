from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_registry
from app.schemas.responses import HealthResponse
from app.services.controller_registry import ControllerRegistry

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(registry: ControllerRegistry = Depends(get_registry)) -> HealthResponse:
    return HealthResponse(open_guards=len(registry))
