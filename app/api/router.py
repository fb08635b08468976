from __future__ import annotations

from fastapi import APIRouter

from app.api.v1 import health, policy, sessions

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["health"])
api_router.include_router(policy.router, tags=["policy"])
api_router.include_router(sessions.router, tags=["sessions"])
