from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.enums import ActivityKind, Role


class OpenSessionRequest(BaseModel):
    path: str = Field(..., min_length=1, max_length=2048, description="Current route path")
    role: Role | None = Field(default=None, description="Role preset for the timeout policy")
    access_token: str | None = Field(default=None, description="Supabase access token")


class ActivityRequest(BaseModel):
    kind: ActivityKind = Field(..., description="Browser event name, e.g. mousemove")


class NavigateRequest(BaseModel):
    path: str = Field(..., min_length=1, max_length=2048, description="New route path")
