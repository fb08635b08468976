from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.enums import ActivityKind, ErrorCode, Phase


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "classbridge-session-guard"
    open_guards: int = 0


class PolicyResponse(BaseModel):
    role: str | None = None
    timeout_minutes: float
    warning_minutes: float
    excluded_paths: list[str]
    activity_events: list[ActivityKind]
    session_check_interval_minutes: float
    logout_redirect_path: str
    warning_message: str


class WarningView(BaseModel):
    """What the warning modal shows. Rendered at least once per second while visible."""

    visible: bool = False
    remaining_seconds: int = Field(default=0, ge=0)
    countdown: str = "0:00"
    message: str = ""


class SessionStateResponse(BaseModel):
    session_id: str
    path: str
    guarded: bool
    phase: Phase | None = Field(default=None, description="None while the controller is detached")
    remaining_seconds: float | None = None
    warning: WarningView = Field(default_factory=WarningView)
    redirect_to: str | None = Field(default=None, description="Last redirect issued by the guard")


class ErrorResponse(BaseModel):
    error_code: ErrorCode
    message: str
    detail: str | None = None


class CleanupResponse(BaseModel):
    removed: int = 0
    open_guards: int = 0
