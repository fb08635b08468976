from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_settings
from app.config import Settings
from app.schemas.enums import Role
from app.schemas.responses import PolicyResponse
from app.services.session_policy import build_policy

router = APIRouter()


@router.get("/session-policy", response_model=PolicyResponse)
async def session_policy(
    role: Role | None = None,
    settings: Settings = Depends(get_settings),
) -> PolicyResponse:
    policy = build_policy(settings, role)
    return PolicyResponse(
        role=role.value if role else None,
        timeout_minutes=policy.timeout_seconds / 60,
        warning_minutes=policy.warning_lead_seconds / 60,
        excluded_paths=list(policy.excluded_path_prefixes),
        activity_events=sorted(policy.activity_signal_kinds, key=lambda k: k.value),
        session_check_interval_minutes=policy.session_check_interval_seconds / 60,
        logout_redirect_path=policy.logout_redirect_path,
        warning_message=policy.warning_message,
    )
