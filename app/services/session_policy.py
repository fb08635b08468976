from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.config import Settings
from app.core.exceptions import ConfigurationError
from app.schemas.enums import ActivityKind, Role

# Per-role overrides of timeout/warning, in minutes
ROLE_PRESETS: dict[Role, tuple[float, float]] = {
    Role.ADMIN: (180, 10),
    Role.TEACHER: (150, 5),
    Role.STUDENT: (120, 5),
}


class SessionPolicy(BaseModel):
    """Immutable auto-logout configuration. Durations are in seconds."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float
    warning_lead_seconds: float
    excluded_path_prefixes: tuple[str, ...] = ()
    activity_signal_kinds: frozenset[ActivityKind] = frozenset(ActivityKind)
    session_check_interval_seconds: float = 5 * 60
    logout_redirect_path: str = "/login"
    warning_message: str = Field(default="You will be logged out soon due to inactivity.")

    @model_validator(mode="after")
    def _check_durations(self) -> SessionPolicy:
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                message="Auto-logout timeout must be positive",
                detail=f"timeout_seconds={self.timeout_seconds}",
            )
        if self.warning_lead_seconds < 0 or self.warning_lead_seconds >= self.timeout_seconds:
            raise ConfigurationError(
                message="Warning lead time must be shorter than the timeout",
                detail=(
                    f"warning_lead_seconds={self.warning_lead_seconds}, "
                    f"timeout_seconds={self.timeout_seconds}"
                ),
            )
        if self.session_check_interval_seconds <= 0:
            raise ConfigurationError(
                message="Session check interval must be positive",
                detail=f"session_check_interval_seconds={self.session_check_interval_seconds}",
            )
        return self

    @property
    def warning_delay_seconds(self) -> float:
        """Idle time after which the warning is raised."""
        return self.timeout_seconds - self.warning_lead_seconds

    @classmethod
    def from_minutes(
        cls,
        timeout_minutes: float,
        warning_minutes: float,
        excluded_paths: list[str] | tuple[str, ...] = (),
        activity_events: list[str] | None = None,
        session_check_interval_minutes: float = 5,
        logout_redirect_path: str = "/login",
        warning_message: str | None = None,
    ) -> SessionPolicy:
        kwargs = {}
        if warning_message is not None:
            kwargs["warning_message"] = warning_message
        if activity_events is not None:
            kwargs["activity_signal_kinds"] = frozenset(ActivityKind(e) for e in activity_events)
        return cls(
            timeout_seconds=timeout_minutes * 60,
            warning_lead_seconds=warning_minutes * 60,
            excluded_path_prefixes=tuple(excluded_paths),
            session_check_interval_seconds=session_check_interval_minutes * 60,
            logout_redirect_path=logout_redirect_path,
            **kwargs,
        )


def build_policy(settings: Settings, role: Role | None = None) -> SessionPolicy:
    """Settings defaults, overridden by the role preset when one is given."""
    timeout_minutes = settings.AUTO_LOGOUT_TIMEOUT_MINUTES
    warning_minutes = settings.AUTO_LOGOUT_WARNING_MINUTES
    if role is not None and role in ROLE_PRESETS:
        timeout_minutes, warning_minutes = ROLE_PRESETS[role]

    try:
        activity_kinds = [ActivityKind(e) for e in settings.AUTO_LOGOUT_ACTIVITY_EVENTS]
    except ValueError as exc:
        raise ConfigurationError(
            message="Unknown activity event in AUTO_LOGOUT_ACTIVITY_EVENTS",
            detail=str(exc),
        ) from exc

    return SessionPolicy.from_minutes(
        timeout_minutes=timeout_minutes,
        warning_minutes=warning_minutes,
        excluded_paths=settings.AUTO_LOGOUT_EXCLUDED_PATHS,
        activity_events=[k.value for k in activity_kinds],
        session_check_interval_minutes=settings.SESSION_CHECK_INTERVAL_MINUTES,
        logout_redirect_path=settings.LOGOUT_REDIRECT_PATH,
        warning_message=settings.WARNING_MESSAGE.replace("{minutes}", f"{warning_minutes:g}"),
    )
