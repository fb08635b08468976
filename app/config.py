from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Supabase
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")

    # HTTP
    REQUEST_TIMEOUT: int = 15
    MAX_RETRIES: int = 3
    BACKOFF_FACTOR: float = 0.5
    VERIFY_SSL: bool = True

    # Auto-logout
    AUTO_LOGOUT_TIMEOUT_MINUTES: float = 150  # 2 hours 30 minutes
    AUTO_LOGOUT_WARNING_MINUTES: float = 5
    AUTO_LOGOUT_EXCLUDED_PATHS: list[str] = [
        "/login",
        "/register",
        "/apply",
        "/home",
        "/our-programs",
        "/contact",
        "/timetable",
    ]
    AUTO_LOGOUT_ACTIVITY_EVENTS: list[str] = [
        "mousedown",
        "mousemove",
        "keypress",
        "scroll",
        "touchstart",
        "click",
        "focus",
    ]
    SESSION_CHECK_INTERVAL_MINUTES: float = 5
    LOGOUT_REDIRECT_PATH: str = "/login"
    # {minutes} is filled with the warning lead of the resolved policy
    WARNING_MESSAGE: str = (
        "You will be logged out in {minutes} minutes due to inactivity. "
        "Click Stay Logged In to continue your session."
    )

    # Guard registry
    GUARD_IDLE_TTL_MINUTES: float = 240
    GUARD_SWEEP_INTERVAL_MINUTES: float = 5

    # Logging
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
