from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    SIGN_OUT_FAILED = "SIGN_OUT_FAILED"
    SESSION_CHECK_FAILED = "SESSION_CHECK_FAILED"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class Phase(str, Enum):
    IDLE = "idle"
    WARNING_SHOWN = "warning_shown"
    LOGGED_OUT = "logged_out"


class ActivityKind(str, Enum):
    """Browser event names that count as user activity."""

    POINTER_DOWN = "mousedown"
    POINTER_MOVE = "mousemove"
    KEY_PRESS = "keypress"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"
    CLICK = "click"
    FOCUS = "focus"


class Role(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
