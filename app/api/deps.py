from __future__ import annotations

from fastapi import Depends, Request

from app.config import Settings
from app.services.controller_registry import ControllerRegistry, HostedSession


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> ControllerRegistry:
    return request.app.state.registry


def get_hosted_session(
    session_id: str,
    registry: ControllerRegistry = Depends(get_registry),
) -> HostedSession:
    return registry.get(session_id)
