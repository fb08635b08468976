from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_hosted_session, get_registry
from app.schemas.requests import ActivityRequest, NavigateRequest, OpenSessionRequest
from app.schemas.responses import CleanupResponse, SessionStateResponse
from app.services.controller_registry import ControllerRegistry, HostedSession

router = APIRouter(prefix="/sessions")

# Handlers are async so that every mutation of a guard happens on the event loop
# its timers are scheduled on.


@router.post("", response_model=SessionStateResponse, status_code=status.HTTP_201_CREATED)
async def open_session(
    body: OpenSessionRequest,
    registry: ControllerRegistry = Depends(get_registry),
) -> SessionStateResponse:
    session = registry.open(path=body.path, role=body.role, access_token=body.access_token)
    return session.to_state()


@router.post("/cleanup", response_model=CleanupResponse)
async def cleanup_sessions(
    registry: ControllerRegistry = Depends(get_registry),
) -> CleanupResponse:
    removed = registry.sweep()
    return CleanupResponse(removed=removed, open_guards=len(registry))


@router.get("/{session_id}", response_model=SessionStateResponse)
async def session_state(
    session: HostedSession = Depends(get_hosted_session),
) -> SessionStateResponse:
    return session.to_state()


@router.post("/{session_id}/activity", response_model=SessionStateResponse)
async def activity(
    body: ActivityRequest,
    session: HostedSession = Depends(get_hosted_session),
) -> SessionStateResponse:
    session.record_activity(body.kind)
    return session.to_state()


@router.post("/{session_id}/navigate", response_model=SessionStateResponse)
async def navigate(
    body: NavigateRequest,
    session: HostedSession = Depends(get_hosted_session),
) -> SessionStateResponse:
    session.navigator.navigate(body.path)
    return session.to_state()


@router.post("/{session_id}/stay", response_model=SessionStateResponse)
async def stay_logged_in(
    session: HostedSession = Depends(get_hosted_session),
) -> SessionStateResponse:
    session.controller.stay_logged_in()
    return session.to_state()


@router.post("/{session_id}/logout", response_model=SessionStateResponse)
async def logout_now(
    session: HostedSession = Depends(get_hosted_session),
) -> SessionStateResponse:
    session.controller.logout_now()
    # Let sign-out and the redirect finish so the client sees where to go
    await session.scheduler.drain()
    return session.to_state()


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    session_id: str,
    registry: ControllerRegistry = Depends(get_registry),
) -> Response:
    registry.close(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
