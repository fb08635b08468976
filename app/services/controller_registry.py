from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable

import httpx

from app.clients.auth_client import SupabaseAuthClient
from app.clients.host import AsyncioScheduler, SignalBus
from app.clients.navigation import Navigator
from app.config import Settings
from app.core.exceptions import SessionNotFoundError
from app.core.logging import bind_session_context, clear_session_context, get_logger
from app.schemas.enums import ActivityKind, Role
from app.schemas.responses import SessionStateResponse
from app.services.auto_logout import AutoLogoutController
from app.services.session_policy import build_policy

logger = get_logger(__name__)


@dataclass
class HostedSession:
    """One browser client's guard and the collaborators it runs against."""

    session_id: str
    role: Role | None
    controller: AutoLogoutController
    navigator: Navigator
    signals: SignalBus
    scheduler: AsyncioScheduler
    last_seen: float = field(default=0.0)

    def record_activity(self, kind: ActivityKind) -> int:
        return self.signals.emit(kind)

    def to_state(self) -> SessionStateResponse:
        remaining = self.controller.remaining_seconds()
        return SessionStateResponse(
            session_id=self.session_id,
            path=self.navigator.current_path,
            guarded=self.controller.guarded,
            phase=self.controller.phase,
            remaining_seconds=round(remaining, 3) if remaining is not None else None,
            warning=self.controller.warning,
            redirect_to=self.navigator.last_redirect,
        )


class ControllerRegistry:
    """Holds the guards of all connected clients.

    Created in the application lifespan and disposed at shutdown; nothing here is
    a module-level singleton. A guard leaves the registry when its client closes
    it, when it logs out and lands on an unguarded page, or when the client has
    not been seen for ``GUARD_IDLE_TTL_MINUTES``.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._http_client = http_client
        self._clock = clock
        self._idle_ttl = settings.GUARD_IDLE_TTL_MINUTES * 60
        self._sessions: dict[str, HostedSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def open(
        self,
        path: str,
        role: Role | None = None,
        access_token: str | None = None,
    ) -> HostedSession:
        """Create and start a guard. Must be called from inside the running event loop."""
        policy = build_policy(self._settings, role)
        scheduler = AsyncioScheduler()
        signals = SignalBus()
        navigator = Navigator(initial_path=path)
        auth = SupabaseAuthClient(
            client=self._http_client,
            settings=self._settings,
            access_token=access_token,
        )
        controller = AutoLogoutController(
            policy=policy,
            scheduler=scheduler,
            signals=signals,
            auth=auth,
            navigator=navigator,
        )
        session = HostedSession(
            session_id=uuid.uuid4().hex,
            role=role,
            controller=controller,
            navigator=navigator,
            signals=signals,
            scheduler=scheduler,
            last_seen=self._clock(),
        )
        self._sessions[session.session_id] = session

        bind_session_context(session.session_id, role.value if role else None)
        try:
            controller.start()
            # Subscribed after the controller so it has already detached when this runs
            self._watch_logout(session)
            logger.info("guard_opened", path=path, guarded=controller.guarded)
        finally:
            clear_session_context()
        return session

    def get(self, session_id: str) -> HostedSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(
                message="Unknown guarded session",
                detail=f"session_id={session_id}",
            )
        session.last_seen = self._clock()
        return session

    def close(self, session_id: str) -> None:
        session = self.get(session_id)
        del self._sessions[session_id]
        session.controller.dispose()
        session.scheduler.close()
        logger.info("guard_closed", session_id=session_id)

    def sweep(self) -> int:
        """Close guards whose client has not been seen within the idle TTL."""
        cutoff = self._clock() - self._idle_ttl
        stale = [sid for sid, s in self._sessions.items() if s.last_seen < cutoff]
        for session_id in stale:
            session = self._sessions.pop(session_id)
            session.controller.dispose()
            session.scheduler.close()
        if stale:
            logger.info("guards_swept", removed=len(stale), open_guards=len(self._sessions))
        return len(stale)

    async def run_sweeper(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                self.sweep()
            except Exception:
                logger.error("guard_sweep_failed", exc_info=True)

    def dispose(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def _watch_logout(self, session: HostedSession) -> None:
        navigator = session.navigator
        seen = len(navigator.redirects)

        def on_route(path: str) -> None:
            nonlocal seen
            redirected = len(navigator.redirects) > seen
            seen = len(navigator.redirects)
            if not redirected or session.controller.attached:
                return
            # The sign-out task that issued the redirect is still finishing, so the
            # scheduler is left to wind down on its own
            if self._sessions.pop(session.session_id, None) is not None:
                session.controller.dispose()
                logger.info("guard_released", session_id=session.session_id, path=path)

        navigator.subscribe(on_route)
