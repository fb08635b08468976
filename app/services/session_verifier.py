from __future__ import annotations

from typing import Any, Callable

from app.clients.auth_client import AuthCollaborator
from app.clients.host import Scheduler
from app.core.exceptions import SessionCheckFailure
from app.core.logging import get_logger

logger = get_logger(__name__)


class SessionVerifier:
    """Polls the auth backend and reports a vanished session, independent of idle timers."""

    def __init__(
        self,
        scheduler: Scheduler,
        auth: AuthCollaborator,
        interval_seconds: float,
        on_session_missing: Callable[[], None],
    ) -> None:
        self._scheduler = scheduler
        self._auth = auth
        self._interval = interval_seconds
        self._on_session_missing = on_session_missing
        self._handle: Any = None
        self._generation = 0
        self._running = False
        self._last_known: bool | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_known_session(self) -> bool | None:
        """Result of the last successful poll; None until one succeeds."""
        return self._last_known

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._schedule_next()

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._scheduler.cancel(self._handle)
        self._handle = None
        # In-flight polls of the old generation are discarded on completion
        self._generation += 1

    def _schedule_next(self) -> None:
        generation = self._generation
        self._handle = self._scheduler.call_later(self._interval, lambda: self._on_due(generation))

    def _on_due(self, generation: int) -> None:
        if not self._running or generation != self._generation:
            return
        self._scheduler.spawn(self._check(generation))
        self._schedule_next()

    async def _check(self, generation: int) -> None:
        try:
            exists = await self._auth.get_session_exists()
        except SessionCheckFailure as exc:
            logger.warning(
                "session_check_failed",
                error_code=exc.error_code,
                message=exc.message,
                detail=exc.detail,
            )
            return
        except Exception:
            logger.warning("session_check_failed", exc_info=True)
            return

        if not self._running or generation != self._generation:
            return

        self._last_known = exists
        if not exists:
            logger.warning("session_missing")
            self.stop()
            self._on_session_missing()
