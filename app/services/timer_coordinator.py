from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable

from app.clients.auth_client import AuthCollaborator
from app.clients.host import Scheduler
from app.clients.navigation import Navigator
from app.core.exceptions import SignOutFailure
from app.core.logging import get_logger
from app.schemas.enums import Phase
from app.services.session_policy import SessionPolicy

logger = get_logger(__name__)

PhaseListener = Callable[[Phase], None]


@dataclass
class ActivityState:
    last_activity_at: float
    phase: Phase = Phase.IDLE
    warning_shown_at: float | None = None
    # Tags the currently armed warning/logout pair
    generation: int = 0


class TimerCoordinator:
    """Idle -> WarningShown -> LoggedOut state machine for one guarded attachment.

    Owns the ActivityState. Every reset cancels the armed warning/logout pair and
    bumps the generation before arming a new pair from a single ``now``, so a
    callback that was already queued for an older pair finds a generation mismatch
    and does nothing.

    LoggedOut is terminal: it triggers sign-out and then always redirects, even if
    sign-out failed. A fresh coordinator is needed to guard the user again.
    """

    def __init__(
        self,
        policy: SessionPolicy,
        scheduler: Scheduler,
        auth: AuthCollaborator,
        navigator: Navigator,
    ) -> None:
        self._policy = policy
        self._scheduler = scheduler
        self._auth = auth
        self._navigator = navigator
        self._state = ActivityState(last_activity_at=scheduler.now())
        self._warning_handle: Any = None
        self._logout_handle: Any = None
        self._live = False
        self._listeners: list[PhaseListener] = []

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def state(self) -> ActivityState:
        return dataclasses.replace(self._state)

    @property
    def is_live(self) -> bool:
        return self._live

    def add_listener(self, listener: PhaseListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def start(self) -> None:
        if self._live:
            return
        self._live = True
        logger.info(
            "auto_logout_armed",
            timeout_seconds=self._policy.timeout_seconds,
            warning_lead_seconds=self._policy.warning_lead_seconds,
        )
        self.reset_timers()

    def stop(self) -> None:
        """Detach: nothing armed by this coordinator fires afterwards."""
        if not self._live:
            return
        self._cancel_timers()
        self._live = False
        self._listeners.clear()

    def reset_timers(self) -> None:
        if not self._live or self._state.phase is Phase.LOGGED_OUT:
            return

        self._cancel_timers()
        previous = self._state.phase
        generation = self._state.generation
        now = self._scheduler.now()

        self._state.last_activity_at = now
        self._state.phase = Phase.IDLE
        self._state.warning_shown_at = None

        self._warning_handle = self._scheduler.call_at(
            now + self._policy.warning_delay_seconds,
            lambda: self._on_warning_due(generation),
        )
        self._logout_handle = self._scheduler.call_at(
            now + self._policy.timeout_seconds,
            lambda: self._on_logout_due(generation),
        )

        if previous is not Phase.IDLE:
            logger.info("auto_logout_warning_dismissed")
            self._notify()

    def stay_logged_in(self) -> None:
        self.reset_timers()

    def logout_now(self) -> None:
        self.force_logout("user_request")

    def force_logout(self, reason: str, sign_out: bool = True) -> None:
        if not self._live or self._state.phase is Phase.LOGGED_OUT:
            return
        self._enter_logged_out(reason, sign_out=sign_out)

    def remaining_seconds(self) -> float:
        """Seconds left until the logout deadline."""
        if not self._live or self._state.phase is Phase.LOGGED_OUT:
            return 0.0
        deadline = self._state.last_activity_at + self._policy.timeout_seconds
        return max(0.0, deadline - self._scheduler.now())

    def _cancel_timers(self) -> None:
        self._scheduler.cancel(self._warning_handle)
        self._scheduler.cancel(self._logout_handle)
        self._warning_handle = None
        self._logout_handle = None
        self._state.generation += 1

    def _is_current(self, generation: int) -> bool:
        return self._live and generation == self._state.generation

    def _on_warning_due(self, generation: int) -> None:
        if not self._is_current(generation) or self._state.phase is not Phase.IDLE:
            logger.debug("stale_timer_ignored", timer="warning", generation=generation)
            return
        self._warning_handle = None
        self._state.phase = Phase.WARNING_SHOWN
        self._state.warning_shown_at = self._scheduler.now()
        logger.info("auto_logout_warning", lead_seconds=self._policy.warning_lead_seconds)
        self._notify()

    def _on_logout_due(self, generation: int) -> None:
        if not self._is_current(generation):
            logger.debug("stale_timer_ignored", timer="logout", generation=generation)
            return
        self._logout_handle = None
        self._enter_logged_out("idle_timeout", sign_out=True)

    def _enter_logged_out(self, reason: str, sign_out: bool) -> None:
        self._cancel_timers()
        self._state.phase = Phase.LOGGED_OUT
        self._state.warning_shown_at = None
        logger.info("auto_logout", reason=reason)
        self._notify()
        self._scheduler.spawn(self._complete_logout(sign_out))

    async def _complete_logout(self, sign_out: bool) -> None:
        if sign_out:
            try:
                await self._auth.sign_out()
            except SignOutFailure as exc:
                logger.warning(
                    "auto_logout_sign_out_failed",
                    error_code=exc.error_code,
                    message=exc.message,
                    detail=exc.detail,
                )
            except Exception:
                logger.warning("auto_logout_sign_out_failed", exc_info=True)
        if not self._live:
            # Detached while signing out: the host already left the guarded page
            logger.info("auto_logout_redirect_skipped", reason="detached")
            return
        # The user must stop interacting whether or not the remote session was revoked
        self._navigator.redirect(self._policy.logout_redirect_path)

    def _notify(self) -> None:
        phase = self._state.phase
        for listener in list(self._listeners):
            listener(phase)
