from __future__ import annotations

import math
from typing import Any, Callable

from app.clients.host import Scheduler
from app.core.logging import get_logger
from app.schemas.enums import Phase
from app.schemas.responses import WarningView
from app.services.timer_coordinator import TimerCoordinator

logger = get_logger(__name__)

TICK_SECONDS = 1.0

RenderCallback = Callable[[WarningView], None]


def format_countdown(seconds: float) -> str:
    total = max(0, math.ceil(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


class WarningPresenter:
    """Non-blocking warning modal: live countdown plus stay / log out now.

    The countdown is display only. Reaching 0:00 does not log out; the
    coordinator's own logout timer does.
    """

    def __init__(
        self,
        coordinator: TimerCoordinator,
        scheduler: Scheduler,
        message: str,
        on_render: RenderCallback | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._scheduler = scheduler
        self._message = message
        self._on_render = on_render
        self._tick_handle: Any = None
        self._generation = 0
        self._view = WarningView(message=message)
        self._remove_listener: Callable[[], None] | None = coordinator.add_listener(
            self._on_phase
        )

    @property
    def view(self) -> WarningView:
        return self._view

    def stay_logged_in(self) -> None:
        logger.info("warning_stay_logged_in")
        self._coordinator.stay_logged_in()

    def logout_now(self) -> None:
        logger.info("warning_logout_now")
        self._coordinator.logout_now()

    def close(self) -> None:
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        self._hide()

    def _on_phase(self, phase: Phase) -> None:
        if phase is Phase.WARNING_SHOWN:
            self._show()
        else:
            self._hide()

    def _show(self) -> None:
        self._cancel_tick()
        self._render(visible=True)
        self._schedule_tick()

    def _hide(self) -> None:
        self._cancel_tick()
        if self._view.visible:
            self._render(visible=False)

    def _schedule_tick(self) -> None:
        generation = self._generation
        self._tick_handle = self._scheduler.call_later(TICK_SECONDS, lambda: self._tick(generation))

    def _cancel_tick(self) -> None:
        self._scheduler.cancel(self._tick_handle)
        self._tick_handle = None
        self._generation += 1

    def _tick(self, generation: int) -> None:
        if generation != self._generation:
            return
        if self._coordinator.phase is not Phase.WARNING_SHOWN:
            self._hide()
            return
        self._render(visible=True)
        self._schedule_tick()

    def _render(self, visible: bool) -> None:
        if visible:
            remaining = self._coordinator.remaining_seconds()
            self._view = WarningView(
                visible=True,
                remaining_seconds=max(0, math.ceil(remaining)),
                countdown=format_countdown(remaining),
                message=self._message,
            )
        else:
            self._view = WarningView(message=self._message)
        if self._on_render is not None:
            self._on_render(self._view)
