from __future__ import annotations

from collections.abc import Iterable
from typing import Callable

from app.clients.host import SignalBus
from app.core.logging import get_logger
from app.schemas.enums import ActivityKind

logger = get_logger(__name__)


class ActivityMonitor:
    """Forwards every qualifying activity signal to ``on_activity``.

    Signals are not coalesced: a burst of mousemove events resets the timers once
    per event.
    """

    def __init__(
        self,
        signals: SignalBus,
        kinds: Iterable[ActivityKind],
        on_activity: Callable[[], None],
    ) -> None:
        self._signals = signals
        self._kinds = tuple(sorted(set(kinds), key=lambda k: k.value))
        self._on_activity = on_activity
        self._attached = False

    @property
    def is_attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        if self._attached:
            return
        for kind in self._kinds:
            self._signals.on(kind, self._handle)
        self._attached = True
        logger.debug("activity_monitor_attached", kinds=[k.value for k in self._kinds])

    def detach(self) -> None:
        if not self._attached:
            return
        for kind in self._kinds:
            self._signals.off(kind, self._handle)
        self._attached = False
        logger.debug("activity_monitor_detached")

    def _handle(self) -> None:
        self._on_activity()
