from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.schemas.enums import ActivityKind
from app.services.activity_monitor import ActivityMonitor


@pytest.fixture
def on_activity():
    return MagicMock()


@pytest.fixture
def monitor(signals, on_activity):
    return ActivityMonitor(
        signals, [ActivityKind.CLICK, ActivityKind.KEY_PRESS], on_activity
    )


class TestActivityMonitor:
    def test_no_subscription_before_attach(self, monitor, signals, on_activity):
        signals.emit(ActivityKind.CLICK)
        on_activity.assert_not_called()
        assert not monitor.is_attached

    def test_every_signal_is_forwarded(self, monitor, signals, on_activity):
        monitor.attach()
        for _ in range(5):
            signals.emit(ActivityKind.CLICK)
        signals.emit(ActivityKind.KEY_PRESS)
        assert on_activity.call_count == 6

    def test_other_kinds_ignored(self, monitor, signals, on_activity):
        monitor.attach()
        signals.emit(ActivityKind.SCROLL)
        on_activity.assert_not_called()

    def test_attach_is_idempotent(self, monitor, signals, on_activity):
        monitor.attach()
        monitor.attach()
        assert signals.listener_count(ActivityKind.CLICK) == 1
        signals.emit(ActivityKind.CLICK)
        on_activity.assert_called_once()

    def test_detach_unsubscribes_everything(self, monitor, signals, on_activity):
        monitor.attach()
        monitor.detach()
        monitor.detach()
        assert signals.listener_count() == 0
        signals.emit(ActivityKind.CLICK)
        on_activity.assert_not_called()

    def test_reattach(self, monitor, signals):
        for _ in range(3):
            monitor.attach()
            monitor.detach()
        monitor.attach()
        assert signals.listener_count() == 2
