from __future__ import annotations

import heapq
import itertools
from collections import deque
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.clients.host import SignalBus
from app.clients.navigation import Navigator
from app.config import Settings
from app.main import create_app
from app.services.auto_logout import AutoLogoutController
from app.services.session_policy import SessionPolicy
from app.services.timer_coordinator import TimerCoordinator

EXCLUDED_PATHS = ["/login", "/register", "/apply", "/home", "/our-programs", "/contact", "/timetable"]


class _Handle:
    def __init__(self, when: float, callback) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False


class ManualScheduler:
    """Virtual-time scheduler: nothing fires until the test advances the clock."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, _Handle]] = []
        self._seq = itertools.count()
        self._pending: deque = deque()

    def now(self) -> float:
        return self._now

    def call_at(self, when: float, callback) -> _Handle:
        handle = _Handle(when, callback)
        heapq.heappush(self._queue, (when, next(self._seq), handle))
        return handle

    def call_later(self, delay: float, callback) -> _Handle:
        return self.call_at(self._now + max(delay, 0.0), callback)

    def cancel(self, handle) -> None:
        if handle is not None:
            handle.cancelled = True

    def spawn(self, coro) -> None:
        self._pending.append(coro)

    @property
    def armed(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    async def run_pending(self) -> None:
        while self._pending:
            await self._pending.popleft()

    async def advance(self, seconds: float) -> None:
        target = self._now + seconds
        await self.run_pending()
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            handle.callback()
            await self.run_pending()
        self._now = target

    async def advance_to(self, when: float) -> None:
        await self.advance(when - self._now)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SUPABASE_URL="https://portal.supabase.test",
        SUPABASE_ANON_KEY="anon-key",
        MAX_RETRIES=2,
        BACKOFF_FACTOR=0,
    )


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def signals() -> SignalBus:
    return SignalBus()


@pytest.fixture
def navigator() -> Navigator:
    return Navigator(initial_path="/students/dashboard")


@pytest.fixture
def auth():
    mock = AsyncMock()
    mock.get_session_exists.return_value = True
    mock.sign_out.return_value = None
    return mock


@pytest.fixture
def policy() -> SessionPolicy:
    return SessionPolicy.from_minutes(
        timeout_minutes=150,
        warning_minutes=5,
        excluded_paths=EXCLUDED_PATHS,
        session_check_interval_minutes=5,
        logout_redirect_path="/login",
        warning_message="You will be logged out soon.",
    )


@pytest.fixture
def coordinator(policy, scheduler, auth, navigator) -> TimerCoordinator:
    coord = TimerCoordinator(policy, scheduler, auth, navigator)
    coord.start()
    return coord


@pytest.fixture
def make_controller(policy, scheduler, signals, auth, navigator):
    def factory(**overrides) -> AutoLogoutController:
        controller = AutoLogoutController(
            policy=overrides.get("policy", policy),
            scheduler=scheduler,
            signals=signals,
            auth=auth,
            navigator=navigator,
            on_render=overrides.get("on_render"),
        )
        controller.start()
        return controller

    return factory


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as c:
        yield c
