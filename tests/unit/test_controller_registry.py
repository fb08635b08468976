from __future__ import annotations

import httpx
import pytest

from app.core.exceptions import SessionNotFoundError
from app.services.controller_registry import ControllerRegistry

MINUTE = 60.0


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestControllerRegistry:
    def setup_method(self):
        self.clock = FakeClock()
        self.http_client = httpx.AsyncClient()

    async def _shutdown(self, registry):
        registry.dispose()
        await self.http_client.aclose()

    @pytest.mark.asyncio
    async def test_sweep_drops_guards_not_seen_within_ttl(self, settings):
        registry = ControllerRegistry(settings, self.http_client, clock=self.clock)
        stale = registry.open("/students/dashboard")
        self.clock.now += 200 * MINUTE
        fresh = registry.open("/teachers/classes")

        self.clock.now += 60 * MINUTE
        assert registry.sweep() == 1
        assert stale.session_id not in registry
        assert fresh.session_id in registry
        assert not stale.controller.attached
        await self._shutdown(registry)

    @pytest.mark.asyncio
    async def test_get_counts_as_seen(self, settings):
        registry = ControllerRegistry(settings, self.http_client, clock=self.clock)
        session = registry.open("/students/dashboard")

        self.clock.now += 230 * MINUTE
        registry.get(session.session_id)
        self.clock.now += 230 * MINUTE
        assert registry.sweep() == 0
        assert len(registry) == 1
        await self._shutdown(registry)

    @pytest.mark.asyncio
    async def test_logout_releases_guard(self, settings):
        registry = ControllerRegistry(settings, self.http_client, clock=self.clock)
        session = registry.open("/students/dashboard")

        session.controller.logout_now()
        await session.scheduler.drain()

        assert session.navigator.current_path == "/login"
        assert len(registry) == 0
        with pytest.raises(SessionNotFoundError):
            registry.get(session.session_id)
        await self._shutdown(registry)

    @pytest.mark.asyncio
    async def test_user_navigation_to_public_page_keeps_guard(self, settings):
        registry = ControllerRegistry(settings, self.http_client, clock=self.clock)
        session = registry.open("/students/dashboard")

        session.navigator.navigate("/login")
        assert not session.controller.attached
        assert session.session_id in registry

        session.navigator.navigate("/students/grades")
        assert session.controller.attached
        await self._shutdown(registry)

    @pytest.mark.asyncio
    async def test_close_unknown_session(self, settings):
        registry = ControllerRegistry(settings, self.http_client, clock=self.clock)
        with pytest.raises(SessionNotFoundError):
            registry.close("missing")
        await self._shutdown(registry)
