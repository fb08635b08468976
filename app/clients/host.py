from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Callable, Coroutine, Protocol

from app.schemas.enums import ActivityKind

Handler = Callable[[], None]


class Scheduler(Protocol):
    """Non-blocking timer facility the controller runs on."""

    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> Any: ...

    def call_at(self, when: float, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._tasks: set[asyncio.Task] = set()

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(max(delay, 0.0), callback)

    def call_at(self, when: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_at(when, callback)

    def cancel(self, handle: asyncio.TimerHandle | None) -> None:
        if handle is not None:
            handle.cancel()

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every spawned task, including ones spawned meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()


class SignalBus:
    """In-process equivalent of document.addEventListener for activity signals."""

    def __init__(self) -> None:
        self._handlers: dict[ActivityKind, list[Handler]] = defaultdict(list)

    def on(self, kind: ActivityKind, handler: Handler) -> None:
        self._handlers[kind].append(handler)

    def off(self, kind: ActivityKind, handler: Handler) -> None:
        handlers = self._handlers.get(kind)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, kind: ActivityKind) -> int:
        """Deliver a signal to every handler of ``kind``. Returns how many were called."""
        handlers = list(self._handlers.get(kind, ()))
        for handler in handlers:
            handler()
        return len(handlers)

    def listener_count(self, kind: ActivityKind | None = None) -> int:
        if kind is not None:
            return len(self._handlers.get(kind, ()))
        return sum(len(h) for h in self._handlers.values())
