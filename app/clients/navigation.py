from __future__ import annotations

from typing import Callable

from app.core.logging import get_logger

logger = get_logger(__name__)

RouteListener = Callable[[str], None]


class Navigator:
    """Tracks the current route and lets the guard redirect the client."""

    def __init__(self, initial_path: str = "/") -> None:
        self._path = initial_path
        self._listeners: list[RouteListener] = []
        self.redirects: list[str] = []

    @property
    def current_path(self) -> str:
        return self._path

    @property
    def last_redirect(self) -> str | None:
        return self.redirects[-1] if self.redirects else None

    def subscribe(self, listener: RouteListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def navigate(self, path: str) -> None:
        """Route transition initiated by the user."""
        if path == self._path:
            return
        self._path = path
        self._notify(path)

    def redirect(self, path: str) -> None:
        """Route transition initiated by the guard (forced logout)."""
        self.redirects.append(path)
        logger.info("redirect", path=path)
        self._path = path
        self._notify(path)

    def _notify(self, path: str) -> None:
        for listener in list(self._listeners):
            listener(path)
