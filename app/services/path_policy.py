from __future__ import annotations

from collections.abc import Iterable


class PathPolicy:
    """Decides whether the auto-logout guard is active on a route."""

    def __init__(self, excluded_prefixes: Iterable[str]) -> None:
        self._excluded = tuple(excluded_prefixes)

    @property
    def excluded_prefixes(self) -> tuple[str, ...]:
        return self._excluded

    def is_guarded(self, path: str) -> bool:
        return not any(path.startswith(prefix) for prefix in self._excluded)
