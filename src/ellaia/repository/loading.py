"""Advisory loading flags keyed by operation, e.g. ``update_posts_<id>``."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class LoadingRegistry:
    """In-memory map of operation keys to in-flight flags.

    Owned by a single repository instance.  Nothing waits on these flags;
    they only let a caller ask whether an operation is still running.
    """

    def __init__(self) -> None:
        self._states: dict[str, bool] = {}

    def set(self, key: str, loading: bool) -> None:
        self._states[key] = loading

    def is_loading(self, key: str) -> bool:
        return self._states.get(key, False)

    def active(self) -> list[str]:
        """Keys currently flagged as loading."""
        return [key for key, loading in self._states.items() if loading]

    @contextmanager
    def track(self, key: str) -> Iterator[None]:
        """Flag *key* as loading for the duration of the block.

        The flag is cleared on both normal exit and error.
        """
        self.set(key, True)
        try:
            yield
        finally:
            self.set(key, False)
