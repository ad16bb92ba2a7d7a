"""In-memory session state: last command and a bounded result cache.

Nothing here is written to disk; the state lives as long as its owner.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from sui_cli_proxy.storage.models import CommandResult

logger = logging.getLogger(__name__)


class SessionState:
    """Session bookkeeping shared by concurrent requests.

    Every read and write takes ``_lock``; callers never hold it across an
    await.
    """

    def __init__(self, cache_size: int = 32) -> None:
        if cache_size < 0:
            raise ValueError("cache_size must be >= 0")
        self._lock = threading.Lock()
        self._last_command = ""
        self._cache: OrderedDict[str, CommandResult] = OrderedDict()
        self._cache_size = cache_size

    @property
    def last_command(self) -> str:
        with self._lock:
            return self._last_command

    def set_last_command(self, command: str) -> None:
        with self._lock:
            self._last_command = command

    def remember(self, key: str, result: CommandResult) -> None:
        """Cache ``result`` under ``key``, evicting the least recently used entry."""
        if self._cache_size == 0:
            return
        with self._lock:
            self._cache[key] = result
            self._cache.move_to_end(key)
            while len(self._cache) > self._cache_size:
                self._cache.popitem(last=False)
                logger.debug("Cache full, evicted oldest entry")

    def recall(self, key: str) -> CommandResult | None:
        with self._lock:
            result = self._cache.get(key)
            if result is not None:
                self._cache.move_to_end(key)
            return result

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear(self) -> None:
        with self._lock:
            self._last_command = ""
            self._cache.clear()
