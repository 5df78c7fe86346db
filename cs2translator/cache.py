"""In-memory LRU translation cache.

Nothing is written to disk: the log file is the only state the translator
touches outside the process.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]  # (source_text, target_lang)

DEFAULT_TTL = 3600  # 1 hour
DEFAULT_MEMORY_SIZE = 500


class TranslationCache:
    """LRU OrderedDict of recent translations with a TTL.

    Chat repeats itself ("gg", "nice", "rush b"), so identical messages are
    answered without another DeepL call.
    """

    def __init__(
        self,
        memory_size: int = DEFAULT_MEMORY_SIZE,
        ttl: float = DEFAULT_TTL,
    ) -> None:
        self._memory_size = memory_size
        self._ttl = ttl
        self._memory: OrderedDict[CacheKey, tuple[str, float]] = OrderedDict()

    def get(self, text: str, target_lang: str) -> str | None:
        """Look up a translation. Returns None on miss or expiry."""
        key: CacheKey = (text, target_lang.upper())
        entry = self._memory.get(key)
        if entry is None:
            return None

        value, created_at = entry
        if time.monotonic() - created_at > self._ttl:
            del self._memory[key]
            return None

        self._memory.move_to_end(key)
        return value

    def put(self, text: str, target_lang: str, translated: str) -> None:
        """Store a translation, evicting the least recently used if full."""
        if self._memory_size <= 0:
            return
        key: CacheKey = (text, target_lang.upper())
        if key in self._memory:
            self._memory.move_to_end(key)
        elif len(self._memory) >= self._memory_size:
            evicted, _ = self._memory.popitem(last=False)
            logger.debug("Cache full, evicted %r", evicted[0][:40])
        self._memory[key] = (translated, time.monotonic())

    def stats(self) -> dict[str, int]:
        """Return cache statistics."""
        return {
            "memory_entries": len(self._memory),
            "memory_max": self._memory_size,
        }

    def __len__(self) -> int:
        return len(self._memory)
