"""
Process-local query cache.

One QueryCache is built per process (see app.py) and handed to the
services; tests build their own with a fake clock. Entries are keyed by a
logical name plus the JSON-serialized call arguments, e.g.
"posts:published:[6,0]", so a writer can drop every page of a query with one
prefix invalidation without knowing which limit/offset pairs were read.

Storage is a cachetools TLRUCache: each entry carries its own max age, and an
entry is gone once that many seconds have elapsed since it was stored.
"""

from __future__ import annotations

import json
import logging
import time
from contextvars import ContextVar
from dataclasses import dataclass
from functools import wraps
from threading import RLock
from typing import Any, Callable, Optional

from cachetools import TLRUCache


logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 60.0
DEFAULT_MAXSIZE = 1024

_MISSING = object()

# Set when a cached call answered from its fallback; read by service.fetch
fallback_served: ContextVar[bool] = ContextVar("fallback_served", default=False)


@dataclass(frozen=True)
class _Entry:
    value: Any
    max_age: float


def _time_to_use(key: str, entry: _Entry, now: float) -> float:
    return now + entry.max_age


def cache_key(key: str, args: tuple[Any, ...]) -> str:
    return f"{key}:{json.dumps(list(args), separators=(',', ':'), default=str)}"


class QueryCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic, maxsize: int = DEFAULT_MAXSIZE):
        self._entries: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=clock)
        # Streamlit runs every browser session in its own thread
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
        return default if entry is None else entry.value

    def set(self, key: str, value: Any, max_age: float = DEFAULT_MAX_AGE) -> None:
        with self._lock:
            self._entries[key] = _Entry(value=value, max_age=max_age)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            stale = [k for k in list(self._entries.keys()) if k.startswith(prefix)]
            for k in stale:
                self._entries.pop(k, None)
        if stale:
            logger.debug("Invalidated %d cache entries under %r", len(stale), prefix)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def close(self) -> None:
        self.clear()

    def cached(
        self,
        key: str,
        max_age: float = DEFAULT_MAX_AGE,
        fallback: Optional[Callable[..., Any]] = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """
        Memoize `fn(*args)` under `key:<json args>` for `max_age` seconds.

        On failure the error is logged and `fallback(*args)` is returned (not cached);
        without a fallback the error propagates.
        """

        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            @wraps(fn)
            def wrapper(*args: Any) -> Any:
                full_key = cache_key(key, args)
                hit = self.get(full_key, default=_MISSING)
                if hit is not _MISSING:
                    return hit

                try:
                    value = fn(*args)
                except Exception:
                    logger.exception("Error in cached fetch %s", full_key)
                    if fallback is None:
                        raise
                    fallback_served.set(True)
                    return fallback(*args)

                self.set(full_key, value, max_age)
                return value

            return wrapper

        return decorator
