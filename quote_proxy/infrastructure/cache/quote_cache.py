from __future__ import annotations

from collections import OrderedDict
from threading import Lock
from typing import Callable

from quote_proxy.application.ports.quote_cache_port import QuoteCachePort
from quote_proxy.domain.entities.quote import CacheEntry, Quote
from quote_proxy.shared.clock import monotonic_ms


class InMemoryQuoteCache(QuoteCachePort):
    """Bounded FIFO quote store with lazy TTL expiry.

    Eviction follows insertion order only; reads never refresh an entry.
    Quotes are copied on the way in and out so callers never share state.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 10,
        max_entries: int = 100,
        clock: Callable[[], int] = monotonic_ms,
    ):
        self.ttl_ms = int(ttl_seconds * 1000)
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = Lock()

    def get(self, key: str) -> Quote | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now - entry.inserted_at >= self.ttl_ms:
                self._entries.pop(key, None)
                return None
            return entry.quote.copy()

    def put(self, key: str, quote: Quote) -> None:
        entry = CacheEntry(key=key, quote=quote.copy(), inserted_at=self._clock())
        with self._lock:
            # A superseded key counts as a fresh insertion.
            self._entries.pop(key, None)
            self._entries[key] = entry
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())
