"""
In-memory query cache keyed by structured keys.

Invalidation marks matching entries stale and refetches the ones that have a
known fetcher in the background; the caller is never blocked on a refetch.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from worksite.client.keys import QueryKey, starts_with

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]


@dataclass
class QueryEntry:
    data: Any = None
    fetcher: Fetcher | None = None
    stale: bool = False
    updated_at: float = field(default_factory=time.monotonic)
    error: Exception | None = None


class QueryClient:
    def __init__(self, stale_time: float | None = None) -> None:
        """
        Args:
            stale_time: Seconds after which a cached entry is refetched on
                read. None keeps entries fresh until invalidated.
        """
        self.stale_time = stale_time
        self._entries: dict[QueryKey, QueryEntry] = {}
        self._inflight: dict[QueryKey, asyncio.Task[Any]] = {}
        self._background: set[asyncio.Task[Any]] = set()

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def _is_fresh(self, entry: QueryEntry) -> bool:
        if entry.stale:
            return False
        if self.stale_time is None:
            return True
        return time.monotonic() - entry.updated_at < self.stale_time

    def get_query_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    def get_entry(self, key: QueryKey) -> QueryEntry | None:
        return self._entries.get(key)

    def set_query_data(self, key: QueryKey, data: Any) -> None:
        entry = self._entries.setdefault(key, QueryEntry())
        entry.data = data
        entry.stale = False
        entry.error = None
        entry.updated_at = time.monotonic()

    async def fetch_query(self, key: QueryKey, fetcher: Fetcher) -> Any:
        """Return cached data for `key` when fresh, otherwise run `fetcher` and cache the result."""
        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry):
            return entry.data
        return await self._fetch(key, fetcher)

    async def _fetch(self, key: QueryKey, fetcher: Fetcher) -> Any:
        # Concurrent reads of the same key share one request.
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(fetcher())
            self._inflight[key] = task
        try:
            data = await task
        except Exception as exc:
            entry = self._entries.get(key)
            if entry is not None:
                entry.error = exc
            raise
        finally:
            if self._inflight.get(key) is task:
                del self._inflight[key]

        entry = self._entries.setdefault(key, QueryEntry())
        entry.data = data
        entry.fetcher = fetcher
        entry.stale = False
        entry.error = None
        entry.updated_at = time.monotonic()
        return data

    async def _refetch(self, key: QueryKey, fetcher: Fetcher) -> None:
        try:
            await self._fetch(key, fetcher)
        except Exception:
            logger.warning("Background refetch failed for %s", key, exc_info=True)

    def invalidate(self, prefix: QueryKey) -> list[QueryKey]:
        """
        Mark every entry under `prefix` stale and schedule refetches.

        Returns the matched keys. Refetches run as background tasks; use
        drain() to wait for them.
        """
        matched = [key for key in self._entries if starts_with(key, prefix)]
        for key in matched:
            entry = self._entries[key]
            entry.stale = True
            if entry.fetcher is not None:
                self._schedule(self._refetch(key, entry.fetcher))
        return matched

    def _schedule(self, coro: Awaitable[None]) -> None:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def remove(self, prefix: QueryKey) -> list[QueryKey]:
        matched = [key for key in self._entries if starts_with(key, prefix)]
        for key in matched:
            del self._entries[key]
        return matched

    def clear(self) -> None:
        self._entries.clear()

    async def drain(self) -> None:
        """Wait for all scheduled background refetches, including ones they schedule."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
