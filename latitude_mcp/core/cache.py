"""TTL-bound cache of the prompt names published in LIVE."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

NameFetcher = Callable[[], Awaitable[list[str]]]


class PromptNameCache:
    """Known prompt paths, refreshed from the remote store.

    A failed refresh keeps the previous names; stale beats empty. The names
    list is replaced wholesale, never mutated in place.
    """

    def __init__(
        self,
        fetch: NameFetcher,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._names: tuple[str, ...] = ()
        self.last_updated: float | None = None

    @property
    def names(self) -> list[str]:
        return list(self._names)

    def is_stale(self) -> bool:
        if self.last_updated is None:
            return True
        return self._clock() - self.last_updated > self.ttl_seconds

    async def read(self) -> list[str]:
        """Return cached names, refreshing first if never loaded or older than the TTL."""
        if self.is_stale():
            await self.refresh()
        return self.names

    async def refresh(self) -> None:
        try:
            names = await self._fetch()
        except Exception as e:
            logger.warning("cache.refresh_failed", error=str(e), cached=len(self._names))
            return
        self.store(names)
        logger.debug("cache.refreshed", count=len(names))

    def store(self, names: list[str]) -> None:
        """Replace the cache with an authoritative listing obtained elsewhere."""
        self._names = tuple(names)
        self.last_updated = self._clock()

    async def invalidate(self) -> None:
        """Called after a deploy. Refreshes immediately so readers never see an empty cache."""
        await self.refresh()
