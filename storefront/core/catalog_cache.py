"""Read-through cache for the best-seller listing.

The listing is global (not per user), computed against the catalog store
at most once per validity window and shared by every request. Concurrent
misses for the same key wait on a single in-flight recomputation.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from .models import Album
from .ports import CatalogStorePort

logger = logging.getLogger(__name__)

TOP_SELLING_CACHE_KEY = "topselling"
DEFAULT_TOP_SELLING_COUNT = 6
DEFAULT_TTL_SECONDS = 600.0


@dataclass(frozen=True)
class _CacheEntry:
    albums: tuple[Album, ...]
    expires_at: float


class CatalogCache:
    """Caches the top selling albums in front of a CatalogStorePort.

    Entries expire a fixed time after they were computed (absolute
    expiration). Entries are replaced whole, so readers never observe a
    partially built listing.
    """

    def __init__(
        self,
        catalog: CatalogStorePort,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            catalog: CatalogStorePort implementation to read through to.
            ttl_seconds: Validity window of a computed listing.
            clock: Monotonic time source, injectable for tests.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.catalog = catalog
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task[tuple[Album, ...]]] = {}
        # Bumped by invalidate(); a recomputation started under an older
        # generation must not store its result
        self._generations: dict[str, int] = {}

    @staticmethod
    def key_for(count: int) -> str:
        return f"{TOP_SELLING_CACHE_KEY}:{count}"

    async def get_top_selling_albums(
        self, count: int = DEFAULT_TOP_SELLING_COUNT
    ) -> tuple[Album, ...]:
        """Return up to count best-selling albums, artist and genre resolved.

        Raises:
            ValueError: If count is not positive.
            DataAccessError: If the catalog store fails on a miss.
        """
        if count <= 0:
            raise ValueError(f"count must be positive, got {count}")

        key = self.key_for(count)
        entry = self._entries.get(key)
        if entry is not None and entry.expires_at > self._clock():
            logger.debug(f"Cache hit for {key}", extra={"cache_key": key})
            return entry.albums

        task = self._inflight.get(key)
        if task is None:
            logger.debug(f"Cache miss for {key}", extra={"cache_key": key})
            generation = self._generations.get(key, 0)
            task = asyncio.create_task(self._recompute(key, count, generation))
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._forget(key, t))
        else:
            logger.debug(
                f"Waiting on in-flight recomputation for {key}",
                extra={"cache_key": key},
            )

        # Shield so one cancelled waiter does not abort the shared recomputation
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task[tuple[Album, ...]]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def _recompute(
        self, key: str, count: int, generation: int
    ) -> tuple[Album, ...]:
        ranked = await self.catalog.list_albums_ranked_by_sales(count)
        albums = tuple(album for album in ranked if album.is_fully_linked)[:count]

        if len(albums) < len(ranked[:count]):
            logger.warning(
                f"Dropped {len(ranked[:count]) - len(albums)} albums without "
                f"resolved artist or genre from {key}",
                extra={"cache_key": key},
            )

        if self._generations.get(key, 0) != generation:
            logger.debug(
                f"Discarding stale recomputation of {key}",
                extra={"cache_key": key},
            )
            return albums

        self._entries[key] = _CacheEntry(
            albums=albums, expires_at=self._clock() + self.ttl_seconds
        )
        logger.info(
            f"Recomputed {key} with {len(albums)} albums",
            extra={"cache_key": key, "count": len(albums)},
        )
        return albums

    def invalidate(self, count: int | None = None) -> None:
        """Drop the cached listing for one count, or every cached listing."""
        if count is None:
            keys = set(self._entries) | set(self._inflight)
        else:
            keys = {self.key_for(count)}
        for key in keys:
            self._entries.pop(key, None)
            self._inflight.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
        logger.info(
            "Invalidated best-seller cache",
            extra={"count": count},
        )
