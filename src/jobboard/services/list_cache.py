"""Redis-backed cache-aside wrapper for paginated list reads.

Keys look like::

    jobboard:jobs:list:jobType=FULL_TIME&recruiterId=...:page:1:limit:10

Filters are sorted before encoding so parameter order never changes the
key. Entries expire after the TTL and can be dropped in bulk per endpoint.
The cache is advisory: every Redis failure is logged and treated as a
miss, so a down cache only costs latency.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar
from urllib.parse import urlencode

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.jobboard.domain.pagination import ListQuery, PaginatedResult

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=PaginatedResult)

# Cache namespaces of the list endpoints
USERS_CACHE = "users"
JOBS_CACHE = "jobs"

# {prefix}:{endpoint}:list:{filters}:page:{page}:limit:{limit}
_LIST_KEY = "{prefix}:{endpoint}:list:{filters}:page:{page}:limit:{limit}"
_LIST_PATTERN = "{prefix}:{endpoint}:list:*"


class ListCache:
    """Cache-aside wrapper around list query results.

    Owns the cache entry lifecycle and never touches the store: on a miss
    it awaits the loader it was given and writes the result back.
    """

    def __init__(
        self,
        redis: Redis | None,
        ttl_seconds: int = 60,
        key_prefix: str = "jobboard",
    ) -> None:
        """Initialize cache with Redis client and TTL.

        Args:
            redis: Async Redis client, or None to run with caching disabled
            ttl_seconds: Time-to-live for list entries in seconds
            key_prefix: Namespace prepended to every key
        """
        self._redis = redis
        self._ttl = ttl_seconds
        self._prefix = key_prefix

    def build_key(self, endpoint: str, query: ListQuery) -> str:
        """Build the deterministic cache key for one list request."""
        filters = urlencode(sorted(query.filters.items())) or "all"
        return _LIST_KEY.format(
            prefix=self._prefix,
            endpoint=endpoint,
            filters=filters,
            page=query.page,
            limit=query.limit,
        )

    async def get_or_load(
        self,
        endpoint: str,
        query: ListQuery,
        loader: Callable[[], Awaitable[R]],
        result_type: type[R],
    ) -> tuple[R, bool]:
        """Return the cached page for ``query`` or load and cache it.

        Args:
            endpoint: Cache namespace of the list endpoint (e.g. "jobs")
            query: Resolved page, limit and filters
            loader: Runs the store query on a miss
            result_type: Model used to deserialize cached entries

        Returns:
            Tuple of (result, served_from_cache)

        Raises:
            StoreReadError: Propagated from ``loader`` on a miss
        """
        key = self.build_key(endpoint, query)

        cached = await self._get(key, result_type)
        if cached is not None:
            logger.info("Cache hit %s", key)
            return cached, True

        logger.info("Cache miss %s", key)
        result = await loader()
        await self._set(key, result)
        return result, False

    async def invalidate(self, endpoint: str) -> int:
        """Delete every cached page of ``endpoint``.

        Returns:
            Number of keys deleted (0 when the cache is unreachable)
        """
        if self._redis is None:
            return 0

        pattern = _LIST_PATTERN.format(prefix=self._prefix, endpoint=endpoint)
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            deleted = await self._redis.delete(*keys) if keys else 0
        except (RedisError, OSError) as e:
            logger.warning("Cache invalidation of %s failed: %s", pattern, e)
            return 0

        logger.info("Invalidated %d cached page(s) for %s", deleted, endpoint)
        return deleted

    async def _get(self, key: str, result_type: type[R]) -> R | None:
        if self._redis is None:
            return None
        try:
            data = await self._redis.get(key)
        except (RedisError, OSError) as e:
            logger.warning("Cache read of %s failed: %s", key, e)
            return None
        if data is None:
            return None

        try:
            return result_type.model_validate_json(data)
        except ValidationError as e:
            logger.warning("Discarding corrupt cache entry %s: %s", key, e)
            return None

    async def _set(self, key: str, result: PaginatedResult) -> None:
        if self._redis is None:
            return
        try:
            await self._redis.set(key, result.model_dump_json(), ex=self._ttl)
        except (RedisError, OSError) as e:
            logger.warning("Cache write of %s failed: %s", key, e)
