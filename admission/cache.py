import os
import json
import time
import logging
from typing import Any, Dict, Optional, Tuple

import redis
from dotenv import load_dotenv

# Load env vars (if not already loaded)
load_dotenv()

logger = logging.getLogger(__name__)

# Seconds to skip Redis after a connection failure before trying again
RETRY_AFTER_SECONDS = 30


class ResponseCache:
    """
    Best-effort key/value cache for API responses.

    Backed by Redis when a URL is configured, otherwise by an in-process
    dict. Every failure is logged and reported as a miss, so callers
    simply recompute. After a Redis error the client is left alone for
    RETRY_AFTER_SECONDS, so an outage costs one timeout per window
    instead of one per request.
    """

    def __init__(self, redis_url: Optional[str] = None, namespace: str = "josaa", client=None):
        self.namespace = namespace
        self.client = client
        if self.client is None and redis_url:
            self.client = redis.Redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=0.5,
                socket_timeout=0.5,
            )

        # key -> (expires_at, serialized payload); used when no Redis client
        self._local: Dict[str, Tuple[float, str]] = {}
        self._down_until = 0.0

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def _backing_off(self) -> bool:
        return time.monotonic() < self._down_until

    def _mark_down(self, error: Exception) -> None:
        self._down_until = time.monotonic() + RETRY_AFTER_SECONDS
        logger.warning(f"Redis unavailable, bypassing cache for {RETRY_AFTER_SECONDS}s: {error}")

    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None on a miss or any backend failure."""
        full_key = self._key(key)
        try:
            if self.client is None:
                data = self._local_get(full_key)
            elif self._backing_off():
                return None
            else:
                data = self.client.get(full_key)
            return json.loads(data) if data else None
        except redis.RedisError as e:
            self._mark_down(e)
            return None
        except (ValueError, TypeError) as e:
            logger.warning(f"Cache retrieval failed for key {full_key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store value for ttl_seconds; failures are logged and ignored."""
        full_key = self._key(key)
        try:
            data = json.dumps(value)
            if self.client is None:
                self._local[full_key] = (time.monotonic() + ttl_seconds, data)
            elif not self._backing_off():
                self.client.set(full_key, data, ex=ttl_seconds)
        except redis.RedisError as e:
            self._mark_down(e)
        except (ValueError, TypeError) as e:
            logger.warning(f"Cache storage failed for key {full_key}: {e}")

    def is_ready(self) -> bool:
        """Ping the backend; a successful ping ends any back-off early."""
        if self.client is None:
            return True
        try:
            ready = bool(self.client.ping())
        except redis.RedisError as e:
            self._mark_down(e)
            return False
        if ready:
            self._down_until = 0.0
        return ready

    @property
    def backend(self) -> str:
        return "redis" if self.client is not None else "memory"

    def _local_get(self, full_key: str) -> Optional[str]:
        entry = self._local.get(full_key)
        if entry is None:
            return None
        expires_at, data = entry
        if time.monotonic() >= expires_at:
            self._local.pop(full_key, None)
            return None
        return data


# Singleton instance
response_cache = ResponseCache(
    redis_url=os.getenv("REDIS_URL"),
    namespace=os.getenv("CACHE_NAMESPACE", "josaa"),
)
