"""
Redis-backed key-value store.
"""

import json
import logging
from typing import Any, List, Optional

import redis

from .key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class RedisStore(KeyValueStore):
    """Stores each key as a JSON string under "<namespace>:<key>"."""

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        namespace: str = "barter",
        client: Optional[redis.Redis] = None
    ):
        self.namespace = namespace
        if client is None:
            client = redis.Redis.from_url(redis_url, decode_responses=True)
            logger.info(f"Redis client created for {redis_url}")
        self.client = client

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def ping(self) -> bool:
        """Check connectivity; raises the client's connection error on failure."""
        return bool(self.client.ping())

    def get_record(self, key: str, default: Any = None) -> Any:
        raw = self.client.get(self._key(key))
        if raw is None:
            return default
        return json.loads(raw)

    def put_record(self, key: str, value: Any) -> None:
        self.client.set(self._key(key), self._encode(value))

    def delete_record(self, key: str) -> None:
        self.client.delete(self._key(key))

    def keys(self) -> List[str]:
        prefix = f"{self.namespace}:"
        return [
            k[len(prefix):] if isinstance(k, str) else k.decode()[len(prefix):]
            for k in self.client.scan_iter(match=f"{prefix}*")
        ]

    def close(self) -> None:
        self.client.close()
        logger.info("Redis connection closed")
