"""Store construction from configuration."""

import logging

from barter_exchange.config.app_config import StoreConfig
from .key_value_store import KeyValueStore, InMemoryStore
from .file_store import JsonFileStore
from .redis_store import RedisStore

logger = logging.getLogger(__name__)


def create_store(config: StoreConfig) -> KeyValueStore:
    """
    Build the store backend named by config.storage_type.

    Args:
        config: Store configuration

    Returns:
        A ready KeyValueStore

    Raises:
        ValueError: If storage_type is not memory, file or redis
    """
    storage_type = config.storage_type.lower()

    if storage_type == "memory":
        logger.info("Using in-memory store")
        return InMemoryStore()
    if storage_type == "file":
        logger.info(f"Using file store in {config.base_dir}")
        return JsonFileStore(base_dir=config.base_dir, file_name=config.file_name)
    if storage_type == "redis":
        logger.info(f"Using redis store with namespace {config.namespace!r}")
        return RedisStore(redis_url=config.redis_url, namespace=config.namespace)

    raise ValueError(f"Unsupported storage type: {config.storage_type}")
