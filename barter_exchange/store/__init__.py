"""
Storage module for the barter exchange.

A namespaced key-value store with memory, JSON file and redis backends,
plus typed record helpers that validate on read.
"""

from .key_value_store import KeyValueStore, InMemoryStore
from .file_store import JsonFileStore
from .redis_store import RedisStore
from .factory import create_store
from .records import (
    load_model,
    load_model_list,
    save_model,
    save_model_list,
    clear_app_data,
)

__all__ = [
    'KeyValueStore',
    'InMemoryStore',
    'JsonFileStore',
    'RedisStore',
    'create_store',
    'load_model',
    'load_model_list',
    'save_model',
    'save_model_list',
    'clear_app_data',
]
