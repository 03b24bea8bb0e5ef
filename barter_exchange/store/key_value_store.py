"""
Key-value store interface and the in-memory backend.

The store is a namespaced map of JSON-serializable values. It holds no
domain logic; typed access lives in records.py.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Generic get/set against a persistent map."""

    @abstractmethod
    def get_record(self, key: str, default: Any = None) -> Any:
        """Return the value stored at key, or default if absent."""

    @abstractmethod
    def put_record(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value at key."""

    @abstractmethod
    def delete_record(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def keys(self) -> List[str]:
        """List all keys currently stored."""

    @staticmethod
    def _encode(value: Any) -> str:
        # Raises TypeError for values that would not survive persistence
        return json.dumps(value)


class InMemoryStore(KeyValueStore):
    """Dict-backed store; values are copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.put_record(key, value)

    def get_record(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def put_record(self, key: str, value: Any) -> None:
        self._data[key] = json.loads(self._encode(value))

    def delete_record(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())
