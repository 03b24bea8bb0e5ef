"""
File-backed key-value store.

Persists the whole map as a single JSON document, rewritten on every
mutation, so a restart picks up exactly what the last call wrote.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """Key-value store persisted to a JSON file.

    An unreadable or malformed file is logged and treated as empty; write
    failures are logged and re-raised so a transition never appears to
    succeed without being saved.

    Attributes:
        base_dir: Directory holding the store file
        file_name: Name of the JSON file inside base_dir
    """

    def __init__(self, base_dir: str = "./barter_data", file_name: str = "store.json"):
        """Initialize file store.

        Args:
            base_dir: Directory holding the store file
            file_name: Name of the JSON file inside base_dir
        """
        self.base_dir = Path(base_dir)
        self.file_name = file_name

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            logger.error(f"Failed to create store directory {self.base_dir}: {e}")

        self._data: Dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self.base_dir / self.file_name

    def _load(self) -> Dict[str, Any]:
        """Load the map from disk.

        Returns:
            Stored map, or an empty dict when the file is missing or unreadable
        """
        if not self.path.exists():
            logger.info(f"No existing store found at {self.path}")
            return {}

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse store JSON from {self.path}: {e}")
            return {}
        except IOError as e:
            logger.error(f"Failed to read store file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Store file {self.path} does not hold a JSON object")
            return {}

        logger.info(f"Loaded {len(data)} keys from {self.path}")
        return data

    def _flush(self, data: Dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w') as f:
                json.dump(data, f, indent=2)
            tmp_path.replace(self.path)
        except (IOError, OSError) as e:
            logger.error(f"Failed to write store file {self.path}: {e}")
            raise

    def get_record(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def put_record(self, key: str, value: Any) -> None:
        # Swap the map in only once it is on disk
        data = dict(self._data)
        data[key] = json.loads(self._encode(value))
        self._flush(data)
        self._data = data

    def delete_record(self, key: str) -> None:
        if key in self._data:
            data = dict(self._data)
            del data[key]
            self._flush(data)
            self._data = data

    def keys(self) -> List[str]:
        return list(self._data.keys())
