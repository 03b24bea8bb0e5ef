"""
Typed access to the key-value store.

Every read is validated through the record's pydantic model; a stored
value that does not validate raises CorruptRecordError instead of leaking
a half-formed dict into the domain code.
"""

import logging
from typing import List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from barter_exchange.error_handling.errors import CorruptRecordError
from .key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Key layout
USERS_KEY = "users"
CURRENT_USER_KEY = "currentUser"
LISTINGS_KEY = "listings"
BARTER_REQUESTS_KEY = "barterRequests"
COMMUNITIES_KEY = "communities"

APP_KEY_PREFIXES = (
    "members_",
    "messages_",
    "notifications_",
    "user_stats_",
)
APP_KEYS = (
    USERS_KEY,
    CURRENT_USER_KEY,
    LISTINGS_KEY,
    BARTER_REQUESTS_KEY,
    COMMUNITIES_KEY,
)


def members_key(community_id: str) -> str:
    return f"members_{community_id}"


def messages_key(community_id: str) -> str:
    return f"messages_{community_id}"


def notifications_key(user_id: str) -> str:
    return f"notifications_{user_id}"


def user_stats_key(user_id: str) -> str:
    return f"user_stats_{user_id}"


def _validate(model: Type[M], key: str, value) -> M:
    try:
        return model.model_validate(value)
    except ValidationError as e:
        logger.error(f"Rejected stored {model.__name__} at {key!r}: {e.error_count()} errors")
        raise CorruptRecordError(key, str(e)) from e


def load_model(
    store: KeyValueStore,
    key: str,
    model: Type[M],
    default: Optional[M] = None
) -> Optional[M]:
    """
    Read and validate a single record.

    Args:
        store: Store to read from
        key: Record key
        model: Pydantic model the record must satisfy
        default: Returned when the key is absent

    Returns:
        Validated model instance or default

    Raises:
        CorruptRecordError: If the stored value does not validate
    """
    value = store.get_record(key)
    if value is None:
        return default
    return _validate(model, key, value)


def load_model_list(store: KeyValueStore, key: str, model: Type[M]) -> List[M]:
    """Read and validate a list of records; an absent key is an empty list."""
    value = store.get_record(key, [])
    if not isinstance(value, list):
        raise CorruptRecordError(key, f"expected a list, got {type(value).__name__}")
    return [_validate(model, key, item) for item in value]


def save_model(store: KeyValueStore, key: str, record: BaseModel) -> None:
    store.put_record(key, record.model_dump(mode="json", by_alias=True))


def save_model_list(store: KeyValueStore, key: str, records: Sequence[BaseModel]) -> None:
    store.put_record(key, [r.model_dump(mode="json", by_alias=True) for r in records])


def is_app_key(key: str) -> bool:
    return key in APP_KEYS or key.startswith(APP_KEY_PREFIXES)


def clear_app_data(store: KeyValueStore) -> int:
    """
    Remove every application key from the store.

    Args:
        store: Store to clear

    Returns:
        Number of keys removed
    """
    removed = 0
    for key in store.keys():
        if is_app_key(key):
            store.delete_record(key)
            removed += 1
    logger.info(f"Cleared {removed} application keys")
    return removed
