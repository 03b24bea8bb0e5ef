"""
Per-user trust statistics persistence.
"""

import logging
from typing import Callable

from barter_exchange.models import UserStats
from barter_exchange.store import KeyValueStore, load_model, save_model
from barter_exchange.store.records import user_stats_key

logger = logging.getLogger(__name__)


class UserStatsRepository:
    """Reads and mutates UserStats records.

    Stats are created with defaults on first read and never deleted.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_stats(self, user_id: str) -> UserStats:
        """
        Load stats for a user, creating the default record if absent.

        Args:
            user_id: User whose stats to read

        Returns:
            Validated UserStats
        """
        key = user_stats_key(user_id)
        stats = load_model(self.store, key, UserStats)
        if stats is None:
            stats = UserStats()
            save_model(self.store, key, stats)
            logger.debug(f"Created default stats for user {user_id}")
        return stats

    def save_stats(self, user_id: str, stats: UserStats) -> None:
        save_model(self.store, user_stats_key(user_id), stats)

    def update(self, user_id: str, mutate: Callable[[UserStats], None]) -> UserStats:
        """
        Read-modify-write a user's stats.

        Args:
            user_id: User whose stats to change
            mutate: Callable that edits the UserStats in place

        Returns:
            The saved UserStats
        """
        stats = self.get_stats(user_id)
        mutate(stats)
        # Re-validate so a mutation cannot persist an out-of-range value
        stats = UserStats.model_validate(stats.model_dump())
        self.save_stats(user_id, stats)
        return stats

    def increment_completed_exchanges(self, user_id: str) -> UserStats:
        def bump(stats: UserStats) -> None:
            stats.completed_exchanges += 1

        return self.update(user_id, bump)
