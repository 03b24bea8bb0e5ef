"""
Trust score engine.

Turns a user's accumulated statistics into a weighted composite score.
The score is always recomputed from UserStats; nothing derived is stored.
"""

import logging
import math
from numbers import Real
from typing import Dict, Optional

from barter_exchange.error_handling.errors import InvalidRatingError
from barter_exchange.models import TrustScoreBreakdown, UserStats
from barter_exchange.store import KeyValueStore
from .user_stats import UserStatsRepository

logger = logging.getLogger(__name__)


# Component weights; they sum to 1.0
TRUST_WEIGHTS: Dict[str, float] = {
    "verification": 0.20,
    "endorsement": 0.25,
    "reputation": 0.30,
    "dispute": 0.10,
    "behavior": 0.15,
}

UNRATED_REPUTATION = 0.8
ENDORSEMENT_SATURATION = 10
ACTIVITY_SATURATION = 5
VIOLATION_PENALTY = 0.05
MIN_RULE_ADHERENCE = 0.5

VERIFICATION_KINDS = ("email", "phone", "id", "address")


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _to_percent(fraction: float) -> int:
    """Scale a [0, 1] fraction to an integer 0-100, rounding halves up."""
    return int(math.floor(round(fraction * 100, 9) + 0.5))


def component_scores(stats: UserStats) -> Dict[str, float]:
    """
    Compute the five normalized trust components.

    Args:
        stats: Accumulated user statistics

    Returns:
        Dict of component name to a fraction in [0, 1]
    """
    verification = stats.verifications.count() / len(VERIFICATION_KINDS)

    endorsement = min(stats.endorsements / ENDORSEMENT_SATURATION, 1.0)

    if stats.rating_count == 0:
        # Unrated users start from a favorable neutral
        reputation = UNRATED_REPUTATION
    else:
        reputation = (stats.total_rating / stats.rating_count) / 5.0

    if stats.completed_exchanges == 0:
        dispute = 1.0
    else:
        dispute = max(0.0, 1 - stats.disputes / stats.completed_exchanges)

    response = _clamp(stats.response_rate)
    adherence = max(MIN_RULE_ADHERENCE, 1 - stats.rule_violations * VIOLATION_PENALTY)
    activity = min(1.0, stats.completed_exchanges / ACTIVITY_SATURATION)
    behavior = (response + adherence + activity) / 3

    return {
        "verification": _clamp(verification),
        "endorsement": _clamp(endorsement),
        "reputation": _clamp(reputation),
        "dispute": _clamp(dispute),
        "behavior": _clamp(behavior),
    }


def score_stats(stats: UserStats) -> TrustScoreBreakdown:
    """Pure scoring of a UserStats record."""
    components = component_scores(stats)
    weighted = sum(TRUST_WEIGHTS[name] * value for name, value in components.items())
    total = max(0, min(100, _to_percent(weighted)))

    return TrustScoreBreakdown(
        verification=_to_percent(components["verification"]),
        endorsement=_to_percent(components["endorsement"]),
        reputation=_to_percent(components["reputation"]),
        dispute=_to_percent(components["dispute"]),
        behavior=_to_percent(components["behavior"]),
        total=total,
    )


class TrustScoreEngine:
    """
    Computes trust scores and applies trust-affecting events.

    calculate() has no side effects beyond the lazy creation of default
    stats, so it is safe to call on every render.
    """

    def __init__(
        self,
        store: KeyValueStore,
        stats_repository: Optional[UserStatsRepository] = None
    ):
        self.stats = stats_repository or UserStatsRepository(store)

    def calculate(self, user_id: str) -> TrustScoreBreakdown:
        """
        Calculate the trust score breakdown for a user.

        Args:
            user_id: User to score

        Returns:
            TrustScoreBreakdown with five components and the weighted total
        """
        return score_stats(self.stats.get_stats(user_id))

    def add_rating(self, user_id: str, rating: float) -> None:
        """
        Record a 1-5 star rating for a user.

        Args:
            user_id: Rated user
            rating: Star rating, 1 to 5 inclusive

        Raises:
            InvalidRatingError: If rating is not a number in [1, 5]
        """
        if isinstance(rating, bool) or not isinstance(rating, Real):
            raise InvalidRatingError(rating)
        if math.isnan(rating) or rating < 1 or rating > 5:
            raise InvalidRatingError(rating)

        def apply(stats: UserStats) -> None:
            stats.total_rating += rating
            stats.rating_count += 1

        self.stats.update(user_id, apply)
        logger.info(f"Recorded rating {rating} for user {user_id}")

    def add_endorsement(self, user_id: str) -> None:
        def apply(stats: UserStats) -> None:
            stats.endorsements += 1

        self.stats.update(user_id, apply)

    def record_dispute(self, user_id: str) -> None:
        def apply(stats: UserStats) -> None:
            stats.disputes += 1

        self.stats.update(user_id, apply)
        logger.info(f"Recorded dispute against user {user_id}")

    def record_rule_violation(self, user_id: str) -> None:
        def apply(stats: UserStats) -> None:
            stats.rule_violations += 1

        self.stats.update(user_id, apply)
        logger.info(f"Recorded rule violation for user {user_id}")

    def set_verification(self, user_id: str, kind: str, verified: bool = True) -> None:
        """
        Set one of the email/phone/id/address verification flags.

        Raises:
            ValueError: If kind is not a known verification
        """
        if kind not in VERIFICATION_KINDS:
            raise ValueError(f"Unknown verification kind: {kind}")

        def apply(stats: UserStats) -> None:
            setattr(stats.verifications, kind, bool(verified))

        self.stats.update(user_id, apply)

    def set_response_rate(self, user_id: str, response_rate: float) -> None:
        def apply(stats: UserStats) -> None:
            stats.response_rate = _clamp(float(response_rate))

        self.stats.update(user_id, apply)

    def record_completed_exchange(self, user_id: str) -> None:
        self.stats.increment_completed_exchanges(user_id)
        logger.info(f"Recorded completed exchange for user {user_id}")
