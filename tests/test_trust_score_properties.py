"""
Property-based tests for the trust score engine.

These tests fuzz UserStats with arbitrary non-negative inputs and check the
scoring bounds, plus the documented behavior of each trust-affecting event.
"""

import math

import pytest
from hypothesis import given, settings, strategies as st

from barter_exchange.error_handling.errors import CorruptRecordError, InvalidRatingError
from barter_exchange.models import UserStats, Verifications
from barter_exchange.store import InMemoryStore
from barter_exchange.store.records import user_stats_key
from barter_exchange.trust import TRUST_WEIGHTS, TrustScoreEngine, component_scores, score_stats


counts = st.integers(min_value=0, max_value=10_000)

user_stats = st.builds(
    lambda completed, rating_count, avg, disputes, endorsements, violations, flags, response: UserStats(
        completed_exchanges=completed,
        total_rating=rating_count * avg,
        rating_count=rating_count,
        disputes=disputes,
        endorsements=endorsements,
        rule_violations=violations,
        verifications=Verifications(email=flags[0], phone=flags[1], id=flags[2], address=flags[3]),
        response_rate=response,
    ),
    completed=counts,
    rating_count=counts,
    avg=st.floats(min_value=1, max_value=5),
    disputes=counts,
    endorsements=counts,
    violations=counts,
    flags=st.tuples(st.booleans(), st.booleans(), st.booleans(), st.booleans()),
    response=st.floats(min_value=-10, max_value=10, allow_nan=False),
)


@given(stats=user_stats)
@settings(max_examples=300)
def test_total_is_always_within_bounds(stats):
    """
    **Feature: barter-exchange, Property 5: Bounded trust score**

    For any non-negative stats, including more disputes than exchanges and
    out-of-range response rates, every component and the total stay in 0-100.
    """
    score = score_stats(stats)

    for value in (score.verification, score.endorsement, score.reputation,
                  score.dispute, score.behavior, score.total):
        assert 0 <= value <= 100

    for name, fraction in component_scores(stats).items():
        assert 0.0 <= fraction <= 1.0, f"{name} component out of range: {fraction}"


@given(stats=user_stats)
@settings(max_examples=100)
def test_total_is_rounded_weighted_sum(stats):
    """
    **Feature: barter-exchange, Property 6: Weighted total**

    The total equals the weighted component sum scaled to 100 and rounded.
    """
    components = component_scores(stats)
    weighted = sum(TRUST_WEIGHTS[name] * components[name] for name in TRUST_WEIGHTS)

    assert abs(score_stats(stats).total - weighted * 100) <= 0.5 + 1e-9


def test_weights_sum_to_one():
    assert math.isclose(sum(TRUST_WEIGHTS.values()), 1.0)
    assert TRUST_WEIGHTS == {
        "verification": 0.20,
        "endorsement": 0.25,
        "reputation": 0.30,
        "dispute": 0.10,
        "behavior": 0.15,
    }


def test_new_user_defaults():
    engine = TrustScoreEngine(InMemoryStore())

    score = engine.calculate("brand-new")

    assert score.verification == 25
    assert score.endorsement == 0
    assert score.reputation == 80
    assert score.dispute == 100
    # response 1.0, adherence 1.0, activity 0.0
    assert score.behavior == 67
    assert score.total == 49


def test_calculate_creates_default_stats_once():
    store = InMemoryStore()
    engine = TrustScoreEngine(store)

    engine.calculate("u1")
    engine.calculate("u1")

    assert store.get_record(user_stats_key("u1"))["completedExchanges"] == 0
    assert store.keys().count(user_stats_key("u1")) == 1


def test_perfect_user_scores_100():
    stats = UserStats(
        completed_exchanges=5,
        total_rating=25,
        rating_count=5,
        endorsements=10,
        verifications=Verifications(email=True, phone=True, id=True, address=True),
    )

    assert score_stats(stats).total == 100


def test_disputes_beyond_exchanges_floor_at_zero():
    stats = UserStats(completed_exchanges=2, disputes=7)

    assert component_scores(stats)["dispute"] == 0.0
    assert score_stats(stats).dispute == 0


def test_rule_adherence_never_drops_below_half():
    stats = UserStats(rule_violations=1000, response_rate=0.0)

    # adherence 0.5, response 0, activity 0
    assert math.isclose(component_scores(stats)["behavior"], 0.5 / 3)


def test_endorsements_saturate_at_ten():
    assert score_stats(UserStats(endorsements=10)).endorsement == 100
    assert score_stats(UserStats(endorsements=250)).endorsement == 100
    assert score_stats(UserStats(endorsements=3)).endorsement == 30


@given(ratings=st.lists(st.integers(min_value=1, max_value=5), min_size=1, max_size=30))
@settings(max_examples=100)
def test_reputation_tracks_average_rating(ratings):
    """
    **Feature: barter-exchange, Property 7: Reputation from ratings**

    After any sequence of valid ratings, reputation is the average rating
    divided by five.
    """
    engine = TrustScoreEngine(InMemoryStore())
    for rating in ratings:
        engine.add_rating("u1", rating)

    stats = engine.stats.get_stats("u1")
    assert stats.rating_count == len(ratings)
    assert stats.total_rating == sum(ratings)
    expected = (sum(ratings) / len(ratings)) / 5.0
    assert math.isclose(component_scores(stats)["reputation"], expected)


@pytest.mark.parametrize("rating", [0, 0.99, 5.01, 6, -1, float("nan"), float("inf"), True, "5", None])
def test_invalid_ratings_are_rejected(rating):
    engine = TrustScoreEngine(InMemoryStore())

    with pytest.raises(InvalidRatingError):
        engine.add_rating("u1", rating)

    assert engine.stats.get_stats("u1").rating_count == 0


def test_boundary_ratings_are_accepted():
    engine = TrustScoreEngine(InMemoryStore())

    engine.add_rating("u1", 1)
    engine.add_rating("u1", 5)
    engine.add_rating("u1", 3.5)

    stats = engine.stats.get_stats("u1")
    assert stats.rating_count == 3
    assert stats.total_rating == 9.5


def test_events_change_the_score():
    engine = TrustScoreEngine(InMemoryStore())
    baseline = engine.calculate("u1")

    engine.add_endorsement("u1")
    assert engine.calculate("u1").endorsement == 10

    engine.record_completed_exchange("u1")
    engine.record_dispute("u1")
    assert engine.calculate("u1").dispute == 0

    engine.record_rule_violation("u1")
    assert engine.stats.get_stats("u1").rule_violations == 1

    engine.set_verification("u1", "id")
    assert engine.calculate("u1").verification == 50

    engine.set_response_rate("u1", 3.0)
    assert engine.stats.get_stats("u1").response_rate == 1.0

    assert engine.calculate("u1") != baseline


def test_unknown_verification_kind_is_rejected():
    engine = TrustScoreEngine(InMemoryStore())

    with pytest.raises(ValueError):
        engine.set_verification("u1", "passport")


def test_corrupt_stats_record_is_rejected():
    store = InMemoryStore()
    store.put_record(user_stats_key("u1"), {"completedExchanges": -4})

    with pytest.raises(CorruptRecordError):
        TrustScoreEngine(store).calculate("u1")
