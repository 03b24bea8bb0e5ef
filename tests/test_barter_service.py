"""
Tests for BarterService, the persistence and side-effect layer around the
negotiation state machine.

Every test builds its own store so no state leaks between tests.
"""

import asyncio
import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from barter_exchange.config import AppSettings, BarterPolicyConfig
from barter_exchange.directory import ListingDirectory, UserDirectory
from barter_exchange.error_handling import ErrorHandler
from barter_exchange.error_handling.errors import (
    ChatNotAvailableError,
    DuplicateRequestError,
    InvalidCodeError,
    InvalidTransitionError,
    ListingNotFoundError,
    NotAuthenticatedError,
    NotReadyError,
    RequestNotFoundError,
    UnauthorizedError,
    UserNotFoundError,
)
from barter_exchange.models import (
    BarterStatus,
    ListingCreate,
    ListingUpdate,
    NotificationType,
    SignupData,
)
from barter_exchange.negotiation import BarterService
from barter_exchange.notifications import NotificationService
from barter_exchange.store import InMemoryStore, JsonFileStore
from barter_exchange.trust import TrustScoreEngine


def run_async(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def build_world(allow_duplicate_requests: bool = False, store=None) -> SimpleNamespace:
    """Store, services, an owner with one listing, a requester and an outsider."""
    store = store if store is not None else InMemoryStore()
    settings = AppSettings(policy=BarterPolicyConfig(allow_duplicate_requests=allow_duplicate_requests))
    trust = TrustScoreEngine(store)
    users = UserDirectory(store, trust)
    listings = ListingDirectory(store, users)
    notifications = NotificationService(store)
    errors = ErrorHandler()
    service = BarterService(
        store,
        settings=settings,
        users=users,
        listings=listings,
        notifications=notifications,
        trust_engine=trust,
        error_handler=errors,
    )

    owner = users.signup(SignupData(email="olive@example.com", password="pw", name="Olive"))
    requester = users.signup(SignupData(email="quinn@example.com", password="pw", name="Quinn"))
    outsider = users.signup(SignupData(email="sam@example.com", password="pw", name="Sam"))
    listing = listings.create_listing(owner, ListingCreate(
        title="Mountain bike",
        description="21 speed, recently serviced",
        category="product",
        estimated_value=150,
        community_id="community-1",
    ))

    return SimpleNamespace(
        store=store,
        trust=trust,
        users=users,
        listings=listings,
        notifications=notifications,
        errors=errors,
        service=service,
        owner=owner,
        requester=requester,
        outsider=outsider,
        listing=listing,
    )


def create_request(world, offer: str = "2 hours gardening"):
    return run_async(world.service.create_barter_request(world.listing.id, offer, world.requester.id))


def accept_both(world):
    request = create_request(world)
    run_async(world.service.respond_to_request(request.id, True, world.owner.id))
    return run_async(world.service.respond_to_request(request.id, True, world.requester.id))


def types_for(world, user_id):
    return [n.type for n in world.notifications.get_notifications(user_id)]


def test_full_exchange_scenario():
    """Create, accept twice, complete twice; stats and notifications follow."""
    world = build_world()

    request = create_request(world)
    assert request.status == BarterStatus.PENDING
    assert request.offer_description == "2 hours gardening"
    assert request.owner_id == world.owner.id
    assert request.owner_name == "Olive"
    assert request.requester_name == "Quinn"
    assert types_for(world, world.owner.id) == [NotificationType.BARTER_REQUEST]

    request = run_async(world.service.respond_to_request(request.id, True, world.owner.id))
    assert request.status == BarterStatus.OWNER_ACCEPTED
    assert types_for(world, world.requester.id) == [NotificationType.BARTER_OWNER_ACCEPTED]

    request = run_async(world.service.respond_to_request(request.id, True, world.requester.id))
    assert request.status == BarterStatus.BOTH_ACCEPTED
    assert len(request.owner_confirmation_code) == 6
    assert len(request.requester_confirmation_code) == 6
    assert request.owner_confirmation_code != request.requester_confirmation_code
    assert not world.listings.listing_by_id(world.listing.id).is_active
    assert NotificationType.BARTER_BOTH_ACCEPTED in types_for(world, world.owner.id)
    assert NotificationType.BARTER_BOTH_ACCEPTED in types_for(world, world.requester.id)

    request = run_async(world.service.complete_barter(
        request.id, request.owner_confirmation_code, world.owner.id
    ))
    assert request.owner_completed
    assert request.status == BarterStatus.BOTH_ACCEPTED

    request = run_async(world.service.complete_barter(
        request.id, request.requester_confirmation_code, world.requester.id
    ))
    assert request.status == BarterStatus.COMPLETED
    assert request.completed_at is not None

    for user in (world.owner, world.requester):
        assert world.trust.stats.get_stats(user.id).completed_exchanges == 1
        assert types_for(world, user.id)[-1] == NotificationType.BARTER_COMPLETED

    stored = run_async(world.service.get_request(request.id))
    assert stored.model_dump() == request.model_dump()


def test_owner_rejection_is_terminal():
    world = build_world()
    request = create_request(world)

    request = run_async(world.service.respond_to_request(request.id, False, world.owner.id))

    assert request.status == BarterStatus.REJECTED
    assert types_for(world, world.requester.id) == [NotificationType.BARTER_REJECTED]
    assert world.listings.listing_by_id(world.listing.id).is_active

    with pytest.raises(InvalidTransitionError):
        run_async(world.service.respond_to_request(request.id, True, world.owner.id))
    with pytest.raises(InvalidTransitionError):
        run_async(world.service.respond_to_request(request.id, True, world.requester.id))
    with pytest.raises(NotReadyError):
        run_async(world.service.complete_barter(request.id, "ABC123", world.owner.id))


def test_requester_decline_notifies_owner():
    world = build_world()
    request = create_request(world)
    run_async(world.service.respond_to_request(request.id, True, world.owner.id))

    request = run_async(world.service.respond_to_request(request.id, False, world.requester.id))

    assert request.status == BarterStatus.REJECTED
    assert types_for(world, world.owner.id)[-1] == NotificationType.BARTER_REJECTED
    assert request.owner_confirmation_code is None


def test_completing_with_counterparty_code_changes_nothing():
    world = build_world()
    request = accept_both(world)

    with pytest.raises(InvalidCodeError):
        run_async(world.service.complete_barter(
            request.id, request.owner_confirmation_code, world.requester.id
        ))

    assert run_async(world.service.get_request(request.id)).model_dump() == request.model_dump()


def test_repeat_completion_counts_once():
    world = build_world()
    request = accept_both(world)
    owner_code = request.owner_confirmation_code
    requester_code = request.requester_confirmation_code

    first = run_async(world.service.complete_barter(request.id, owner_code, world.owner.id))
    again = run_async(world.service.complete_barter(request.id, owner_code, world.owner.id))
    assert again.model_dump() == first.model_dump()

    run_async(world.service.complete_barter(request.id, requester_code, world.requester.id))
    run_async(world.service.complete_barter(request.id, requester_code, world.requester.id))
    run_async(world.service.complete_barter(request.id, owner_code, world.owner.id))

    for user in (world.owner, world.requester):
        assert world.trust.stats.get_stats(user.id).completed_exchanges == 1
        assert types_for(world, user.id).count(NotificationType.BARTER_COMPLETED) == 1


def test_complete_before_both_accepted_is_not_ready():
    world = build_world()
    request = create_request(world)

    with pytest.raises(NotReadyError):
        run_async(world.service.complete_barter(request.id, "ABC123", world.owner.id))


def test_outsider_cannot_touch_request():
    world = build_world()
    request = create_request(world)

    with pytest.raises(UnauthorizedError):
        run_async(world.service.respond_to_request(request.id, True, world.outsider.id))

    run_async(world.service.respond_to_request(request.id, True, world.owner.id))
    request = run_async(world.service.respond_to_request(request.id, True, world.requester.id))

    with pytest.raises(UnauthorizedError):
        run_async(world.service.complete_barter(
            request.id, request.owner_confirmation_code, world.outsider.id
        ))
    with pytest.raises(UnauthorizedError):
        run_async(world.service.send_chat_message(request.id, "hi", world.outsider.id))


def test_owner_cannot_accept_twice():
    world = build_world()
    request = create_request(world)
    run_async(world.service.respond_to_request(request.id, True, world.owner.id))

    with pytest.raises(InvalidTransitionError):
        run_async(world.service.respond_to_request(request.id, True, world.owner.id))


def test_chat_opens_at_both_accepted():
    world = build_world()
    request = create_request(world)

    with pytest.raises(ChatNotAvailableError):
        run_async(world.service.send_chat_message(request.id, "hello?", world.requester.id))

    run_async(world.service.respond_to_request(request.id, True, world.owner.id))
    run_async(world.service.respond_to_request(request.id, True, world.requester.id))

    request = run_async(world.service.send_chat_message(request.id, "Saturday at 10?", world.requester.id))

    assert [m.content for m in request.chat_messages] == ["Saturday at 10?"]
    assert request.chat_messages[0].sender_name == "Quinn"
    assert types_for(world, world.owner.id)[-1] == NotificationType.CHAT_MESSAGE


def test_missing_actor_is_not_authenticated():
    world = build_world()
    request = create_request(world)

    with pytest.raises(NotAuthenticatedError):
        run_async(world.service.create_barter_request(world.listing.id, "offer", None))
    with pytest.raises(NotAuthenticatedError):
        run_async(world.service.respond_to_request(request.id, True, None))
    with pytest.raises(NotAuthenticatedError):
        run_async(world.service.send_chat_message(request.id, "hi", None))
    with pytest.raises(NotAuthenticatedError):
        run_async(world.service.complete_barter(request.id, "ABC123", None))


def test_unknown_ids_are_not_found():
    world = build_world()

    with pytest.raises(ListingNotFoundError):
        run_async(world.service.create_barter_request("missing", "offer", world.requester.id))
    with pytest.raises(UserNotFoundError):
        run_async(world.service.create_barter_request(world.listing.id, "offer", "ghost"))
    with pytest.raises(RequestNotFoundError):
        run_async(world.service.respond_to_request("missing", True, world.owner.id))
    with pytest.raises(RequestNotFoundError):
        run_async(world.service.get_request("missing"))


def test_inactive_listing_cannot_be_requested():
    world = build_world()
    world.listings.deactivate_listing(world.listing.id)

    with pytest.raises(ListingNotFoundError):
        create_request(world)


def test_owner_cannot_request_own_listing():
    world = build_world()

    with pytest.raises(UnauthorizedError):
        run_async(world.service.create_barter_request(world.listing.id, "my own", world.owner.id))


def test_duplicate_open_request_is_rejected():
    world = build_world()
    first = create_request(world)

    with pytest.raises(DuplicateRequestError):
        create_request(world, "something else")

    run_async(world.service.respond_to_request(first.id, False, world.owner.id))
    second = create_request(world, "something else")

    assert second.id != first.id
    assert len(run_async(world.service.get_my_requests(world.requester.id))) == 2


def test_duplicates_allowed_when_configured():
    world = build_world(allow_duplicate_requests=True)

    create_request(world)
    create_request(world, "another offer")

    assert len(run_async(world.service.get_requests_for_my_listings(world.owner.id))) == 2


def test_request_lists_are_split_by_role():
    world = build_world()
    request = create_request(world)

    assert [r.id for r in run_async(world.service.get_my_requests(world.requester.id))] == [request.id]
    assert run_async(world.service.get_my_requests(world.owner.id)) == []
    assert [r.id for r in run_async(world.service.get_requests_for_my_listings(world.owner.id))] == [request.id]
    assert run_async(world.service.get_requests_for_my_listings(world.requester.id)) == []


def test_listing_snapshot_survives_listing_edits():
    world = build_world()
    request = create_request(world)

    world.listings.update_listing(world.listing.id, world.owner.id, ListingUpdate(title="Road bike"))

    stored = run_async(world.service.get_request(request.id))
    assert stored.listing.title == "Mountain bike"
    assert stored.listing.estimated_value == 150


def test_notification_failure_does_not_roll_back_transition():
    world = build_world()
    request = create_request(world)

    with patch.object(world.notifications, "emit", side_effect=RuntimeError("mailbox down")):
        updated = run_async(world.service.respond_to_request(request.id, True, world.owner.id))

    assert updated.status == BarterStatus.OWNER_ACCEPTED
    assert run_async(world.service.get_request(request.id)).status == BarterStatus.OWNER_ACCEPTED
    assert len(world.errors.failures) == 1
    assert world.errors.failures[0]["error_type"] == "RuntimeError"


def test_listing_deactivation_failure_does_not_roll_back_confirmation():
    world = build_world()
    request = create_request(world)
    run_async(world.service.respond_to_request(request.id, True, world.owner.id))

    with patch.object(world.listings, "deactivate_listing", side_effect=OSError("disk full")):
        updated = run_async(world.service.respond_to_request(request.id, True, world.requester.id))

    assert updated.status == BarterStatus.BOTH_ACCEPTED
    assert any(f["operation"] == "deactivate_listing" for f in world.errors.failures)


def test_stale_write_is_refused():
    world = build_world()
    request = create_request(world)
    stale = run_async(world.service.get_request(request.id))

    run_async(world.service.respond_to_request(request.id, True, world.owner.id))
    late = world.service.state_machine.respond(stale, world.owner.id, False)

    with pytest.raises(InvalidTransitionError):
        world.service._commit(stale, late)
    assert run_async(world.service.get_request(request.id)).status == BarterStatus.OWNER_ACCEPTED


def test_failed_save_leaves_request_unchanged():
    """A transition whose write fails is neither visible in memory nor on disk."""
    with tempfile.TemporaryDirectory() as tmpdir:
        world = build_world(store=JsonFileStore(base_dir=tmpdir))
        request = create_request(world)
        Path(str(world.store.path) + ".tmp").mkdir()

        with pytest.raises(OSError):
            run_async(world.service.respond_to_request(request.id, True, world.owner.id))

        assert run_async(world.service.get_request(request.id)).status == BarterStatus.PENDING
        reopened = BarterService(JsonFileStore(base_dir=tmpdir))
        assert run_async(reopened.get_request(request.id)).status == BarterStatus.PENDING
        assert types_for(world, world.requester.id) == []


def test_latency_is_simulated_when_configured():
    world = build_world()
    world.service.settings.latency.barter_ms = 5

    with patch("barter_exchange.negotiation.manager.simulate_latency") as delay:
        create_request(world)

    delay.assert_awaited_once_with(5)
