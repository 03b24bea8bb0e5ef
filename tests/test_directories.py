"""
Tests for the user, listing and community directories.
"""

import pytest
from hypothesis import given, settings, strategies as st

from barter_exchange.directory import CommunityDirectory, ListingDirectory, UserDirectory
from barter_exchange.error_handling.errors import (
    AlreadyMemberError,
    CommunityNotFoundError,
    DuplicateUserError,
    InvalidCredentialsError,
    ListingNotFoundError,
    NotAuthenticatedError,
    UnauthorizedError,
    UserNotFoundError,
)
from barter_exchange.models import (
    CommunityCreate,
    ListingCreate,
    ListingUpdate,
    LoginData,
    ProfileUpdate,
    SignupData,
)
from barter_exchange.store import InMemoryStore
from barter_exchange.trust import TrustScoreEngine


def signup(users: UserDirectory, name: str):
    return users.signup(SignupData(email=f"{name.lower()}@example.com", password="secret", name=name))


def listing_data(**overrides) -> ListingCreate:
    data = dict(title="Ladder", category="product", community_id="c1")
    data.update(overrides)
    return ListingCreate(**data)


# User directory

def test_signup_sets_current_user_and_default_stats():
    store = InMemoryStore()
    users = UserDirectory(store)

    user = users.signup(SignupData(email="  Ada@Example.com ", password="pw", name="Ada"))

    assert user.email == "ada@example.com"
    assert users.current_user().id == user.id
    assert users.trust_engine.calculate(user.id).total == 49
    assert "password" not in store.get_record("currentUser")


def test_duplicate_email_is_rejected_case_insensitively():
    users = UserDirectory(InMemoryStore())
    signup(users, "Ada")

    with pytest.raises(DuplicateUserError):
        users.signup(SignupData(email="ADA@example.com", password="x", name="Other"))


def test_login_logout_cycle():
    users = UserDirectory(InMemoryStore())
    ada = signup(users, "Ada")
    signup(users, "Bob")

    users.logout()
    with pytest.raises(NotAuthenticatedError):
        users.require_current_user()

    assert users.login(LoginData(email="ADA@example.com", password="secret")).id == ada.id
    assert users.require_current_user().id == ada.id

    with pytest.raises(InvalidCredentialsError):
        users.login(LoginData(email="ada@example.com", password="wrong"))


def test_user_lookup():
    users = UserDirectory(InMemoryStore())
    ada = signup(users, "Ada")

    assert users.user_by_id(ada.id).name == "Ada"
    assert users.find_user("ghost") is None
    with pytest.raises(UserNotFoundError):
        users.user_by_id("ghost")


def test_profile_completion_raises_verification():
    store = InMemoryStore()
    trust = TrustScoreEngine(store)
    users = UserDirectory(store, trust)
    ada = signup(users, "Ada")
    before = trust.calculate(ada.id)

    updated = users.complete_profile(ada.id, ProfileUpdate(
        full_name="Ada Lovelace",
        phone="555-0100",
        address="12 Analytical Way",
        city="London",
    ))

    after = trust.calculate(ada.id)
    assert updated.is_profile_complete
    assert updated.city == "London"
    assert users.current_user().full_name == "Ada Lovelace"
    assert before.verification == 25
    assert after.verification == 75
    assert after.total > before.total


def test_profile_without_city_does_not_verify_address():
    store = InMemoryStore()
    trust = TrustScoreEngine(store)
    users = UserDirectory(store, trust)
    ada = signup(users, "Ada")

    users.complete_profile(ada.id, ProfileUpdate(address="12 Analytical Way"))

    verifications = trust.stats.get_stats(ada.id).verifications
    assert not verifications.address
    assert not verifications.phone


def test_profile_of_unknown_user():
    users = UserDirectory(InMemoryStore())
    with pytest.raises(UserNotFoundError):
        users.complete_profile("ghost", ProfileUpdate(phone="1"))


# Listing directory

def test_listing_lifecycle():
    store = InMemoryStore()
    users = UserDirectory(store)
    listings = ListingDirectory(store, users)
    ada = signup(users, "Ada")
    bob = signup(users, "Bob")

    listing = listings.create_listing(ada, listing_data(estimated_value=40))
    assert listing.is_active
    assert listing.user_name == "Ada"

    with pytest.raises(UnauthorizedError):
        listings.update_listing(listing.id, bob.id, ListingUpdate(title="Mine now"))

    updated = listings.update_listing(listing.id, ada.id, ListingUpdate(title="Tall ladder"))
    assert updated.title == "Tall ladder"
    assert updated.estimated_value == 40
    assert updated.updated_at is not None

    listings.deactivate_listing(listing.id)
    listings.deactivate_listing(listing.id)
    assert listings.community_listings("c1") == []
    assert len(listings.user_listings(ada.id)) == 1

    with pytest.raises(UnauthorizedError):
        listings.reactivate_listing(listing.id, bob.id)
    assert listings.reactivate_listing(listing.id, ada.id).is_active


def test_community_listings_refresh_owner_names():
    store = InMemoryStore()
    users = UserDirectory(store)
    listings = ListingDirectory(store, users)
    ada = signup(users, "Ada")

    listings.create_listing(ada, listing_data())
    listings.create_listing(ada, listing_data(community_id="c2"))
    users.complete_profile(ada.id, ProfileUpdate(bio="hi"))

    shown = listings.community_listings("c1")
    assert [listing.community_id for listing in shown] == ["c1"]
    assert shown[0].user_name == "Ada"

    store.put_record("users", [])
    assert listings.community_listings("c1")[0].user_name == "Unknown User"


def test_unknown_listing():
    listings = ListingDirectory(InMemoryStore())

    assert listings.find_listing("nope") is None
    with pytest.raises(ListingNotFoundError):
        listings.deactivate_listing("nope")


# Community directory

def test_create_and_join_community():
    store = InMemoryStore()
    users = UserDirectory(store)
    communities = CommunityDirectory(store)
    ada = signup(users, "Ada")
    bob = signup(users, "Bob")

    community = communities.create_community(ada, CommunityCreate(name="Elm Street", location="Springfield"))
    assert len(community.code) == 6
    assert community.member_count == 1
    assert communities.community_members(community.id)[0].is_admin

    joined = communities.join_community(bob, community.code.lower())
    assert joined.id == community.id
    assert joined.member_count == 2
    assert communities.is_member(community.id, bob.id)
    assert [c.id for c in communities.user_communities(bob.id)] == [community.id]

    with pytest.raises(AlreadyMemberError):
        communities.join_community(bob, f"  {community.code}  ")
    with pytest.raises(CommunityNotFoundError):
        communities.join_community(bob, "ZZZZZZZZ")


@given(code=st.text(alphabet="ABCDEFGHJKLMNPQRSTUVWXYZ23456789", min_size=6, max_size=6), mask=st.integers(0, 63))
@settings(max_examples=50)
def test_join_codes_are_case_insensitive(code, mask):
    """
    **Feature: barter-exchange, Property 9: Case-insensitive join codes**

    Any upper/lower-case variant of a community code joins that community.
    """
    store = InMemoryStore()
    users = UserDirectory(store)
    communities = CommunityDirectory(store)
    ada = signup(users, "Ada")
    bob = signup(users, "Bob")
    community = communities.create_community(ada, CommunityCreate(name="Elm"))

    # Force a known code so the mask can vary its case
    stored = store.get_record("communities")
    stored[0]["code"] = code
    store.put_record("communities", stored)

    variant = "".join(c.lower() if mask & (1 << i) else c for i, c in enumerate(code))
    assert communities.join_community(bob, variant).id == community.id


def test_community_board_is_members_only():
    store = InMemoryStore()
    users = UserDirectory(store)
    communities = CommunityDirectory(store)
    ada = signup(users, "Ada")
    eve = signup(users, "Eve")
    community = communities.create_community(ada, CommunityCreate(name="Elm"))

    message = communities.send_community_message(community.id, ada, "Welcome!")
    assert message.user_name == "Ada"
    assert [m.content for m in communities.community_messages(community.id)] == ["Welcome!"]

    with pytest.raises(UnauthorizedError):
        communities.send_community_message(community.id, eve, "hi")
    with pytest.raises(CommunityNotFoundError):
        communities.send_community_message("missing", ada, "hi")
