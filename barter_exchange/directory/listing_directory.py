"""
Listing directory - CRUD over the listings collection.
"""

import logging
from typing import List, Optional

from barter_exchange.common import generate_id, utcnow
from barter_exchange.error_handling.errors import ListingNotFoundError, UnauthorizedError
from barter_exchange.models import Listing, ListingCreate, ListingUpdate, User
from barter_exchange.store import KeyValueStore, load_model_list, save_model_list
from barter_exchange.store.records import LISTINGS_KEY
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)


class ListingDirectory:
    """Manage listing persistence and visibility"""

    def __init__(self, store: KeyValueStore, users: Optional[UserDirectory] = None):
        self.store = store
        self.users = users or UserDirectory(store)

    def _listings(self) -> List[Listing]:
        return load_model_list(self.store, LISTINGS_KEY, Listing)

    def _replace(self, listing: Listing) -> Listing:
        listings = self._listings()
        for index, existing in enumerate(listings):
            if existing.id == listing.id:
                listings[index] = listing
                save_model_list(self.store, LISTINGS_KEY, listings)
                return listing
        raise ListingNotFoundError(listing.id)

    def create_listing(self, owner: User, data: ListingCreate) -> Listing:
        """
        Create an active listing owned by owner.

        Args:
            owner: Listing owner
            data: Listing fields

        Returns:
            Created Listing
        """
        listing = Listing(
            **data.model_dump(),
            id=generate_id(),
            user_id=owner.id,
            user_name=owner.name,
            is_active=True,
            created_at=utcnow(),
        )
        listings = self._listings()
        listings.append(listing)
        save_model_list(self.store, LISTINGS_KEY, listings)

        logger.info(f"Created listing {listing.id} for user {owner.id}")
        return listing

    def find_listing(self, listing_id: str) -> Optional[Listing]:
        for listing in self._listings():
            if listing.id == listing_id:
                return listing
        return None

    def listing_by_id(self, listing_id: str) -> Listing:
        listing = self.find_listing(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    def update_listing(self, listing_id: str, actor_id: str, data: ListingUpdate) -> Listing:
        """
        Apply a partial update.

        Raises:
            ListingNotFoundError: If listing_id is unknown
            UnauthorizedError: If actor_id does not own the listing
        """
        listing = self.listing_by_id(listing_id)
        if listing.user_id != actor_id:
            raise UnauthorizedError("Only the owner can edit this listing")

        changes = data.model_dump(exclude_unset=True)
        updated = listing.model_copy(update={**changes, "updated_at": utcnow()})
        return self._replace(Listing.model_validate(updated.model_dump()))

    def deactivate_listing(self, listing_id: str) -> Listing:
        """
        Hide a listing from browse results. Idempotent.

        Raises:
            ListingNotFoundError: If listing_id is unknown
        """
        listing = self.listing_by_id(listing_id)
        if not listing.is_active:
            return listing
        listing.is_active = False
        listing.updated_at = utcnow()
        logger.info(f"Deactivated listing {listing_id}")
        return self._replace(listing)

    def reactivate_listing(self, listing_id: str, actor_id: str) -> Listing:
        listing = self.listing_by_id(listing_id)
        if listing.user_id != actor_id:
            raise UnauthorizedError("Only the owner can reactivate this listing")
        if listing.is_active:
            return listing
        listing.is_active = True
        listing.updated_at = utcnow()
        logger.info(f"Reactivated listing {listing_id}")
        return self._replace(listing)

    def community_listings(self, community_id: str) -> List[Listing]:
        """Active listings in a community, with owner names refreshed."""
        result = []
        for listing in self._listings():
            if listing.community_id != community_id or not listing.is_active:
                continue
            owner = self.users.find_user(listing.user_id)
            listing.user_name = owner.name if owner else "Unknown User"
            result.append(listing)
        return result

    def user_listings(self, user_id: str) -> List[Listing]:
        return [listing for listing in self._listings() if listing.user_id == user_id]
