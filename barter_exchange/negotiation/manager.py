"""
Barter manager - Handles persistence and side effects of barter requests.
"""

import logging
from typing import List, Optional

from barter_exchange.common import generate_id, simulate_latency, utcnow
from barter_exchange.config import AppSettings, get_app_settings
from barter_exchange.directory import ListingDirectory, UserDirectory
from barter_exchange.error_handling import ErrorHandler
from barter_exchange.error_handling.errors import (
    DuplicateRequestError,
    InvalidTransitionError,
    ListingNotFoundError,
    NotAuthenticatedError,
    RequestNotFoundError,
    UnauthorizedError,
)
from barter_exchange.models import BarterRequest, BarterStatus, NotificationType
from barter_exchange.notifications import NotificationService
from barter_exchange.store import KeyValueStore, load_model_list, save_model_list
from barter_exchange.store.records import BARTER_REQUESTS_KEY
from barter_exchange.trust import TrustScoreEngine
from .state_machine import BarterStateMachine

logger = logging.getLogger(__name__)


class BarterService:
    """Manage barter request persistence and lifecycle"""

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[AppSettings] = None,
        users: Optional[UserDirectory] = None,
        listings: Optional[ListingDirectory] = None,
        notifications: Optional[NotificationService] = None,
        trust_engine: Optional[TrustScoreEngine] = None,
        error_handler: Optional[ErrorHandler] = None,
        state_machine: Optional[BarterStateMachine] = None
    ):
        self.store = store
        self.settings = settings or get_app_settings()
        self.trust_engine = trust_engine or TrustScoreEngine(store)
        self.users = users or UserDirectory(store, self.trust_engine)
        self.listings = listings or ListingDirectory(store, self.users)
        self.notifications = notifications or NotificationService(store)
        self.error_handler = error_handler or ErrorHandler()
        self.state_machine = state_machine or BarterStateMachine(
            code_length=self.settings.codes.confirmation_code_length,
            code_alphabet=self.settings.codes.confirmation_code_alphabet,
        )

    # Persistence

    def _requests(self) -> List[BarterRequest]:
        return load_model_list(self.store, BARTER_REQUESTS_KEY, BarterRequest)

    def _load(self, request_id: str) -> BarterRequest:
        for request in self._requests():
            if request.id == request_id:
                return request
        raise RequestNotFoundError(request_id)

    def _commit(self, original: BarterRequest, updated: BarterRequest) -> BarterRequest:
        """
        Write updated back only if the stored record still equals original.

        Raises:
            RequestNotFoundError: If the request disappeared
            InvalidTransitionError: If the record changed since it was read
        """
        requests = self._requests()
        for index, current in enumerate(requests):
            if current.id == original.id:
                if current != original:
                    raise InvalidTransitionError(
                        f"Barter {original.id} changed while it was being updated",
                        status=current.status,
                    )
                requests[index] = updated
                save_model_list(self.store, BARTER_REQUESTS_KEY, requests)
                return updated
        raise RequestNotFoundError(original.id)

    # Side effects

    def _notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        request_id: str
    ) -> None:
        self.error_handler.best_effort(
            f"notify:{notification_type.value}",
            self.notifications.emit,
            user_id,
            notification_type,
            title,
            message,
            related_id=request_id,
        )

    def _deactivate_listing(self, listing_id: str) -> None:
        self.error_handler.best_effort(
            "deactivate_listing",
            self.listings.deactivate_listing,
            listing_id,
        )

    # Operations

    async def create_barter_request(
        self,
        listing_id: str,
        offer_description: str,
        requester_id: Optional[str]
    ) -> BarterRequest:
        """
        Create a pending barter request for a listing.

        Args:
            listing_id: Listing the requester wants
            offer_description: What the requester offers in exchange
            requester_id: Current user, or None when nobody is logged in

        Returns:
            Created BarterRequest

        Raises:
            NotAuthenticatedError: If requester_id is None
            ListingNotFoundError: If the listing is unknown or inactive
            UnauthorizedError: If the requester owns the listing
            DuplicateRequestError: If the requester already has an open request for it
        """
        await simulate_latency(self.settings.latency.barter_ms)

        if requester_id is None:
            raise NotAuthenticatedError("Not authenticated")
        requester = self.users.user_by_id(requester_id)

        listing = self.listings.find_listing(listing_id)
        if listing is None or not listing.is_active:
            raise ListingNotFoundError(listing_id)
        if listing.user_id == requester.id:
            raise UnauthorizedError("You cannot barter for your own listing")

        requests = self._requests()
        if not self.settings.policy.allow_duplicate_requests:
            for existing in requests:
                if (existing.listing_id == listing_id
                        and existing.requester_id == requester.id
                        and not existing.status.is_terminal):
                    raise DuplicateRequestError(
                        f"Request {existing.id} for this listing is still open",
                        status=existing.status,
                    )

        owner = self.users.find_user(listing.user_id)
        request = BarterRequest(
            id=generate_id(),
            listing_id=listing.id,
            requester_id=requester.id,
            requester_name=requester.name,
            owner_id=listing.user_id,
            owner_name=owner.name if owner else (listing.user_name or "Unknown"),
            offer_description=offer_description,
            status=BarterStatus.PENDING,
            listing=listing.snapshot(),
            created_at=utcnow(),
        )

        requests.append(request)
        save_model_list(self.store, BARTER_REQUESTS_KEY, requests)
        logger.info(f"Created barter {request.id} for listing {listing.id}")

        self._notify(
            request.owner_id,
            NotificationType.BARTER_REQUEST,
            "New Barter Request",
            f'{requester.name} wants to barter for your "{listing.title}"',
            request.id,
        )
        return request

    async def get_request(self, request_id: str) -> BarterRequest:
        return self._load(request_id)

    async def get_my_requests(self, user_id: str) -> List[BarterRequest]:
        """Requests the user made."""
        return [r for r in self._requests() if r.requester_id == user_id]

    async def get_requests_for_my_listings(self, user_id: str) -> List[BarterRequest]:
        """Requests made against the user's listings."""
        return [r for r in self._requests() if r.owner_id == user_id]

    async def respond_to_request(
        self,
        request_id: str,
        accept: bool,
        acting_user_id: Optional[str]
    ) -> BarterRequest:
        """
        Accept or decline a request.

        The owner answers a pending request; the requester then confirms or
        declines an owner_accepted one. Confirmation issues both codes and
        takes the listing off the board.

        Raises:
            NotAuthenticatedError: If acting_user_id is None
            RequestNotFoundError: If request_id is unknown
            UnauthorizedError: If the actor is not a party
            InvalidTransitionError: If the actor cannot respond in this status
        """
        await simulate_latency(self.settings.latency.barter_ms)

        if acting_user_id is None:
            raise NotAuthenticatedError("Not authenticated")

        original = self._load(request_id)
        updated = self._commit(original, self.state_machine.respond(original, acting_user_id, accept))
        title = updated.listing.title

        if updated.status == BarterStatus.OWNER_ACCEPTED:
            self._notify(
                updated.requester_id,
                NotificationType.BARTER_OWNER_ACCEPTED,
                "Barter Request Accepted!",
                f'{updated.owner_name} accepted your barter request for "{title}". Please confirm to proceed!',
                request_id,
            )
        elif updated.status == BarterStatus.BOTH_ACCEPTED:
            self._deactivate_listing(updated.listing_id)
            self._notify(
                updated.owner_id,
                NotificationType.BARTER_BOTH_ACCEPTED,
                "Barter Confirmed - Chat Available!",
                f'{updated.requester_name} confirmed the barter for "{title}". '
                f'You can now chat privately to arrange the exchange!',
                request_id,
            )
            self._notify(
                updated.requester_id,
                NotificationType.BARTER_BOTH_ACCEPTED,
                "Barter Confirmed - Chat Available!",
                f'You confirmed the barter for "{title}". '
                f'You can now chat privately to arrange the exchange!',
                request_id,
            )
        elif updated.status == BarterStatus.REJECTED:
            if original.status == BarterStatus.PENDING:
                recipient, message = (
                    updated.requester_id,
                    f'{updated.owner_name} declined your barter request for "{title}"',
                )
            else:
                recipient, message = (
                    updated.owner_id,
                    f'{updated.requester_name} declined to confirm the barter for "{title}"',
                )
            self._notify(recipient, NotificationType.BARTER_REJECTED, "Barter Request Declined", message, request_id)

        return updated

    async def send_chat_message(
        self,
        request_id: str,
        content: str,
        sender_id: Optional[str]
    ) -> BarterRequest:
        """
        Append a chat message to an accepted barter.

        Raises:
            NotAuthenticatedError: If sender_id is None
            RequestNotFoundError: If request_id is unknown
            ChatNotAvailableError: If the barter is not both_accepted or completed
            UnauthorizedError: If the sender is not a party
        """
        await simulate_latency(self.settings.latency.chat_ms)

        if sender_id is None:
            raise NotAuthenticatedError("Not authenticated")

        original = self._load(request_id)
        updated = self._commit(original, self.state_machine.append_chat_message(original, sender_id, content))

        sender = updated.party_of(sender_id)
        self._notify(
            updated.counterparty_id(sender),
            NotificationType.CHAT_MESSAGE,
            "New Barter Message",
            f'{updated.name_of(sender)} sent a message about "{updated.listing.title}"',
            request_id,
        )
        return updated

    async def complete_barter(
        self,
        request_id: str,
        confirmation_code: str,
        acting_user_id: Optional[str]
    ) -> BarterRequest:
        """
        Confirm the in-person exchange with the caller's assigned code.

        When both parties have confirmed, the barter becomes completed, the
        listing is kept inactive and both users get a completed exchange.

        Raises:
            NotAuthenticatedError: If acting_user_id is None
            RequestNotFoundError: If request_id is unknown
            UnauthorizedError: If the actor is not a party
            NotReadyError: If the barter has not reached both_accepted
            InvalidCodeError: If the code is not the caller's assigned code
        """
        await simulate_latency(self.settings.latency.barter_ms)

        if acting_user_id is None:
            raise NotAuthenticatedError("Not authenticated")

        original = self._load(request_id)
        result = self.state_machine.complete(original, acting_user_id, confirmation_code)
        if not result.changed:
            logger.debug(f"Barter {request_id}: repeat completion by {acting_user_id} ignored")
            return result.request

        updated = self._commit(original, result.request)

        if result.completed_now:
            self._deactivate_listing(updated.listing_id)
            for user_id in (updated.owner_id, updated.requester_id):
                self.error_handler.best_effort(
                    "record_completed_exchange",
                    self.trust_engine.record_completed_exchange,
                    user_id,
                )
                self._notify(
                    user_id,
                    NotificationType.BARTER_COMPLETED,
                    "Barter Completed!",
                    f'The barter for "{updated.listing.title}" is complete. Thanks for trading!',
                    request_id,
                )

        return updated
