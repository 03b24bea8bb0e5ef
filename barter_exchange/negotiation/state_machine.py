"""
Barter negotiation state machine - pure transition logic.

    pending --owner accepts--> owner_accepted --requester accepts--> both_accepted --both codes--> completed
       |                            |
       +--owner declines------------+--requester declines--> rejected

rejected and completed are terminal. Nothing here touches storage; every
method takes a BarterRequest and returns an updated copy, leaving the
input untouched so a failed call has no effect.
"""

import hmac
import logging
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from barter_exchange.common import generate_code, generate_id, utcnow
from barter_exchange.error_handling.errors import (
    ChatNotAvailableError,
    InvalidCodeError,
    InvalidTransitionError,
    NotReadyError,
    UnauthorizedError,
    ValidationFailedError,
)
from barter_exchange.models import BarterParty, BarterRequest, BarterStatus, ChatMessage

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """Outcome of a completion attempt.

    Attributes:
        request: Request after the call (unchanged on a repeat call)
        changed: Whether the caller's completion flag was newly set
        completed_now: Whether this call moved the request to completed
    """
    request: BarterRequest
    changed: bool
    completed_now: bool


class BarterStateMachine:
    """
    Transition rules for a single barter request.
    """

    # (status, acting party) -> (status on accept, status on decline)
    TRANSITIONS: Dict[Tuple[BarterStatus, BarterParty], Tuple[BarterStatus, BarterStatus]] = {
        (BarterStatus.PENDING, BarterParty.OWNER): (
            BarterStatus.OWNER_ACCEPTED, BarterStatus.REJECTED
        ),
        (BarterStatus.OWNER_ACCEPTED, BarterParty.REQUESTER): (
            BarterStatus.BOTH_ACCEPTED, BarterStatus.REJECTED
        ),
    }

    CHAT_STATUSES = (BarterStatus.BOTH_ACCEPTED, BarterStatus.COMPLETED)

    def __init__(
        self,
        code_length: int = 6,
        code_alphabet: str = string.ascii_uppercase + string.digits,
        clock: Callable[[], datetime] = utcnow
    ):
        if code_length < 1 or len(set(code_alphabet)) < 2:
            raise ValueError("Confirmation codes need a length >= 1 and at least two symbols")
        self.code_length = code_length
        self.code_alphabet = code_alphabet
        self.clock = clock

    def _party(self, request: BarterRequest, actor_id: Optional[str]) -> BarterParty:
        party = request.party_of(actor_id)
        if party is None:
            raise UnauthorizedError(f"User {actor_id} is not part of barter {request.id}")
        return party

    def issue_codes(self) -> Tuple[str, str]:
        """
        Generate the owner and requester confirmation codes.

        Returns:
            (owner_code, requester_code), never equal to each other
        """
        owner_code = generate_code(self.code_length, self.code_alphabet)
        requester_code = generate_code(self.code_length, self.code_alphabet)
        while requester_code == owner_code:
            requester_code = generate_code(self.code_length, self.code_alphabet)
        return owner_code, requester_code

    def respond(self, request: BarterRequest, actor_id: str, accept: bool) -> BarterRequest:
        """
        Apply an accept/decline from one party.

        Args:
            request: Current request
            actor_id: User responding
            accept: True to accept, False to decline

        Returns:
            Updated copy of the request

        Raises:
            UnauthorizedError: If actor_id is neither owner nor requester
            InvalidTransitionError: If this party cannot respond in the current status
        """
        party = self._party(request, actor_id)

        targets = self.TRANSITIONS.get((request.status, party))
        if targets is None:
            raise InvalidTransitionError(
                f"{party.value} cannot respond to a {request.status.value} request",
                status=request.status,
            )

        accepted_status, declined_status = targets
        updated = request.model_copy(deep=True)
        updated.updated_at = self.clock()

        if not accept:
            updated.status = declined_status
            logger.info(f"Barter {request.id}: {request.status.value} -> {declined_status.value} by {party.value}")
            return updated

        updated.status = accepted_status
        if party == BarterParty.OWNER:
            updated.owner_accepted = True
        else:
            updated.requester_accepted = True

        if accepted_status == BarterStatus.BOTH_ACCEPTED:
            owner_code, requester_code = self.issue_codes()
            updated.owner_confirmation_code = owner_code
            updated.requester_confirmation_code = requester_code

        logger.info(f"Barter {request.id}: {request.status.value} -> {accepted_status.value} by {party.value}")
        return updated

    def complete(self, request: BarterRequest, actor_id: str, submitted_code: str) -> CompletionResult:
        """
        Record one party's completion using their assigned code.

        A repeat call by a party that already completed is a no-op, also
        after the request has reached completed.

        Args:
            request: Current request
            actor_id: User confirming the exchange
            submitted_code: Code the user presents

        Returns:
            CompletionResult

        Raises:
            UnauthorizedError: If actor_id is neither owner nor requester
            NotReadyError: If the request has not reached both_accepted
            InvalidCodeError: If submitted_code is not the caller's assigned code
        """
        party = self._party(request, actor_id)

        if request.status not in (BarterStatus.BOTH_ACCEPTED, BarterStatus.COMPLETED):
            raise NotReadyError(
                f"Barter {request.id} is {request.status.value}, not ready for completion",
                status=request.status,
            )

        if party == BarterParty.OWNER:
            expected = request.owner_confirmation_code
            already_done = request.owner_completed
        else:
            expected = request.requester_confirmation_code
            already_done = request.requester_completed

        if not self._codes_match(expected, submitted_code):
            raise InvalidCodeError("Invalid confirmation code")

        if already_done or request.status == BarterStatus.COMPLETED:
            return CompletionResult(request=request, changed=False, completed_now=False)

        updated = request.model_copy(deep=True)
        if party == BarterParty.OWNER:
            updated.owner_completed = True
        else:
            updated.requester_completed = True

        completed_now = updated.owner_completed and updated.requester_completed
        if completed_now:
            now = self.clock()
            updated.status = BarterStatus.COMPLETED
            updated.completed_at = now
            updated.updated_at = now
            logger.info(f"Barter {request.id}: both_accepted -> completed")
        else:
            logger.info(f"Barter {request.id}: {party.value} confirmed the exchange")

        return CompletionResult(request=updated, changed=True, completed_now=completed_now)

    @staticmethod
    def _codes_match(expected: Optional[str], submitted) -> bool:
        if not expected or not isinstance(submitted, str):
            return False
        return hmac.compare_digest(expected.encode("utf-8"), submitted.encode("utf-8"))

    def append_chat_message(self, request: BarterRequest, sender_id: str, content: str) -> BarterRequest:
        """
        Append a chat message from one of the parties.

        Raises:
            ChatNotAvailableError: If the request is not both_accepted or completed
            UnauthorizedError: If sender_id is neither owner nor requester
            ValidationFailedError: If content is blank
        """
        if request.status not in self.CHAT_STATUSES:
            raise ChatNotAvailableError(
                "Chat is only available after both parties accept the barter"
            )
        party = self._party(request, sender_id)
        if not content or not content.strip():
            raise ValidationFailedError("Chat message cannot be empty")

        updated = request.model_copy(deep=True)
        updated.chat_messages.append(ChatMessage(
            id=generate_id(),
            sender_id=sender_id,
            sender_name=request.name_of(party),
            content=content,
            timestamp=self.clock(),
        ))
        return updated
