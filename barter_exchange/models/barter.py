"""Barter request data models"""

from pydantic import Field
from enum import Enum
from datetime import datetime
from typing import List, Optional

from .base import StoredModel


class BarterStatus(str, Enum):
    """Barter negotiation lifecycle states"""
    PENDING = "pending"
    OWNER_ACCEPTED = "owner_accepted"
    REJECTED = "rejected"
    BOTH_ACCEPTED = "both_accepted"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (BarterStatus.REJECTED, BarterStatus.COMPLETED)


class BarterParty(str, Enum):
    """Which side of a barter an actor is on"""
    OWNER = "owner"
    REQUESTER = "requester"


class ListingSnapshot(StoredModel):
    """Copy of the listing taken when the request was created"""
    id: str
    title: str
    description: str = ""
    category: str
    estimated_value: float = 0


class ChatMessage(StoredModel):
    """Single message in a barter chat"""
    id: str
    sender_id: str
    sender_name: str
    content: str
    timestamp: datetime


class CreateBarterRequestData(StoredModel):
    """Model for creating a new barter request"""
    listing_id: str
    offer_description: str = Field(min_length=1)


class BarterRequest(StoredModel):
    """Complete barter request model"""
    id: str
    listing_id: str
    requester_id: str
    requester_name: str
    owner_id: str
    owner_name: str
    offer_description: str
    status: BarterStatus = BarterStatus.PENDING
    listing: ListingSnapshot

    owner_accepted: bool = False
    requester_accepted: bool = False

    # Issued at both_accepted
    owner_confirmation_code: Optional[str] = None
    requester_confirmation_code: Optional[str] = None
    owner_completed: bool = False
    requester_completed: bool = False

    chat_messages: List[ChatMessage] = Field(default_factory=list)

    created_at: datetime
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def party_of(self, user_id: Optional[str]) -> Optional[BarterParty]:
        """Return the side user_id is on, or None for outsiders."""
        if user_id is None:
            return None
        if user_id == self.owner_id:
            return BarterParty.OWNER
        if user_id == self.requester_id:
            return BarterParty.REQUESTER
        return None

    def name_of(self, party: BarterParty) -> str:
        if party == BarterParty.OWNER:
            return self.owner_name
        return self.requester_name

    def counterparty_id(self, party: BarterParty) -> str:
        if party == BarterParty.OWNER:
            return self.requester_id
        return self.owner_id

    def visible_to(self, user_id: Optional[str]) -> "BarterRequest":
        """Copy showing user_id only their own confirmation code."""
        party = self.party_of(user_id)
        view = self.model_copy(deep=True)
        if party != BarterParty.OWNER:
            view.owner_confirmation_code = None
        if party != BarterParty.REQUESTER:
            view.requester_confirmation_code = None
        return view
