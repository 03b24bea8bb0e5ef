"""Notification models"""

from enum import Enum
from datetime import datetime
from typing import Optional

from .base import StoredModel


class NotificationType(str, Enum):
    BARTER_REQUEST = "barter_request"
    BARTER_OWNER_ACCEPTED = "barter_owner_accepted"
    BARTER_BOTH_ACCEPTED = "barter_both_accepted"
    BARTER_REJECTED = "barter_rejected"
    BARTER_COMPLETED = "barter_completed"
    CHAT_MESSAGE = "chat_message"
    SYSTEM = "system"


class Notification(StoredModel):
    """Per-user notification record"""
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    related_id: Optional[str] = None
    is_read: bool = False
    created_at: datetime
