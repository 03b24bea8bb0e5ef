"""Data models for the barter exchange"""

from .base import StoredModel
from .barter import (
    BarterStatus,
    BarterParty,
    BarterRequest,
    ChatMessage,
    CreateBarterRequestData,
    ListingSnapshot,
)
from .listing import Listing, ListingCategory, ListingCreate, ListingUpdate
from .user import (
    User,
    StoredUser,
    SignupData,
    LoginData,
    ProfileUpdate,
    UserStats,
    Verifications,
)
from .trust import TrustScoreBreakdown
from .notification import Notification, NotificationType
from .community import Community, CommunityCreate, CommunityMember, CommunityMessage

__all__ = [
    "StoredModel",
    "BarterStatus",
    "BarterParty",
    "BarterRequest",
    "ChatMessage",
    "CreateBarterRequestData",
    "ListingSnapshot",
    "Listing",
    "ListingCategory",
    "ListingCreate",
    "ListingUpdate",
    "User",
    "StoredUser",
    "SignupData",
    "LoginData",
    "ProfileUpdate",
    "UserStats",
    "Verifications",
    "TrustScoreBreakdown",
    "Notification",
    "NotificationType",
    "Community",
    "CommunityCreate",
    "CommunityMember",
    "CommunityMessage",
]
