"""Directory services for users, listings and communities"""

from .user_directory import UserDirectory
from .listing_directory import ListingDirectory
from .community_directory import CommunityDirectory

__all__ = ["UserDirectory", "ListingDirectory", "CommunityDirectory"]
