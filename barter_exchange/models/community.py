"""Community data models"""

from pydantic import Field
from datetime import datetime

from .base import StoredModel


class CommunityCreate(StoredModel):
    name: str = Field(min_length=1)
    location: str = ""
    description: str = ""


class Community(CommunityCreate):
    """Neighborhood community; member_count is filled in on read"""
    id: str
    code: str
    created_at: datetime
    created_by: str
    member_count: int = 0


class CommunityMember(StoredModel):
    id: str
    name: str
    email: str
    joined_at: datetime
    is_admin: bool = False
    is_online: bool = True


class CommunityMessage(StoredModel):
    id: str
    content: str
    user_id: str
    user_name: str
    timestamp: datetime
    type: str = "message"
