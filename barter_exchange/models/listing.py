"""Listing data models"""

from pydantic import Field
from enum import Enum
from datetime import datetime
from typing import List, Optional

from .base import StoredModel
from .barter import ListingSnapshot


class ListingCategory(str, Enum):
    """What a listing offers"""
    PRODUCT = "product"
    SERVICE = "service"


class ListingBase(StoredModel):
    """Base listing fields"""
    title: str = Field(min_length=1)
    description: str = ""
    category: ListingCategory
    estimated_value: float = Field(default=0, ge=0)
    availability: str = ""
    images: List[str] = Field(default_factory=list)
    community_id: str


class ListingCreate(ListingBase):
    """Model for creating a new listing"""
    pass


class ListingUpdate(StoredModel):
    """Partial listing update; unset fields are left alone"""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[ListingCategory] = None
    estimated_value: Optional[float] = Field(default=None, ge=0)
    availability: Optional[str] = None
    images: Optional[List[str]] = None


class Listing(ListingBase):
    """Complete listing model"""
    id: str
    user_id: str
    user_name: str
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None

    def snapshot(self) -> ListingSnapshot:
        """Detached copy embedded in barter requests."""
        return ListingSnapshot(
            id=self.id,
            title=self.title,
            description=self.description,
            category=self.category.value,
            estimated_value=self.estimated_value,
        )
