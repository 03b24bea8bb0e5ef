"""User and trust statistics models"""

from pydantic import Field
from datetime import datetime
from typing import Optional

from .base import StoredModel


class User(StoredModel):
    """Public user profile"""
    id: str
    email: str
    name: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    bio: Optional[str] = None
    is_profile_complete: bool = False
    created_at: datetime


class StoredUser(User):
    """User row as kept in the store (plaintext password, local toy store only)"""
    password: str

    def public(self) -> User:
        return User.model_validate(self.model_dump(exclude={"password"}))


class SignupData(StoredModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)


class LoginData(StoredModel):
    email: str
    password: str


class ProfileUpdate(StoredModel):
    """Profile completion fields"""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    bio: Optional[str] = None


class Verifications(StoredModel):
    """Independent identity verifications"""
    email: bool = True
    phone: bool = False
    id: bool = False
    address: bool = False

    def count(self) -> int:
        return sum([self.email, self.phone, self.id, self.address])


class UserStats(StoredModel):
    """Accumulated trust inputs for one user.

    Defaults describe a brand-new user: email verified, no history and a
    perfect response rate.
    """
    completed_exchanges: int = Field(default=0, ge=0)
    total_rating: float = Field(default=0, ge=0)
    rating_count: int = Field(default=0, ge=0)
    disputes: int = Field(default=0, ge=0)
    endorsements: int = Field(default=0, ge=0)
    rule_violations: int = Field(default=0, ge=0)
    verifications: Verifications = Field(default_factory=Verifications)
    response_rate: float = 1.0
