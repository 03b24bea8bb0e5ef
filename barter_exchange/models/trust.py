"""Trust score models"""

from pydantic import BaseModel, Field


class TrustScoreBreakdown(BaseModel):
    """Derived trust score; every field is on a 0-100 scale"""
    verification: int = Field(ge=0, le=100)
    endorsement: int = Field(ge=0, le=100)
    reputation: int = Field(ge=0, le=100)
    dispute: int = Field(ge=0, le=100)
    behavior: int = Field(ge=0, le=100)
    total: int = Field(ge=0, le=100)
