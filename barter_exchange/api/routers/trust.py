"""
Trust score routes.
"""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from barter_exchange.error_handling.errors import UnauthorizedError
from barter_exchange.models import TrustScoreBreakdown, User
from barter_exchange.api.dependencies import ExchangeServices, get_current_user, get_services

router = APIRouter()


class RatingBody(BaseModel):
    rating: float


@router.get("/trust/{user_id}", response_model=TrustScoreBreakdown)
async def calculate_trust_score(
    user_id: str,
    services: ExchangeServices = Depends(get_services)
):
    """Trust score breakdown for any known user."""
    services.users.user_by_id(user_id)
    return services.trust.calculate(user_id)


@router.post("/trust/{user_id}/ratings", status_code=204)
async def add_rating(
    user_id: str,
    body: RatingBody,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    """Rate another user 1-5 stars."""
    services.users.user_by_id(user_id)
    if user_id == user.id:
        raise UnauthorizedError("Users cannot rate themselves")
    services.trust.add_rating(user_id, body.rating)
    return Response(status_code=204)


@router.post("/trust/{user_id}/endorsements", status_code=204)
async def endorse_user(
    user_id: str,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    services.users.user_by_id(user_id)
    if user_id == user.id:
        raise UnauthorizedError("Users cannot endorse themselves")
    services.trust.add_endorsement(user_id)
    return Response(status_code=204)
