"""
Barter routes - request, accept, chat and complete.
"""

import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import List

from barter_exchange.error_handling.errors import UnauthorizedError
from barter_exchange.models import BarterRequest, CreateBarterRequestData, User
from barter_exchange.api.dependencies import ExchangeServices, get_current_user, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


class RespondBody(BaseModel):
    accept: bool


class ChatBody(BaseModel):
    content: str = Field(min_length=1)


class CompleteBody(BaseModel):
    confirmation_code: str = Field(alias="confirmationCode")


@router.post("/barters", response_model=BarterRequest)
async def create_barter_request(
    data: CreateBarterRequestData,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    """
    Offer something in exchange for a listing.

    Args:
        data: Listing id and offer description

    Returns:
        Created pending BarterRequest
    """
    return await services.barters.create_barter_request(
        data.listing_id, data.offer_description, user.id
    )


@router.get("/barters/mine", response_model=List[BarterRequest])
async def get_my_requests(
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    """Requests the current user made."""
    requests = await services.barters.get_my_requests(user.id)
    return [r.visible_to(user.id) for r in requests]


@router.get("/barters/incoming", response_model=List[BarterRequest])
async def get_requests_for_my_listings(
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    """Requests made against the current user's listings."""
    requests = await services.barters.get_requests_for_my_listings(user.id)
    return [r.visible_to(user.id) for r in requests]


@router.get("/barters/{request_id}", response_model=BarterRequest)
async def get_barter_request(
    request_id: str,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    request = await services.barters.get_request(request_id)
    if request.party_of(user.id) is None:
        raise UnauthorizedError(f"User {user.id} is not part of barter {request_id}")
    return request.visible_to(user.id)


@router.post("/barters/{request_id}/respond", response_model=BarterRequest)
async def respond_to_request(
    request_id: str,
    body: RespondBody,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    """
    Accept or decline a barter request.

    Args:
        request_id: Barter request id
        body: accept flag

    Returns:
        Updated BarterRequest showing only the caller's confirmation code
    """
    request = await services.barters.respond_to_request(request_id, body.accept, user.id)
    return request.visible_to(user.id)


@router.post("/barters/{request_id}/chat", response_model=BarterRequest)
async def send_chat_message(
    request_id: str,
    body: ChatBody,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    request = await services.barters.send_chat_message(request_id, body.content, user.id)
    return request.visible_to(user.id)


@router.post("/barters/{request_id}/complete", response_model=BarterRequest)
async def complete_barter(
    request_id: str,
    body: CompleteBody,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    """
    Confirm the exchange with the caller's assigned confirmation code.
    """
    request = await services.barters.complete_barter(request_id, body.confirmation_code, user.id)
    return request.visible_to(user.id)
