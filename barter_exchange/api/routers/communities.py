"""
Community routes.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import List

from barter_exchange.models import Community, CommunityCreate, CommunityMember, CommunityMessage, User
from barter_exchange.api.dependencies import ExchangeServices, get_current_user, get_services

router = APIRouter()


class JoinBody(BaseModel):
    code: str = Field(min_length=1)


class MessageBody(BaseModel):
    content: str = Field(min_length=1)


@router.post("/communities", response_model=Community)
async def create_community(
    data: CommunityCreate,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return services.communities.create_community(user, data)


@router.post("/communities/join", response_model=Community)
async def join_community(
    body: JoinBody,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return services.communities.join_community(user, body.code)


@router.get("/communities", response_model=List[Community])
async def get_user_communities(
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return services.communities.user_communities(user.id)


@router.get("/communities/{community_id}/members", response_model=List[CommunityMember])
async def get_community_members(
    community_id: str,
    services: ExchangeServices = Depends(get_services)
):
    services.communities.community_by_id(community_id)
    return services.communities.community_members(community_id)


@router.post("/communities/{community_id}/messages", response_model=CommunityMessage)
async def send_community_message(
    community_id: str,
    body: MessageBody,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return services.communities.send_community_message(community_id, user, body.content)


@router.get("/communities/{community_id}/messages", response_model=List[CommunityMessage])
async def get_community_messages(
    community_id: str,
    services: ExchangeServices = Depends(get_services)
):
    services.communities.community_by_id(community_id)
    return services.communities.community_messages(community_id)
