"""
Listing routes.
"""

from fastapi import APIRouter, Depends
from typing import List

from barter_exchange.error_handling.errors import UnauthorizedError
from barter_exchange.models import Listing, ListingCreate, ListingUpdate, User
from barter_exchange.api.dependencies import ExchangeServices, get_current_user, get_services

router = APIRouter()


@router.post("/listings", response_model=Listing)
async def create_listing(
    data: ListingCreate,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    if not services.communities.is_member(data.community_id, user.id):
        raise UnauthorizedError("Only members can list in this community")
    return services.listings.create_listing(user, data)


@router.get("/listings/{listing_id}", response_model=Listing)
async def get_listing(listing_id: str, services: ExchangeServices = Depends(get_services)):
    return services.listings.listing_by_id(listing_id)


@router.patch("/listings/{listing_id}", response_model=Listing)
async def update_listing(
    listing_id: str,
    data: ListingUpdate,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return services.listings.update_listing(listing_id, user.id, data)


@router.delete("/listings/{listing_id}", response_model=Listing)
async def delete_listing(
    listing_id: str,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    """Deleting a listing only hides it; barter snapshots keep their copy."""
    listing = services.listings.listing_by_id(listing_id)
    if listing.user_id != user.id:
        raise UnauthorizedError("Only the owner can delete this listing")
    return services.listings.deactivate_listing(listing_id)


@router.post("/listings/{listing_id}/reactivate", response_model=Listing)
async def reactivate_listing(
    listing_id: str,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return services.listings.reactivate_listing(listing_id, user.id)


@router.get("/communities/{community_id}/listings", response_model=List[Listing])
async def get_community_listings(
    community_id: str,
    services: ExchangeServices = Depends(get_services)
):
    """Active listings in a community."""
    services.communities.community_by_id(community_id)
    return services.listings.community_listings(community_id)
