"""
Service wiring for the API.

One ExchangeServices bundle is built per app around a single injected
store and shared by every request.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from barter_exchange.config import AppSettings
from barter_exchange.directory import CommunityDirectory, ListingDirectory, UserDirectory
from barter_exchange.error_handling import ErrorHandler
from barter_exchange.models import User
from barter_exchange.negotiation import BarterService
from barter_exchange.notifications import NotificationService
from barter_exchange.store import KeyValueStore
from barter_exchange.trust import TrustScoreEngine


@dataclass
class ExchangeServices:
    """All services bound to one store"""
    store: KeyValueStore
    settings: AppSettings
    trust: TrustScoreEngine
    users: UserDirectory
    listings: ListingDirectory
    communities: CommunityDirectory
    notifications: NotificationService
    barters: BarterService

    @classmethod
    def build(
        cls,
        store: KeyValueStore,
        settings: AppSettings,
        error_handler: Optional[ErrorHandler] = None
    ) -> "ExchangeServices":
        trust = TrustScoreEngine(store)
        users = UserDirectory(store, trust)
        listings = ListingDirectory(store, users)
        communities = CommunityDirectory(store, code_length=settings.codes.community_code_length)
        notifications = NotificationService(store)
        barters = BarterService(
            store,
            settings=settings,
            users=users,
            listings=listings,
            notifications=notifications,
            trust_engine=trust,
            error_handler=error_handler,
        )
        return cls(
            store=store,
            settings=settings,
            trust=trust,
            users=users,
            listings=listings,
            communities=communities,
            notifications=notifications,
            barters=barters,
        )


def get_services(request: Request) -> ExchangeServices:
    return request.app.state.services


def get_current_user(services: ExchangeServices = Depends(get_services)) -> User:
    """Acting user from the session; raises NotAuthenticatedError when logged out."""
    return services.users.require_current_user()
