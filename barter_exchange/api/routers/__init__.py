"""API routers"""

from . import auth, barters, communities, listings, notifications, trust

__all__ = ["auth", "barters", "communities", "listings", "notifications", "trust"]
