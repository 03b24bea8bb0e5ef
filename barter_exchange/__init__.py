"""
Community barter exchange.

Barter negotiation state machine, trust scoring and the small directories
(users, listings, communities, notifications) they depend on.
"""

__version__ = "0.1.0"
