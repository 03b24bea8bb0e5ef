"""
Error handling module for the barter exchange.

Provides the domain error taxonomy and best-effort side-effect execution.
"""

from .error_handler import ErrorHandler
from .errors import (
    BarterExchangeError,
    NotAuthenticatedError,
    NotFoundError,
    ListingNotFoundError,
    RequestNotFoundError,
    UserNotFoundError,
    CommunityNotFoundError,
    InvalidTransitionError,
    NotReadyError,
    DuplicateRequestError,
    UnauthorizedError,
    InvalidCodeError,
    ChatNotAvailableError,
    InvalidRatingError,
    ValidationFailedError,
    AlreadyMemberError,
    DuplicateUserError,
    InvalidCredentialsError,
    CorruptRecordError,
)

__all__ = [
    'ErrorHandler',
    'BarterExchangeError',
    'NotAuthenticatedError',
    'NotFoundError',
    'ListingNotFoundError',
    'RequestNotFoundError',
    'UserNotFoundError',
    'CommunityNotFoundError',
    'InvalidTransitionError',
    'NotReadyError',
    'DuplicateRequestError',
    'UnauthorizedError',
    'InvalidCodeError',
    'ChatNotAvailableError',
    'InvalidRatingError',
    'ValidationFailedError',
    'AlreadyMemberError',
    'DuplicateUserError',
    'InvalidCredentialsError',
    'CorruptRecordError',
]
