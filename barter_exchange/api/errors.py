"""
HTTP mapping for domain errors.

Each error kind gets its own status code and user-facing message; the
domain layer never formats these strings itself.
"""

import logging
from typing import Dict, Tuple, Type

from fastapi import Request
from fastapi.responses import JSONResponse

from barter_exchange.error_handling.errors import (
    AlreadyMemberError,
    BarterExchangeError,
    ChatNotAvailableError,
    CommunityNotFoundError,
    CorruptRecordError,
    DuplicateRequestError,
    DuplicateUserError,
    InvalidCodeError,
    InvalidCredentialsError,
    InvalidRatingError,
    InvalidTransitionError,
    ListingNotFoundError,
    NotAuthenticatedError,
    NotFoundError,
    NotReadyError,
    RequestNotFoundError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


ERROR_RESPONSES: Dict[Type[BarterExchangeError], Tuple[int, str]] = {
    NotAuthenticatedError: (401, "Please log in to continue."),
    ListingNotFoundError: (404, "That listing is no longer available."),
    RequestNotFoundError: (404, "That barter request could not be found."),
    UserNotFoundError: (404, "That user could not be found."),
    CommunityNotFoundError: (404, "Community not found. Please check the code and try again."),
    NotFoundError: (404, "The requested item could not be found."),
    NotReadyError: (409, "Both parties must accept the barter before it can be completed."),
    DuplicateRequestError: (409, "You already have an open request for this listing."),
    InvalidTransitionError: (409, "This action is not available for the barter in its current state."),
    UnauthorizedError: (403, "You are not allowed to do that."),
    InvalidCodeError: (400, "Invalid confirmation code."),
    ChatNotAvailableError: (409, "Chat is only available after both parties accept the barter."),
    InvalidRatingError: (400, "Rating must be between 1 and 5."),
    AlreadyMemberError: (409, "You are already a member of this community."),
    DuplicateUserError: (409, "A user with this email already exists."),
    InvalidCredentialsError: (401, "Invalid email or password."),
    ValidationFailedError: (400, "The submitted data is not valid."),
    CorruptRecordError: (500, "Stored data could not be read."),
    BarterExchangeError: (500, "Something went wrong."),
}


def describe_error(error: BarterExchangeError) -> Tuple[int, str]:
    """Status and message for the most specific mapped error class."""
    for cls in type(error).__mro__:
        if cls in ERROR_RESPONSES:
            return ERROR_RESPONSES[cls]
    return 500, "Something went wrong."


async def barter_error_handler(request: Request, exc: BarterExchangeError) -> JSONResponse:
    status_code, message = describe_error(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "error": type(exc).__name__},
    )
