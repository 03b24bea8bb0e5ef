"""
Error taxonomy for the barter exchange.

Every core operation either returns the updated record or raises one of
these. Messages are diagnostic; presentation text belongs to the caller.
"""


class BarterExchangeError(Exception):
    """Base exception for barter exchange domain errors."""


class NotAuthenticatedError(BarterExchangeError):
    """Raised when an operation needs a current user and there is none."""


class NotFoundError(BarterExchangeError):
    """Raised when a referenced id does not resolve."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class ListingNotFoundError(NotFoundError):
    def __init__(self, record_id: str):
        super().__init__("Listing", record_id)


class RequestNotFoundError(NotFoundError):
    def __init__(self, record_id: str):
        super().__init__("Barter request", record_id)


class UserNotFoundError(NotFoundError):
    def __init__(self, record_id: str):
        super().__init__("User", record_id)


class CommunityNotFoundError(NotFoundError):
    def __init__(self, record_id: str):
        super().__init__("Community", record_id)


class InvalidTransitionError(BarterExchangeError):
    """Raised when a status/actor combination is not in the transition table."""

    def __init__(self, message: str, status=None):
        self.status = status
        super().__init__(message)


class NotReadyError(InvalidTransitionError):
    """Raised when completion is attempted before both parties accepted."""


class DuplicateRequestError(InvalidTransitionError):
    """Raised when a requester already has an open request for the listing."""


class UnauthorizedError(BarterExchangeError):
    """Raised when the actor is not a party to the barter."""


class InvalidCodeError(BarterExchangeError):
    """Raised when a submitted confirmation code does not match."""


class ChatNotAvailableError(BarterExchangeError):
    """Raised when chat is attempted before both parties accepted."""


class InvalidRatingError(BarterExchangeError):
    """Raised when a rating falls outside 1..5."""

    def __init__(self, rating):
        self.rating = rating
        super().__init__(f"Rating must be between 1 and 5, got {rating}")


class ValidationFailedError(BarterExchangeError):
    """Raised when directory input is rejected."""


class AlreadyMemberError(ValidationFailedError):
    """Raised when a user joins a community they already belong to."""


class DuplicateUserError(ValidationFailedError):
    """Raised when signing up with an email that is already registered."""


class InvalidCredentialsError(ValidationFailedError):
    """Raised when login credentials do not match a stored user."""


class CorruptRecordError(BarterExchangeError):
    """Raised when a stored record fails validation on read."""

    def __init__(self, key: str, detail: str):
        self.key = key
        super().__init__(f"Corrupt record at {key!r}: {detail}")
