"""
Matching errors.

The engine raises exactly these kinds; the request layer maps them to
status codes (NotFound -> 404, InvalidArgument -> 400,
DependencyUnavailable -> 503).
"""


class MatchingError(Exception):
    """Base exception for matching engine errors."""
    pass


class NotFoundError(MatchingError):
    """Raised when a requested user or profile does not exist."""
    pass


class UserNotFoundError(NotFoundError):
    """Raised when the user identity is unknown."""

    def __init__(self, user_id: str):
        super().__init__(f"User not found with ID: {user_id}")
        self.user_id = user_id


class ProfileNotFoundError(NotFoundError):
    """Raised when the user exists but has no profile."""

    def __init__(self, user_id: str):
        super().__init__(f"User profile not found for user ID: {user_id}")
        self.user_id = user_id


class InvalidArgumentError(MatchingError):
    """Raised for malformed filters or page parameters."""
    pass


class InvalidProfileError(InvalidArgumentError):
    """Raised when a profile carries out-of-range age or coordinates."""
    pass


class DependencyUnavailableError(MatchingError):
    """Raised by store adapters when a backing service fails."""
    pass


class MatchingCancelledError(MatchingError):
    """Raised when a candidate scan is aborted by the caller."""
    pass
