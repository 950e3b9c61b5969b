"""Domain exceptions raised by the EdLoop services.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request. ``edloop.core.error_handlers`` maps them onto HTTP responses.
"""

from __future__ import annotations

from fastapi import status


class EdLoopError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(EdLoopError):
    """Raised when a referenced post, community or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"


class VoteValidationError(EdLoopError):
    """Raised when a vote kind is not one of the two allowed values."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "invalid_vote_type"


class VoteConflictError(EdLoopError):
    """Raised when a second vote row would be created for the same user and post.

    The transition logic never inserts over an existing vote, so this signals a
    broken invariant rather than a user mistake.
    """

    status_code = status.HTTP_409_CONFLICT
    error_code = "vote_conflict"


class PermissionDeniedError(EdLoopError):
    """Raised when a user acts on content they do not own."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"


class LedgerStorageError(EdLoopError):
    """Raised when the vote and counter update could not be committed."""

    error_code = "ledger_storage_error"


class PostValidationError(EdLoopError):
    """Raised when an edit would leave a post without its type's payload."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "invalid_post"
