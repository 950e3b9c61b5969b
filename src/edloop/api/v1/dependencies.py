"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from edloop.core.security import decode_subject
from edloop.db.session import get_db
from edloop.models import User
from edloop.services.ranking import Clock, system_clock

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _resolve_user(token: str, db: Session) -> User:
    user_id = decode_subject(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    return _resolve_user(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)
    ],
    db: SessionDep,
) -> User | None:
    """Return the caller when a bearer token is present, otherwise ``None``.

    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return _resolve_user(credentials.credentials, db)


def get_clock() -> Clock:
    """Return the clock used for time-dependent ranking."""
    return system_clock


# Type aliases for common dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
ClockDep = Annotated[Clock, Depends(get_clock)]
