"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from forum_diff.core.security import decode_access_token
from forum_diff.core.settings import quiet_edits_settings, settings
from forum_diff.db.session import get_db
from forum_diff.models import User
from forum_diff.repositories.archive_repo import RevisionArchiveRepository
from forum_diff.repositories.post_repo import PostRepository
from forum_diff.repositories.revision_repo import RevisionRepository
from forum_diff.services.comparison import ContentResolver, DiffOptions, RevisionComparator
from forum_diff.services.features import FeatureFlags
from forum_diff.services.revisions import RevisionService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
    )


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
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as err:
        raise _credentials_error() from err

    subject = payload.get("sub")
    if subject is None:
        raise _credentials_error()
    try:
        user_id = int(str(subject))
    except ValueError as err:
        raise _credentials_error() from err

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_feature_flags() -> FeatureFlags:
    """Return the companion features enabled for this installation."""
    return FeatureFlags.from_settings(settings)


def get_diff_options(
    features: Annotated[FeatureFlags, Depends(get_feature_flags)],
) -> DiffOptions:
    """Return comparison and rendering options from the current settings."""
    return DiffOptions.from_settings(settings, features, quiet_edits_settings)


DiffOptionsDep = Annotated[DiffOptions, Depends(get_diff_options)]


def get_revision_service(db: SessionDep) -> RevisionService:
    """Return a revision service bound to the request session."""
    return RevisionService(db)


def get_comparator(db: SessionDep, options: DiffOptionsDep) -> RevisionComparator:
    """Return a comparator bound to the request session."""
    return RevisionComparator(
        revisions=RevisionRepository(db),
        posts=PostRepository(db),
        resolver=ContentResolver(RevisionArchiveRepository(db)),
        options=options,
    )


RevisionServiceDep = Annotated[RevisionService, Depends(get_revision_service)]
ComparatorDep = Annotated[RevisionComparator, Depends(get_comparator)]
