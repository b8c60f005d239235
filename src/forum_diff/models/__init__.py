# src/forum_diff/models/__init__.py
"""SQLAlchemy models for the Forum Diff application."""

from .post import Post
from .revision import Revision
from .revision_archive import RevisionArchive
from .user import User

__all__ = [
    "Post",
    "Revision",
    "RevisionArchive",
    "User",
]
