"""Data access helpers for posts, revisions and revision archives."""

from .archive_repo import RevisionArchiveRepository
from .post_repo import PostRepository
from .revision_repo import RevisionRepository

__all__ = ["PostRepository", "RevisionArchiveRepository", "RevisionRepository"]
