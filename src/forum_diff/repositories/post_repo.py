"""Data access helpers for working with posts."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from forum_diff.core.errors import NotFoundError
from forum_diff.models.post import Post

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.execute(select(Post).where(Post.id == post_id)).scalars().first()

    def find_or_fail(self, post_id: int) -> Post:
        """Return a post by identifier or raise ``NotFoundError``."""
        post = self.get_by_id(post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        return post
