"""Data access helpers for working with post revisions."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from forum_diff.core.errors import NotFoundError
from forum_diff.models.revision import Revision

__all__ = ["RevisionRepository"]


class RevisionRepository:
    """Queries over the ``post_revision`` table."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, revision_id: int) -> Revision | None:
        """Return a revision by identifier."""
        return self.session.get(Revision, revision_id)

    def find_or_fail(self, revision_id: int) -> Revision:
        """Return a revision by identifier or raise ``NotFoundError``."""
        revision = self.get_by_id(revision_id)
        if revision is None:
            raise NotFoundError(f"Revision {revision_id} not found")
        return revision

    def max_revision(self, post_id: int) -> int | None:
        """Return the highest revision number recorded for a post."""
        return self.session.execute(
            select(func.max(Revision.revision)).where(Revision.post_id == post_id)
        ).scalar()

    def latest(self, post_id: int) -> Revision | None:
        """Return the highest-numbered revision of a post, deleted or not."""
        return self.session.execute(
            select(Revision)
            .where(Revision.post_id == post_id)
            .order_by(Revision.revision.desc())
            .limit(1)
        ).scalars().first()

    def previous_visible(self, post_id: int, before_revision: int) -> Revision | None:
        """Return the newest non-deleted revision numbered below ``before_revision``."""
        return self.session.execute(
            select(Revision)
            .where(
                Revision.post_id == post_id,
                Revision.revision < before_revision,
                Revision.deleted_at.is_(None),
            )
            .order_by(Revision.revision.desc())
            .limit(1)
        ).scalars().first()

    def list_for_post(self, post_id: int, *, offset: int = 0, limit: int | None = None) -> list[Revision]:
        """Return a post's revisions ordered by revision number descending."""
        stmt = (
            select(Revision)
            .where(Revision.post_id == post_id)
            .order_by(Revision.revision.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars())

    def count_for_post(self, post_id: int) -> int:
        """Return how many revisions a post has."""
        return self.session.execute(
            select(func.count()).select_from(Revision).where(Revision.post_id == post_id)
        ).scalar() or 0

    def archive_candidates(self, post_id: int, keep_recent: int) -> list[Revision]:
        """Return revisions eligible for archiving, oldest first.

        The ``keep_recent`` highest revision numbers stay inline, as do deleted
        revisions, already archived ones and those without stored text.
        """
        recent_ids = list(
            self.session.execute(
                select(Revision.id)
                .where(Revision.post_id == post_id)
                .order_by(Revision.revision.desc())
                .limit(max(keep_recent, 0))
            ).scalars()
        )
        stmt = (
            select(Revision)
            .where(
                Revision.post_id == post_id,
                Revision.deleted_at.is_(None),
                Revision.archive_id.is_(None),
                Revision.content.is_not(None),
            )
            .order_by(Revision.revision.asc())
        )
        if recent_ids:
            stmt = stmt.where(Revision.id.not_in(recent_ids))
        return list(self.session.execute(stmt).scalars())

    def post_ids_with_revisions(self) -> list[int]:
        """Return the ids of posts that have at least one revision."""
        return list(
            self.session.execute(
                select(Revision.post_id).distinct().order_by(Revision.post_id)
            ).scalars()
        )
