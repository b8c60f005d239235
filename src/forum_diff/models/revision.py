# src/forum_diff/models/revision.py
"""SQLAlchemy model for stored post revisions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_diff.db.session import Base
from forum_diff.db.time import utcnow

from .user import User


class Revision(Base):
    """One historical state of a post's content.

    Revision 0 is the original content. The highest revision may have no
    stored content, in which case the live post content stands in for it.
    Archived revisions keep their text in ``RevisionArchive`` and have
    ``content`` cleared.
    """

    __tablename__ = "post_revision"
    __table_args__ = (UniqueConstraint("post_id", "revision", name="uq_post_revision_number"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    revision: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    archive_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("post_revision_archive.id", ondelete="SET NULL"),
        nullable=True,
    )

    actor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Soft-delete marker.
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Set when the post was rolled back to this revision.
    rollbacked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rollbacked_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="SET NULL"),
        nullable=True,
    )

    actor: Mapped[User | None] = relationship("User", foreign_keys=[actor_id])
    deleted_user: Mapped[User | None] = relationship("User", foreign_keys=[deleted_user_id])
    rollbacked_user: Mapped[User | None] = relationship("User", foreign_keys=[rollbacked_user_id])

    @property
    def is_deleted(self) -> bool:
        """Return True once the revision has been soft-deleted."""
        return self.deleted_at is not None

    @property
    def is_archived(self) -> bool:
        """Return True while the revision's text lives in an archive."""
        return self.archive_id is not None
