# src/forum_diff/models/revision_archive.py
"""SQLAlchemy model for compressed revision archives."""

from sqlalchemy import ForeignKey, Integer, LargeBinary, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from forum_diff.db.session import Base


class RevisionArchive(Base):
    """Out-of-line storage for the text of several revisions of one post.

    ``contents`` is a zlib-compressed JSON object mapping revision ids
    (as strings) to their text.
    """

    __tablename__ = "post_revision_archive"
    __table_args__ = (UniqueConstraint("post_id", "archive_no", name="uq_post_archive_no"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Per-post sequence of archive rows.
    archive_no: Mapped[int] = mapped_column(Integer, nullable=False)
    contents: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
