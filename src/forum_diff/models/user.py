# src/forum_diff/models/user.py
"""SQLAlchemy model for forum accounts and their granted abilities."""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from forum_diff.db.session import Base

# Abilities consulted by the revision history endpoints.
PERMISSION_VIEW_EDIT_HISTORY = "viewEditHistory"
PERMISSION_DELETE_EDIT_HISTORY = "deleteEditHistory"
PERMISSION_SELF_DELETE_EDIT_HISTORY = "selfDeleteEditHistory"
PERMISSION_EDIT_POSTS = "editPosts"


class User(Base):
    """Forum account.

    Administrators hold every ability; other users hold the abilities listed
    in ``permissions``.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    permissions: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    def can(self, ability: str) -> bool:
        """Return True if the user holds ``ability``."""
        if self.is_admin:
            return True
        return ability in (self.permissions or [])
