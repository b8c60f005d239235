# src/forum_diff/services/revisions.py
"""Revision history services: recording edits and deleting revisions."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from forum_diff.core.errors import PermissionDeniedError, RevisionConflictError
from forum_diff.db.time import utcnow
from forum_diff.models.post import Post
from forum_diff.models.revision import Revision
from forum_diff.models.user import (
    PERMISSION_DELETE_EDIT_HISTORY,
    PERMISSION_EDIT_POSTS,
    PERMISSION_SELF_DELETE_EDIT_HISTORY,
    PERMISSION_VIEW_EDIT_HISTORY,
    User,
)
from forum_diff.repositories.archive_repo import RevisionArchiveRepository
from forum_diff.repositories.post_repo import PostRepository
from forum_diff.repositories.revision_repo import RevisionRepository

logger = logging.getLogger(__name__)


class RevisionService:
    """Service handling revision permissions and state transitions."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.posts = PostRepository(db)
        self.revisions = RevisionRepository(db)
        self.archives = RevisionArchiveRepository(db)

    @staticmethod
    def can_view(actor: User) -> bool:
        """Return True if ``actor`` may browse edit histories."""
        return actor.can(PERMISSION_VIEW_EDIT_HISTORY)

    def can_delete(self, revision: Revision, actor: User) -> bool:
        """Check whether ``actor`` may delete ``revision``.

        Holders of the global ability may delete any revision; a post's author
        may delete revisions of their own post with the self-delete ability.

        Raises:
            NotFoundError: If the revision's post no longer exists.
        """
        if actor.can(PERMISSION_DELETE_EDIT_HISTORY):
            return True

        post = self.posts.find_or_fail(revision.post_id)
        is_self = post.user_id is not None and actor.id == post.user_id
        return is_self and actor.can(PERMISSION_SELF_DELETE_EDIT_HISTORY)

    def delete_revision(self, revision: Revision, actor: User) -> Revision:
        """Soft-delete ``revision`` on behalf of ``actor``.

        Archived text is purged from its archive; inline text is cleared.

        Raises:
            PermissionDeniedError: If ``actor`` may not delete the revision.
            RevisionConflictError: If the revision is already deleted.
        """
        if not self.can_delete(revision, actor):
            raise PermissionDeniedError("You are not allowed to delete this revision")
        if revision.is_deleted:
            raise RevisionConflictError("Revision has already been deleted")

        if revision.is_archived:
            self.archives.delete_archived_content(revision.archive_id, revision.id)
            revision.archive_id = None

        revision.content = None
        revision.deleted_user_id = actor.id
        revision.deleted_at = utcnow()
        self.db.commit()
        self.db.refresh(revision)

        logger.info(
            "User %s deleted revision %s of post %s",
            actor.id,
            revision.revision,
            revision.post_id,
        )
        return revision

    @staticmethod
    def can_edit(post: Post, actor: User) -> bool:
        """Return True if ``actor`` may edit ``post``."""
        return actor.id == post.user_id or actor.can(PERMISSION_EDIT_POSTS)

    def record_edit(self, post: Post, new_content: str, actor: User) -> Revision | None:
        """Apply an edit to ``post`` and record it in the revision history.

        Returns:
            The new highest revision, or ``None`` when the content is unchanged.

        Raises:
            PermissionDeniedError: If ``actor`` may not edit the post.
        """
        if not self.can_edit(post, actor):
            raise PermissionDeniedError("You can only edit your own posts")

        old_content = post.content
        if new_content == old_content:
            return None

        latest = self.revisions.latest(post.id)
        if latest is None:
            # First edit: keep the original text as revision 0.
            latest = Revision(
                post_id=post.id,
                revision=0,
                content=old_content,
                actor_id=post.user_id,
                created_at=post.created_at,
            )
            self.db.add(latest)
        elif latest.content is None and latest.archive_id is None and latest.deleted_at is None:
            # The previous head stops mirroring the live post.
            latest.content = old_content

        now = utcnow()
        revision = Revision(
            post_id=post.id,
            revision=latest.revision + 1,
            content=None,
            actor_id=actor.id,
            created_at=now,
        )
        self.db.add(revision)

        post.content = new_content
        post.edited_at = now
        post.edited_user_id = actor.id
        self.db.commit()
        self.db.refresh(revision)

        logger.info("User %s recorded revision %s of post %s", actor.id, revision.revision, post.id)
        return revision
