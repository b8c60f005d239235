# src/forum_diff/services/archiver.py
"""Background job moving old revision text into compressed archives."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from forum_diff.core.settings import Settings
from forum_diff.repositories.archive_repo import RevisionArchiveRepository
from forum_diff.repositories.revision_repo import RevisionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchivePolicy:
    """How much history stays inline and how archives are packed."""

    enabled: bool = True
    keep_recent: int = 5
    chunk_size: int = 20

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArchivePolicy":
        """Build the policy from application settings."""
        return cls(
            enabled=settings.archive_enabled,
            keep_recent=max(settings.archive_keep_recent, 0),
            chunk_size=max(settings.archive_chunk_size, 1),
        )


class RevisionArchiver:
    """Packs the older revisions of a post into ``RevisionArchive`` rows.

    Each archived revision keeps a reference to its archive and has its inline
    text cleared. Deleted revisions and the ``keep_recent`` newest revisions
    are left alone.
    """

    def __init__(self, db: Session, policy: ArchivePolicy | None = None) -> None:
        self.db = db
        self.policy = policy or ArchivePolicy()
        self.revisions = RevisionRepository(db)
        self.archives = RevisionArchiveRepository(db)

    def archive_post(self, post_id: int, *, dry_run: bool = False) -> int:
        """Archive eligible revisions of one post.

        Args:
            post_id: Post whose history should be archived.
            dry_run: Report what would be archived without writing.

        Returns:
            Number of revisions archived (or eligible, for a dry run).
        """
        if not self.policy.enabled:
            return 0

        candidates = self.revisions.archive_candidates(post_id, self.policy.keep_recent)
        if not candidates or dry_run:
            return len(candidates)

        size = self.policy.chunk_size
        for start in range(0, len(candidates), size):
            chunk = candidates[start:start + size]
            archive = self.archives.create_archive(
                post_id,
                {revision.id: revision.content or "" for revision in chunk},
            )
            for revision in chunk:
                revision.archive_id = archive.id
                revision.content = None

        self.db.commit()
        logger.info("Archived %d revisions of post %s", len(candidates), post_id)
        return len(candidates)

    def archive_all(self, *, dry_run: bool = False) -> dict[int, int]:
        """Archive every post with revisions; returns counts keyed by post id."""
        results: dict[int, int] = {}
        for post_id in self.revisions.post_ids_with_revisions():
            archived = self.archive_post(post_id, dry_run=dry_run)
            if archived:
                results[post_id] = archived
        return results
