"""Storage for revision text moved out of the ``post_revision`` table."""
from __future__ import annotations

import json
import logging
import zlib

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from forum_diff.core.errors import NotFoundError
from forum_diff.models.revision_archive import RevisionArchive

__all__ = ["RevisionArchiveRepository", "compress_contents", "decompress_contents"]

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 9


def compress_contents(contents: dict[str, str]) -> bytes:
    """Serialize an archive mapping of revision id to text."""
    return zlib.compress(json.dumps(contents).encode("utf-8"), COMPRESSION_LEVEL)


def decompress_contents(blob: bytes) -> dict[str, str]:
    """Inverse of ``compress_contents``.

    Raises:
        ValueError: If the payload is not a compressed JSON object.
    """
    try:
        data = json.loads(zlib.decompress(blob).decode("utf-8"))
    except (zlib.error, UnicodeDecodeError, json.JSONDecodeError) as err:
        raise ValueError("Corrupt revision archive payload") from err
    if not isinstance(data, dict):
        raise ValueError("Revision archive payload is not an object")
    return data


class RevisionArchiveRepository:
    """Key-addressed store mapping (archive id, revision id) to text."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def _load(self, archive_id: int) -> tuple[RevisionArchive, dict[str, str]]:
        archive = self.session.get(RevisionArchive, archive_id)
        if archive is None:
            raise NotFoundError(f"Revision archive {archive_id} not found")
        try:
            contents = decompress_contents(archive.contents)
        except ValueError as err:
            logger.error("Unable to read revision archive %s: %s", archive_id, err)
            raise NotFoundError(f"Revision archive {archive_id} is unreadable") from err
        return archive, contents

    def get_archived_content(self, archive_id: int, revision_id: int) -> str:
        """Return the archived text of one revision.

        Raises:
            NotFoundError: If the archive or the revision's entry is missing.
        """
        _, contents = self._load(archive_id)
        key = str(revision_id)
        if key not in contents:
            raise NotFoundError(
                f"Revision {revision_id} is not stored in archive {archive_id}"
            )
        return contents[key]

    def delete_archived_content(self, archive_id: int, revision_id: int) -> None:
        """Purge one revision's text, dropping the archive row once it is empty."""
        archive, contents = self._load(archive_id)
        contents.pop(str(revision_id), None)
        if contents:
            archive.contents = compress_contents(contents)
        else:
            self.session.delete(archive)
        self.session.flush()

    def create_archive(self, post_id: int, contents: dict[int, str]) -> RevisionArchive:
        """Store ``contents`` in a new archive row for ``post_id``."""
        last_no = self.session.execute(
            select(func.max(RevisionArchive.archive_no)).where(RevisionArchive.post_id == post_id)
        ).scalar()
        archive = RevisionArchive(
            post_id=post_id,
            archive_no=(last_no or 0) + 1,
            contents=compress_contents({str(key): value for key, value in contents.items()}),
        )
        self.session.add(archive)
        self.session.flush()
        return archive
