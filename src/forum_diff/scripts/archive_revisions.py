# src/forum_diff/scripts/archive_revisions.py
"""
Cron job moving old revision text into compressed archives.

Run periodically (e.g. nightly):

    python -m forum_diff.scripts.archive_revisions [--post-id N] [--dry-run]
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from forum_diff.core.settings import settings
from forum_diff.db.session import SessionLocal
from forum_diff.services.archiver import ArchivePolicy, RevisionArchiver

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(description="Archive old post revisions.")
    parser.add_argument("--post-id", type=int, default=None, help="Only archive this post")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report eligible revisions without archiving them",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the archiver and return a process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper())

    policy = ArchivePolicy.from_settings(settings)
    if not policy.enabled:
        logger.info("Revision archiving is disabled")
        return 0

    db = SessionLocal()
    try:
        archiver = RevisionArchiver(db, policy)
        if args.post_id is not None:
            results = {args.post_id: archiver.archive_post(args.post_id, dry_run=args.dry_run)}
        else:
            results = archiver.archive_all(dry_run=args.dry_run)
    finally:
        db.close()

    verb = "Eligible" if args.dry_run else "Archived"
    for post_id, count in sorted(results.items()):
        print(f"{verb}: post {post_id}: {count} revisions")
    print(f"{verb}: {sum(results.values())} revisions in total")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
