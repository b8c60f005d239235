# src/forum_diff/services/__init__.py
"""Business logic services for the Forum Diff application."""

from .archiver import ArchivePolicy, RevisionArchiver
from .comparison import ComparisonResult, ContentResolver, DiffOptions, RevisionComparator
from .features import FeatureFlags
from .formatting import TextFormatter
from .revisions import RevisionService

__all__ = [
    "ArchivePolicy",
    "ComparisonResult",
    "ContentResolver",
    "DiffOptions",
    "FeatureFlags",
    "RevisionArchiver",
    "RevisionComparator",
    "RevisionService",
    "TextFormatter",
]
