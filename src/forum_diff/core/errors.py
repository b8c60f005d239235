# src/forum_diff/core/errors.py
"""Domain errors raised by the revision services."""

from __future__ import annotations


class RevisionError(Exception):
    """Base error for revision history operations."""


class NotFoundError(RevisionError, LookupError):
    """Raised when a post, revision or archived payload does not exist."""


class PermissionDeniedError(RevisionError):
    """Raised when the acting user may not perform an operation."""


class RevisionConflictError(RevisionError):
    """Raised when an operation does not apply to the revision's current state."""
