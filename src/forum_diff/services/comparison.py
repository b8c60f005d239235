# src/forum_diff/services/comparison.py
"""Selection of the revisions to compare and rendering of their diff."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from forum_diff.core.settings import QuietEditsSettings, Settings
from forum_diff.models.revision import Revision
from forum_diff.repositories.archive_repo import RevisionArchiveRepository
from forum_diff.repositories.post_repo import PostRepository
from forum_diff.repositories.revision_repo import RevisionRepository
from forum_diff.services.features import QUIET_EDITS, FeatureFlags
from forum_diff.services.formatting import TextFormatter
from forum_diff.services.rendering import Differ, RendererOptions, make_renderer

__all__ = [
    "ArchivedContent",
    "ComparisonResult",
    "ContentResolver",
    "DiffOptions",
    "InlineContent",
    "RevisionComparator",
]

logger = logging.getLogger(__name__)

# Marks the live post content on the "old" side of a comparison.
LIVE_CONTENT_REVISION = -1

NO_DIFF_TEMPLATE = '<div class="noDiff"><p>{message}</p></div>'


@dataclass(frozen=True)
class InlineContent:
    """Text stored directly on the revision row (or the live post)."""

    text: str | None


@dataclass(frozen=True)
class ArchivedContent:
    """Text held in a revision archive."""

    archive_id: int
    revision_id: int


ContentSource = InlineContent | ArchivedContent


class ContentResolver:
    """Resolves a ``ContentSource`` to text."""

    def __init__(self, archives: RevisionArchiveRepository) -> None:
        self.archives = archives

    def resolve(self, source: ContentSource) -> str | None:
        """Return the text behind ``source``.

        Raises:
            NotFoundError: If archived content is missing.
        """
        if isinstance(source, ArchivedContent):
            return self.archives.get_archived_content(source.archive_id, source.revision_id)
        return source.text

    @staticmethod
    def source_for(revision: Revision) -> ContentSource:
        """Return where the text of ``revision`` lives."""
        if revision.is_archived:
            return ArchivedContent(archive_id=revision.archive_id, revision_id=revision.id)
        return InlineContent(revision.content)


@dataclass(frozen=True)
class DiffOptions:
    """Comparison and rendering options, read once from configuration."""

    context: int = 2
    ignore_case: bool = False
    ignore_whitespace: bool = False
    detail_level: str = "line"
    separate_block: bool = True
    merge_threshold: float = 0.8
    text_formatting: bool = True
    no_diff_message: str = "There are no differences between these revisions."

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        features: FeatureFlags,
        quiet_edits: QuietEditsSettings | None = None,
    ) -> "DiffOptions":
        """Build options from application settings.

        The ignore flags only apply while the quiet-edits feature is enabled;
        they are read from that feature's own settings.
        """
        ignore_case = ignore_whitespace = False
        if quiet_edits is not None and features.is_enabled(QUIET_EDITS):
            ignore_case = quiet_edits.ignore_case
            ignore_whitespace = quiet_edits.ignore_whitespace
        return cls(
            context=settings.neighbor_lines,
            ignore_case=ignore_case,
            ignore_whitespace=ignore_whitespace,
            detail_level=settings.diff_detail_level,
            separate_block=settings.diff_separate_block,
            merge_threshold=settings.merge_threshold,
            text_formatting=settings.diff_text_formatting,
            no_diff_message=settings.diff_no_diff_message,
        )

    def renderer_options(self) -> RendererOptions:
        """Return the options shared by the three renderers."""
        return RendererOptions(
            detail_level=self.detail_level,
            separate_block=self.separate_block,
            line_numbers=False,
            result_for_identicals=NO_DIFF_TEMPLATE.format(message=self.no_diff_message),
            merge_threshold=self.merge_threshold,
        )


@dataclass
class ComparisonResult:
    """Rendered artifacts for one revision plus which revisions were compared."""

    preview_html: str
    comparison: dict[str, dict[str, Any]] = field(default_factory=dict)
    inline_html: str | None = None
    side_by_side_html: str | None = None
    combined_html: str | None = None

    @property
    def is_preview_only(self) -> bool:
        """Return True when no diff was rendered."""
        return self.inline_html is None

    @property
    def comparison_between(self) -> str:
        """JSON form of ``comparison`` with ``new`` listed before ``old``."""
        ordered = {key: self.comparison[key] for key in ("new", "old") if key in self.comparison}
        return json.dumps(ordered, separators=(",", ":"))


def _marker(revision: int, diff_id: int | None) -> dict[str, Any]:
    return {"revision": revision, "diffId": diff_id}


class RevisionComparator:
    """Decides which two revisions to diff and renders the result."""

    def __init__(
        self,
        revisions: RevisionRepository,
        posts: PostRepository,
        resolver: ContentResolver,
        options: DiffOptions | None = None,
        formatter: TextFormatter | None = None,
    ) -> None:
        self.revisions = revisions
        self.posts = posts
        self.resolver = resolver
        self.options = options or DiffOptions()
        self.formatter = formatter or TextFormatter(self.options.text_formatting)

    def _live_content(self, post_id: int) -> str:
        return self.posts.find_or_fail(post_id).content

    def compare(self, target: Revision) -> ComparisonResult | None:
        """Compare ``target`` against the revision preceding it.

        Returns:
            ``None`` for a soft-deleted revision, otherwise the preview and,
            unless no diff applies, the three diff renderings.

        Raises:
            NotFoundError: If the post or an archived payload is missing.
        """
        if target.is_deleted:
            return None

        revision_count = self.revisions.max_revision(target.post_id)
        is_latest = target.revision == revision_count

        current_text = self.resolver.resolve(ContentResolver.source_for(target))
        # The newest revision has no stored text while the post still shows it.
        if is_latest and current_text is None:
            current_text = self._live_content(target.post_id)

        result = ComparisonResult(
            preview_html=self.formatter.render(current_text),
            comparison={"new": _marker(target.revision, target.id)},
        )

        compare_with = self.revisions.previous_visible(target.post_id, target.revision)

        if target.revision == 0 or (is_latest and compare_with is None):
            result.comparison["old"] = _marker(target.revision, target.id)
            return result

        if compare_with is None:
            old_text = self._live_content(target.post_id)
            result.comparison["old"] = _marker(LIVE_CONTENT_REVISION, None)
        else:
            old_text = self.resolver.resolve(ContentResolver.source_for(compare_with))
            result.comparison["old"] = _marker(compare_with.revision, compare_with.id)

        logger.debug(
            "Comparing post %s revision %s against %s",
            target.post_id,
            target.revision,
            result.comparison["old"]["revision"],
        )

        differ = Differ(
            (old_text or "").split("\n"),
            (current_text or "").split("\n"),
            context=self.options.context,
            ignore_case=self.options.ignore_case,
            ignore_whitespace=self.options.ignore_whitespace,
        )
        renderer_options = self.options.renderer_options()
        result.inline_html = make_renderer("Inline", renderer_options).render(differ)
        result.side_by_side_html = make_renderer("SideBySide", renderer_options).render(differ)
        result.combined_html = make_renderer("Combined", renderer_options).render(differ)
        return result
