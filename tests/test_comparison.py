# tests/test_comparison.py
"""Tests for revision selection and comparison rendering."""

import json

import pytest

from forum_diff.core.errors import NotFoundError
from forum_diff.core.settings import QuietEditsSettings, Settings
from forum_diff.models import Revision
from forum_diff.repositories.archive_repo import RevisionArchiveRepository
from forum_diff.repositories.post_repo import PostRepository
from forum_diff.repositories.revision_repo import RevisionRepository
from forum_diff.services.comparison import (
    ArchivedContent,
    ContentResolver,
    DiffOptions,
    InlineContent,
    RevisionComparator,
)
from forum_diff.services.features import QUIET_EDITS, FeatureFlags


def _comparator(db_session, options: DiffOptions | None = None) -> RevisionComparator:
    return RevisionComparator(
        revisions=RevisionRepository(db_session),
        posts=PostRepository(db_session),
        resolver=ContentResolver(RevisionArchiveRepository(db_session)),
        options=options or DiffOptions(no_diff_message="Nothing changed"),
    )


def test_latest_revision_compares_live_content_with_previous(db_session, history):
    result = _comparator(db_session).compare(history["r2"])

    assert result is not None
    assert not result.is_preview_only
    assert result.preview_html == "<p>C</p>"
    assert "<del>B</del>" in result.inline_html
    assert "<ins>C</ins>" in result.inline_html
    assert result.comparison == {
        "new": {"revision": 2, "diffId": history["r2"].id},
        "old": {"revision": 1, "diffId": history["r1"].id},
    }


def test_original_revision_is_preview_only(db_session, history):
    result = _comparator(db_session).compare(history["r0"])

    assert result.is_preview_only
    assert result.preview_html == "<p>A</p>"
    assert result.side_by_side_html is None
    assert result.combined_html is None
    assert result.comparison["old"] == result.comparison["new"] == {
        "revision": 0,
        "diffId": history["r0"].id,
    }


def test_single_revision_is_preview_only(db_session, make_post, add_revision):
    post = make_post("only")
    revision = add_revision(post, 0, "only")

    result = _comparator(db_session).compare(revision)

    assert result.is_preview_only
    assert result.comparison_between == (
        f'{{"new":{{"revision":0,"diffId":{revision.id}}},'
        f'"old":{{"revision":0,"diffId":{revision.id}}}}}'
    )
    assert json.loads(result.comparison_between) == {
        "new": {"revision": 0, "diffId": revision.id},
        "old": {"revision": 0, "diffId": revision.id},
    }


def test_latest_without_older_visible_revision_is_preview_only(db_session, make_post, add_revision):
    post = make_post("live")
    add_revision(post, 0, "gone", deleted=True)
    head = add_revision(post, 1, None)

    result = _comparator(db_session).compare(head)

    assert result.is_preview_only
    assert result.preview_html == "<p>live</p>"
    assert result.comparison["old"]["revision"] == 1


def test_middle_revision_without_older_visible_revision_uses_live_content(
    db_session, make_post, add_revision
):
    post = make_post("live text")
    add_revision(post, 0, "gone", deleted=True)
    middle = add_revision(post, 1, "middle text")
    add_revision(post, 2, None)

    result = _comparator(db_session).compare(middle)

    assert not result.is_preview_only
    assert result.comparison["old"] == {"revision": -1, "diffId": None}
    assert "<del>live text</del>" in result.combined_html
    assert "<ins>middle text</ins>" in result.combined_html
    assert "<del>liv</del>e text" in result.inline_html


def test_deleted_revisions_are_skipped(db_session, make_post, add_revision):
    post = make_post("v3")
    r0 = add_revision(post, 0, "v0")
    add_revision(post, 1, "v1", deleted=True)
    r2 = add_revision(post, 2, "v2")

    result = _comparator(db_session).compare(r2)

    assert result.comparison["old"] == {"revision": 0, "diffId": r0.id}
    assert "<del>v0</del>" in result.inline_html or "v<del>0</del>" in result.inline_html


def test_deleted_target_produces_nothing(db_session, make_post, add_revision):
    post = make_post("live")
    add_revision(post, 0, "v0")
    deleted = add_revision(post, 1, "v1", deleted=True)

    assert _comparator(db_session).compare(deleted) is None


def test_archived_revisions_are_resolved(db_session, make_post, add_revision):
    post = make_post("new text")
    add_revision(post, 0, "original", archived=True)
    old = add_revision(post, 1, "archived text", archived=True)
    head = add_revision(post, 2, None)

    result = _comparator(db_session).compare(head)

    assert result.comparison["old"] == {"revision": 1, "diffId": old.id}
    assert "archived" in result.combined_html
    current = _comparator(db_session).compare(old)
    assert current.preview_html == "<p>archived text</p>"


def test_identical_texts_render_no_diff_message(db_session, make_post, add_revision):
    post = make_post("same")
    add_revision(post, 0, "same")
    head = add_revision(post, 1, None)

    result = _comparator(db_session).compare(head)

    expected = '<div class="noDiff"><p>Nothing changed</p></div>'
    assert result.inline_html == expected
    assert result.side_by_side_html == expected
    assert result.combined_html == expected


def test_quiet_edit_options_ignore_case(db_session, make_post, add_revision):
    post = make_post("Hello World")
    add_revision(post, 0, "hello world")
    head = add_revision(post, 1, None)

    loud = _comparator(db_session).compare(head)
    quiet = _comparator(
        db_session,
        DiffOptions(ignore_case=True, no_diff_message="Nothing changed"),
    ).compare(head)

    assert "noDiff" not in loud.inline_html
    assert "noDiff" in quiet.inline_html


def test_missing_post_is_not_found(db_session, add_revision, make_post):
    post = make_post("x")
    add_revision(post, 0, "x")
    orphan = Revision(post_id=post.id + 1000, revision=0, content=None)
    db_session.add(orphan)
    db_session.commit()

    with pytest.raises(NotFoundError):
        _comparator(db_session).compare(orphan)


def test_missing_archived_payload_is_not_found(db_session, make_post, add_revision):
    post = make_post("x")
    revision = add_revision(post, 0, "x")
    archive = RevisionArchiveRepository(db_session).create_archive(post.id, {999: "other"})
    revision.archive_id = archive.id
    revision.content = None
    db_session.commit()

    with pytest.raises(NotFoundError):
        _comparator(db_session).compare(revision)


def test_content_resolver_sources(db_session, make_post, add_revision):
    post = make_post("x")
    inline = add_revision(post, 0, "inline")
    archived = add_revision(post, 1, "packed", archived=True)
    resolver = ContentResolver(RevisionArchiveRepository(db_session))

    assert ContentResolver.source_for(inline) == InlineContent("inline")
    assert ContentResolver.source_for(archived) == ArchivedContent(archived.archive_id, archived.id)
    assert resolver.resolve(ContentResolver.source_for(archived)) == "packed"
    assert resolver.resolve(InlineContent(None)) is None


class TestDiffOptions:
    """Tests for building comparison options from settings."""

    def _settings(self, **env) -> Settings:
        return Settings(_env_file=None, SECRET_KEY="x", **env)

    def test_defaults(self):
        options = DiffOptions.from_settings(self._settings(), FeatureFlags())
        assert options.context == 2
        assert options.detail_level == "line"
        assert options.separate_block is True
        assert options.merge_threshold == 0.8
        assert options.ignore_case is False
        assert options.ignore_whitespace is False

    def test_quiet_edits_only_apply_when_enabled(self):
        quiet = QuietEditsSettings(_env_file=None)
        disabled = DiffOptions.from_settings(self._settings(), FeatureFlags(), quiet)
        enabled = DiffOptions.from_settings(self._settings(), FeatureFlags([QUIET_EDITS]), quiet)
        assert (disabled.ignore_case, disabled.ignore_whitespace) == (False, False)
        assert (enabled.ignore_case, enabled.ignore_whitespace) == (True, True)

    def test_quiet_edits_settings_are_respected(self):
        quiet = QuietEditsSettings(_env_file=None, QUIET_EDITS_IGNORE_CASE=False)
        options = DiffOptions.from_settings(self._settings(), FeatureFlags([QUIET_EDITS]), quiet)
        assert options.ignore_case is False
        assert options.ignore_whitespace is True

    def test_malformed_numbers_are_sanitized(self):
        settings = self._settings(DIFF_MERGE_THRESHOLD="7", DIFF_NEIGHBOR_LINES="lots")
        options = DiffOptions.from_settings(settings, FeatureFlags())
        assert options.merge_threshold == 1.0
        assert options.context == 2

    def test_renderer_options_embed_message(self):
        options = DiffOptions(no_diff_message="Same")
        renderer_options = options.renderer_options()
        assert renderer_options.result_for_identicals == '<div class="noDiff"><p>Same</p></div>'
        assert renderer_options.line_numbers is False
