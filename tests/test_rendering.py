# tests/test_rendering.py
"""Tests for the line differ and the three HTML renderers."""

import pytest

from forum_diff.services.rendering import (
    CombinedRenderer,
    Differ,
    InlineRenderer,
    RendererOptions,
    SideBySideRenderer,
    highlight_pair,
    make_renderer,
)

NO_DIFF = '<div class="noDiff"><p>Nothing changed</p></div>'


def _options(**overrides) -> RendererOptions:
    return RendererOptions(result_for_identicals=NO_DIFF, **overrides)


class TestDiffer:
    """Tests for ``Differ``."""

    def test_identical_lines(self):
        differ = Differ(["a", "b"], ["a", "b"])
        assert differ.is_identical
        assert differ.grouped_opcodes == []

    def test_ignore_case(self):
        assert not Differ(["Hello"], ["hello"]).is_identical
        assert Differ(["Hello"], ["hello"], ignore_case=True).is_identical

    def test_ignore_whitespace(self):
        assert not Differ(["a  b"], ["ab"]).is_identical
        assert Differ(["a  b", "\tc"], ["ab", "c"], ignore_whitespace=True).is_identical

    def test_context_splits_distant_changes(self):
        old = [f"line {n}" for n in range(10)]
        new = list(old)
        new[0] = "first"
        new[9] = "last"
        assert len(Differ(old, new, context=1).grouped_opcodes) == 2

    def test_negative_context_keeps_every_line(self):
        old = [f"line {n}" for n in range(10)]
        new = list(old)
        new[5] = "changed"
        hunks = Differ(old, new, context=-1).grouped_opcodes
        assert len(hunks) == 1
        assert hunks[0][0][1] == 0
        assert hunks[0][-1][2] == 10


class TestHighlightPair:
    """Tests for intra-line highlighting."""

    def test_line_level_marks_changed_middle(self):
        old, new = highlight_pair("hello world", "hello there world", "line")
        assert old == "hello world"
        assert new == "hello <ins>there </ins>world"

    def test_word_level(self):
        old, new = highlight_pair("one two three", "one 2 three", "word")
        assert old == "one <del>two</del> three"
        assert new == "one <ins>2</ins> three"

    def test_char_level(self):
        old, new = highlight_pair("cat", "cut", "char")
        assert old == "c<del>a</del>t"
        assert new == "c<ins>u</ins>t"

    def test_none_level_only_escapes(self):
        assert highlight_pair("<a>", "<b>", "none") == ("&lt;a&gt;", "&lt;b&gt;")


class TestRenderers:
    """Tests for the inline, side-by-side and combined renderers."""

    @pytest.mark.parametrize("name", ["Inline", "SideBySide", "Combined"])
    def test_identical_texts_render_no_diff_message(self, name):
        differ = Differ(["same"], ["same"])
        assert make_renderer(name, _options()).render(differ) == NO_DIFF

    def test_unknown_renderer(self):
        with pytest.raises(ValueError, match="Unknown diff renderer"):
            make_renderer("Unified")

    def test_inline_shows_removed_and_inserted_lines(self):
        differ = Differ(["a", "b", "c"], ["a", "B", "c"])
        html = InlineRenderer(_options()).render(differ)
        assert "ForumDiff CustomDiff diff-wrapper" in html
        assert "diff-inline" in html
        assert '<td class="old"><del>b</del></td>' in html
        assert '<td class="new"><ins>B</ins></td>' in html
        assert 'change change-rep' in html

    def test_side_by_side_pairs_lines(self):
        differ = Differ(["a", "b"], ["a", "b", "c"])
        html = SideBySideRenderer(_options()).render(differ)
        assert "diff-side-by-side" in html
        assert '<td class="old none"></td><td class="new ins">c</td>' in html

    def test_combined_merges_similar_lines(self):
        differ = Differ(["the quick brown fox"], ["the quick brown cat"])
        html = CombinedRenderer(_options(merge_threshold=0.8)).render(differ)
        assert "the quick brown <del>fox</del><ins>cat</ins>" in html

    def test_combined_keeps_dissimilar_lines_apart(self):
        differ = Differ(["the quick brown fox"], ["the quick brown cat"])
        html = CombinedRenderer(_options(merge_threshold=1.0)).render(differ)
        assert "<del>the quick brown fox</del>" in html
        assert "<ins>the quick brown cat</ins>" in html

    def test_separate_block_toggle(self):
        old = [f"line {n}" for n in range(10)]
        new = list(old)
        new[0] = "first"
        new[9] = "last"
        differ = Differ(old, new, context=1)
        assert 'class="skipped"' in InlineRenderer(_options()).render(differ)
        assert 'class="skipped"' not in InlineRenderer(_options(separate_block=False)).render(differ)

    def test_output_is_escaped(self):
        differ = Differ(["safe"], ["<script>alert(1)</script>"])
        html = InlineRenderer(_options()).render(differ)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_line_numbers(self):
        differ = Differ(["a", "b"], ["a", "c"])
        html = InlineRenderer(_options(line_numbers=True)).render(differ)
        assert '<th class="n-old">2</th><th class="n-new"></th>' in html
        assert '<th class="n-old"></th><th class="n-new">2</th>' in html

    def test_unknown_detail_level_falls_back_to_line(self):
        assert RendererOptions(detail_level="sentence").detail_level == "line"
