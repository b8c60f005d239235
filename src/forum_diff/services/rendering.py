# src/forum_diff/services/rendering.py
"""Line diffs between two revisions and their HTML renderings.

``Differ`` computes grouped opcodes with ``difflib.SequenceMatcher``; the
renderers turn one ``Differ`` into inline, side-by-side or combined tables.
"""

from __future__ import annotations

import html
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from functools import cached_property
from itertools import zip_longest

__all__ = [
    "DETAIL_LEVELS",
    "CombinedRenderer",
    "Differ",
    "InlineRenderer",
    "RendererOptions",
    "SideBySideRenderer",
    "make_renderer",
]

Opcode = tuple[str, int, int, int, int]

DETAIL_LEVELS = ("none", "line", "word", "char")
DEFAULT_WRAPPER_CLASSES = ("ForumDiff", "CustomDiff", "diff-wrapper")

_WHITESPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"\w+|\s+|[^\w\s]", re.UNICODE)


class Differ:
    """Line-level comparison of two texts.

    Args:
        old: Lines of the older text.
        new: Lines of the newer text.
        context: Unchanged lines kept around each change; negative keeps all.
        ignore_case: Compare lines case-insensitively.
        ignore_whitespace: Compare lines with all whitespace removed.
    """

    def __init__(
        self,
        old: Sequence[str],
        new: Sequence[str],
        *,
        context: int = 2,
        ignore_case: bool = False,
        ignore_whitespace: bool = False,
    ) -> None:
        self.old = list(old)
        self.new = list(new)
        self.context = context
        self.ignore_case = ignore_case
        self.ignore_whitespace = ignore_whitespace

    def _normalize(self, line: str) -> str:
        if self.ignore_whitespace:
            line = _WHITESPACE_RE.sub("", line)
        if self.ignore_case:
            line = line.casefold()
        return line

    @cached_property
    def _normalized(self) -> tuple[list[str], list[str]]:
        return (
            [self._normalize(line) for line in self.old],
            [self._normalize(line) for line in self.new],
        )

    @property
    def is_identical(self) -> bool:
        """Return True when no line differs under the comparison options."""
        old, new = self._normalized
        return old == new

    @cached_property
    def grouped_opcodes(self) -> list[list[Opcode]]:
        """Return change hunks, each a list of ``(tag, i1, i2, j1, j2)`` opcodes."""
        if self.is_identical:
            return []
        old, new = self._normalized
        matcher = SequenceMatcher(None, old, new, autojunk=False)
        if self.context < 0:
            return [matcher.get_opcodes()]
        return [list(group) for group in matcher.get_grouped_opcodes(self.context)]


@dataclass
class RendererOptions:
    """Options shared by every renderer."""

    detail_level: str = "line"
    separate_block: bool = True
    line_numbers: bool = False
    wrapper_classes: Sequence[str] = field(default_factory=lambda: DEFAULT_WRAPPER_CLASSES)
    # Returned verbatim instead of a table when the texts do not differ.
    result_for_identicals: str | None = None
    # Combined renderer only: similarity above which a changed pair is merged.
    merge_threshold: float = 0.8

    def __post_init__(self) -> None:
        if self.detail_level not in DETAIL_LEVELS:
            self.detail_level = "line"


def _tokenize(text: str, level: str) -> list[str]:
    if level == "char":
        return list(text)
    return _WORD_RE.findall(text)


def _wrap(tag: str, text: str) -> str:
    return f"<{tag}>{html.escape(text)}</{tag}>" if text else ""


def highlight_pair(old: str, new: str, level: str) -> tuple[str, str]:
    """Return escaped ``old`` and ``new`` with their differing parts marked up."""
    if level == "none" or old == new:
        return html.escape(old), html.escape(new)

    if level == "line":
        prefix = 0
        limit = min(len(old), len(new))
        while prefix < limit and old[prefix] == new[prefix]:
            prefix += 1
        suffix = 0
        while (
            suffix < limit - prefix
            and old[len(old) - 1 - suffix] == new[len(new) - 1 - suffix]
        ):
            suffix += 1
        old_mid = old[prefix:len(old) - suffix]
        new_mid = new[prefix:len(new) - suffix]
        head = html.escape(old[:prefix])
        tail = html.escape(old[len(old) - suffix:])
        return (
            head + _wrap("del", old_mid) + tail,
            head + _wrap("ins", new_mid) + tail,
        )

    old_tokens = _tokenize(old, level)
    new_tokens = _tokenize(new, level)
    old_parts: list[str] = []
    new_parts: list[str] = []
    matcher = SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        old_chunk = "".join(old_tokens[i1:i2])
        new_chunk = "".join(new_tokens[j1:j2])
        if tag == "equal":
            old_parts.append(html.escape(old_chunk))
            new_parts.append(html.escape(new_chunk))
        else:
            old_parts.append(_wrap("del", old_chunk))
            new_parts.append(_wrap("ins", new_chunk))
    return "".join(old_parts), "".join(new_parts)


def merge_pair(old: str, new: str, level: str) -> str:
    """Return one line showing deletions and insertions of ``old`` -> ``new`` in place."""
    tokens_level = level if level in ("word", "char") else "word"
    old_tokens = _tokenize(old, tokens_level)
    new_tokens = _tokenize(new, tokens_level)
    parts: list[str] = []
    matcher = SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            parts.append(html.escape("".join(old_tokens[i1:i2])))
            continue
        parts.append(_wrap("del", "".join(old_tokens[i1:i2])))
        parts.append(_wrap("ins", "".join(new_tokens[j1:j2])))
    return "".join(parts)


class AbstractRenderer:
    """Walks a ``Differ``'s hunks and assembles an HTML table."""

    name = ""
    columns = 1

    def __init__(self, options: RendererOptions | None = None) -> None:
        self.options = options or RendererOptions()

    def render(self, differ: Differ) -> str:
        """Render ``differ`` to HTML."""
        if differ.is_identical:
            return self.options.result_for_identicals or ""

        bodies: list[str] = []
        for index, hunk in enumerate(differ.grouped_opcodes):
            if index and self.options.separate_block:
                bodies.append(self._separator())
            for tag, i1, i2, j1, j2 in hunk:
                if i1 == i2 and j1 == j2:
                    continue
                rows = self._render_block(tag, differ.old[i1:i2], differ.new[j1:j2], i1, j1)
                bodies.append(f'<tbody class="change change-{_CHANGE_CLASS[tag]}">{rows}</tbody>')

        classes = " ".join([*self.options.wrapper_classes, "diff", "diff-html", f"diff-{self.name}"])
        return f'<table class="{html.escape(classes)}">{"".join(bodies)}</table>'

    def _separator(self) -> str:
        span = self.columns + (2 if self.options.line_numbers else 0)
        return f'<tbody class="skipped"><tr><td colspan="{span}">&hellip;</td></tr></tbody>'

    def _numbers(self, old_no: int | None, new_no: int | None) -> str:
        if not self.options.line_numbers:
            return ""
        old_cell = "" if old_no is None else str(old_no)
        new_cell = "" if new_no is None else str(new_no)
        return f'<th class="n-old">{old_cell}</th><th class="n-new">{new_cell}</th>'

    def _render_block(
        self,
        tag: str,
        old: list[str],
        new: list[str],
        old_start: int,
        new_start: int,
    ) -> str:
        raise NotImplementedError


_CHANGE_CLASS = {"equal": "eq", "insert": "ins", "delete": "del", "replace": "rep"}


class InlineRenderer(AbstractRenderer):
    """One column; removed lines followed by inserted lines."""

    name = "inline"
    columns = 2

    def _row(self, sign: str, css: str, text: str, old_no: int | None, new_no: int | None) -> str:
        return (
            f'<tr data-type="{sign}">{self._numbers(old_no, new_no)}'
            f'<th class="sign {css}">{sign}</th><td class="{css}">{text}</td></tr>'
        )

    def _render_block(self, tag, old, new, old_start, new_start):  # type: ignore[override]
        level = self.options.detail_level
        rows: list[str] = []
        if tag == "equal":
            for offset, line in enumerate(new):
                rows.append(
                    self._row(" ", "eq", html.escape(line), old_start + offset + 1, new_start + offset + 1)
                )
            return "".join(rows)

        old_html = [html.escape(line) for line in old]
        new_html = [html.escape(line) for line in new]
        if tag == "replace":
            for k, (old_line, new_line) in enumerate(zip(old, new)):
                old_html[k], new_html[k] = highlight_pair(old_line, new_line, level)
        for offset, text in enumerate(old_html):
            rows.append(self._row("-", "old", text, old_start + offset + 1, None))
        for offset, text in enumerate(new_html):
            rows.append(self._row("+", "new", text, None, new_start + offset + 1))
        return "".join(rows)


class SideBySideRenderer(AbstractRenderer):
    """Old text on the left, new text on the right."""

    name = "side-by-side"
    columns = 2

    def _old_cell(self, old_no: int | None, text: str | None, css: str) -> str:
        number = f'<th class="n-old">{"" if old_no is None else old_no}</th>' if self.options.line_numbers else ""
        if text is None:
            return f'{number}<td class="old none"></td>'
        return f'{number}<td class="old {css}">{text}</td>'

    def _new_cell(self, new_no: int | None, text: str | None, css: str) -> str:
        number = f'<th class="n-new">{"" if new_no is None else new_no}</th>' if self.options.line_numbers else ""
        if text is None:
            return f'{number}<td class="new none"></td>'
        return f'{number}<td class="new {css}">{text}</td>'

    def _render_block(self, tag, old, new, old_start, new_start):  # type: ignore[override]
        level = self.options.detail_level
        css = _CHANGE_CLASS[tag]
        rows: list[str] = []
        for offset, (old_line, new_line) in enumerate(zip_longest(old, new)):
            if tag == "equal":
                old_text = new_text = html.escape(new_line)
            elif old_line is not None and new_line is not None:
                old_text, new_text = highlight_pair(old_line, new_line, level)
            else:
                old_text = None if old_line is None else html.escape(old_line)
                new_text = None if new_line is None else html.escape(new_line)
            old_no = None if old_line is None else old_start + offset + 1
            new_no = None if new_line is None else new_start + offset + 1
            rows.append(
                f"<tr>{self._old_cell(old_no, old_text, css)}{self._new_cell(new_no, new_text, css)}</tr>"
            )
        return "".join(rows)


class CombinedRenderer(AbstractRenderer):
    """One column; similar changed lines are merged into a single marked-up line."""

    name = "combined"
    columns = 1

    def _row(self, sign: str, css: str, text: str, old_no: int | None, new_no: int | None) -> str:
        return f'<tr data-type="{sign}">{self._numbers(old_no, new_no)}<td class="{css}">{text}</td></tr>'

    def _render_block(self, tag, old, new, old_start, new_start):  # type: ignore[override]
        rows: list[str] = []
        if tag == "equal":
            for offset, line in enumerate(new):
                rows.append(
                    self._row(" ", "eq", html.escape(line), old_start + offset + 1, new_start + offset + 1)
                )
            return "".join(rows)

        threshold = self.options.merge_threshold
        removed: list[str] = []
        inserted: list[str] = []
        for offset, (old_line, new_line) in enumerate(zip_longest(old, new)):
            old_no = None if old_line is None else old_start + offset + 1
            new_no = None if new_line is None else new_start + offset + 1
            if old_line is not None and new_line is not None:
                ratio = SequenceMatcher(None, old_line, new_line, autojunk=False).ratio()
                if ratio >= threshold:
                    rows.extend(removed)
                    rows.extend(inserted)
                    removed.clear()
                    inserted.clear()
                    merged = merge_pair(old_line, new_line, self.options.detail_level)
                    rows.append(self._row("*", "rep", merged, old_no, new_no))
                    continue
            if old_line is not None:
                removed.append(self._row("-", "old", _wrap("del", old_line), old_no, None))
            if new_line is not None:
                inserted.append(self._row("+", "new", _wrap("ins", new_line), None, new_no))
        rows.extend(removed)
        rows.extend(inserted)
        return "".join(rows)


_RENDERERS: dict[str, type[AbstractRenderer]] = {
    "Inline": InlineRenderer,
    "SideBySide": SideBySideRenderer,
    "Combined": CombinedRenderer,
}


def make_renderer(name: str, options: RendererOptions | None = None) -> AbstractRenderer:
    """Return a renderer by name (``Inline``, ``SideBySide`` or ``Combined``).

    Raises:
        ValueError: If the renderer name is unknown.
    """
    try:
        renderer_cls = _RENDERERS[name]
    except KeyError as err:
        raise ValueError(f"Unknown diff renderer: {name}") from err
    return renderer_cls(options)
