# src/forum_diff/services/formatting.py
"""Preview rendering for revision text."""

from __future__ import annotations

import html
import re

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_CODE_RE = re.compile(r"`([^`\n]+)`")
_STRONG_RE = re.compile(r"\*\*(.+?)\*\*")
_EM_RE = re.compile(r"(?<![*\w])\*(?!\s)(.+?)(?<!\s)\*(?![*\w])")
_LINK_RE = re.compile(r"\[([^\]\n]+)\]\((https?://[^\s)]+)\)")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")


class TextFormatter:
    """Turn stored post text into sanitized HTML for the preview pane.

    With formatting disabled the text is only HTML-escaped. Otherwise a small
    Markdown subset (headings, emphasis, inline code, http links, paragraphs
    and line breaks) is rendered on top of the escaped text, so raw HTML in a
    post never reaches the output.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def render(self, content: str | None) -> str:
        """Return HTML for ``content``; ``None`` renders as empty."""
        text = (content or "").replace("\r\n", "\n")
        if not self.enabled:
            return html.escape(text, quote=True)
        blocks = [block for block in _PARAGRAPH_SPLIT_RE.split(text.strip("\n")) if block.strip()]
        return "".join(self._render_block(block) for block in blocks)

    def _render_block(self, block: str) -> str:
        heading = _HEADING_RE.match(block)
        if heading and "\n" not in block:
            level = len(heading.group(1))
            return f"<h{level}>{self._render_inline(heading.group(2))}</h{level}>"
        lines = [self._render_inline(line) for line in block.split("\n")]
        return "<p>" + "<br>".join(lines) + "</p>"

    @staticmethod
    def _render_inline(line: str) -> str:
        escaped = html.escape(line, quote=True)
        # Code spans first so emphasis markers inside them stay literal.
        pieces = _CODE_RE.split(escaped)
        out: list[str] = []
        for index, piece in enumerate(pieces):
            if index % 2:
                out.append(f"<code>{piece}</code>")
                continue
            out.append(TextFormatter._render_links(piece))
        return "".join(out)

    @staticmethod
    def _render_links(text: str) -> str:
        # Emphasis applies to link labels but never to the URL.
        out: list[str] = []
        last = 0
        for match in _LINK_RE.finditer(text):
            out.append(_emphasis(text[last:match.start()]))
            out.append(f'<a href="{match.group(2)}" rel="ugc nofollow">{_emphasis(match.group(1))}</a>')
            last = match.end()
        out.append(_emphasis(text[last:]))
        return "".join(out)


def _emphasis(text: str) -> str:
    text = _STRONG_RE.sub(r"<strong>\1</strong>", text)
    return _EM_RE.sub(r"<em>\1</em>", text)
