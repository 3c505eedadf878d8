"""Markdown rendering for question and option text.

Authors may format questions with Markdown (code spans, tables, emphasis).
The API ships rendered HTML fragments next to the raw text so the browser
front-end never has to bundle a Markdown parser. Raw HTML in the source is
not passed through.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

EMPTY_FRAGMENT = "<p><em>No content provided.</em></p>"


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts Markdown into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = markdown_text.strip()
        if not sanitized:
            return EMPTY_FRAGMENT
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line (an option label) without the wrapping paragraph."""
        return self._markdown.renderInline(markdown_text.strip())


# MarkdownIt is safe to share for read-only renders, so one instance serves
# every request thread.
renderer = MarkdownRenderer()
