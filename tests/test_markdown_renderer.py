from __future__ import annotations

from quiz_portal.core.markdown_renderer import EMPTY_FRAGMENT, MarkdownRenderer


def test_render_fragment_formats_markdown():
    html = MarkdownRenderer().render_fragment("What does `len([1, 2])` return?")

    assert html.startswith("<p>")
    assert "<code>len([1, 2])</code>" in html


def test_render_fragment_escapes_raw_html():
    html = MarkdownRenderer().render_fragment("<script>alert(1)</script>")

    assert "<script>" not in html


def test_blank_text_renders_placeholder():
    assert MarkdownRenderer().render_fragment("   ") == EMPTY_FRAGMENT


def test_render_inline_has_no_paragraph():
    assert MarkdownRenderer().render_inline("**Paris**") == "<strong>Paris</strong>"
