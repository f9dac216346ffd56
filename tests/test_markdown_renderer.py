import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from hiyo_notes.services.markdown_renderer import MarkdownRenderer, render_markdown_to_safe_html


def test_fenced_code():
    out = render_markdown_to_safe_html("```\nprint('hi')\n```")
    assert "<pre>" in out
    assert "<code>" in out


def test_script_is_stripped():
    out = render_markdown_to_safe_html("hello <script>alert(1)</script>")
    assert "<script>" not in out
    assert "hello" in out


def test_page_wraps_body():
    page = MarkdownRenderer().render_page("# Title")
    assert "<h1>Title</h1>" in page
    assert page.lstrip().startswith("<html>")


def test_empty_text():
    assert MarkdownRenderer().render_page("")
