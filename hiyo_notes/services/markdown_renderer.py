from __future__ import annotations

import bleach
import markdown as md

MD_EXTENSIONS = ["fenced_code", "tables"]

ALLOWED_TAGS = [
    "a", "p", "br", "hr",
    "strong", "em", "code", "pre", "blockquote",
    "ul", "ol", "li",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "thead", "tbody", "tr", "th", "td",
]
ALLOWED_ATTRS = {
    "a": ["href", "title"],
    "th": ["align"], "td": ["align"],
}
ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


def render_markdown_to_safe_html(note_text: str) -> str:
    rendered = md.markdown(note_text or "", extensions=MD_EXTENSIONS)
    return bleach.clean(
        rendered,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )


class MarkdownRenderer:
    """note text -> sanitized HTML page for the preview pane (QTextBrowser)."""

    def render_page(self, text: str) -> str:
        rendered = render_markdown_to_safe_html(text)
        return f"""\
<html>
<head>
  <meta charset="utf-8"/>
  <style>
    body {{ font-family: sans-serif; line-height: 1.5; }}
    pre {{ background: #f5f5f5; padding: 8px; }}
    code {{ background: #f5f5f5; }}
  </style>
</head>
<body>{rendered}</body>
</html>
"""
