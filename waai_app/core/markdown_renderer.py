"""Markdown rendering shared by the editor preview and the child page.

Question text is authored as Markdown. The same renderer produces the HTML
fragment embedded in the child page and the full document shown in the
Qt preview, so both surfaces display a question identically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html

from markdown_it import MarkdownIt

from waai_app.constants.about import APP_NAME


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts question Markdown into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        text = markdown_text.strip()
        if not text:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(text)

    def render_document(self, markdown_text: str, title: str = APP_NAME) -> str:
        """Render ``markdown_text`` inside a minimal standalone HTML page."""
        fragment = self.render_fragment(markdown_text)
        return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{html.escape(title)}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; color: #2d2a4a; }}
      .question-html {{ font-size: 1.2rem; line-height: 1.5; }}
      img {{ max-width: 100%; border-radius: 8px; }}
    </style>
  </head>
  <body>
    <div class="question-html">{fragment}</div>
  </body>
</html>"""


# shared by the Qt thread and the API thread
renderer = MarkdownRenderer()
