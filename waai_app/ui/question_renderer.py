"""Question rendering for the editor preview."""

from __future__ import annotations

from typing import List

from waai_app.core.markdown_renderer import renderer


def render_question_with_options(question_text: str, options: List[str], correct_index: int | None = None) -> str:
    """Render a question and its options as an HTML document for QWebEngineView.

    Args:
        question_text: The question text (supports Markdown)
        options: Option labels in display order
        correct_index: Index of the option marked correct, if any

    Returns:
        HTML string ready for display in QWebEngineView
    """
    markdown_lines = [question_text.strip() or "(No question text)", ""]
    for idx, option in enumerate(options):
        letter = chr(ord("A") + idx)
        marker = " ✓" if idx == correct_index else ""
        markdown_lines.append(f"**{letter}.** {option or '(empty)'}{marker}")
    markdown = "\n\n".join(markdown_lines)
    return renderer.render_document(markdown)
