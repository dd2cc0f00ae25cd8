"""Markdown + LaTeX rendering for question bodies in exported result sheets.

Question content is authored in markdown and may contain ``$...$`` math.
The renderer turns it into HTML and leaves math typesetting to MathJax at
display time, so exported sheets look the same as the quiz pages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html

from markdown_it import MarkdownIt

_MATHJAX_SCRIPT = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

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
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def wrap_with_mathjax(self, body_html: str, title: str = "Quiz Results") -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""
        return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{html.escape(title)}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0 auto; padding: 1rem; max-width: 52rem; }}
      .answer-correct {{ color: #15803d; }}
      .answer-incorrect {{ color: #b91c1c; }}
      .question {{ border-top: 1px solid #d4d4d8; padding-top: 0.75rem; margin-top: 0.75rem; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src="{_MATHJAX_SCRIPT}"></script>
  </head>
  <body>
{body_html}
  </body>
</html>"""


renderer = MarkdownMathRenderer()
