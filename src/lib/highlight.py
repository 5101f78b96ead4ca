"""
Code highlighting to inline-styled HTML

Turns source text of a known language into styled spans (Pygments tokens
resolved against the active theme) and renders those spans to HTML with
inline styles, so the output deck needs no external stylesheet.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Type

from markdown_it.common.utils import escapeHtml
from pygments.lexer import Lexer

from .theme import Theme


class IncludeBackground(Enum):
    """Whether rendered spans carry their own background colour"""
    NO = "no"
    YES = "yes"


@dataclass(frozen=True)
class StyledSpan:
    """A run of text sharing one resolved style"""
    style: Dict[str, Any]
    text: str


def snippet_start(theme: Theme) -> str:
    """Opening <pre> wrapper for a code block in the given theme"""
    if theme.background:
        return f'<pre style="background-color:{theme.background};">\n'
    return "<pre>\n"


class LineHighlighter:
    """
    Converts source text into styled spans for one grammar and theme.

    A fresh instance is created for every code block.
    """

    def __init__(self, syntax: Type[Lexer], theme: Theme) -> None:
        # Keep the text byte-for-byte: no newline stripping or appending
        self.lexer = syntax(stripnl=False, stripall=False, ensurenl=False)
        self.theme = theme

    def highlight(self, text: str) -> List[StyledSpan]:
        """
        Highlight text, which may span several lines.

        Adjacent tokens resolving to the same style are merged.
        """
        spans: List[StyledSpan] = []
        for ttype, value in self.lexer.get_tokens(text):
            if not value:
                continue
            style = self.theme.tokenStyle_get(ttype)
            if spans and spans[-1].style == style:
                spans[-1] = StyledSpan(style, spans[-1].text + value)
            else:
                spans.append(StyledSpan(style, value))
        return spans


def spanStyle_toCss(style: Dict[str, Any], background: IncludeBackground) -> str:
    css: List[str] = []
    if background is IncludeBackground.YES and style.get('bgcolor'):
        css.append(f"background-color:#{style['bgcolor']};")
    if style.get('color'):
        css.append(f"color:#{style['color']};")
    if style.get('bold'):
        css.append("font-weight:bold;")
    if style.get('italic'):
        css.append("font-style:italic;")
    if style.get('underline'):
        css.append("text-decoration:underline;")
    return "".join(css)


def spans_toHtml(spans: List[StyledSpan], background: IncludeBackground = IncludeBackground.NO) -> str:
    """
    Render styled spans as <span style="..."> elements.

    Args:
        spans: Output of LineHighlighter.highlight()
        background: Whether to emit per-span background colours

    Returns:
        HTML fragment; span text is HTML-escaped
    """
    parts: List[str] = []
    for span in spans:
        css = spanStyle_toCss(span.style, background)
        parts.append(f'<span style="{css}">{escapeHtml(span.text)}</span>')
    return "".join(parts)
