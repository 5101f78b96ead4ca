"""
Markdown to structural events

Wraps markdown-it (CommonMark preset, tables enabled) and adapts its flat
block token stream into the event sequence consumed by the renderer:

    hr                 -> Rule
    fence / code_block -> CodeBlockStart, Text, CodeBlockEnd
    anything else      -> Passthrough(token)

Example:
    >>> md = markdownParser_make()
    >>> [type(e).__name__ for e in events_parse(md, "# A\\n\\n---\\n")]
    ['Passthrough', 'Passthrough', 'Passthrough', 'Rule']
"""

from typing import Any, Dict, Iterator, Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll

from ..models.events import CodeBlockEnd, CodeBlockStart, Event, Passthrough, Rule, Text


def markdownParser_make() -> MarkdownIt:
    """CommonMark parser with GFM tables"""
    return MarkdownIt("commonmark").enable("table")


def language_extract(info: str) -> str:
    """First word of a fence info string ("" when absent)"""
    words = unescapeAll(info).strip().split(maxsplit=1)
    return words[0] if words else ""


def events_parse(md: MarkdownIt, source: str, env: Optional[Dict[str, Any]] = None) -> Iterator[Event]:
    """
    Parse Markdown into a one-shot sequence of structural events.

    Args:
        md: Parser from markdownParser_make()
        source: Markdown text
        env: markdown-it environment (link references); must be the same
             dict later passed to the HTML renderer

    Yields:
        Events in document order
    """
    for token in md.parse(source, env if env is not None else {}):
        if token.type == "hr":
            yield Rule()
        elif token.type in ("fence", "code_block"):
            yield CodeBlockStart(language_extract(token.info))
            if token.content:
                yield Text(token.content)
            yield CodeBlockEnd()
        else:
            yield Passthrough(token)
