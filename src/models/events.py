"""
Structural event models

The Markdown source is turned into a one-shot sequence of these events.
Events the slide transform does not care about wrap a markdown-it Token
and are rendered by the standard Markdown-to-HTML renderer.
"""

from dataclasses import dataclass
from typing import Union, TYPE_CHECKING

if TYPE_CHECKING:
    from markdown_it.token import Token


@dataclass(frozen=True)
class Passthrough:
    """A block token rendered by the standard Markdown renderer"""
    token: 'Token'


@dataclass(frozen=True)
class Rule:
    """Thematic break (slide separator)"""
    pass


@dataclass(frozen=True)
class CodeBlockStart:
    """
    Start of a fenced or indented code block

    Attributes:
        language: First word of the fence info string ("" when absent)
    """
    language: str


@dataclass(frozen=True)
class CodeBlockEnd:
    """End of the current code block"""
    pass


@dataclass(frozen=True)
class Text:
    """Raw text inside a code block; HTML-escaped when rendered"""
    text: str


@dataclass(frozen=True)
class Html:
    """Pre-rendered HTML emitted verbatim"""
    html: str


Event = Union[Passthrough, Rule, CodeBlockStart, CodeBlockEnd, Text, Html]
