"""
Renderer for Markdown slide decks

Transforms Markdown into a slide-segmented, syntax-highlighted HTML body
plus inlined, minified CSS/JS.

The pipeline is a single pass over the structural events of the source:

    events_parse()      Markdown -> events (markdown-it)
    events_highlight()  slide breaks + code highlighting (state machine)
    html_push()         events -> HTML (standard renderer for the rest)

Each thematic break closes the current slide container and opens a new
one; the whole body is wrapped in an initial open and a final close, so a
source with n thematic breaks yields n+1 slides.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.token import Token

from ..models.events import CodeBlockEnd, CodeBlockStart, Event, Html, Passthrough, Rule, Text
from ..models.render import RenderOptions, RenderOutput
from .assets import script_build, style_build
from .highlight import IncludeBackground, LineHighlighter, snippet_start, spans_toHtml
from .log import LOG
from .parser import events_parse, markdownParser_make
from .registry import HighlightRegistry


SLIDE_OPEN = '<div class="slide"><div class="content">'
SLIDE_CLOSE = '</div></div>'
SLIDE_BREAK = SLIDE_CLOSE + SLIDE_OPEN


@dataclass(frozen=True)
class HighlightInactive:
    """Outside a code block, or inside one with no known grammar"""
    pass


@dataclass(frozen=True)
class HighlightActive:
    """Inside a code block whose language resolved to a grammar"""
    language: str
    highlighter: LineHighlighter


HighlightState = Union[HighlightInactive, HighlightActive]

INACTIVE = HighlightInactive()


def event_highlight(
    state: HighlightState, event: Event, registry: HighlightRegistry
) -> Tuple[HighlightState, Event]:
    """
    One step of the slide/highlight state machine.

    Args:
        state: Current highlight state
        event: Next structural event
        registry: Syntax set and theme

    Returns:
        (next state, event to emit in place of the input event)
    """
    if isinstance(event, Rule):
        return state, Html(SLIDE_BREAK)

    if isinstance(event, CodeBlockStart):
        snippet = Html(snippet_start(registry.theme))
        syntax = registry.syntaxes.syntax_findByToken(event.language)
        if syntax is None:
            if event.language:
                LOG(f"No grammar for '{event.language}', rendering as plain text", level=3)
            return INACTIVE, snippet
        return HighlightActive(event.language, LineHighlighter(syntax, registry.theme)), snippet

    if isinstance(event, CodeBlockEnd):
        return INACTIVE, Html("</pre>")

    if isinstance(event, Text) and isinstance(state, HighlightActive):
        spans = state.highlighter.highlight(event.text)
        return state, Html(spans_toHtml(spans, IncludeBackground.NO))

    return state, event


def events_highlight(events: Iterable[Event], registry: HighlightRegistry) -> Iterator[Event]:
    """Fold event_highlight() over an event sequence, lazily"""
    state: HighlightState = INACTIVE
    for event in events:
        state, emitted = event_highlight(state, event, registry)
        yield emitted


def html_push(md: MarkdownIt, events: Iterable[Event], env: Dict[str, Any]) -> str:
    """
    Render events to HTML.

    Runs of Passthrough tokens go through markdown-it's own renderer;
    Html is emitted verbatim and Text is escaped. Rules and code block
    boundaries must already have been turned into Html by
    events_highlight().
    """
    parts: List[str] = []
    pending: List[Token] = []

    def pending_flush() -> None:
        if pending:
            parts.append(md.renderer.render(pending, md.options, env))
            pending.clear()

    for event in events:
        if isinstance(event, Passthrough):
            pending.append(event.token)
            continue
        pending_flush()
        if isinstance(event, Html):
            parts.append(event.html)
        elif isinstance(event, Text):
            parts.append(escapeHtml(event.text))
        else:
            raise TypeError(f"html_push expects highlighted events, got {event!r}")
    pending_flush()
    return "".join(parts)


class Renderer:
    """
    Renders Markdown documents into slide decks

    Holds the resolved syntax set and theme, loaded once at construction
    and shared read-only by every render call.
    """

    def __init__(self, options: Optional[RenderOptions] = None) -> None:
        """
        Args:
            options: Title, theme name and theme search directories

        Raises:
            ThemeNotFoundError, ThemeLoadingError, DeckIOError: On theme
                resolution failure (fail fast)
        """
        self.options = options or RenderOptions()
        self.registry = HighlightRegistry.registry_create(
            self.options.theme, self.options.theme_dirs
        )
        self.md = markdownParser_make()

    def body_render(self, source: str) -> Tuple[str, int]:
        """
        Render the slide body.

        Returns:
            (HTML body, number of slide containers)
        """
        env: Dict[str, Any] = {}
        rules = 0

        def rules_count(events: Iterable[Event]) -> Iterator[Event]:
            nonlocal rules
            for event in events:
                if isinstance(event, Rule):
                    rules += 1
                yield event

        events = rules_count(events_parse(self.md, source, env))
        body = html_push(self.md, events_highlight(events, self.registry), env)
        return SLIDE_OPEN + body + SLIDE_CLOSE, rules + 1

    def render(
        self, source: str, css: Optional[str] = None, js: Optional[str] = None
    ) -> RenderOutput:
        """
        Render a Markdown document.

        Args:
            source: Markdown text
            css: Custom CSS appended to the built-in stylesheet
            js: Custom JS appended to the built-in script

        Returns:
            RenderOutput (title, style, script, body)

        Raises:
            MinificationError: If the combined stylesheet cannot be minified
        """
        body, slide_count = self.body_render(source)
        LOG(f"Rendered {slide_count} slide(s)", level=3)
        return RenderOutput(
            title=self.options.title,
            style=style_build(css),
            script=script_build(js),
            body=body,
            slide_count=slide_count,
        )


def document_render(
    markdown_text: str,
    title: Optional[str] = None,
    theme: Optional[str] = None,
    theme_dirs: Iterable[Path] = (),
    css_text: Optional[str] = None,
    js_text: Optional[str] = None,
) -> str:
    """
    Render Markdown straight to a standalone HTML document.

    Example:
        >>> html = document_render("# A\\n\\n---\\n\\n# B", title="Demo")
        >>> html.count('<div class="slide">')
        2
    """
    options = RenderOptions(title=title, theme=theme, theme_dirs=tuple(Path(d) for d in theme_dirs))
    return Renderer(options).render(markdown_text, css_text, js_text).document_build()
