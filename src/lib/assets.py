"""
Asset inliner

Builds the <style> and <script> contents of a deck: the built-in asset
text, followed verbatim by the user's custom text, minified as a whole.
Custom rules come last, so they win CSS ties by source order.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

import rcssmin
import rjsmin
import tinycss2
from tinycss2.ast import ParseError

from .errors import MinificationError


ASSETS_DIR: Path = Path(__file__).parent.parent / "assets"

# Unquoted url() holding a quote or paren; the token ends at the next ")"
TOLERATED_PARSE_ERRORS = frozenset({"bad-url"})


@lru_cache(maxsize=None)
def asset_load(filename: str) -> str:
    """Built-in asset text (read once per process)"""
    return (ASSETS_DIR / filename).read_text(encoding="utf-8")


def parseErrors_find(nodes: Iterable[Any]) -> Iterator[ParseError]:
    """Every ParseError in a tinycss2 node tree, depth first"""
    for node in nodes or ():
        if isinstance(node, ParseError):
            yield node
            continue
        for attribute in ("prelude", "content", "arguments"):
            children = getattr(node, attribute, None)
            if isinstance(children, list):
                yield from parseErrors_find(children)


def stylesheet_check(css: str) -> None:
    """
    Reject stylesheets the minifier would mangle.

    Blocks left open at the end and trailing unclosed comments are
    recovered by CSS error handling and pass. A malformed url() token is
    dropped by the browser on its own and passes too.

    Raises:
        MinificationError: On the first parse error tinycss2 reports
    """
    nodes = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
    for error in parseErrors_find(nodes):
        if error.kind in TOLERATED_PARSE_ERRORS:
            continue
        raise MinificationError(
            f"{error.kind}: {error.message} (line {error.source_line}, column {error.source_column})"
        )


def style_build(custom_css: Optional[str] = None) -> str:
    """
    Built-in stylesheet plus custom CSS, minified.

    Raises:
        MinificationError: If the combined stylesheet is malformed
    """
    style = asset_load("style.css")
    if custom_css:
        style += custom_css
    stylesheet_check(style)
    return rcssmin.cssmin(style)


def script_build(custom_js: Optional[str] = None) -> str:
    """Built-in script plus custom JS, minified (never fails)"""
    script = asset_load("script.js")
    if custom_js:
        script += "\n" + custom_js
    return rjsmin.jsmin(script)
