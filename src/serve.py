"""
deck-serve - live preview server

Serves a Markdown document as a slide deck, re-rendered on every request;
with --watch, open browser tabs reload whenever the document (or the
custom CSS/JS) is saved.

Usage:
    deck-serve talk.md --watch
    deck-serve talk.md --port 8080 --theme monokai --css extra.css
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import List, Optional

from . import __version__
from .config import appsettings
from .lib import LOG, state_connectToLogger, DeckError, start
from .models import ServerConfig


parser = ArgumentParser(
    prog="deck-serve",
    description="deck - live preview server for Markdown slide decks",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("input", type=Path, help="Markdown document to serve")

parser.add_argument("-p", "--port", default=appsettings.port, type=int, help="Listening port")

parser.add_argument("--host", default=appsettings.host, type=str, help="Listening interface")

parser.add_argument(
    "-w", "--watch", action="store_true", help="Reload open browser tabs when files change"
)

parser.add_argument(
    "--theme",
    default=None,
    type=str,
    help=f"Code highlighting theme (default: {appsettings.default_theme})",
)

parser.add_argument(
    "--themeDir",
    action="append",
    default=[],
    type=Path,
    help="Extra directory of YAML theme files (repeatable)",
)

parser.add_argument("--css", default=None, type=Path, help="Custom CSS file")

parser.add_argument("--js", default=None, type=Path, help="Custom JS file")

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def config_createFromNamespace(options: Namespace) -> ServerConfig:
    """Build a ServerConfig from parsed CLI arguments"""
    return ServerConfig(
        input=options.input,
        port=options.port,
        host=options.host,
        watch=options.watch,
        theme=options.theme,
        theme_dirs=tuple(options.themeDir),
        css=options.css,
        js=options.js,
        verbosity=options.verbosity,
    )


def main(argv: Optional[List[str]] = None) -> None:
    options = parser.parse_args(argv)
    config = config_createFromNamespace(options)
    state_connectToLogger(config)

    if not config.input.is_file():
        print(f"Error: Input file not found: {config.input}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Serving {config.input}", level=2)
    try:
        start(config)
    except DeckError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
