#!/usr/bin/env python3
"""
deck - Markdown slide deck builder

Renders a single Markdown document into a self-contained HTML slide deck
with syntax-highlighted code blocks and inlined, minified CSS/JS.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Plain Markdown: a thematic break (---) starts a new slide
    - Single-file output: one .md source -> one standalone HTML document
    - Themeable code: any Pygments style, or your own YAML theme file

Usage:
    deck inputdir/ outputdir/ --inputFile slides.md

    The deck is written to outputdir/index.html.

Examples:
    # Basic build
    deck . output/ --inputFile talk.md

    # Title, theme and custom assets
    deck . output/ --inputFile talk.md --title "My Talk" --theme monokai --css extra.css

    # Filter mode: Markdown on stdin, HTML on stdout
    deck . . --inputFile - < talk.md > talk.html

    # Live preview with reload on save
    deck-serve talk.md --watch
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from . import __version__
from .config import appsettings
from .lib import LOG, state_connectToLogger, DeckError, Renderer, themes_listAvailable
from .models import ProgramState, RenderOptions, pipeline


DISPLAY_TITLE = r"""
      _           _
   __| | ___  ___| | __
  / _` |/ _ \/ __| |/ /
 | (_| |  __/ (__|   <
  \__,_|\___|\___|_|\_\

  Markdown slide decks
"""

STDIN_MARKER = "-"

# Define CLI arguments
parser = ArgumentParser(
    description="deck - Markdown to self-contained HTML slide decks",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile",
    default="slides.md",
    type=str,
    help="Input Markdown file (relative to inputdir), or '-' to read stdin and write stdout",
)

parser.add_argument("--title", default=None, type=str, help="Document title")

parser.add_argument(
    "--theme",
    default=None,
    type=str,
    help=f"Code highlighting theme (default: {appsettings.default_theme})",
)

parser.add_argument(
    "--themeDir",
    action="append",
    default=None,
    type=str,
    help="Extra directory of YAML theme files (repeatable)",
)

parser.add_argument(
    "--css", default=None, type=str, help="Custom CSS file (relative to inputdir)"
)

parser.add_argument(
    "--js", default=None, type=str, help="Custom JS file (relative to inputdir)"
)

parser.add_argument(
    "--listThemes", action="store_true", help="List available themes and exit"
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved Markdown path (None for stdin)
            - cssFile / jsFile: Resolved custom asset paths
            - htmlOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the input file or a custom asset is not found
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    inputdir = state.inputdir or Path(".")

    if state.inputFile != STDIN_MARKER:
        input_file = inputdir / state.inputFile
        if not input_file.is_file():
            fail(f"Input file not found: {input_file}")
        state.inputSourceFile = input_file
        LOG(f"Input file: {input_file}", level=2)

    for attr, target in (("css", "cssFile"), ("js", "jsFile")):
        name = getattr(state, attr)
        if name:
            path = inputdir / name
            if not path.is_file():
                fail(f"Custom {attr} file not found: {path}")
            setattr(state, target, path)
            LOG(f"Custom {attr}: {path}", level=2)

    if state.inputSourceFile is not None:
        state.htmlOutputdir = state.outputdir or Path(".")
        state.htmlOutputdir.mkdir(parents=True, exist_ok=True)
        LOG(f"Output directory: {state.htmlOutputdir}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the Markdown source and any custom CSS/JS.

    Returns:
        ProgramState with markdownSource, cssSource, jsSource

    Exits:
        1 if a file cannot be read
    """
    state = inputstate.copy()

    LOG("Reading source...", level=1)
    try:
        if state.inputSourceFile is None:
            state.markdownSource = sys.stdin.read()
        else:
            state.markdownSource = state.inputSourceFile.read_text(encoding="utf-8")
        if state.cssFile:
            state.cssSource = state.cssFile.read_text(encoding="utf-8")
        if state.jsFile:
            state.jsSource = state.jsFile.read_text(encoding="utf-8")
    except OSError as e:
        fail(f"reading input: {e}")
    except UnicodeDecodeError as e:
        fail(f"reading input: not valid UTF-8 at byte {e.start}: {e.reason}")

    LOG(f"Read {len(state.markdownSource or '')} characters", level=2)
    return state


def html_render(inputstate: ProgramState) -> ProgramState:
    """
    Render the Markdown source into a slide deck.

    Returns:
        ProgramState with renderResult (RenderOutput)

    Exits:
        1 on theme resolution or minification failure
    """
    state = inputstate.copy()

    LOG("Rendering slides...", level=1)
    try:
        renderer = Renderer(
            RenderOptions(
                title=state.title,
                theme=state.theme,
                theme_dirs=tuple(state.themeDirs_get()),
            )
        )
        state.renderResult = renderer.render(
            state.markdownSource or "", state.cssSource, state.jsSource
        )
    except DeckError as e:
        fail(str(e))

    LOG(f"Rendered {state.renderResult.slide_count} slides", level=2)
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the document to outputdir, or to stdout in filter mode.

    Returns:
        ProgramState with outputFile (None for stdout)
    """
    state = inputstate.copy()

    document = state.renderResult.document_build()
    if state.inputSourceFile is None:
        sys.stdout.write(document)
        sys.stdout.flush()
        return state

    output_file = state.htmlOutputdir / appsettings.output_filename
    try:
        output_file.write_text(document, encoding="utf-8")
    except OSError as e:
        fail(f"writing output: {e}")
    state.outputFile = output_file
    LOG(f"Wrote {output_file}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display build results and usage instructions to user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()
    if state.outputFile is None:
        return state

    LOG("\n✓ Build successful!", level=1)
    LOG(f"  Output: {state.outputFile}", level=1)
    LOG(f"  Slides: {state.renderResult.slide_count}", level=1)
    LOG("\nTo preview with live reload:", level=1)
    LOG(f"  deck-serve {state.inputSourceFile} --watch", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="deck - Markdown slide decks",
    category="Visualization",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - build a slide deck from a Markdown source.

    Orchestrates the build pipeline:
        1. env_check: Validate paths and environment
        2. source_read: Read Markdown and custom assets
        3. html_render: Render slides
        4. output_write: Write index.html (or stdout)
        5. results_report: Display results to user
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    if options.listThemes:
        try:
            names = themes_listAvailable(state.themeDirs_get())
        except DeckError as e:
            fail(str(e))
        print("\n".join(names))
        return

    pipeline(state, env_check, source_read, html_render, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
