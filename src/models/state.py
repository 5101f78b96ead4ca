"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the build pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the build progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, title, theme,
          themeDir, css, js
        - env_check: inputSourceFile, cssFile, jsFile, htmlOutputdir, envOK
        - source_read: markdownSource, cssSource, jsSource
        - html_render: renderResult
        - output_write: outputFile
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the Markdown source
        outputdir: Directory where the document is written
        verbosity: Logging verbosity level (1-3)
        inputFile: Markdown filename relative to inputdir ("-" for stdin)
        title: Optional document title
        theme: Optional theme name
        themeDir: Extra theme search directories
        css: Optional custom stylesheet, relative to inputdir
        js: Optional custom script, relative to inputdir
        envOK: Environment validation passed
        inputSourceFile: Resolved Markdown path (None for stdin)
        cssFile: Resolved custom stylesheet path
        jsFile: Resolved custom script path
        htmlOutputdir: Final output directory
        markdownSource: Markdown text
        cssSource: Custom stylesheet text
        jsSource: Custom script text
        renderResult: RenderOutput of the render stage
        outputFile: Path of the written document (None for stdout)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    title: Optional[str] = field(default=None)
    theme: Optional[str] = field(default=None)
    themeDir: List[str] = field(default_factory=list)
    css: Optional[str] = field(default=None)
    js: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Optional[Path] = field(default=None)
    cssFile: Optional[Path] = field(default=None)
    jsFile: Optional[Path] = field(default=None)
    htmlOutputdir: Path = field(default=Path("/"))
    markdownSource: Optional[str] = field(default=None)
    cssSource: Optional[str] = field(default=None)
    jsSource: Optional[str] = field(default=None)
    renderResult: Optional[Any] = field(default=None)  # RenderOutput at runtime
    outputFile: Optional[Path] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, theme, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for build output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict: Dict[str, Any] = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown CLI attributes (e.g. listThemes) are not state
        filtered_options = {
            k: v for k, v in options_dict.items() if k in valid_fields and v is not None
        }

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def themeDirs_get(self) -> List[Path]:
        """Theme search directories as paths, in CLI order"""
        return [Path(d) for d in self.themeDir]

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_read,
            html_render,
            output_write,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
