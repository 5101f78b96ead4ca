"""
Theme/syntax registry

Loads the syntax set and resolves the requested theme once; the result is
read-only and shared by every render.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ..config import appsettings
from .log import LOG
from .syntax import SyntaxSet
from .theme import Theme, ThemeSet


@dataclass(frozen=True)
class HighlightRegistry:
    """Resolved syntax set and theme"""
    syntaxes: SyntaxSet
    theme: Theme

    @classmethod
    def registry_create(
        cls, theme_name: Optional[str] = None, theme_dirs: Iterable[Path] = ()
    ) -> "HighlightRegistry":
        """
        Load the syntax set and resolve a theme.

        Args:
            theme_name: Requested theme; None selects appsettings.default_theme
            theme_dirs: Extra theme search directories

        Raises:
            ThemeNotFoundError: Theme name absent from the merged set
            ThemeLoadingError: A theme file is malformed
            DeckIOError: A search directory cannot be read
        """
        themes = ThemeSet(theme_dirs)
        theme = themes.theme_get(theme_name or appsettings.default_theme)
        LOG(f"Loaded theme: {theme!r}", level=2)
        return cls(syntaxes=SyntaxSet(), theme=theme)
