"""
Theme loader and manager for deck code highlighting.

A theme is a Pygments style. The merged theme set is built from:
  - every style bundled with Pygments
  - the theme files shipped in the package's assets/themes/
  - theme files found in user-supplied search directories (later
    directories override earlier ones; all override built-ins)

A theme file is <name>.yaml:

    background: "#2b303b"
    highlight: "#4f5b66"
    styles:
      Token: "#c0c5ce"
      Keyword: "#b48ead"
      Comment: "italic #65737e"
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type

from pygments.style import Style
from pygments.styles import get_all_styles, get_style_by_name
from pygments.token import STANDARD_TYPES, Token, _TokenType, string_to_tokentype
from pygments.util import ClassNotFound

from .errors import DeckIOError, ThemeLoadingError, ThemeNotFoundError
from .log import LOG


BUILTIN_THEMES_DIR: Path = Path(__file__).parent.parent / "assets" / "themes"
THEME_SUFFIXES = (".yaml", ".yml")


class Theme:
    """
    Represents a resolved colour theme.

    Wraps a Pygments style class; safe to share across concurrent renders
    since it is never mutated.
    """

    def __init__(self, name: str, style: Type[Style], source: Optional[Path] = None):
        """
        Args:
            name: Theme name as requested
            style: Pygments style class
            source: Theme file the style was loaded from (None for Pygments built-ins)
        """
        self.name = name
        self.style = style
        self.source = source

    @property
    def background(self) -> Optional[str]:
        """Background colour of code blocks, or None"""
        return self.style.background_color or None

    def tokenStyle_get(self, ttype: _TokenType) -> Dict[str, Any]:
        """Resolved style attributes (color, bold, italic, ...) for a token type"""
        return self.style.style_for_token(ttype)

    def __repr__(self) -> str:
        return f"Theme(name='{self.name}', source='{self.source or 'pygments'}')"


def tokenType_parse(name: str, path: Path) -> _TokenType:
    """
    Parse a token name from a theme file ("Keyword", "Name.Function", "Token").

    Raises:
        ThemeLoadingError: If the name is not a standard Pygments token type
    """
    if name == "Token":
        return Token
    if name.startswith("Token."):
        name = name[len("Token."):]
    try:
        ttype = string_to_tokentype(name)
    except AttributeError:
        raise ThemeLoadingError(path, f"unknown token type '{name}'")
    if ttype not in STANDARD_TYPES:
        raise ThemeLoadingError(path, f"unknown token type '{name}'")
    return ttype


def themeFile_load(path: Path) -> Type[Style]:
    """
    Load and validate a theme file into a Pygments style class.

    Args:
        path: Path to a <name>.yaml theme file

    Returns:
        Pygments Style subclass

    Raises:
        DeckIOError: If the file cannot be read
        ThemeLoadingError: If the file is not a valid theme
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ThemeLoadingError(path, f"invalid YAML: {e}")
    except OSError as e:
        raise DeckIOError(path, e)

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ThemeLoadingError(path, "expected a mapping at top level")

    styles_config = config.get('styles') or {}
    if not isinstance(styles_config, dict):
        raise ThemeLoadingError(path, "'styles' must be a mapping")

    styles: Dict[_TokenType, str] = {}
    for token_name, definition in styles_config.items():
        if not isinstance(definition, str):
            raise ThemeLoadingError(path, f"style for '{token_name}' must be a string")
        styles[tokenType_parse(str(token_name), path)] = definition

    attrs: Dict[str, Any] = {'styles': styles}
    if 'background' in config:
        attrs['background_color'] = str(config['background'])
    if 'highlight' in config:
        attrs['highlight_color'] = str(config['highlight'])

    # StyleMeta validates colour formats with assertions
    try:
        return type(path.stem, (Style,), attrs)
    except (AssertionError, ValueError, TypeError) as e:
        raise ThemeLoadingError(path, f"invalid style definition: {e}")


def themeFiles_scan(directory: Path) -> Dict[str, Path]:
    """
    Find theme files in a directory.

    Args:
        directory: Directory to scan (non-recursive)

    Returns:
        Mapping of theme name (file stem) to file path

    Raises:
        DeckIOError: If the directory cannot be listed
    """
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise DeckIOError(directory, e)

    found: Dict[str, Path] = {}
    for item in entries:
        if item.is_file() and item.suffix in THEME_SUFFIXES:
            found[item.stem] = item
    return found


class ThemeSet:
    """
    Merged set of available themes.

    Theme files (built-in and from search directories) are loaded eagerly,
    so a malformed file fails construction; Pygments styles are resolved
    on demand.
    """

    def __init__(self, theme_dirs: Iterable[Path] = ()):
        """
        Args:
            theme_dirs: Extra search directories, scanned in order

        Raises:
            DeckIOError: If a search directory cannot be read
            ThemeLoadingError: If a theme file is malformed
        """
        files: Dict[str, Path] = {}
        if BUILTIN_THEMES_DIR.is_dir():
            files.update(themeFiles_scan(BUILTIN_THEMES_DIR))
        for directory in theme_dirs:
            found = themeFiles_scan(Path(directory))
            LOG(f"Found {len(found)} theme file(s) in {directory}", level=2)
            files.update(found)

        self.styles: Dict[str, Type[Style]] = {}
        self.sources: Dict[str, Path] = {}
        for name, path in files.items():
            self.styles[name] = themeFile_load(path)
            self.sources[name] = path

    def names(self) -> List[str]:
        """All theme names in the merged set, sorted"""
        return sorted(set(get_all_styles()) | set(self.styles))

    def theme_get(self, name: str) -> Theme:
        """
        Resolve a theme by name.

        Raises:
            ThemeNotFoundError: If no theme of that name exists
        """
        if name in self.styles:
            return Theme(name, self.styles[name], self.sources[name])
        try:
            return Theme(name, get_style_by_name(name))
        except ClassNotFound:
            raise ThemeNotFoundError(name, self.names())


def themes_listAvailable(theme_dirs: Iterable[Path] = ()) -> List[str]:
    """
    List all available theme names.

    Args:
        theme_dirs: Extra search directories

    Returns:
        Sorted theme names (Pygments styles plus theme files)
    """
    return ThemeSet(theme_dirs).names()
