"""
Exception hierarchy for deck

Every failure the renderer, the registry or the server can report derives
from DeckError, so callers at a boundary (CLI stage, HTTP handler) can
catch one type.
"""

from pathlib import Path
from typing import Iterable, Optional


class DeckError(Exception):
    """Base class for all deck failures"""
    pass


class DeckIOError(DeckError):
    """Raised when a file cannot be read or watched"""

    def __init__(self, path: Optional[Path], cause: OSError) -> None:
        self.path = path
        self.cause = cause
        where = f" on '{path}'" if path is not None else ""
        super().__init__(f"I/O error{where}: {cause.strerror or cause}")



class DeckDecodeError(DeckError):
    """Raised when a file is not valid UTF-8"""

    def __init__(self, path: Optional[Path], cause: UnicodeDecodeError) -> None:
        self.path = path
        self.cause = cause
        where = f" in '{path}'" if path is not None else ""
        super().__init__(f"Invalid UTF-8{where} at byte {cause.start}: {cause.reason}")

class MinificationError(DeckError):
    """Raised when an inlined asset cannot be minified"""

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"Minification failed: {description}")


class ThemeError(DeckError):
    """Raised when theme loading or resolution fails"""
    pass


class ThemeNotFoundError(ThemeError):
    """Raised when the requested theme name is absent from the merged theme set"""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = sorted(available)
        message = f"Theme '{name}' not found"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class ThemeLoadingError(ThemeError):
    """Raised when a theme file is malformed"""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load theme file {path}: {reason}")


class SerializationError(DeckError):
    """Raised when a push message cannot be encoded"""
    pass
