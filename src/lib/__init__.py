"""
deck - Markdown slide decks with live preview

Rendering pipeline, theme/syntax registry, push connection registry,
file watcher and preview server.
"""

__version__ = "1.0.0"

from .errors import (
    DeckError,
    DeckIOError,
    DeckDecodeError,
    MinificationError,
    ThemeError,
    ThemeNotFoundError,
    ThemeLoadingError,
    SerializationError,
)
from .log import LOG, state_connectToLogger
from .theme import Theme, ThemeSet, themes_listAvailable
from .syntax import SyntaxSet
from .registry import HighlightRegistry
from .renderer import Renderer, document_render
from .connections import ConnectionRegistry, Channel
from .watcher import FileWatcher, ChangeEvent
from .server import app_create, serve, start

__all__ = [
    "DeckError",
    "DeckIOError",
    "DeckDecodeError",
    "MinificationError",
    "ThemeError",
    "ThemeNotFoundError",
    "ThemeLoadingError",
    "SerializationError",
    "LOG",
    "state_connectToLogger",
    "Theme",
    "ThemeSet",
    "themes_listAvailable",
    "SyntaxSet",
    "HighlightRegistry",
    "Renderer",
    "document_render",
    "ConnectionRegistry",
    "Channel",
    "FileWatcher",
    "ChangeEvent",
    "app_create",
    "serve",
    "start",
    "__version__",
]
