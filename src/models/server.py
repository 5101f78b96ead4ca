"""
Preview server data models

Server configuration, the fixed watch target set and the push message
sent to browsers.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the preview server

    Attributes:
        input: Markdown document to serve
        port: Listening port
        host: Listening interface
        watch: Broadcast reload signals on file modification
        theme: Theme name (None selects the default)
        theme_dirs: Extra theme search directories
        css: Optional custom stylesheet appended to the built-in one
        js: Optional custom script appended to the built-in one
        verbosity: Logging verbosity level (1-3)
    """
    input: Path
    port: int = 3030
    host: str = "127.0.0.1"
    watch: bool = False
    theme: Optional[str] = None
    theme_dirs: Tuple[Path, ...] = field(default_factory=tuple)
    css: Optional[Path] = None
    js: Optional[Path] = None
    verbosity: int = 1


@dataclass(frozen=True)
class WatchTargets:
    """
    Files re-read on every render and watched for modification

    Computed once at server start from the ServerConfig.
    """
    input: Path
    css: Optional[Path] = None
    js: Optional[Path] = None

    @classmethod
    def config_resolve(cls, config: ServerConfig) -> "WatchTargets":
        """Resolve the configured paths to absolute paths"""
        return cls(
            input=config.input.resolve(),
            css=config.css.resolve() if config.css else None,
            js=config.js.resolve() if config.js else None,
        )

    def paths(self) -> List[Path]:
        """All configured paths, input first"""
        return [p for p in (self.input, self.css, self.js) if p is not None]


class PushMessage(BaseModel):
    """Message sent to browsers over the push channel"""
    type: Literal["reload"] = "reload"
