"""
Models package for deck

Contains data structures and type definitions for rendering and serving.
"""

from .state import ProgramState, pipeline
from .render import RenderOptions, RenderOutput
from .server import ServerConfig, WatchTargets, PushMessage
from . import events

__all__ = [
    "ProgramState",
    "pipeline",
    "RenderOptions",
    "RenderOutput",
    "ServerConfig",
    "WatchTargets",
    "PushMessage",
    "events",
]
