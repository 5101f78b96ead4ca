"""
deck - Markdown slide decks with live preview

Renders a Markdown document into a self-contained HTML slide deck and
optionally serves it with live reload.
"""

__version__ = "1.0.0"

from .lib import Renderer, document_render, start, LOG, state_connectToLogger

__all__ = ["Renderer", "document_render", "start", "LOG", "state_connectToLogger", "__version__"]
