"""
Rendering data models

Options consumed by the Renderer and the structured output it produces.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class RenderOptions:
    """
    Options fixed when a Renderer is constructed

    Attributes:
        title: Document title, passed through untouched (None omits <title>)
        theme: Theme name; None selects appsettings.default_theme
        theme_dirs: Extra theme search directories, scanned in order
    """
    title: Optional[str] = None
    theme: Optional[str] = None
    theme_dirs: Tuple[Path, ...] = field(default_factory=tuple)


@dataclass
class RenderOutput:
    """
    Result of a single render call

    Produced fresh on every render; build_document() (or str()) serializes
    it to the final HTML document.

    Attributes:
        title: Pass-through title
        style: Minified built-in + custom CSS
        script: Minified built-in + custom JS
        body: Slide-segmented HTML body
        slide_count: Number of slide containers in body
    """
    title: Optional[str]
    style: str
    script: str
    body: str
    slide_count: int = 1

    def document_build(self) -> str:
        """Assemble the standalone HTML document"""
        title = f"<title>{self.title}</title>" if self.title is not None else ""
        return (
            "<html><head>"
            '<meta charset="utf-8">'
            f"{title}"
            f"<style>{self.style}</style>"
            f'<script type="text/javascript">{self.script}</script>'
            "</head>"
            f"<body>{self.body}</body>"
            "</html>"
        )

    def __str__(self) -> str:
        return self.document_build()
