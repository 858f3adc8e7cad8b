"""Immutable per-application site configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from mdoc.api.errors import default_error_handler
from mdoc.config import normalize_root
from mdoc.rendering.markdown import make_converter
from mdoc.rendering.theme import Theme

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import Request
    from starlette.responses import Response

    from mdoc.config import Settings
    from mdoc.rendering.markdown import Converter
    from mdoc.rendering.theme import DocumentRenderer, IndexRenderer

    ErrorHandler = Callable[[Request, Exception], Response]


@dataclass(frozen=True)
class SiteConfig:
    """Everything a request needs, fixed when the application is created."""

    content_dir: Path
    root: str
    theme_dir: Path
    converter: Converter
    index_renderer: IndexRenderer
    document_renderer: DocumentRenderer
    error_handler: ErrorHandler

    @property
    def assets_dir(self) -> Path:
        return self.theme_dir / "assets"


def build_site_config(
    settings: Settings,
    *,
    content_dir: str | Path | None = None,
    root: str | None = None,
    theme_dir: str | Path | None = None,
    converter: Converter | None = None,
    index_renderer: IndexRenderer | None = None,
    document_renderer: DocumentRenderer | None = None,
    error_handler: ErrorHandler | None = None,
) -> SiteConfig:
    """Combine settings with explicit overrides into a SiteConfig.

    The theme templates are only loaded when at least one default renderer is
    needed; a ``ThemeError`` raised here is meant to abort startup.
    """
    resolved_theme_dir = Path(theme_dir) if theme_dir is not None else settings.theme_dir
    if index_renderer is None or document_renderer is None:
        theme = Theme.load(resolved_theme_dir)
        if index_renderer is None:
            index_renderer = theme.render_index
        if document_renderer is None:
            document_renderer = theme.render_document
    if converter is None:
        converter = make_converter(settings)

    base = Path(content_dir) if content_dir is not None else settings.content_dir
    return SiteConfig(
        content_dir=base.absolute(),
        root=normalize_root(root) if root is not None else settings.root,
        theme_dir=resolved_theme_dir,
        converter=converter,
        index_renderer=index_renderer,
        document_renderer=document_renderer,
        error_handler=error_handler or default_error_handler,
    )
