"""FastAPI application entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from mdoc.api.handler import router as documents_router
from mdoc.config import Settings
from mdoc.rendering.pages import ASSETS_SEGMENT
from mdoc.site import build_site_config

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mdoc.rendering.markdown import Converter
    from mdoc.rendering.theme import DocumentRenderer, IndexRenderer
    from mdoc.site import ErrorHandler

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("markdown").setLevel(logging.WARNING)


def create_app(
    content_dir: str | Path | None = None,
    *,
    settings: Settings | None = None,
    root: str | None = None,
    theme_dir: str | Path | None = None,
    converter: Converter | None = None,
    index_renderer: IndexRenderer | None = None,
    document_renderer: DocumentRenderer | None = None,
    error_handler: ErrorHandler | None = None,
) -> FastAPI:
    """Create an application that renders the Markdown tree in ``content_dir``.

    Every keyword overrides the matching field of ``settings``.  Raises
    ``ThemeError`` when a default renderer is needed and the theme is broken.
    """
    if settings is None:
        settings = Settings()

    site = build_site_config(
        settings,
        content_dir=content_dir,
        root=root,
        theme_dir=theme_dir,
        converter=converter,
        index_renderer=index_renderer,
        document_renderer=document_renderer,
        error_handler=error_handler,
    )

    app = FastAPI(
        title="mdoc",
        description="Browse a directory of Markdown documents",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.site = site

    # The assets mount must precede the catch-all document route
    app.mount(
        f"{site.root}{ASSETS_SEGMENT}",
        StaticFiles(directory=site.assets_dir, check_dir=False),
        name="assets",
    )
    app.include_router(documents_router, prefix=site.root.rstrip("/"))

    logger.info(
        "Serving %s at %s (theme %s)",
        site.content_dir,
        site.root,
        site.theme_dir,
    )
    return app


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdoc",
        description="Serve a directory of Markdown documents as a website",
    )
    parser.add_argument("dir", nargs="?", default=None, help="Content directory (default: .)")
    parser.add_argument("--host", default=None, help="Address to listen on (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: 3000)")
    parser.add_argument("--theme", default=None, help="Theme directory (default: bundled theme)")
    parser.add_argument("--root", default=None, help="URL path to mount at (default: /)")
    parser.add_argument(
        "--engine",
        choices=("markdown", "pandoc"),
        default=None,
        help="Markdown engine (default: markdown)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def cli_entry(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for running the server."""
    import uvicorn

    args = _build_parser().parse_args(argv)
    overrides = {
        "content_dir": args.dir,
        "host": args.host,
        "port": args.port,
        "theme_dir": args.theme,
        "root": args.root,
        "markdown_engine": args.engine,
    }
    settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    if args.debug:
        settings = settings.model_copy(update={"debug": True})

    configure_logging(settings.debug)
    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    cli_entry()
