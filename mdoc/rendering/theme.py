"""Jinja2-backed default page rendering hooks.

A theme directory holds ``layout.html`` plus one page template per page kind
(``index.html`` for listings, ``doc.html`` for documents) and an ``assets/``
directory of static files.  Page templates extend the layout.  Templates are
loaded when the theme is loaded, so a broken theme stops the application at
startup rather than failing individual requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import jinja2

from mdoc.exceptions import RenderError, ThemeError

if TYPE_CHECKING:
    from collections.abc import Callable

    from mdoc.rendering.pages import DocumentPage, IndexPage

    IndexRenderer = Callable[[IndexPage], bytes]
    DocumentRenderer = Callable[[DocumentPage], bytes]

logger = logging.getLogger(__name__)

LAYOUT_TEMPLATE = "layout.html"
INDEX_TEMPLATE = "index.html"
DOCUMENT_TEMPLATE = "doc.html"


def _load_template(env: jinja2.Environment, theme_dir: Path, name: str) -> jinja2.Template:
    try:
        return env.get_template(name)
    except jinja2.TemplateNotFound as exc:
        raise ThemeError(f"Template {exc.name!r} not found in theme {theme_dir}") from exc
    except jinja2.TemplateSyntaxError as exc:
        raise ThemeError(
            f"Template {exc.name or name!r} in theme {theme_dir} is malformed "
            f"(line {exc.lineno}): {exc.message}"
        ) from exc


def _render(template: jinja2.Template, page: object) -> bytes:
    try:
        return template.render(page=page).encode("utf-8")
    except jinja2.TemplateError as exc:
        raise RenderError(f"Failed to render {template.name}: {exc}") from exc


@dataclass(frozen=True)
class Theme:
    """A loaded theme: its directory and the parsed page templates."""

    directory: Path
    index_template: jinja2.Template
    document_template: jinja2.Template

    @property
    def assets_dir(self) -> Path:
        return self.directory / "assets"

    @classmethod
    def load(cls, directory: str | Path) -> Theme:
        """Parse the theme templates in ``directory``.

        Raises:
            ThemeError: If a template is missing or does not parse.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise ThemeError(f"Theme directory does not exist: {directory}")
        env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(directory),
            autoescape=True,
            undefined=jinja2.StrictUndefined,
        )
        # Page templates only resolve the layout when rendered; check it up front
        _load_template(env, directory, LAYOUT_TEMPLATE)
        theme = cls(
            directory=directory,
            index_template=_load_template(env, directory, INDEX_TEMPLATE),
            document_template=_load_template(env, directory, DOCUMENT_TEMPLATE),
        )
        logger.info("Loaded theme from %s", directory)
        return theme

    def render_index(self, page: IndexPage) -> bytes:
        """Default IndexPage renderer."""
        return _render(self.index_template, page)

    def render_document(self, page: DocumentPage) -> bytes:
        """Default DocumentPage renderer."""
        return _render(self.document_template, page)
