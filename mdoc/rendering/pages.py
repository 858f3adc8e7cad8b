"""Page data handed to the rendering hooks."""

from __future__ import annotations

import asyncio
import logging
import os
import posixpath
from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING

from markupsafe import Markup

from mdoc.exceptions import NotAMarkdownFileError
from mdoc.filesystem.listing import File, is_markdown_file

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from mdoc.rendering.markdown import Converter

logger = logging.getLogger(__name__)

ASSETS_SEGMENT = ".mdoc/assets"


@dataclass(frozen=True)
class Layout:
    """Page data shared by index and document pages.

    ``path`` is the full request path, mount prefix included.
    """

    root: str
    path: str
    theme: Path | None = field(default=None, repr=False)

    @property
    def dir(self) -> str:
        """Path of the current directory relative to the mount prefix."""
        return "/" + self.path.removeprefix(self.root).lstrip("/")

    def static_file(self, name: str) -> str:
        """URL of a theme asset."""
        return posixpath.join(self.root, ASSETS_SEGMENT, name)


@dataclass(frozen=True)
class IndexPage(Layout):
    """Data used to render a directory listing."""

    files: tuple[File, ...] = ()


@dataclass(frozen=True)
class DocumentPage(Layout):
    """Data used to render a single Markdown document.

    ``content`` is already HTML and is not escaped again by templates.
    """

    name: str = ""
    content: Markup = field(default_factory=Markup)


def build_index_page(
    files: Iterable[File], path: str, root: str, theme: Path | None = None
) -> IndexPage:
    """Assemble an IndexPage from an already filtered and ordered listing."""
    return IndexPage(root=root, path=path, theme=theme, files=tuple(files))


async def build_document_page(
    fh: IO[bytes],
    name: str,
    path: str,
    root: str,
    converter: Converter,
    theme: Path | None = None,
) -> DocumentPage:
    """Read a Markdown file and convert it into a DocumentPage.

    Raises:
        NotAMarkdownFileError: If ``name`` has no Markdown extension.
        OSError: If the file cannot be read.
        RenderError: If the converter fails.
    """
    if not is_markdown_file(name):
        raise NotAMarkdownFileError(name)
    raw = await asyncio.to_thread(fh.read)
    html = await converter(raw)
    logger.debug("Converted %s (%d bytes -> %d bytes)", name, len(raw), len(html))
    return DocumentPage(
        root=root,
        path=path,
        theme=theme,
        name=os.path.basename(name),
        content=Markup(html.decode("utf-8")),
    )
