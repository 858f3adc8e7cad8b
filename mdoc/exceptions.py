"""Application-level exception types.

Convention:
- ``NotAMarkdownFileError``: the entry exists but is not eligible for document
  rendering.  The default error handler treats it exactly like a missing file
  and answers 404.
- ``RenderError``: a page rendering hook or the Markdown converter failed for
  a single request.  Answered with a generic 500.
- ``ThemeError``: the theme directory is missing a template or a template does
  not parse.  Raised while the application is being created and never reaches
  the request path.

Filesystem failures (``FileNotFoundError``, ``PermissionError`` and other
``OSError`` subclasses) are not wrapped; they travel to the error handler as-is.
"""

from __future__ import annotations


class MdocError(Exception):
    """Base class for mdoc errors."""


class NotAMarkdownFileError(MdocError):
    """Raised when a requested file does not have a Markdown extension."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"mdoc: file not found: {name}")


class RenderError(MdocError, RuntimeError):
    """Raised when a page or Markdown document cannot be rendered."""


class ThemeError(MdocError):
    """Raised at startup when the theme templates cannot be loaded."""
