"""Mapping of request URL paths onto the content directory."""

from __future__ import annotations

import os
import posixpath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def clean_url_path(url_path: str) -> str:
    """Normalize a URL path to start with "/" and lexically clean it.

    ``.`` and ``..`` segments are resolved and repeated slashes collapsed.
    ``..`` cannot climb above "/", so the result never escapes the root.
    """
    if not url_path.startswith("/"):
        url_path = "/" + url_path
    if url_path == "/":
        return url_path
    cleaned = posixpath.normpath(url_path)
    # normpath keeps a leading "//" as-is (POSIX allows it to be special)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def resolve_path(content_dir: str | Path, url_path: str) -> str:
    """Return the filesystem path that ``url_path`` maps to under ``content_dir``.

    No filesystem access happens here.  The URL is cleaned before it is joined
    onto the base directory, which neutralizes ``..`` traversal; symlinks inside
    the content directory are still followed when the path is opened.
    """
    name = os.fspath(content_dir)
    url_path = clean_url_path(url_path)
    if url_path != "/":
        name = name.rstrip("/") + url_path
    return name
