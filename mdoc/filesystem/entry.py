"""Classification of a resolved filesystem entry into a response action."""

from __future__ import annotations

import enum
import os
import posixpath
import stat
from dataclasses import dataclass

INDEX_DOCUMENT = "index.md"


class Action(enum.Enum):
    """What the dispatcher does with an opened entry."""

    REDIRECT_ADD_SLASH = "redirect-add-slash"
    REDIRECT_REMOVE_SLASH = "redirect-remove-slash"
    RENDER_INDEX = "render-index"
    RENDER_DOCUMENT = "render-document"
    RENDER_IMPLICIT_INDEX = "render-implicit-index"

    @property
    def is_redirect(self) -> bool:
        return self in (Action.REDIRECT_ADD_SLASH, Action.REDIRECT_REMOVE_SLASH)


def classify(url: str, *, is_dir: bool, has_index: bool = False) -> Action:
    """Pick the action for an entry reached through ``url``.

    ``has_index`` is only consulted for a directory URL that ends in "/" and
    tells whether ``index.md`` inside it could be opened.
    """
    trailing_slash = url.endswith("/")
    if is_dir:
        if not trailing_slash:
            return Action.REDIRECT_ADD_SLASH
        if has_index:
            return Action.RENDER_IMPLICIT_INDEX
        return Action.RENDER_INDEX
    if trailing_slash:
        return Action.REDIRECT_REMOVE_SLASH
    return Action.RENDER_DOCUMENT


def redirect_location(action: Action, url: str, query: str = "") -> str:
    """Relative ``Location`` for a redirect action, keeping the query string."""
    base = posixpath.basename(url.rstrip("/")) if url != "/" else ""
    if action is Action.REDIRECT_ADD_SLASH:
        location = base + "/"
    elif action is Action.REDIRECT_REMOVE_SLASH:
        location = "../" + base
    else:
        msg = f"{action} is not a redirect"
        raise ValueError(msg)
    if query:
        location += "?" + query
    return location


@dataclass(frozen=True)
class Entry:
    """An opened filesystem entry selected for a request."""

    name: str
    mtime: float
    is_dir: bool
    action: Action


_OPEN_FLAGS = os.O_RDONLY | getattr(os, "O_NONBLOCK", 0)


def _open_stat(name: str) -> os.stat_result:
    """Open ``name`` read-only and return its status.

    Non-blocking so that a FIFO does not hang the probe; nothing is read.
    """
    fd = os.open(name, _OPEN_FLAGS)
    try:
        return os.fstat(fd)
    finally:
        os.close(fd)


def _index_stat(directory: str) -> os.stat_result | None:
    try:
        st = _open_stat(os.path.join(directory, INDEX_DOCUMENT))
    except OSError:
        return None
    if stat.S_ISDIR(st.st_mode):
        return None
    return st


def open_entry(name: str, url: str) -> Entry:
    """Open ``name`` and classify it for ``url``.

    Raises the ``OSError`` of the open unchanged, before any redirect is
    decided.  A directory whose ``index.md`` can be opened is reported as
    that file.
    """
    st = _open_stat(name)
    is_dir = stat.S_ISDIR(st.st_mode)
    if is_dir and url.endswith("/"):
        index_st = _index_stat(name)
        if index_st is not None:
            return Entry(
                name=os.path.join(name, INDEX_DOCUMENT),
                mtime=index_st.st_mtime,
                is_dir=False,
                action=classify(url, is_dir=True, has_index=True),
            )
    return Entry(
        name=name,
        mtime=st.st_mtime,
        is_dir=is_dir,
        action=classify(url, is_dir=is_dir),
    )
