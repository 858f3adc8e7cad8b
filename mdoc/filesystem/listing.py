"""Directory listing for index pages."""

from __future__ import annotations

import os
from dataclasses import dataclass

MARKDOWN_EXTENSIONS: tuple[str, ...] = (".md", ".markdown")
HIDDEN_PREFIX = "."


def is_markdown_file(name: str) -> bool:
    """Whether ``name`` ends in a Markdown extension (case-sensitive).

    The extension starts at the last dot of the base name, so ``.md`` itself
    counts.
    """
    base = os.path.basename(name)
    dot = base.rfind(".")
    return dot >= 0 and base[dot:] in MARKDOWN_EXTENSIONS


@dataclass(frozen=True)
class File:
    """A directory entry shown on an index page."""

    name: str
    is_dir: bool = False

    @property
    def display_name(self) -> str:
        """The file name with a trailing slash for directories."""
        if self.is_dir:
            return self.name + "/"
        return self.name


def _sort_key(f: File) -> tuple[bool, str]:
    return (not f.is_dir, f.name)


def list_files(directory: str | os.PathLike[str]) -> list[File]:
    """Return the visible entries of ``directory``, directories first.

    Hidden entries (leading dot) are skipped, as are files without a Markdown
    extension.  Each group is ordered by name.  ``OSError`` from reading the
    directory propagates unchanged.
    """
    files: list[File] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            f = File(name=entry.name, is_dir=entry.is_dir())
            if f.name.startswith(HIDDEN_PREFIX):
                continue
            if not f.is_dir and not is_markdown_file(f.name):
                continue
            files.append(f)
    files.sort(key=_sort_key)
    return files
