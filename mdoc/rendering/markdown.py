"""Markdown to HTML converters.

A converter is an async callable taking the raw bytes of a Markdown document
and returning the HTML fragment as UTF-8 bytes.  Two engines are provided:
Python-Markdown (the default, pure Python) and pandoc (GitHub-flavored input,
requires the ``pandoc`` binary on PATH).
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from typing import TYPE_CHECKING

import markdown

from mdoc.exceptions import RenderError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from mdoc.config import Settings

    Converter = Callable[[bytes], Awaitable[bytes]]

logger = logging.getLogger(__name__)


DEFAULT_EXTENSIONS: tuple[str, ...] = ("fenced_code", "codehilite", "tables", "toc", "sane_lists")
DEFAULT_EXTENSION_CONFIGS: dict[str, dict[str, object]] = {
    "codehilite": {"css_class": "highlight", "guess_lang": False},
}


class MarkdownConverter:
    """Python-Markdown engine with GitHub-like extensions."""

    def __init__(
        self,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
        extension_configs: dict[str, dict[str, object]] | None = None,
    ) -> None:
        self._extensions = list(extensions)
        if extension_configs is None:
            extension_configs = DEFAULT_EXTENSION_CONFIGS
        self._extension_configs = extension_configs

    def convert(self, raw: bytes) -> bytes:
        """Convert synchronously.

        A fresh ``markdown.Markdown`` instance (and fresh extension objects) is
        built per call; both keep per-document state.
        """
        text = raw.decode("utf-8", errors="replace")
        md = markdown.Markdown(
            extensions=self._extensions,
            extension_configs=self._extension_configs,
        )
        return md.convert(text).encode("utf-8")

    async def __call__(self, raw: bytes) -> bytes:
        return await asyncio.to_thread(self.convert, raw)


_PANDOC_ARGS = ("-f", "gfm", "-t", "html5", "--wrap=none")


class PandocConverter:
    """pandoc engine, one subprocess per document.

    Args:
        timeout: Seconds to wait for pandoc before giving up.
        executable: Name or path of the pandoc binary.
    """

    def __init__(self, timeout: float = 10.0, executable: str = "pandoc") -> None:
        if timeout <= 0:
            msg = f"timeout must be > 0, got {timeout}"
            raise ValueError(msg)
        self._timeout = timeout
        self._executable = executable

    def check(self) -> None:
        """Verify that the pandoc binary is available.

        Raises:
            RenderError: If pandoc cannot be found on PATH.
        """
        if shutil.which(self._executable) is None:
            raise RenderError(
                "Pandoc is not installed. Install pandoc or set MDOC_MARKDOWN_ENGINE=markdown. "
                "See https://pandoc.org/installing.html"
            )
        logger.info("Using pandoc at %s", shutil.which(self._executable))

    async def __call__(self, raw: bytes) -> bytes:
        try:
            proc = await asyncio.create_subprocess_exec(
                self._executable,
                *_PANDOC_ARGS,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise RenderError("Pandoc is not installed") from None
        except OSError as exc:
            raise RenderError(f"Failed to start pandoc: {exc}") from None

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(raw), timeout=self._timeout)
        except TimeoutError:
            logger.warning("Pandoc did not finish after %.1fs, killing", self._timeout)
            proc.kill()
            await proc.wait()
            raise RenderError(f"Pandoc rendering timed out after {self._timeout}s") from None

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace")[:200]
            logger.warning("Pandoc exited with code %s: %s", proc.returncode, detail)
            raise RenderError(f"Pandoc failed (exit code {proc.returncode}): {detail}")
        return stdout


def make_converter(settings: Settings) -> Converter:
    """Build the converter selected by ``settings.markdown_engine``."""
    if settings.markdown_engine == "pandoc":
        converter = PandocConverter(timeout=settings.pandoc_timeout)
        converter.check()
        return converter
    return MarkdownConverter()
