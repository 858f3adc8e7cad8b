"""Shared test fixtures for mdoc."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from mdoc.config import Settings
from mdoc.main import create_app

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

    from fastapi import FastAPI


@asynccontextmanager
async def create_test_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an HTTP test client for ``app``; redirects are not followed."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def tmp_content_dir(tmp_path: Path) -> Path:
    """Create a content tree exercising listings, documents and index files.

    content/
        hello.md
        image.png
        docs/
            api/
            guide.md
            internal.md
            .draft.md
            notes.txt
        notes/
            index.md
            extra.md
        empty/
    """
    content = tmp_path / "content"
    content.mkdir()
    (content / "hello.md").write_text("# Hello\n\nWelcome to *mdoc*.\n")
    (content / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n")

    docs = content / "docs"
    docs.mkdir()
    (docs / "api").mkdir()
    (docs / "guide.md").write_text("# Guide\n")
    (docs / "internal.md").write_text("# Internal\n")
    (docs / ".draft.md").write_text("# Draft\n\nNot listed.\n")
    (docs / "notes.txt").write_text("plain text")

    notes = content / "notes"
    notes.mkdir()
    (notes / "index.md").write_text("# Notes index\n")
    (notes / "extra.md").write_text("# Extra\n")

    (content / "empty").mkdir()
    return content


@pytest.fixture
def test_settings(tmp_content_dir: Path) -> Settings:
    """Create settings rooted at the temporary content tree."""
    return Settings(_env_file=None, content_dir=tmp_content_dir)


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(settings=test_settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with create_test_client(app) as ac:
        yield ac


@pytest.fixture
def theme_dir(tmp_path: Path) -> Path:
    """A minimal valid theme whose output is easy to assert on."""
    theme = tmp_path / "theme"
    theme.mkdir()
    (theme / "assets").mkdir()
    (theme / "assets" / "site.css").write_text("body {}")
    (theme / "layout.html").write_text(
        "<html><body data-dir=\"{{ page.dir }}\">{% block content %}{% endblock %}</body></html>"
    )
    (theme / "index.html").write_text(
        '{% extends "layout.html" %}{% block content %}'
        "{% for f in page.files %}[{{ f.display_name }}]{% endfor %}"
        "{% endblock %}"
    )
    (theme / "doc.html").write_text(
        '{% extends "layout.html" %}{% block content %}'
        "<h1>{{ page.name }}</h1>{{ page.content }}"
        "{% endblock %}"
    )
    return theme
