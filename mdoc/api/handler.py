"""Request dispatcher: URL path -> redirect, listing, document or error."""

from __future__ import annotations

import logging
from datetime import UTC
from email.utils import formatdate, parsedate_to_datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from mdoc.exceptions import NotAMarkdownFileError
from mdoc.filesystem.entry import Action, Entry, open_entry, redirect_location
from mdoc.filesystem.listing import is_markdown_file, list_files
from mdoc.filesystem.paths import resolve_path
from mdoc.rendering.pages import build_document_page, build_index_page
from mdoc.site import SiteConfig  # noqa: TC001 (FastAPI resolves dependency annotations)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])

HTML_MEDIA_TYPE = "text/html"


def get_site(request: Request) -> SiteConfig:
    """Return the SiteConfig the application was created with."""
    return request.app.state.site


def _not_modified(request: Request, mtime: float) -> bool:
    """Whether the client's copy, per If-Modified-Since, is still current."""
    if "if-none-match" in request.headers:
        return False
    header = request.headers.get("if-modified-since")
    if not header:
        return False
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=UTC)
    # HTTP dates have whole-second precision
    return int(mtime) <= since.timestamp()


def serve_content(request: Request, body: bytes, name: str, mtime: float) -> Response:
    """Write rendered bytes with Last-Modified based conditional handling.

    ``name`` is the file the bytes were produced from; it only appears in logs.
    """
    headers = {"Last-Modified": formatdate(mtime, usegmt=True)}
    if _not_modified(request, mtime):
        logger.debug("Not modified: %s", name)
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)
    return Response(content=body, media_type=HTML_MEDIA_TYPE, headers=headers)


async def render_entry(site: SiteConfig, entry: Entry, path: str) -> bytes:
    """Produce the page bytes for a non-redirect entry.

    ``path`` is the full request path and becomes the page's logical path.
    """
    if entry.action is Action.RENDER_INDEX:
        files = await run_in_threadpool(list_files, entry.name)
        index_page = build_index_page(files, path, site.root, site.theme_dir)
        return site.index_renderer(index_page)

    if not is_markdown_file(entry.name):
        raise NotAMarkdownFileError(entry.name)
    # open() blocks on FIFOs and slow filesystems
    fh = await run_in_threadpool(open, entry.name, "rb")
    try:
        document_page = await build_document_page(
            fh, entry.name, path, site.root, site.converter, site.theme_dir
        )
    finally:
        fh.close()
    return site.document_renderer(document_page)


@router.api_route("/{url_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def serve(
    url_path: str,
    request: Request,
    site: Annotated[SiteConfig, Depends(get_site)],
) -> Response:
    """Serve a directory listing or a rendered Markdown document."""
    url = "/" + url_path
    name = resolve_path(site.content_dir, url)

    try:
        entry = await run_in_threadpool(open_entry, name, url)
    except (OSError, ValueError) as exc:
        # ValueError: the path contains a NUL byte
        return site.error_handler(request, exc)

    if entry.action.is_redirect:
        location = redirect_location(entry.action, url, request.url.query)
        logger.debug("Redirecting %s -> %s", request.url.path, location)
        return RedirectResponse(location, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    try:
        body = await render_entry(site, entry, request.url.path)
    except Exception as exc:
        return site.error_handler(request, exc)

    return serve_content(request, body, entry.name, entry.mtime)
