"""Default mapping of request failures to HTTP responses."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING

from fastapi import status
from fastapi.responses import PlainTextResponse

from mdoc.exceptions import NotAMarkdownFileError

if TYPE_CHECKING:
    from fastapi import Request

logger = logging.getLogger(__name__)


def status_for_error(exc: BaseException) -> int:
    """HTTP status code the default policy assigns to ``exc``."""
    if isinstance(exc, (NotAMarkdownFileError, FileNotFoundError, NotADirectoryError)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, PermissionError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int) -> PlainTextResponse:
    """Plain-text response carrying only the standard reason phrase."""
    return PlainTextResponse(HTTPStatus(status_code).phrase, status_code=status_code)


def default_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Respond with a plain-text status message.

    Exception details are logged server-side and never sent to the client.
    """
    code = status_for_error(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "%s in %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
    else:
        logger.debug("%s %s -> %d (%s)", request.method, request.url.path, code, exc)
    return error_response(code)
