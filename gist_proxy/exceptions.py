"""Custom exceptions and FastAPI exception handlers."""

import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)


class GistProxyError(Exception):
    """Base error carrying the HTTP status and plain-text body to return."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class UserNotSpecifiedError(GistProxyError):
    """Raised when the request path carries no username."""

    def __init__(self):
        super().__init__(400, "user not specified")


class GitHubRequestBuildError(GistProxyError):
    """Raised when the upstream request cannot be constructed."""

    def __init__(self):
        super().__init__(500, "failed to create request")


class GitHubUnreachableError(GistProxyError):
    """Raised when GitHub cannot be reached or does not answer in time."""

    def __init__(self):
        super().__init__(502, "failed to contact GitHub")


class GitHubAPIError(GistProxyError):
    """Raised when GitHub answers with a non-200 status."""

    def __init__(self, status_code: int):
        super().__init__(status_code, f"GitHub API error: {status_code}")


class GitHubResponseReadError(GistProxyError):
    """Raised when the upstream response body cannot be read."""

    def __init__(self):
        super().__init__(500, "failed to read response")


class GitHubResponseParseError(GistProxyError):
    """Raised when the upstream body is not a JSON array of gist objects."""

    def __init__(self, reason: str | None = None):
        self.reason = reason
        super().__init__(500, "failed to parse GitHub response")


async def gist_proxy_error_handler(
    request: Request,
    exc: GistProxyError,
) -> PlainTextResponse:
    """Render any GistProxyError as a plain-text response."""
    if exc.status_code >= 500:
        logger.warning(f"{request.url.path}: {exc.message} ({exc.status_code})")
    return PlainTextResponse(exc.message, status_code=exc.status_code)
