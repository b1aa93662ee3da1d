"""Async GitHub API client using httpx."""

import asyncio
import logging

import httpx

from gist_proxy.config import Settings
from gist_proxy.exceptions import (
    GitHubAPIError,
    GitHubRequestBuildError,
    GitHubResponseParseError,
    GitHubResponseReadError,
    GitHubUnreachableError,
)
from gist_proxy.models.schemas import Gist
from gist_proxy.services.projection import parse_gists

logger = logging.getLogger(__name__)


def build_gists_url(
    base_url: str,
    username: str,
    page: str | None = None,
    per_page: str | None = None,
) -> str:
    """
    Build the upstream gists URL for a user.

    Pagination values are appended verbatim, ``page`` first; the query
    string is omitted when neither is given.
    """
    url = f"{base_url.rstrip('/')}/users/{username}/gists"

    params = []
    if page:
        params.append(f"page={page}")
    if per_page:
        params.append(f"per_page={per_page}")
    if params:
        url += "?" + "&".join(params)
    return url


class GitHubClient:
    """Async client for the GitHub user gists endpoint."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = settings.github_api_base_url
        self._timeout = settings.github_api_timeout
        self._user_agent = settings.user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GitHubClient":
        await self.start()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def start(self) -> None:
        """Initialize the HTTP client."""
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._user_agent},
            timeout=self._timeout,
            follow_redirects=True,
            max_redirects=10,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_user_gists(
        self,
        username: str,
        page: str | None = None,
        per_page: str | None = None,
    ) -> list[Gist]:
        """
        Fetch and project the public gists of a GitHub user.

        A single attempt is made; redirects are followed. The configured
        timeout is a deadline for the whole exchange, body read included.

        Args:
            username: GitHub username, inserted into the path as given
            page: Opaque page value forwarded to GitHub
            per_page: Opaque page size forwarded to GitHub

        Returns:
            Projected gists in upstream order

        Raises:
            GitHubRequestBuildError: If the upstream request cannot be built
            GitHubUnreachableError: On transport failure or timeout
            GitHubAPIError: If GitHub answers with a non-200 status
            GitHubResponseReadError: If the body cannot be read
            GitHubResponseParseError: If the body is not a list of gist objects
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Call start() first.")

        url = build_gists_url(self._base_url, username, page, per_page)
        logger.debug(f"GET {url}")

        try:
            request = self._client.build_request("GET", url)
        except (httpx.InvalidURL, ValueError) as e:
            logger.warning(f"Could not build request for {url!r}: {e}")
            raise GitHubRequestBuildError() from e

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout

        try:
            response = await asyncio.wait_for(
                self._client.send(request, stream=True),
                timeout=self._timeout,
            )
        except (httpx.RequestError, asyncio.TimeoutError) as e:
            logger.warning(f"Failed to contact GitHub for {username!r}: {e!r}")
            raise GitHubUnreachableError() from e

        try:
            if response.status_code != 200:
                logger.info(f"GitHub returned {response.status_code} for {username!r}")
                raise GitHubAPIError(response.status_code)

            try:
                body = await asyncio.wait_for(
                    response.aread(),
                    timeout=max(deadline - loop.time(), 0),
                )
            except (httpx.HTTPError, httpx.StreamError, asyncio.TimeoutError) as e:
                logger.warning(f"Failed to read GitHub response for {username!r}: {e!r}")
                raise GitHubResponseReadError() from e
        finally:
            await response.aclose()

        try:
            return parse_gists(body)
        except GitHubResponseParseError as e:
            logger.warning(f"Unexpected GitHub payload for {username!r}: {e.reason}")
            raise
