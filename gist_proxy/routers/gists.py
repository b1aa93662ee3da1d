"""Gist listing endpoint."""

from fastapi import APIRouter, Depends, Request
from starlette.convertors import Convertor, register_url_convertor

from gist_proxy.exceptions import UserNotSpecifiedError
from gist_proxy.models.schemas import Gist
from gist_proxy.services.github_client import GitHubClient


class AnyPathConvertor(Convertor):
    """Like Starlette's ``path`` convertor, but also matches newlines."""

    regex = "(?s:.*)"

    def convert(self, value: str) -> str:
        return str(value)

    def to_string(self, value: str) -> str:
        return str(value)


register_url_convertor("anypath", AnyPathConvertor())

router = APIRouter(tags=["Gists"])


async def get_github_client() -> GitHubClient:
    """Placeholder - overridden in main.py."""
    raise NotImplementedError


def extract_username(path: str) -> str:
    """Return the first segment of a path given without its leading slash."""
    return path.split("/", 1)[0]


def first_query_value(request: Request, name: str) -> str | None:
    """First value of a query parameter; empty values count as absent."""
    values = request.query_params.getlist(name)
    if not values or not values[0]:
        return None
    return values[0]


@router.get(
    "/{path:anypath}",
    response_model=list[Gist],
    summary="Get user's public gists",
    responses={
        200: {"description": "Simplified list of the user's gists"},
        400: {"description": "No username in the path"},
        502: {"description": "GitHub could not be reached"},
    },
)
async def get_user_gists(
    path: str,
    request: Request,
    github_client: GitHubClient = Depends(get_github_client),
) -> list[Gist]:
    """
    Get public gists for a GitHub user.

    - **path**: the first segment is the GitHub username
    - **page**: forwarded to GitHub without validation
    - **per_page**: forwarded to GitHub without validation

    Upstream error statuses are passed through with a plain-text body.
    """
    username = extract_username(path)
    if not username:
        raise UserNotSpecifiedError()

    return await github_client.get_user_gists(
        username=username,
        page=first_query_value(request, "page"),
        per_page=first_query_value(request, "per_page"),
    )
