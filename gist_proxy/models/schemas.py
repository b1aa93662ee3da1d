"""Pydantic models for the proxied gist listing."""

from pydantic import BaseModel


class GistFile(BaseModel):
    """Represents a single file within a gist."""

    filename: str
    language: str
    raw_url: str


class Gist(BaseModel):
    """Simplified view of a GitHub Gist."""

    id: str
    description: str
    html_url: str
    files: dict[str, GistFile]
