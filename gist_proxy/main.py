"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gist_proxy.config import get_settings
from gist_proxy.exceptions import GistProxyError, gist_proxy_error_handler
from gist_proxy.routers import gists
from gist_proxy.services.github_client import GitHubClient

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

github_client: GitHubClient | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Creates the shared GitHub client on startup and closes it on shutdown.
    """
    global github_client

    settings = get_settings()
    logger.info(f"Starting {settings.app_name}")

    github_client = GitHubClient(settings)
    await github_client.start()

    logger.info("GitHub client initialized")

    yield

    logger.info("Shutting down GitHub client")
    await github_client.close()
    github_client = None


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    # Every path is a username, so nothing else may be routed.
    app = FastAPI(
        title=settings.app_name,
        description="A proxy for GitHub users' public gists",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.add_exception_handler(GistProxyError, gist_proxy_error_handler)

    async def get_github_client_dep():
        return github_client

    app.dependency_overrides[gists.get_github_client] = get_github_client_dep

    app.include_router(gists.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "gist_proxy.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
