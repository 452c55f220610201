from typing import Any, Dict, Optional

import httpx

from src.core.config import settings
from src.core.sync_config import OpenAPIMethod, SyncConfig
from src.exceptions.sync_exceptions import FetchError
from src.services.github.github_client import GithubClient
from src.utils.logging import get_logger

logger = get_logger(__name__)


class SchemaFetcher:
    """Retrieves the current OpenAPI schema from GitHub or a live endpoint."""

    def __init__(self, github_client: Optional[GithubClient] = None, timeout: Optional[float] = None):
        self.github_client = github_client or GithubClient()
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS

    async def fetch_schema(self, config: SyncConfig) -> Dict[str, Any]:
        if config.openapi_method == OpenAPIMethod.RAW_CONTENTS:
            download_url = await self.github_client.get_content_download_url(
                config.owner, config.repo, config.path
            )
            return await self._download_json(download_url, "Failed to fetch OpenAPI Schema from GitHub.")

        if not config.url:
            raise FetchError("No OpenAPI source configured (openapi-method/url missing).")
        return await self._download_json(config.url, "Failed to fetch OpenAPI Schema from live url.")

    async def _download_json(self, url: str, failure_message: str) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.request("GET", url)
        except httpx.HTTPError as e:
            logger.error(f"OpenAPI schema request failed for {url}: {e}")
            raise FetchError(failure_message, url=url, cause=e)

        if not 200 <= response.status_code < 300:
            logger.error(f"OpenAPI schema request to {url} returned {response.status_code}")
            raise FetchError(failure_message, url=url, status_code=response.status_code)

        try:
            schema = response.json()
        except ValueError as e:
            raise FetchError(f"OpenAPI schema at {url} is not valid JSON.", url=url, cause=e)

        logger.info(f"Fetched OpenAPI schema from {url}")
        return schema
