from typing import Any, Dict, List, Optional

import httpx

from src.core.config import settings
from src.exceptions.sync_exceptions import FetchError
from src.models.schemas.github_events import ChangedFile
from src.utils.logging import get_logger

logger = get_logger(__name__)


class GithubClient:
    """Minimal GitHub REST client for commit details and repository contents."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.token = token if token is not None else settings.GITHUB_PAT
        self.base_url = (base_url or settings.GITHUB_API_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request("GET", url, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"GitHub request failed for {url}: {e}")
            raise FetchError(f"GitHub request failed: {path}", url=url, cause=e)

        if not 200 <= response.status_code < 300:
            logger.error(f"GitHub API error {response.status_code} for {url}: {response.text}")
            raise FetchError(
                f"GitHub API returned {response.status_code} for {path}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"GitHub API returned invalid JSON for {path}", url=url, cause=e)

    async def get_commit_files(self, owner: str, repo: str, commit_sha: str) -> List[ChangedFile]:
        """Return the full list of files changed by a commit."""
        data = await self._get_json(f"/repos/{owner}/{repo}/commits/{commit_sha}")
        files = (data.get("files") or []) if isinstance(data, dict) else []
        logger.info(f"Commit {commit_sha[:7]} in {owner}/{repo} changed {len(files)} file(s)")
        return [ChangedFile.model_validate(f) for f in files]

    async def get_content_download_url(self, owner: str, repo: str, path: str) -> str:
        """Resolve a repository file to its content-addressed download URL."""
        data = await self._get_json(f"/repos/{owner}/{repo}/contents/{path.lstrip('/')}")
        download_url = data.get("download_url") if isinstance(data, dict) else None
        if not download_url:
            raise FetchError(f"Failed to fetch file from GitHub: {owner}/{repo}/{path}")
        logger.info(f"Resolved {owner}/{repo}/{path} to {download_url}")
        return download_url
