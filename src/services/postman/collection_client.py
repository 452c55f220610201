"""
Postman collection store client.

Collections are always read and written wholesale: fetch returns the whole
document and replace overwrites it without any concurrency token, so the
last writer wins.
"""

from typing import Any, Dict, Optional

import httpx

from src.core.config import settings
from src.exceptions.sync_exceptions import CreateError, FetchError, UpdateError
from src.utils.logging import get_logger

logger = get_logger(__name__)

IMPORT_OPTIONS = {
    "folderStrategy": "Tags",
    "requestParametersResolution": "Example",
    "optimizeConversion": False,
}


def unwrap_collection(document: Dict[str, Any]) -> Dict[str, Any]:
    """Strip the ``{"collection": ...}`` envelope used by the Postman API."""
    if isinstance(document, dict) and isinstance(document.get("collection"), dict):
        return document["collection"]
    return document


class PostmanCollectionClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        workspace_id: Optional[str] = None,
        base_url: Optional[str] = None,
        schema_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.POSTMAN_API_KEY
        self.workspace_id = workspace_id if workspace_id is not None else settings.POSTMAN_WORKSPACE_ID
        self.base_url = (base_url or settings.POSTMAN_API_URL).rstrip("/")
        self.schema_url = schema_url or settings.POSTMAN_SCHEMA_URL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS

    def _headers(self, with_body: bool = False) -> Dict[str, str]:
        headers = {"x-api-key": self.api_key}
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.request(method, url, headers=headers, json=body)

    async def fetch(self, collection_id: str) -> Dict[str, Any]:
        """GET the collection; returns the unwrapped collection document."""
        url = f"{self.base_url}/collections/{collection_id}"
        try:
            response = await self._request("GET", url, headers=self._headers())
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch Postman collection {collection_id}", url=url, cause=e)

        if not 200 <= response.status_code < 300:
            logger.error(f"Failed to fetch Postman collection {collection_id}: {response.status_code}")
            raise FetchError(
                f"Failed to fetch Postman collection: {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return unwrap_collection(response.json())
        except ValueError as e:
            raise FetchError("Postman collection response is not valid JSON", url=url, cause=e)

    async def replace(self, collection_id: str, collection: Dict[str, Any]) -> Dict[str, Any]:
        """PUT a full replacement of the collection."""
        url = f"{self.base_url}/collections/{collection_id}"
        body = {"collection": unwrap_collection(collection)}
        try:
            response = await self._request("PUT", url, headers=self._headers(with_body=True), body=body)
        except httpx.HTTPError as e:
            raise UpdateError(status_code=0, body=str(e), collection_id=collection_id)

        if not 200 <= response.status_code < 300:
            logger.error(f"Failed to update Postman collection {collection_id}: {response.status_code}")
            raise UpdateError(status_code=response.status_code, body=response.text, collection_id=collection_id)

        logger.info(f"Replaced Postman collection {collection_id}")
        return _json_or_empty(response)

    async def create(self, collection: Dict[str, Any]) -> Dict[str, Any]:
        """POST a new collection into the configured workspace.

        Returns:
            The created collection summary (``id``, ``uid``, ``name``)
        """
        url = f"{self.base_url}/collections"
        if self.workspace_id:
            url = f"{url}?workspace={self.workspace_id}"
        body = {"collection": unwrap_collection(collection)}
        try:
            response = await self._request("POST", url, headers=self._headers(with_body=True), body=body)
        except httpx.HTTPError as e:
            raise CreateError(f"Failed to create Postman collection: {e}")

        if not 200 <= response.status_code < 300:
            raise CreateError(
                f"Failed to create Postman collection: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        created = unwrap_collection(_json_or_empty(response))
        if not created.get("id") and not created.get("uid"):
            raise CreateError("Postman did not return an id for the created collection")
        logger.info(f"Created Postman collection {created.get('id') or created.get('uid')}")
        return created

    async def import_openapi(self, openapi_schema: Dict[str, Any]) -> str:
        """Create a collection through Postman's OpenAPI importer; returns its id."""
        url = f"{self.base_url}/import/openapi"
        if self.workspace_id:
            url = f"{url}?workspace={self.workspace_id}"
        body = {"type": "json", "input": openapi_schema, "options": IMPORT_OPTIONS}
        try:
            response = await self._request("POST", url, headers=self._headers(with_body=True), body=body)
        except httpx.HTTPError as e:
            raise CreateError(f"Failed to import OpenAPI to Postman collection: {e}")

        if not 200 <= response.status_code < 300:
            raise CreateError(
                f"Failed to import OpenAPI to Postman collection: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        collections = _json_or_empty(response).get("collections") or []
        collection_id = collections[0].get("id") if collections else None
        if not collection_id:
            raise CreateError("Failed to find collection id in import response.")
        return collection_id

    async def fetch_spec_schema(self) -> Dict[str, Any]:
        """GET the Postman collection format (v2.1.0) JSON schema."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.request("GET", self.schema_url)
        except httpx.HTTPError as e:
            raise FetchError("Failed to fetch Postman specs", url=self.schema_url, cause=e)

        if not 200 <= response.status_code < 300:
            raise FetchError(
                f"Failed to fetch Postman specs: {response.status_code}",
                url=self.schema_url,
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise FetchError("Postman collection schema is not valid JSON", url=self.schema_url, cause=e)


def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
