"""
Collection Backfill

Creates a brand new Postman collection from the current OpenAPI schema and
records its id in the sync config file, so later pushes update it.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from src.core.sync_config import SyncConfig, persist_collection_id
from src.exceptions.sync_exceptions import CreateError, SyncError
from src.services.llm.base_client import BaseLLMClient
from src.services.openapi.schema_fetcher import SchemaFetcher
from src.services.postman.collection_client import PostmanCollectionClient
from src.services.sync.prompts import BACKFILL_SYSTEM_PROMPT, build_backfill_prompt
from src.services.sync.sanitizer import parse_model_json
from src.utils.logging import get_logger

logger = get_logger(__name__)


class BackfillStrategy(str, Enum):
    LLM = "llm"
    IMPORT = "import"


@dataclass
class BackfillResult:
    success: bool
    message: str
    collection_id: Optional[str] = None
    config: Optional[SyncConfig] = None


class BackfillService:
    def __init__(
        self,
        config: SyncConfig,
        config_path: Union[str, Path],
        llm_client: Optional[BaseLLMClient] = None,
        schema_fetcher: Optional[SchemaFetcher] = None,
        collection_client: Optional[PostmanCollectionClient] = None,
    ):
        self.config = config
        self.config_path = config_path
        self.llm_client = llm_client
        self.schema_fetcher = schema_fetcher or SchemaFetcher()
        self.collection_client = collection_client or PostmanCollectionClient()

    async def run(self, strategy: BackfillStrategy = BackfillStrategy.LLM) -> BackfillResult:
        """Build, create and record a new collection.

        Returns:
            BackfillResult carrying the new id and the updated config on success
        """
        try:
            openapi_schema = await self.schema_fetcher.fetch_schema(self.config)

            if strategy == BackfillStrategy.IMPORT:
                collection_id = await self.collection_client.import_openapi(openapi_schema)
            else:
                collection_id = await self._create_with_llm(openapi_schema)
        except SyncError as e:
            logger.error(f"Backfill failed: {e}")
            return BackfillResult(success=False, message=f"Failed to create collection: {e.message}")

        try:
            persist_collection_id(self.config_path, collection_id)
        except OSError as e:
            logger.error(f"Created collection {collection_id} but could not persist its id: {e}")
            return BackfillResult(
                success=False,
                message=(
                    f"Created collection {collection_id} but failed to write config: {e}. "
                    f"Set collection-id: {collection_id} manually."
                ),
                collection_id=collection_id,
            )

        logger.info(f"Backfill created collection {collection_id} using {strategy.value} strategy")
        return BackfillResult(
            success=True,
            message="Created new Postman Collection.",
            collection_id=collection_id,
            config=self.config.with_collection_id(collection_id),
        )

    async def _create_with_llm(self, openapi_schema: dict) -> str:
        if self.llm_client is None:
            raise CreateError("No LLM client configured for collection synthesis")

        collection_format = await self.collection_client.fetch_spec_schema()
        response = await self.llm_client.generate(
            BACKFILL_SYSTEM_PROMPT, build_backfill_prompt(openapi_schema, collection_format)
        )
        created = await self.collection_client.create(parse_model_json(response))
        return created.get("id") or created["uid"]
