from fastapi import APIRouter, Depends, Query
from fastapi.requests import Request
from fastapi.responses import PlainTextResponse

from src.api.fastapi.dependencies import (
    get_backfill_service,
    get_collection_client,
    get_settings,
    get_sync_config,
)
from src.core.config import Settings
from src.core.sync_config import SyncConfig
from src.exceptions.sync_exceptions import FetchError
from src.models.schemas.postman import CrawlRecordType
from src.models.schemas.responses import CrawlResponse
from src.services.postman.collection_client import PostmanCollectionClient
from src.services.postman.crawler import crawl
from src.services.sync.backfill import BackfillService, BackfillStrategy
from src.utils.exception import BadRequestException, UpstreamServiceException
from src.utils.logging import logger

router = APIRouter(
    prefix="/collection",
    tags=["Collection"],
)


@router.post("/backfill", response_class=PlainTextResponse)
async def backfill_collection(
    request: Request,
    strategy: BackfillStrategy = Query(BackfillStrategy.LLM),
    backfill_service: BackfillService = Depends(get_backfill_service),
):
    """Create a new collection from the OpenAPI schema and remember its id."""
    result = await backfill_service.run(strategy)
    if result.success and result.config is not None:
        request.app.state.sync_config = result.config
    return PlainTextResponse(result.message)


@router.get("/items", response_model=CrawlResponse)
async def list_collection_items(
    config: SyncConfig = Depends(get_sync_config),
    collection_client: PostmanCollectionClient = Depends(get_collection_client),
    app_settings: Settings = Depends(get_settings),
):
    """Flattened, addressable view of the configured collection."""
    collection_id = config.collection_id or app_settings.POSTMAN_COLLECTION_ID
    if not collection_id:
        raise BadRequestException("No collection-id configured - run the backfill first.")

    try:
        collection = await collection_client.fetch(collection_id)
    except FetchError as e:
        logger.error(f"Failed to fetch collection for crawl: {e}")
        raise UpstreamServiceException(e.message)

    records = crawl(collection)
    request_count = sum(1 for r in records if r.type == CrawlRecordType.REQUEST)
    return CrawlResponse(
        success=True,
        collection_id=collection_id,
        total_count=len(records),
        items=records,
        folder_count=len(records) - request_count,
        request_count=request_count,
    )
