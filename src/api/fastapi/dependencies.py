from fastapi import Depends, Request

from src.core.config import Settings, settings
from src.core.sync_config import SyncConfig, load_sync_config
from src.services.llm import BaseLLMClient, get_llm_client
from src.services.postman.collection_client import PostmanCollectionClient
from src.services.sync.backfill import BackfillService
from src.services.sync.workflow import SyncWorkflow


def get_settings() -> Settings:
    return settings


def get_sync_config(request: Request, app_settings: Settings = Depends(get_settings)) -> SyncConfig:
    """The sync config loaded at startup; loaded lazily if the lifespan did not run."""
    config = getattr(request.app.state, "sync_config", None)
    if config is None:
        config = load_sync_config(app_settings.SYNC_CONFIG_PATH, strict=app_settings.STRICT_CONFIG)
        request.app.state.sync_config = config
    return config


def get_llm(app_settings: Settings = Depends(get_settings)) -> BaseLLMClient:
    return get_llm_client(app_settings)


def get_collection_client() -> PostmanCollectionClient:
    return PostmanCollectionClient()


def get_sync_workflow(
    config: SyncConfig = Depends(get_sync_config),
    llm_client: BaseLLMClient = Depends(get_llm),
    collection_client: PostmanCollectionClient = Depends(get_collection_client),
    app_settings: Settings = Depends(get_settings),
) -> SyncWorkflow:
    return SyncWorkflow(
        config=config,
        llm_client=llm_client,
        webhook_secret=app_settings.GITHUB_WEBHOOK_SECRET,
        collection_client=collection_client,
        fallback_collection_id=app_settings.POSTMAN_COLLECTION_ID,
    )


def get_backfill_service(
    config: SyncConfig = Depends(get_sync_config),
    llm_client: BaseLLMClient = Depends(get_llm),
    collection_client: PostmanCollectionClient = Depends(get_collection_client),
    app_settings: Settings = Depends(get_settings),
) -> BackfillService:
    return BackfillService(
        config=config,
        config_path=app_settings.SYNC_CONFIG_PATH,
        llm_client=llm_client,
        collection_client=collection_client,
    )
