from fastapi import APIRouter
from fastapi.requests import Request

from src.core.config import settings
from src.utils.logging import logger

router = APIRouter()


@router.get("/health")
def health_check(request: Request):
    logger.info("Health check endpoint hit")
    config = getattr(request.app.state, "sync_config", None)
    return {
        "status": "ok",
        "service": settings.app_name,
        "config_loaded": config is not None,
        "collection_configured": bool(
            (config is not None and config.collection_id) or settings.POSTMAN_COLLECTION_ID
        ),
    }


@router.get("/ping")
def ping():
    logger.info("Ping endpoint hit")
    return {"status": "pong"}
