from fastapi import FastAPI
import uvicorn
from dotenv import load_dotenv
from contextlib import asynccontextmanager

load_dotenv()

from src.api.fastapi import FastAPIApp
from src.core.config import settings
from src.core.sync_config import load_sync_config
from src.utils.exception import add_exception_handlers
from src.utils.logging import Logger, logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up Postman collection sync")
    app.state.sync_config = load_sync_config(settings.SYNC_CONFIG_PATH, strict=settings.STRICT_CONFIG)
    config = app.state.sync_config
    logger.info(
        f"Loaded sync config: method={config.openapi_method.value if config.openapi_method else None}, "
        f"branches={config.branches}, scope={config.scope}, "
        f"collection configured={bool(config.collection_id or settings.POSTMAN_COLLECTION_ID)}"
    )

    yield

    logger.info("Shutting down Postman collection sync")


app_instance = FastAPIApp(lifespan=lifespan)
app = app_instance.get_app()

add_exception_handlers(app, Logger("ExceptionHandler"))

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
