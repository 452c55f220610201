import pytest
from fastapi.testclient import TestClient

from src.api.fastapi import FastAPIApp
from src.api.fastapi.dependencies import get_settings
from src.core.config import Settings
from src.utils.exception import add_exception_handlers
from src.utils.logging import Logger


@pytest.fixture
def app_settings(webhook_secret, tmp_path):
    return Settings(
        GITHUB_WEBHOOK_SECRET=webhook_secret,
        POSTMAN_COLLECTION_ID="",
        SYNC_CONFIG_PATH=str(tmp_path / "config.yaml"),
        SYNC_IN_BACKGROUND=False,
    )


@pytest.fixture
def app(app_settings):
    application = FastAPIApp().get_app()
    add_exception_handlers(application, Logger("ExceptionHandler"))
    application.dependency_overrides[get_settings] = lambda: app_settings
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
