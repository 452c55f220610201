import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "postman-sync"

    env: str = "development"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    GITHUB_WEBHOOK_SECRET: str = os.getenv("GITHUB_WEBHOOK_SECRET", "")
    GITHUB_PAT: str = os.getenv("GITHUB_PAT", "")
    GITHUB_API_URL: str = os.getenv("GITHUB_API_URL", "https://api.github.com")

    POSTMAN_API_KEY: str = os.getenv("POSTMAN_API_KEY", "")
    POSTMAN_WORKSPACE_ID: str = os.getenv("POSTMAN_WORKSPACE_ID", "")
    POSTMAN_COLLECTION_ID: str = os.getenv("POSTMAN_COLLECTION_ID", "")
    POSTMAN_API_URL: str = os.getenv("POSTMAN_API_URL", "https://api.getpostman.com")
    POSTMAN_SCHEMA_URL: str = os.getenv(
        "POSTMAN_SCHEMA_URL",
        "https://schema.postman.com/json/collection/v2.1.0/collection.json",
    )

    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "claude")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "")
    LLM_MAX_TOKENS: int = 16000
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")

    SYNC_CONFIG_PATH: str = os.getenv("SYNC_CONFIG_PATH", "config.yaml")
    STRICT_CONFIG: bool = False
    SYNC_IN_BACKGROUND: bool = False
    HTTP_TIMEOUT_SECONDS: float = 30.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
