from src.exceptions.sync_exceptions import (
    SyncError,
    FetchError,
    ParseError,
    UpdateError,
    CreateError,
    ConfigError,
    LLMGenerationError,
)

__all__ = [
    "SyncError",
    "FetchError",
    "ParseError",
    "UpdateError",
    "CreateError",
    "ConfigError",
    "LLMGenerationError",
]
