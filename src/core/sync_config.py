"""
Sync configuration loading.

The sync configuration describes where the OpenAPI schema lives, which
branches and paths are watched, and which Postman collection is kept in
sync. It is read once at startup and threaded explicitly into the services
that need it.
"""

import re
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from src.exceptions.sync_exceptions import ConfigError
from src.utils.logging import get_logger

logger = get_logger(__name__)

_COLLECTION_ID_LINE = re.compile(r"^collection-id:.*$", re.MULTILINE)


class OpenAPIMethod(str, Enum):
    """How the OpenAPI schema is retrieved."""
    RAW_CONTENTS = "raw-contents"
    LIVE_URL = "live-url"


class SyncConfig(BaseModel):
    """Immutable sync configuration; field aliases match the YAML keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    openapi_method: Optional[OpenAPIMethod] = Field(default=None, alias="openapi-method")
    path: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    url: Optional[str] = None
    branches: List[str] = Field(default_factory=list)
    scope: List[str] = Field(default_factory=list)
    collection_id: Optional[str] = Field(default=None, alias="collection-id")
    llm_passes: int = Field(default=2, alias="llm-passes", ge=1, le=2)

    @field_validator("collection_id", mode="before")
    @classmethod
    def coerce_collection_id(cls, v):
        # YAML reads bare numeric ids as int
        return str(v) if v is not None else v

    @model_validator(mode="after")
    def check_method_requirements(self) -> "SyncConfig":
        if self.openapi_method == OpenAPIMethod.RAW_CONTENTS:
            missing = [name for name in ("path", "owner", "repo") if not getattr(self, name)]
            if missing:
                raise ValueError(
                    f"Missing required field(s): {', '.join(missing)} "
                    "(required when openapi-method is raw-contents)"
                )
        if self.openapi_method == OpenAPIMethod.LIVE_URL and not self.url:
            raise ValueError("Missing required field: url (required when openapi-method is live-url)")
        return self

    def with_collection_id(self, collection_id: str) -> "SyncConfig":
        return self.model_copy(update={"collection_id": collection_id})


def parse_sync_config(raw: object) -> SyncConfig:
    """Validate a parsed YAML document into a SyncConfig.

    Raises:
        ValueError: If the document is empty, not a mapping, or invalid
    """
    if not raw:
        raise ValueError("Config file is empty or invalid")
    if not isinstance(raw, dict):
        raise ValueError("Config file must contain a mapping")

    method = raw.get("openapi-method")
    if method not in {m.value for m in OpenAPIMethod}:
        raise ValueError(f"Invalid field in openapi-method: {method}")

    for key in ("branches", "scope"):
        if raw.get(key) is not None and not isinstance(raw[key], list):
            raise ValueError(f"Invalid field: {key} (must be a list)")

    try:
        return SyncConfig.model_validate(raw)
    except ValidationError as e:
        raise ValueError(str(e)) from e


def load_sync_config(path: Union[str, Path], strict: bool = False) -> SyncConfig:
    """Load the sync configuration from a YAML file.

    An unreadable or invalid file falls back to the default configuration
    (watch every branch and every path) unless ``strict`` is set.

    Raises:
        ConfigError: If ``strict`` is set and the file cannot be loaded
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
        return parse_sync_config(yaml.safe_load(content))
    except (OSError, yaml.YAMLError, ValueError) as e:
        if strict:
            raise ConfigError(f"Failed to load config: {e}", path=str(path)) from e
        logger.error(f"Failed to load config from {path}, using defaults: {e}")
        return SyncConfig()


def persist_collection_id(path: Union[str, Path], collection_id: str) -> None:
    """Rewrite the ``collection-id`` line of the config file in place."""
    config_path = Path(path)
    content = config_path.read_text(encoding="utf-8") if config_path.exists() else ""
    line = f"collection-id: {collection_id}"

    if _COLLECTION_ID_LINE.search(content):
        updated = _COLLECTION_ID_LINE.sub(lambda _: line, content, count=1)
    else:
        separator = "" if not content or content.endswith("\n") else "\n"
        updated = f"{content}{separator}{line}\n"

    config_path.write_text(updated, encoding="utf-8")
    logger.info(f"Persisted collection-id {collection_id} to {config_path}")
