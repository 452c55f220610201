"""
Postman Collection Models

Schemas describing the flattened, addressable view of a collection tree.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CrawlRecordType(str, Enum):
    """Kinds of collection nodes emitted by the crawler."""
    REQUEST = "request"
    FOLDER = "folder"


class CrawlRecord(BaseModel):
    """One collection node with the location expression that addresses it."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    type: CrawlRecordType
    name: Optional[str] = None
    id: Optional[str] = Field(default=None, description="Request id, absent for folders")
    location: str = Field(..., description="Colon-delimited location expression, e.g. item:2:item:0")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Full request payload, absent for folders")
