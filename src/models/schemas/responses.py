from typing import List, Optional

from pydantic import BaseModel

from src.models.schemas.postman import CrawlRecord


class BaseResponse(BaseModel):
    """Base response model for all API responses"""

    success: bool


class ErrorResponse(BaseModel):
    """Error response model for 400 and 5xx responses"""

    success: bool = False
    errorMessage: str


class CrawlResponse(BaseResponse):
    """Flattened view of a Postman collection."""

    collection_id: str
    total_count: int
    items: List[CrawlRecord]
    folder_count: Optional[int] = None
    request_count: Optional[int] = None
