from src.services.postman.collection_client import PostmanCollectionClient, unwrap_collection
from src.services.postman.crawler import crawl, format_location, parse_location, resolve_location

__all__ = [
    "PostmanCollectionClient",
    "crawl",
    "format_location",
    "parse_location",
    "resolve_location",
    "unwrap_collection",
]
