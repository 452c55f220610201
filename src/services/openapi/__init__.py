from src.services.openapi.schema_fetcher import SchemaFetcher

__all__ = ["SchemaFetcher"]
