"""
Global test configuration and fixtures for collection sync tests.

Provides signed webhook payloads, sample collections and HTTP mocking helpers
shared across test modules.
"""

import copy
import hashlib
import hmac
import json
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.sync_config import SyncConfig


TEST_WEBHOOK_SECRET = "test-webhook-secret"


# Test utilities
def sign_payload(body: bytes, secret: str = TEST_WEBHOOK_SECRET) -> str:
    """Compute the x-hub-signature-256 header value for a body."""
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def make_response(status_code: int = 200, json_data: Any = None, text: Optional[str] = None) -> MagicMock:
    """Build a mock httpx.Response."""
    response = MagicMock()
    response.status_code = status_code
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("No JSON body")
    response.text = text if text is not None else json.dumps(json_data) if json_data is not None else ""
    return response


def install_http_client(mock_client_cls: MagicMock, *responses: MagicMock) -> AsyncMock:
    """Wire a patched httpx.AsyncClient so successive requests return ``responses``."""
    client = AsyncMock()
    client.request.side_effect = list(responses)
    mock_client_cls.return_value.__aenter__.return_value = client
    mock_client_cls.return_value.__aexit__.return_value = False
    return client


@pytest.fixture
def webhook_secret() -> str:
    return TEST_WEBHOOK_SECRET


@pytest.fixture
def sample_commit_sha() -> str:
    """Sample commit SHA."""
    return "1234567890abcdef1234567890abcdef12345678"


@pytest.fixture
def sample_push_payload(sample_commit_sha: str) -> dict:
    """Sample GitHub push webhook payload."""
    return {
        "ref": "refs/heads/main",
        "before": "0000000000000000000000000000000000000000",
        "after": sample_commit_sha,
        "commits": [
            {
                "id": sample_commit_sha,
                "message": "Add orders endpoint",
                "timestamp": "2024-01-15T10:00:00Z",
                "url": f"https://github.com/test-owner/test-repo/commit/{sample_commit_sha}",
                "author": {"name": "Test Dev", "email": "dev@example.com", "username": "testdev"},
                "committer": {"name": "Test Dev", "email": "dev@example.com", "username": "testdev"},
                "added": ["api/orders.ts"],
                "removed": [],
                "modified": [],
            }
        ],
        "repository": {
            "name": "test-repo",
            "full_name": "test-owner/test-repo",
            "owner": {"name": "test-owner", "login": "test-owner"},
        },
    }


@pytest.fixture
def sample_commit_files() -> list:
    """Sample files from GET /repos/{owner}/{repo}/commits/{sha}."""
    return [
        {
            "sha": "bbcd538c8e72b8c175046e27cc8f907076331401",
            "filename": "api/orders.ts",
            "status": "added",
            "additions": 20,
            "deletions": 0,
            "changes": 20,
            "raw_url": "https://github.com/test-owner/test-repo/raw/1234/api/orders.ts",
            "patch": "@@ -0,0 +1,3 @@\n+router.get('/orders', listOrders);\n+router.post('/orders', createOrder);\n+",
        },
        {
            "sha": "f4b5c6d7e8f9a0b1c2d3e4f5a6b7c8d9e0f1a2b3",
            "filename": "docs/README.md",
            "status": "modified",
            "additions": 1,
            "deletions": 0,
            "changes": 1,
            "raw_url": "https://github.com/test-owner/test-repo/raw/1234/docs/README.md",
            "patch": "@@ -1 +1,2 @@\n # Docs\n+Orders API",
        },
    ]


@pytest.fixture
def sample_collection() -> dict:
    """Collection with a top-level folder, a top-level request and a nested folder."""
    return {
        "info": {
            "_postman_id": "c0ffee00-0000-0000-0000-000000000000",
            "name": "Test API",
            "schema": "https://schema.getpostman.com/json/collection/v2.1.0/collection.json",
        },
        "item": [
            {
                "name": "users",
                "item": [
                    {
                        "id": "req-list-users",
                        "name": "List users",
                        "request": {"method": "GET", "url": "{{baseUrl}}/users"},
                    },
                    {
                        "name": "admin",
                        "item": [
                            {
                                "id": "req-ban-user",
                                "name": "Ban user",
                                "request": {"method": "POST", "url": "{{baseUrl}}/admin/ban"},
                            }
                        ],
                    },
                ],
            },
            {
                "id": "req-health",
                "name": "Health",
                "request": {"method": "GET", "url": "{{baseUrl}}/health"},
            },
        ],
    }


@pytest.fixture
def updated_collection(sample_collection: dict) -> dict:
    collection = copy.deepcopy(sample_collection)
    collection["item"].append(
        {
            "id": "req-list-orders",
            "name": "List orders",
            "request": {"method": "GET", "url": "{{baseUrl}}/orders"},
        }
    )
    return collection


@pytest.fixture
def openapi_schema() -> dict:
    return {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": {"/orders": {"get": {"summary": "List orders"}}},
    }


@pytest.fixture
def live_url_config() -> SyncConfig:
    return SyncConfig.model_validate(
        {
            "openapi-method": "live-url",
            "url": "https://api.example.com/openapi.json",
            "branches": ["main"],
            "scope": ["api/"],
            "collection-id": "12345-abcdef",
        }
    )


@pytest.fixture
def raw_contents_config() -> SyncConfig:
    return SyncConfig.model_validate(
        {
            "openapi-method": "raw-contents",
            "owner": "test-owner",
            "repo": "test-repo",
            "path": "openapi/openapi.json",
            "branches": [],
            "scope": [],
            "collection-id": "12345-abcdef",
        }
    )


@pytest.fixture
def mock_llm_client():
    """Create a mock LLM client."""
    client = MagicMock()
    client.provider_name = "mock"
    client.model = "mock-model"
    client.generate = AsyncMock()
    return client


@pytest.fixture
def sign():
    """Signature helper: sign(body, secret=TEST_WEBHOOK_SECRET) -> header value."""
    return sign_payload


@pytest.fixture
def http_response():
    """Factory for mock httpx responses."""
    return make_response


@pytest.fixture
def wire_http_client():
    """Wire a patched httpx.AsyncClient with a sequence of responses."""
    return install_http_client
