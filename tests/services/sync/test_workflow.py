"""
Tests for SyncWorkflow

Drives the webhook graph end to end with mocked GitHub, Postman and model
clients.
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.core.sync_config import SyncConfig
from src.exceptions.sync_exceptions import FetchError, LLMGenerationError, UpdateError
from src.models.schemas.github_events import ChangedFile
from src.services.sync.prompts import (
    APPLY_CHANGES_SYSTEM_PROMPT,
    PROPOSE_CHANGES_SYSTEM_PROMPT,
    SINGLE_PASS_SYSTEM_PROMPT,
)
from src.services.sync.workflow import SyncState, SyncWorkflow


PROPOSAL = "1. Add GET /orders request named 'List orders' at the top level."


@pytest.fixture
def mock_github_client(sample_commit_files):
    client = MagicMock()
    client.get_commit_files = AsyncMock(
        return_value=[ChangedFile.model_validate(f) for f in sample_commit_files]
    )
    return client


@pytest.fixture
def mock_schema_fetcher(openapi_schema):
    fetcher = MagicMock()
    fetcher.fetch_schema = AsyncMock(return_value=openapi_schema)
    return fetcher


@pytest.fixture
def mock_collection_client(sample_collection):
    client = MagicMock()
    client.fetch = AsyncMock(return_value=sample_collection)
    client.fetch_spec_schema = AsyncMock(return_value={"title": "Postman Collection"})
    client.replace = AsyncMock(return_value={})
    return client


@pytest.fixture
def make_workflow(webhook_secret, mock_llm_client, mock_github_client, mock_schema_fetcher, mock_collection_client):
    def _make(config: SyncConfig, fallback_collection_id=None):
        return SyncWorkflow(
            config=config,
            llm_client=mock_llm_client,
            webhook_secret=webhook_secret,
            github_client=mock_github_client,
            schema_fetcher=mock_schema_fetcher,
            collection_client=mock_collection_client,
            fallback_collection_id=fallback_collection_id,
        )
    return _make


@pytest.fixture
def signed_delivery(sample_push_payload, sign):
    def _delivery(payload=None):
        body = json.dumps(payload if payload is not None else sample_push_payload).encode()
        headers = {
            "X-GitHub-Event": "push",
            "X-GitHub-Delivery": "delivery-1",
            "X-Hub-Signature-256": sign(body),
        }
        return headers, body
    return _delivery


class TestSyncWorkflow:
    """Test suite for the webhook sync graph."""

    @pytest.mark.asyncio
    async def test_in_scope_push_updates_collection(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client,
        mock_collection_client, updated_collection,
    ):
        mock_llm_client.generate.side_effect = [PROPOSAL, f"```json\n{json.dumps(updated_collection)}\n```"]
        workflow = make_workflow(live_url_config)

        result = await workflow.run(*signed_delivery())

        assert result.state == SyncState.APPLIED
        assert result.message == "Successfully updated Postman collection 12345-abcdef."
        assert result.relevant_files == ["api/orders.ts"]
        assert result.llm_calls == 2
        mock_collection_client.fetch.assert_awaited_once_with("12345-abcdef")
        mock_collection_client.replace.assert_awaited_once_with("12345-abcdef", updated_collection)

        propose_call, apply_call = mock_llm_client.generate.await_args_list
        assert propose_call.args[0] == PROPOSE_CHANGES_SYSTEM_PROMPT
        assert "api/orders.ts" in propose_call.args[1]
        assert apply_call.args[0] == APPLY_CHANGES_SYSTEM_PROMPT
        assert PROPOSAL in apply_call.args[1]

    @pytest.mark.asyncio
    async def test_enveloped_model_output_is_unwrapped(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client,
        mock_collection_client, updated_collection,
    ):
        mock_llm_client.generate.side_effect = [PROPOSAL, json.dumps({"collection": updated_collection})]

        result = await make_workflow(live_url_config).run(*signed_delivery())

        assert result.state == SyncState.APPLIED
        mock_collection_client.replace.assert_awaited_once_with("12345-abcdef", updated_collection)

    @pytest.mark.asyncio
    async def test_single_pass_mode(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client,
        mock_collection_client, updated_collection,
    ):
        config = live_url_config.model_copy(update={"llm_passes": 1})
        mock_llm_client.generate.return_value = json.dumps(updated_collection)

        result = await make_workflow(config).run(*signed_delivery())

        assert result.state == SyncState.APPLIED
        assert result.llm_calls == 1
        assert mock_llm_client.generate.await_args.args[0] == SINGLE_PASS_SYSTEM_PROMPT
        mock_collection_client.replace.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_bad_signature_is_rejected(
        self, make_workflow, sample_push_payload, live_url_config, mock_llm_client,
        mock_github_client, mock_collection_client,
    ):
        body = json.dumps(sample_push_payload).encode()
        headers = {"X-Hub-Signature-256": "sha256=" + "0" * 64}

        result = await make_workflow(live_url_config).run(headers, body)

        assert result.state == SyncState.REJECTED
        assert result.message == "Webhook not from GitHub - ignoring."
        mock_github_client.get_commit_files.assert_not_awaited()
        mock_llm_client.generate.assert_not_awaited()
        mock_collection_client.replace.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_payload_is_rejected(self, make_workflow, live_url_config, sign, mock_llm_client):
        body = b'{"not": "a push"}'

        result = await make_workflow(live_url_config).run({"x-hub-signature-256": sign(body)}, body)

        assert result.state == SyncState.REJECTED
        assert result.message == "Invalid push payload - ignoring."
        mock_llm_client.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unwatched_branch_does_nothing(
        self, make_workflow, signed_delivery, sample_push_payload, live_url_config,
        mock_llm_client, mock_github_client, mock_collection_client,
    ):
        payload = dict(sample_push_payload, ref="refs/heads/feature/x")

        result = await make_workflow(live_url_config).run(*signed_delivery(payload))

        assert result.state == SyncState.REJECTED
        assert result.message == "Not on watched branch - ignoring."
        mock_github_client.get_commit_files.assert_not_awaited()
        mock_llm_client.generate.assert_not_awaited()
        mock_collection_client.replace.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_relevant_files(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client, mock_collection_client,
    ):
        config = live_url_config.model_copy(update={"scope": ["openapi/"]})

        result = await make_workflow(config).run(*signed_delivery())

        assert result.state == SyncState.REJECTED
        assert result.message == "No relevant changes - ignoring."
        mock_llm_client.generate.assert_not_awaited()
        mock_collection_client.replace.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_every_commit_is_inspected(
        self, make_workflow, signed_delivery, sample_push_payload, live_url_config,
        mock_github_client, mock_llm_client, updated_collection,
    ):
        second = dict(sample_push_payload["commits"][0], id="abcdef1234567890abcdef1234567890abcdef12")
        payload = dict(sample_push_payload, commits=sample_push_payload["commits"] + [second])
        mock_llm_client.generate.side_effect = [PROPOSAL, json.dumps(updated_collection)]

        result = await make_workflow(live_url_config).run(*signed_delivery(payload))

        assert result.state == SyncState.APPLIED
        assert mock_github_client.get_commit_files.await_count == 2
        assert result.relevant_files == ["api/orders.ts", "api/orders.ts"]

    @pytest.mark.asyncio
    async def test_missing_collection_id_fails_without_model_call(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client, mock_collection_client,
    ):
        config = live_url_config.model_copy(update={"collection_id": None})

        result = await make_workflow(config).run(*signed_delivery())

        assert result.state == SyncState.FAILED
        assert "No collection-id configured" in result.message
        mock_llm_client.generate.assert_not_awaited()
        mock_collection_client.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fallback_collection_id(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client,
        mock_collection_client, updated_collection,
    ):
        config = live_url_config.model_copy(update={"collection_id": None})
        mock_llm_client.generate.side_effect = [PROPOSAL, json.dumps(updated_collection)]

        result = await make_workflow(config, fallback_collection_id="env-collection").run(*signed_delivery())

        assert result.state == SyncState.APPLIED
        mock_collection_client.replace.assert_awaited_once_with("env-collection", updated_collection)

    @pytest.mark.asyncio
    async def test_unparseable_model_output_leaves_collection_untouched(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client, mock_collection_client,
    ):
        mock_llm_client.generate.side_effect = [PROPOSAL, "I could not produce a collection."]

        result = await make_workflow(live_url_config).run(*signed_delivery())

        assert result.state == SyncState.FAILED
        assert result.message.startswith("Failed to sync collection:")
        mock_collection_client.replace.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_proposal_fails(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client, mock_collection_client,
    ):
        mock_llm_client.generate.return_value = "   "

        result = await make_workflow(live_url_config).run(*signed_delivery())

        assert result.state == SyncState.FAILED
        assert mock_llm_client.generate.await_count == 1
        mock_collection_client.replace.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_model_failure(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client, mock_collection_client,
    ):
        mock_llm_client.generate.side_effect = LLMGenerationError("claude completion failed: overloaded")

        result = await make_workflow(live_url_config).run(*signed_delivery())

        assert result.state == SyncState.FAILED
        assert "overloaded" in result.message
        mock_collection_client.replace.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_update(
        self, make_workflow, signed_delivery, live_url_config, mock_llm_client,
        mock_collection_client, updated_collection,
    ):
        mock_llm_client.generate.side_effect = [PROPOSAL, json.dumps(updated_collection)]
        mock_collection_client.replace.side_effect = UpdateError(400, "malformedRequestError", "12345-abcdef")

        result = await make_workflow(live_url_config).run(*signed_delivery())

        assert result.state == SyncState.FAILED
        assert result.message == (
            "Failed to update collection: Failed to update Postman collection: 400 - malformedRequestError"
        )

    @pytest.mark.asyncio
    async def test_schema_fetch_failure(
        self, make_workflow, signed_delivery, live_url_config, mock_schema_fetcher, mock_llm_client,
    ):
        mock_schema_fetcher.fetch_schema.side_effect = FetchError("Failed to fetch OpenAPI Schema from live url.")

        result = await make_workflow(live_url_config).run(*signed_delivery())

        assert result.state == SyncState.FAILED
        assert result.message == "Failed to sync collection: Failed to fetch OpenAPI Schema from live url."
        mock_llm_client.generate.assert_not_awaited()
