"""
Collection Sync Workflow

LangGraph state machine handling one GitHub push delivery:

    verify -> check_scope -> enrich -> propose -> apply -> write

Verification and scope failures end the graph early with a REJECTED result.
With ``llm-passes: 1`` the propose step is skipped and a single model call
produces the updated collection. Any SyncError raised along the way is
turned into a FAILED result at the workflow boundary, so callers always get
a SyncResult back.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, TypedDict

from langgraph.graph import END, StateGraph
from pydantic import ValidationError

from src.core.sync_config import SyncConfig
from src.exceptions.sync_exceptions import ParseError, SyncError, UpdateError
from src.models.schemas.github_events import ChangedFile, PushEvent
from src.services.github.github_client import GithubClient
from src.services.github.scope import filter_relevant_files, is_watched_branch
from src.services.github.webhook_verifier import WebhookVerifier
from src.services.llm.base_client import BaseLLMClient
from src.services.openapi.schema_fetcher import SchemaFetcher
from src.services.postman.collection_client import PostmanCollectionClient, unwrap_collection
from src.services.sync.prompts import (
    APPLY_CHANGES_SYSTEM_PROMPT,
    PROPOSE_CHANGES_SYSTEM_PROMPT,
    SINGLE_PASS_SYSTEM_PROMPT,
    build_apply_prompt,
    build_propose_prompt,
)
from src.services.sync.sanitizer import parse_model_json
from src.utils.logging import Logger


class SyncState(str, Enum):
    RECEIVED = "received"
    VERIFIED = "verified"
    SCOPE_CHECKED = "scope_checked"
    ENRICHED = "enriched"
    PROPOSAL_GENERATED = "proposal_generated"
    APPLY_GENERATED = "apply_generated"
    APPLIED = "applied"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Outcome of one webhook delivery."""

    state: SyncState
    message: str
    collection_id: Optional[str] = None
    relevant_files: List[str] = field(default_factory=list)
    llm_calls: int = 0


class SyncGraphState(TypedDict, total=False):
    delivery_id: str
    headers: Dict[str, str]
    raw_body: bytes
    event: PushEvent
    status: SyncState
    message: str
    collection_id: str
    relevant_files: List[ChangedFile]
    openapi_schema: Dict[str, Any]
    collection: Dict[str, Any]
    collection_format: Dict[str, Any]
    proposal: str
    updated_collection: Dict[str, Any]
    llm_calls: int


class SyncWorkflow:
    """Keeps the configured Postman collection in step with pushed API changes."""

    def __init__(
        self,
        config: SyncConfig,
        llm_client: BaseLLMClient,
        webhook_secret: str,
        github_client: Optional[GithubClient] = None,
        schema_fetcher: Optional[SchemaFetcher] = None,
        collection_client: Optional[PostmanCollectionClient] = None,
        fallback_collection_id: Optional[str] = None,
    ):
        self.config = config
        self.llm_client = llm_client
        self.verifier = WebhookVerifier(webhook_secret)
        self.github_client = github_client or GithubClient()
        self.schema_fetcher = schema_fetcher or SchemaFetcher(self.github_client)
        self.collection_client = collection_client or PostmanCollectionClient()
        self.collection_id = config.collection_id or fallback_collection_id or None
        self.logger = Logger("SyncWorkflow")
        self.graph = self._build_graph()

    def _build_graph(self):
        workflow = StateGraph(SyncGraphState)

        workflow.add_node("verify", self._verify)
        workflow.add_node("check_scope", self._check_scope)
        workflow.add_node("enrich", self._enrich)
        workflow.add_node("propose", self._propose)
        workflow.add_node("apply", self._apply)
        workflow.add_node("write", self._write)

        workflow.set_entry_point("verify")
        workflow.add_conditional_edges(
            "verify", self._continue_if(SyncState.VERIFIED), {"next": "check_scope", "stop": END}
        )
        workflow.add_conditional_edges(
            "check_scope", self._continue_if(SyncState.SCOPE_CHECKED), {"next": "enrich", "stop": END}
        )
        workflow.add_conditional_edges(
            "enrich", self._route_model_passes, {"propose": "propose", "apply": "apply"}
        )
        workflow.add_edge("propose", "apply")
        workflow.add_edge("apply", "write")
        workflow.add_edge("write", END)

        return workflow.compile()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, headers: Mapping[str, str], raw_body: bytes) -> SyncResult:
        lowered = {k.lower(): v for k, v in headers.items()}
        delivery_id = lowered.get("x-github-delivery", "unknown")
        log = self.logger.bind(delivery_id=delivery_id)

        initial: SyncGraphState = {
            "delivery_id": delivery_id,
            "headers": lowered,
            "raw_body": raw_body,
            "status": SyncState.RECEIVED,
            "llm_calls": 0,
        }

        try:
            final = await self.graph.ainvoke(initial)
        except SyncError as e:
            log.error(f"Collection sync failed: {e}", extra={"error": e.to_dict()})
            return SyncResult(
                state=SyncState.FAILED,
                message=f"Failed to sync collection: {e.message}",
                collection_id=self.collection_id,
            )

        result = SyncResult(
            state=final["status"],
            message=final.get("message", ""),
            collection_id=final.get("collection_id"),
            relevant_files=[f.filename for f in final.get("relevant_files", [])],
            llm_calls=final.get("llm_calls", 0),
        )
        log.info(f"Collection sync finished: {result.state.value} - {result.message}")
        return result

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    @staticmethod
    def _continue_if(expected: SyncState):
        def route(state: SyncGraphState) -> str:
            return "next" if state.get("status") == expected else "stop"
        return route

    def _route_model_passes(self, state: SyncGraphState) -> str:
        return "propose" if self.config.llm_passes >= 2 else "apply"

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    async def _verify(self, state: SyncGraphState) -> Dict[str, Any]:
        log = self.logger.bind(delivery_id=state.get("delivery_id"))

        if not self.verifier.verify(state["headers"], state["raw_body"]):
            log.info("Webhook not from GitHub - ignoring.")
            return {"status": SyncState.REJECTED, "message": "Webhook not from GitHub - ignoring."}

        try:
            event = PushEvent.model_validate(json.loads(state["raw_body"]))
        except (ValueError, ValidationError) as e:
            log.warning(f"Invalid push payload: {e}")
            return {"status": SyncState.REJECTED, "message": "Invalid push payload - ignoring."}

        log.info(f"Came from GitHub: push to {event.ref} with {len(event.commits)} commit(s)")
        return {"status": SyncState.VERIFIED, "event": event}

    async def _check_scope(self, state: SyncGraphState) -> Dict[str, Any]:
        log = self.logger.bind(delivery_id=state.get("delivery_id"))
        event = state["event"]

        if not is_watched_branch(event.ref, self.config.branches):
            log.info("Not on watched branch - ignoring.")
            return {"status": SyncState.REJECTED, "message": "Not on watched branch - ignoring."}

        owner = event.repository.owner_name
        repo = event.repository.name
        relevant: List[ChangedFile] = []
        for commit in event.commits:
            files = await self.github_client.get_commit_files(owner, repo, commit.id)
            relevant.extend(filter_relevant_files(files, self.config.scope))

        if not relevant:
            log.info("No relevant changes - ignoring.")
            return {"status": SyncState.REJECTED, "message": "No relevant changes - ignoring."}

        if not self.collection_id:
            log.error("No collection-id configured")
            return {
                "status": SyncState.FAILED,
                "message": "No collection-id configured - run the backfill first.",
                "relevant_files": relevant,
            }

        log.info(f"{len(relevant)} relevant file(s) changed")
        return {
            "status": SyncState.SCOPE_CHECKED,
            "relevant_files": relevant,
            "collection_id": self.collection_id,
        }

    async def _enrich(self, state: SyncGraphState) -> Dict[str, Any]:
        openapi_schema = await self.schema_fetcher.fetch_schema(self.config)
        collection = await self.collection_client.fetch(state["collection_id"])
        collection_format = await self.collection_client.fetch_spec_schema()
        return {
            "status": SyncState.ENRICHED,
            "openapi_schema": openapi_schema,
            "collection": collection,
            "collection_format": collection_format,
        }

    async def _propose(self, state: SyncGraphState) -> Dict[str, Any]:
        prompt = build_propose_prompt(
            state["relevant_files"],
            state["openapi_schema"],
            state["collection"],
            state["collection_format"],
        )
        proposal = await self.llm_client.generate(PROPOSE_CHANGES_SYSTEM_PROMPT, prompt)
        if not proposal or not proposal.strip():
            raise ParseError("Model returned an empty change proposal", raw_response=proposal)

        self.logger.info(
            f"Change instructions: {proposal}", extra={"delivery_id": state.get("delivery_id")}
        )
        return {
            "status": SyncState.PROPOSAL_GENERATED,
            "proposal": proposal,
            "llm_calls": state.get("llm_calls", 0) + 1,
        }

    async def _apply(self, state: SyncGraphState) -> Dict[str, Any]:
        if state.get("proposal"):
            system_prompt = APPLY_CHANGES_SYSTEM_PROMPT
            prompt = build_apply_prompt(state["proposal"], state["collection"], state["collection_format"])
        else:
            system_prompt = SINGLE_PASS_SYSTEM_PROMPT
            prompt = build_propose_prompt(
                state["relevant_files"],
                state["openapi_schema"],
                state["collection"],
                state["collection_format"],
            )

        response = await self.llm_client.generate(system_prompt, prompt)
        updated = unwrap_collection(parse_model_json(response))
        return {
            "status": SyncState.APPLY_GENERATED,
            "updated_collection": updated,
            "llm_calls": state.get("llm_calls", 0) + 1,
        }

    async def _write(self, state: SyncGraphState) -> Dict[str, Any]:
        log = self.logger.bind(delivery_id=state.get("delivery_id"))
        collection_id = state["collection_id"]
        try:
            await self.collection_client.replace(collection_id, state["updated_collection"])
        except UpdateError as e:
            log.error(f"Failed to update collection: {e}")
            return {"status": SyncState.FAILED, "message": f"Failed to update collection: {e.message}"}

        log.info("Successfully updated Postman collection")
        return {
            "status": SyncState.APPLIED,
            "message": f"Successfully updated Postman collection {collection_id}.",
        }
