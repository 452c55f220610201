"""
Prompt templates for collection synchronization.

Inputs are embedded as JSON so the model sees exactly what the services
fetched. Model output is untrusted text and is validated by the caller.
"""

import json
from textwrap import dedent
from typing import Any, Dict, List

from src.models.schemas.github_events import ChangedFile


# ============================================================================
# SYSTEM PROMPTS
# ============================================================================

PROPOSE_CHANGES_SYSTEM_PROMPT = dedent("""
    # API Change Analysis Agent

    Your job is to analyze git commit diffs to determine whether the API has changed
    and describe how the Postman collection must change to match it.

    ## Inputs Provided
    1. **Git commit diffs** - The code changes to analyze
    2. **OpenAPI schema** - The current OpenAPI document of the API
    3. **Current Postman collection** - The existing collection structure
    4. **Postman Collection Format v2.1.0** - The collection JSON schema

    ## Task
    1. Analyze the provided git commit diffs
    2. Identify API changes including:
       - New endpoints
       - Modified endpoints (path, method, parameters)
       - Removed endpoints
       - Changed request/response schemas
       - Updated authentication requirements
    3. Generate a NUMBERED LIST of changes to make to the Postman Collection JSON object,
       being as specific as possible. Mention everything that needs to change, do not
       mention anything that should stay the same.

    ## Output Format
    Return only the numbered list of changes to make in the Postman Collection JSON object.
""").strip()


APPLY_CHANGES_SYSTEM_PROMPT = dedent("""
    # Collection Update Agent

    ## Inputs Provided
    1. **Change instructions**
    2. **Current Postman collection** - The existing collection structure
    3. **Postman Collection Format v2.1.0** - The collection JSON schema

    Apply the change instructions to the Postman collection to produce the final updated collection.

    ## Task
    Take the change instructions and the current collection, then return the complete updated collection.

    ## Output Format
    Return the FULL valid JSON object following Postman Collection Format v2.1.0 structure
    with the changes applied. No explanations or additional text.
""").strip()


SINGLE_PASS_SYSTEM_PROMPT = dedent("""
    # Collection Sync Agent

    You receive git commit diffs, the current OpenAPI schema, the current Postman collection
    and the Postman Collection Format v2.1.0 schema.

    ## Task
    Identify every API change introduced by the diffs (new, modified or removed endpoints,
    parameters, request/response schemas, authentication) and apply them to the collection.

    ## Output Format
    Return the FULL valid JSON object following Postman Collection Format v2.1.0 structure
    with the changes applied. No explanations or additional text.
""").strip()


BACKFILL_SYSTEM_PROMPT = dedent("""
    # Collection Builder Agent

    You receive an OpenAPI schema and the Postman Collection Format v2.1.0 schema.

    ## Task
    Build a complete Postman collection covering every path and method of the OpenAPI schema.
    Group requests into folders by tag, include path/query parameters, headers, example request
    bodies and authentication described by the schema.

    ## Output Format
    Return the FULL valid JSON object following Postman Collection Format v2.1.0 structure.
    No explanations or additional text.
""").strip()


# ============================================================================
# USER PROMPT BUILDERS
# ============================================================================

def _section(number: int, title: str, value: Any) -> str:
    body = value if isinstance(value, str) else json.dumps(value)
    return f"### {number}. **{title}**\n{body}"


def _inputs(*sections: str) -> str:
    return "## Inputs\n" + "\n\n".join(sections)


def build_propose_prompt(
    diffs: List[ChangedFile],
    openapi_schema: Dict[str, Any],
    collection: Dict[str, Any],
    collection_format: Dict[str, Any],
) -> str:
    return _inputs(
        _section(1, "Git commit diffs", [d.model_dump(exclude_none=True) for d in diffs]),
        _section(2, "OpenAPI schema", openapi_schema),
        _section(3, "Current Postman collection", collection),
        _section(4, "Postman Collection Format v2.1.0", collection_format),
    )


def build_apply_prompt(
    proposal: str,
    collection: Dict[str, Any],
    collection_format: Dict[str, Any],
) -> str:
    return _inputs(
        _section(1, "Change instructions", json.dumps(proposal)),
        _section(2, "Current Postman collection", collection),
        _section(3, "Postman Collection Format v2.1.0", collection_format),
    )


def build_backfill_prompt(openapi_schema: Dict[str, Any], collection_format: Dict[str, Any]) -> str:
    return _inputs(
        _section(1, "OpenAPI schema", openapi_schema),
        _section(2, "Postman Collection Format v2.1.0", collection_format),
    )
