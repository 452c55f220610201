import json
import re
from typing import Any, Dict

from src.exceptions.sync_exceptions import ParseError
from src.utils.logging import get_logger

logger = get_logger(__name__)

_OPENING_FENCE = re.compile(r"^```[\w.+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```$")


def strip_code_fence(text: str) -> str:
    """Remove a leading ``` fence (with any language tag) and its trailing ``` delimiter."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
        cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_model_json(text: str) -> Dict[str, Any]:
    """Parse a model response into a JSON object after stripping code fences.

    Raises:
        ParseError: If the sanitized text is empty, not JSON, or not an object
    """
    if not text or not text.strip():
        raise ParseError("Model returned an empty response", raw_response=text)

    cleaned = strip_code_fence(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Model response is not valid JSON: {e}")
        raise ParseError(
            "Model response is not valid JSON",
            raw_response=text,
            parse_error=str(e),
        ) from e

    if not isinstance(parsed, dict):
        raise ParseError(
            f"Model response must be a JSON object, got {type(parsed).__name__}",
            raw_response=text,
        )
    return parsed
