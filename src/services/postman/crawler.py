"""
Collection Crawler

Flattens the folder/request tree of a Postman collection into an ordered list
of CrawlRecords. Each record carries a location expression that addresses
its position in the original nested document.

Location expressions are tuples of tokens alternating property names and
integer indices, e.g. ``("item", 2, "item", 0)``. The colon-delimited string
form ``item:2:item:0`` is only used at the API boundary.

Traversal is breadth-first over folder depth: subfolders are queued and only
visited after every sibling at the current depth has been emitted.
"""

from collections import deque
from typing import Any, Deque, List, Optional, Sequence, Tuple, Union

from src.models.schemas.postman import CrawlRecord, CrawlRecordType
from src.utils.logging import get_logger

logger = get_logger(__name__)

Token = Union[str, int]
LocationPath = Tuple[Token, ...]

ROOT_LOCATION: LocationPath = ("item",)
LOCATION_SEPARATOR = ":"


def parse_location(expression: str) -> LocationPath:
    """Parse ``item:2:item:0`` into ``("item", 2, "item", 0)``."""
    if not expression:
        return ()
    return tuple(
        int(token) if token.isdigit() else token
        for token in expression.split(LOCATION_SEPARATOR)
    )


def format_location(path: Sequence[Token]) -> str:
    return LOCATION_SEPARATOR.join(str(token) for token in path)


def resolve_location(root: Any, location: Union[str, Sequence[Token]]) -> Optional[Any]:
    """Follow a location expression from ``root``.

    Returns None (and logs) when a property is missing, an index is out of
    bounds, or a non-array is indexed numerically.
    """
    path = parse_location(location) if isinstance(location, str) else tuple(location)
    node = root

    for depth, token in enumerate(path):
        if isinstance(token, int):
            if not isinstance(node, list):
                logger.warning(
                    f"Cannot index non-array with {token} at {format_location(path[:depth]) or '<root>'}"
                )
                return None
            if not 0 <= token < len(node):
                logger.warning(f"Index {token} out of bounds at {format_location(path[:depth])}")
                return None
            node = node[token]
        else:
            if not isinstance(node, dict) or token not in node:
                logger.warning(
                    f"Missing property '{token}' at {format_location(path[:depth]) or '<root>'}"
                )
                return None
            node = node[token]

    return node


def crawl(collection: Any) -> List[CrawlRecord]:
    """Flatten a collection into CrawlRecords in breadth-first order.

    For every element of a visited items array:
    - a nested ``item`` array queues ``parent + (i, "item")`` for a later pass
    - a ``request`` field emits a request record at ``parent + (i,)``
    - otherwise a folder record is emitted at ``parent``
    """
    records: List[CrawlRecord] = []
    worklist: Deque[LocationPath] = deque([ROOT_LOCATION])

    while worklist:
        parent = worklist.popleft()
        items = resolve_location(collection, parent)
        if not isinstance(items, list):
            logger.warning(f"Location {format_location(parent)} does not resolve to an items array")
            continue

        for index, element in enumerate(items):
            if not isinstance(element, dict):
                logger.warning(f"Skipping non-object element at {format_location(parent + (index,))}")
                continue

            if isinstance(element.get("item"), list):
                worklist.append(parent + (index, "item"))

            if "request" in element:
                records.append(
                    CrawlRecord(
                        type=CrawlRecordType.REQUEST,
                        name=element.get("name"),
                        id=_element_id(element),
                        location=format_location(parent + (index,)),
                        data=_request_payload(element["request"]),
                    )
                )
            else:
                records.append(
                    CrawlRecord(
                        type=CrawlRecordType.FOLDER,
                        name=element.get("name"),
                        location=format_location(parent),
                    )
                )

    return records


def _element_id(element: dict) -> Optional[str]:
    value = element.get("id")
    return str(value) if value is not None else None


def _request_payload(request: Any) -> dict:
    # v2.1 allows a bare URL string as the request
    if isinstance(request, dict):
        return request
    return {"url": request}
