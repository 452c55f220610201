from typing import Iterable, List, Sequence

from src.models.schemas.github_events import ChangedFile
from src.utils.logging import get_logger

logger = get_logger(__name__)


def is_watched_branch(ref: str, branches: Sequence[str]) -> bool:
    """True if no branches are configured or ``ref`` contains one of them."""
    if not branches:
        return True
    # Substring match: "main" also matches "refs/heads/domain".
    return any(branch in ref for branch in branches)


def is_in_scope(filename: str, scope: Sequence[str]) -> bool:
    """True if no scope is configured or ``filename`` starts with a scope prefix."""
    if not scope:
        return True
    return any(filename.startswith(prefix) for prefix in scope)


def filter_relevant_files(files: Iterable[ChangedFile], scope: Sequence[str]) -> List[ChangedFile]:
    relevant = []
    for changed in files:
        if is_in_scope(changed.filename, scope):
            relevant.append(changed)
        else:
            logger.info(f"{changed.filename} is outside of scope - ignoring.")
    return relevant
