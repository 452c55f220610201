from src.services.sync.backfill import BackfillResult, BackfillService, BackfillStrategy
from src.services.sync.sanitizer import parse_model_json, strip_code_fence
from src.services.sync.workflow import SyncResult, SyncState, SyncWorkflow

__all__ = [
    "BackfillResult",
    "BackfillService",
    "BackfillStrategy",
    "SyncResult",
    "SyncState",
    "SyncWorkflow",
    "parse_model_json",
    "strip_code_fence",
]
