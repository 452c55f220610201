from typing import Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header
from fastapi.requests import Request
from fastapi.responses import PlainTextResponse

from src.api.fastapi.dependencies import get_settings, get_sync_workflow
from src.core.config import Settings
from src.services.sync.workflow import SyncWorkflow
from src.utils.logging import logger

router = APIRouter(
    prefix="/github",
    tags=["Github"],
)


async def run_detached(workflow: SyncWorkflow, headers: Dict[str, str], body: bytes) -> None:
    """Run the sync after the response was sent; the outcome is only logged."""
    result = await workflow.run(headers, body)
    logger.info(f"Background collection sync finished: {result.state.value} - {result.message}")


@router.post("/events", response_class=PlainTextResponse)
async def github_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_github_event: Optional[str] = Header(None),
    workflow: SyncWorkflow = Depends(get_sync_workflow),
    app_settings: Settings = Depends(get_settings),
):
    """Handle GitHub push webhooks and sync the Postman collection."""
    body_bytes = await request.body()

    if x_github_event and x_github_event != "push":
        logger.info(f"Ignoring GitHub webhook event: {x_github_event}")
        return PlainTextResponse(f"Event '{x_github_event}' is not handled - ignoring.")

    headers = dict(request.headers)

    if app_settings.SYNC_IN_BACKGROUND:
        background_tasks.add_task(run_detached, workflow, headers, body_bytes)
        return PlainTextResponse("Accepted.")

    result = await workflow.run(headers, body_bytes)
    return PlainTextResponse(result.message)
