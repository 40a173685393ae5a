from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from farmdesk.core.config import settings
from farmdesk.core.logging import assistant_logger
from farmdesk.permissions.constants import Action, AppModule
from farmdesk.permissions.dependencies import require_module_permission
from farmdesk.services.assistant import (
    MISSING_KEY_MESSAGE,
    UPSTREAM_FAILURE_MESSAGE,
    AssistantError,
    ChatRequest,
    open_reply_stream,
)

router = APIRouter()


def get_assistant_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for upstream calls; None means the default network transport."""
    return None


def _error(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"message": message}})


@router.post(
    "/chat",
    dependencies=[Depends(require_module_permission(AppModule.ASSISTANT, Action.VIEW))],
)
async def chat(
    request: ChatRequest,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_assistant_transport),
):
    if not settings.GEMINI_API_KEY:
        assistant_logger.error("Chat requested but GEMINI_API_KEY is not set")
        return _error(MISSING_KEY_MESSAGE)

    try:
        chunks = await open_reply_stream(request.history, request.message, transport=transport)
    except AssistantError as e:
        return _error(e.message, e.status_code)
    except (httpx.HTTPError, ValueError) as e:
        assistant_logger.error("Upstream request failed", error=e)
        return _error(UPSTREAM_FAILURE_MESSAGE)

    return StreamingResponse(
        chunks,
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache"},
    )
