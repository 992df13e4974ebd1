"""
Idea inbox command handlers
"""

from typing import Any, Dict

from core.logger import get_logger
from core.views import RecordNotFoundError
from core.views import ideas as idea_view
from models.requests import ToggleItemRequest
from system.runtime import get_storage

from . import api_handler
from .records import failure_response, success_response, write_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/ideas/inbox",
    tags=["ideas"],
    summary="Get idea inbox",
    description="Unexecuted ideas first, pinned ideas next, newest first within each",
)
async def get_idea_inbox() -> Dict[str, Any]:
    try:
        ideas = await get_storage().fetch_ideas()
        return success_response(idea_view.build_inbox_view(ideas))
    except Exception as e:
        logger.error(f"Failed to build idea inbox: {e}", exc_info=True)
        return failure_response("build idea inbox", e)


@api_handler(
    body=ToggleItemRequest,
    method="POST",
    path="/ideas/toggle-pin",
    tags=["ideas"],
    summary="Pin or unpin an idea",
)
async def toggle_idea_pin(body: ToggleItemRequest) -> Dict[str, Any]:
    try:
        result = await idea_view.toggle_pin(get_storage(), body.id)
        return write_response(result, "pin idea")
    except RecordNotFoundError as e:
        logger.warning(str(e))
        return failure_response("pin idea", e)
    except Exception as e:
        logger.error(f"Failed to pin idea: {e}", exc_info=True)
        return failure_response("pin idea", e)


@api_handler(
    body=ToggleItemRequest,
    method="POST",
    path="/ideas/toggle-executed",
    tags=["ideas"],
    summary="Mark an idea executed or not",
)
async def toggle_idea_executed(body: ToggleItemRequest) -> Dict[str, Any]:
    try:
        result = await idea_view.toggle_executed(get_storage(), body.id)
        return write_response(result, "mark idea")
    except RecordNotFoundError as e:
        logger.warning(str(e))
        return failure_response("mark idea", e)
    except Exception as e:
        logger.error(f"Failed to mark idea: {e}", exc_info=True)
        return failure_response("mark idea", e)
