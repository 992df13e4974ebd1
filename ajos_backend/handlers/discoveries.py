"""
Discoveries command handlers
"""

from typing import Any, Dict

from core.logger import get_logger
from core.views import RecordNotFoundError
from core.views import discoveries as discovery_view
from models.requests import ToggleItemRequest
from system.runtime import get_storage

from . import api_handler
from .records import failure_response, success_response, write_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/discoveries/view",
    tags=["discoveries"],
    summary="Get discoveries, pinned first, with impact counts",
)
async def get_discoveries_view() -> Dict[str, Any]:
    try:
        discoveries = await get_storage().fetch_discoveries()
        return success_response(discovery_view.build_discoveries_view(discoveries))
    except Exception as e:
        logger.error(f"Failed to build discoveries view: {e}", exc_info=True)
        return failure_response("build discoveries view", e)


@api_handler(
    body=ToggleItemRequest,
    method="POST",
    path="/discoveries/toggle-pin",
    tags=["discoveries"],
    summary="Pin or unpin a discovery",
)
async def toggle_discovery_pin(body: ToggleItemRequest) -> Dict[str, Any]:
    try:
        result = await discovery_view.toggle_pin(get_storage(), body.id)
        return write_response(result, "pin discovery")
    except RecordNotFoundError as e:
        logger.warning(str(e))
        return failure_response("pin discovery", e)
    except Exception as e:
        logger.error(f"Failed to pin discovery: {e}", exc_info=True)
        return failure_response("pin discovery", e)
