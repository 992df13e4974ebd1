"""
Daily capture command handlers
"""

from typing import Any, Dict

from core.logger import get_logger
from core.views import RecordNotFoundError
from core.views import daily as daily_view
from models.requests import MoveEntryRequest, ToggleItemRequest
from system.runtime import get_storage

from . import api_handler
from .records import failure_response, success_response, write_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/daily/view",
    tags=["daily"],
    summary="Get daily log view",
    description="Ordered entries with date labels plus the last seven days and whether each was logged",
)
async def get_daily_view() -> Dict[str, Any]:
    try:
        entries = await get_storage().fetch_daily_entries()
        return success_response(daily_view.build_daily_view(entries))
    except Exception as e:
        logger.error(f"Failed to build daily view: {e}", exc_info=True)
        return failure_response("build daily view", e)


@api_handler(
    body=ToggleItemRequest,
    method="POST",
    path="/daily/toggle-pin",
    tags=["daily"],
    summary="Pin or unpin a daily entry",
)
async def toggle_daily_pin(body: ToggleItemRequest) -> Dict[str, Any]:
    try:
        result = await daily_view.toggle_pin(get_storage(), body.id)
        return write_response(result, "pin daily entry")
    except RecordNotFoundError as e:
        logger.warning(str(e))
        return failure_response("pin daily entry", e)
    except Exception as e:
        logger.error(f"Failed to pin daily entry: {e}", exc_info=True)
        return failure_response("pin daily entry", e)


@api_handler(
    body=MoveEntryRequest,
    method="POST",
    path="/daily/move",
    tags=["daily"],
    summary="Move a daily entry up or down",
)
async def move_daily_entry(body: MoveEntryRequest) -> Dict[str, Any]:
    try:
        result = await daily_view.move_entry(get_storage(), body.id, body.direction)
        return write_response(result, "move daily entry")
    except RecordNotFoundError as e:
        logger.warning(str(e))
        return failure_response("move daily entry", e)
    except Exception as e:
        logger.error(f"Failed to move daily entry: {e}", exc_info=True)
        return failure_response("move daily entry", e)


@api_handler(
    method="POST",
    path="/daily/shuffle",
    tags=["daily"],
    summary="Shuffle daily entries",
    description="Randomize entry order, renumber positions and clear every pin",
)
async def shuffle_daily_entries() -> Dict[str, Any]:
    try:
        result = await daily_view.shuffle_entries(get_storage())
        return write_response(result, "shuffle daily entries")
    except Exception as e:
        logger.error(f"Failed to shuffle daily entries: {e}", exc_info=True)
        return failure_response("shuffle daily entries", e)
