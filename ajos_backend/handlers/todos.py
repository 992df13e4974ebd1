"""
Task module command handlers
Grouped task list and status operations
"""

from typing import Any, Dict

from core.logger import get_logger
from core.views import RecordNotFoundError
from core.views import tasks as task_view
from models.requests import SetTodoStatusRequest, ToggleItemRequest, TodoViewRequest
from system.runtime import get_storage

from . import api_handler
from .records import failure_response, success_response, write_response

logger = get_logger(__name__)


@api_handler(
    body=TodoViewRequest,
    method="POST",
    path="/todos/view",
    tags=["todos"],
    summary="Get grouped task list",
    description="Refresh tasks and group them into pinned, per-deadline and per-completion-day sections",
)
async def get_todo_view(body: TodoViewRequest) -> Dict[str, Any]:
    """Get grouped task list

    @param body - Filter (all, today, upcoming, completed) and optional completion date
    @returns Groups plus today/overdue counters
    """
    try:
        todos = await get_storage().fetch_todos()
        view = task_view.build_task_view(todos, body.filter, body.completed_date)
        return success_response(view)
    except Exception as e:
        logger.error(f"Failed to build task view: {e}", exc_info=True)
        return failure_response("build task view", e)


@api_handler(
    body=ToggleItemRequest,
    method="POST",
    path="/todos/toggle-complete",
    tags=["todos"],
    summary="Toggle task completion",
)
async def toggle_todo_complete(body: ToggleItemRequest) -> Dict[str, Any]:
    """Completed tasks go back to Pending, anything else becomes Completed"""
    try:
        result = await task_view.toggle_complete(get_storage(), body.id)
        return write_response(result, "toggle task")
    except RecordNotFoundError as e:
        logger.warning(str(e))
        return failure_response("toggle task", e)
    except Exception as e:
        logger.error(f"Failed to toggle task: {e}", exc_info=True)
        return failure_response("toggle task", e)


@api_handler(
    body=SetTodoStatusRequest,
    method="POST",
    path="/todos/set-status",
    tags=["todos"],
    summary="Set task status",
)
async def set_todo_status(body: SetTodoStatusRequest) -> Dict[str, Any]:
    try:
        result = await task_view.set_status(get_storage(), body.id, body.status)
        return write_response(result, "set task status")
    except RecordNotFoundError as e:
        logger.warning(str(e))
        return failure_response("set task status", e)
    except Exception as e:
        logger.error(f"Failed to set task status: {e}", exc_info=True)
        return failure_response("set task status", e)


@api_handler(
    body=ToggleItemRequest,
    method="POST",
    path="/todos/toggle-pin",
    tags=["todos"],
    summary="Pin or unpin a task",
)
async def toggle_todo_pin(body: ToggleItemRequest) -> Dict[str, Any]:
    try:
        result = await task_view.toggle_pin(get_storage(), body.id)
        return write_response(result, "pin task")
    except RecordNotFoundError as e:
        logger.warning(str(e))
        return failure_response("pin task", e)
    except Exception as e:
        logger.error(f"Failed to pin task: {e}", exc_info=True)
        return failure_response("pin task", e)
