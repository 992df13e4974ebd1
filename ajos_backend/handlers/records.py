"""
Record command handlers
Cached read, fetch, create, update and delete routes for every entity collection
"""

from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from core.logger import get_logger
from core.storage import Storage, WriteResult
from core.views import ideas as idea_view
from models.base import BaseModel
from models.entities import (
    Contact,
    DailyEntry,
    DecisionGate,
    Discovery,
    Expense,
    Idea,
    Todo,
    WeeklyOutcome,
)
from models.requests import DeleteItemRequest
from system.runtime import get_storage

from . import api_handler

logger = get_logger(__name__)

WriteOp = Callable[[Storage, Any], Awaitable[WriteResult]]


def write_result_data(result: WriteResult) -> Dict[str, Any]:
    return {
        "success": result.success,
        "records": [r.model_dump(mode="json") for r in result.records],
        "reason": result.reason,
    }


def write_response(result: WriteResult, action: str) -> Dict[str, Any]:
    """Envelope for a settled write; failures still carry the reverted records"""
    response: Dict[str, Any] = {
        "success": result.success,
        "data": write_result_data(result),
        "timestamp": datetime.now().isoformat(),
    }
    if not result.success:
        response["message"] = f"Failed to {action}: {result.reason}"
    return response


def success_response(data: Any) -> Dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "timestamp": datetime.now().isoformat(),
    }


def failure_response(action: str, error: Exception) -> Dict[str, Any]:
    return {
        "success": False,
        "message": f"Failed to {action}: {str(error)}",
        "timestamp": datetime.now().isoformat(),
    }


def _named(func: Callable, name: str, annotations: Dict[str, Any]) -> Callable:
    # FastAPI reads the body model from these annotations
    func.__name__ = name
    func.__qualname__ = name
    func.__annotations__ = annotations
    return func


def register_entity_routes(
    path: str,
    label: str,
    model: Type[BaseModel],
    stem: str,
    plural: str,
    save_op: Optional[WriteOp] = None,
    update_op: Optional[WriteOp] = None,
) -> None:
    """Register the five record routes under /{path}

    @param path - URL segment, e.g. "todos"
    @param label - Human label used in messages, e.g. "todo"
    @param model - Entity model accepted as the request body
    @param stem - Storage method stem for single records, e.g. "todo"
    @param plural - Storage method stem for collections, e.g. "todos"
    @param save_op - Replaces the plain storage save (view rules applied first)
    @param update_op - Replaces the plain storage update
    """

    async def list_cached() -> Dict[str, Any]:
        try:
            records = getattr(get_storage(), f"get_{plural}")()
            return success_response([r.model_dump(mode="json") for r in records])
        except Exception as e:
            logger.error(f"Failed to read cached {path}: {e}", exc_info=True)
            return failure_response(f"read cached {path}", e)

    async def fetch() -> Dict[str, Any]:
        try:
            records = await getattr(get_storage(), f"fetch_{plural}")()
            return success_response([r.model_dump(mode="json") for r in records])
        except Exception as e:
            logger.error(f"Failed to fetch {path}: {e}", exc_info=True)
            return failure_response(f"fetch {path}", e)

    async def create(body) -> Dict[str, Any]:
        try:
            storage = get_storage()
            if save_op is not None:
                result = await save_op(storage, body)
            else:
                result = await getattr(storage, f"save_{stem}")(body)
            return write_response(result, f"save {label}")
        except Exception as e:
            logger.error(f"Failed to save {label}: {e}", exc_info=True)
            return failure_response(f"save {label}", e)

    async def update(body) -> Dict[str, Any]:
        try:
            storage = get_storage()
            if update_op is not None:
                result = await update_op(storage, body)
            else:
                result = await getattr(storage, f"update_{stem}")(body)
            return write_response(result, f"update {label}")
        except Exception as e:
            logger.error(f"Failed to update {label}: {e}", exc_info=True)
            return failure_response(f"update {label}", e)

    async def delete(body) -> Dict[str, Any]:
        try:
            result = await getattr(get_storage(), f"delete_{stem}")(body.id)
            return write_response(result, f"delete {label}")
        except Exception as e:
            logger.error(f"Failed to delete {label}: {e}", exc_info=True)
            return failure_response(f"delete {label}", e)

    returns = Dict[str, Any]
    name = path.replace("-", "_")

    api_handler(
        method="GET",
        path=f"/{path}",
        tags=[path],
        summary=f"Get cached {path}",
    )(_named(list_cached, f"get_cached_{name}", {"return": returns}))

    api_handler(
        method="POST",
        path=f"/{path}/fetch",
        tags=[path],
        summary=f"Fetch {path} from the backend",
    )(_named(fetch, f"fetch_{name}", {"return": returns}))

    api_handler(
        body=model,
        method="POST",
        path=f"/{path}/create",
        tags=[path],
        summary=f"Create {label}",
    )(_named(create, f"create_{name}", {"body": model, "return": returns}))

    api_handler(
        body=model,
        method="POST",
        path=f"/{path}/update",
        tags=[path],
        summary=f"Update {label}",
    )(_named(update, f"update_{name}", {"body": model, "return": returns}))

    api_handler(
        body=DeleteItemRequest,
        method="POST",
        path=f"/{path}/delete",
        tags=[path],
        summary=f"Delete {label}",
    )(_named(delete, f"delete_{name}", {"body": DeleteItemRequest, "return": returns}))


ENTITY_ROUTES = (
    ("daily", "daily entry", DailyEntry, "daily_entry", "daily_entries"),
    ("ideas", "idea", Idea, "idea", "ideas", idea_view.save_idea, idea_view.update_idea),
    ("weekly", "weekly outcome", WeeklyOutcome, "weekly_outcome", "weekly_outcomes"),
    ("todos", "todo", Todo, "todo", "todos"),
    ("decisions", "decision", DecisionGate, "decision", "decisions"),
    ("contacts", "contact", Contact, "contact", "contacts"),
    ("discoveries", "discovery", Discovery, "discovery", "discoveries"),
    ("expenses", "expense", Expense, "expense", "expenses"),
)

for _route in ENTITY_ROUTES:
    register_entity_routes(*_route)
