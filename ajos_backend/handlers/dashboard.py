"""
Dashboard module command handlers
Command-center overview and its quick actions
"""

from datetime import datetime
from typing import Any, Dict

from core.dashboard.manager import get_dashboard_manager
from core.logger import get_logger
from core.views import RecordNotFoundError
from models.requests import ToggleItemRequest

from . import api_handler
from .records import write_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/dashboard",
    tags=["dashboard"],
    summary="Get command-center overview",
    description="Pinned, overdue and due-today tasks, latest ideas and discoveries, today's log, current week and network size",
)
async def get_dashboard() -> Dict[str, Any]:
    """Get command-center overview

    @returns Greeting, task sections and previews for every collection
    """
    try:
        dashboard_manager = get_dashboard_manager()
        snapshot = await dashboard_manager.load()

        return {
            "success": True,
            "data": snapshot.to_dict(),
            "timestamp": datetime.now().isoformat(),
        }

    except Exception as e:
        logger.error(f"Failed to load dashboard: {e}", exc_info=True)
        return {
            "success": False,
            "message": f"Failed to load dashboard: {str(e)}",
            "timestamp": datetime.now().isoformat(),
        }


@api_handler(
    body=ToggleItemRequest,
    method="POST",
    path="/dashboard/toggle-complete",
    tags=["dashboard"],
    summary="Toggle task completion from the dashboard",
)
async def toggle_dashboard_todo(body: ToggleItemRequest) -> Dict[str, Any]:
    try:
        dashboard_manager = get_dashboard_manager()
        result = await dashboard_manager.toggle_complete(body.id)
        return write_response(result, "toggle task")

    except RecordNotFoundError as e:
        logger.warning(str(e))
        return {
            "success": False,
            "message": str(e),
            "timestamp": datetime.now().isoformat(),
        }
    except Exception as e:
        logger.error(f"Failed to toggle task from dashboard: {e}", exc_info=True)
        return {
            "success": False,
            "message": f"Failed to toggle task: {str(e)}",
            "timestamp": datetime.now().isoformat(),
        }
