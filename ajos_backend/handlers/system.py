"""
System module command handlers
Full sync and runtime status
"""

from datetime import datetime
from typing import Any, Dict

from core.logger import get_logger
from system.runtime import get_runtime_stats, get_storage

from . import api_handler

logger = get_logger(__name__)


@api_handler(
    method="POST",
    path="/system/sync",
    tags=["system"],
    summary="Sync every collection",
    description="Refresh all eight collections from the backend concurrently; failed collections keep their cache",
)
async def sync_all() -> Dict[str, Any]:
    """Sync every collection

    @returns Record count per collection
    """
    try:
        synced = await get_storage().sync_all()
        return {
            "success": True,
            "data": {name: len(records) for name, records in synced.items()},
            "timestamp": datetime.now().isoformat(),
        }
    except Exception as e:
        logger.error(f"Failed to sync: {e}", exc_info=True)
        return {
            "success": False,
            "message": f"Failed to sync: {str(e)}",
            "timestamp": datetime.now().isoformat(),
        }


@api_handler(
    method="GET",
    path="/system/status",
    tags=["system"],
    summary="Get runtime status",
)
async def get_system_status() -> Dict[str, Any]:
    """Get runtime status

    @returns Connection mode, rate-limit headroom and cached collection sizes
    """
    try:
        return {
            "success": True,
            "data": get_runtime_stats(),
            "timestamp": datetime.now().isoformat(),
        }
    except Exception as e:
        logger.error(f"Failed to get system status: {e}", exc_info=True)
        return {
            "success": False,
            "message": f"Failed to get system status: {str(e)}",
            "timestamp": datetime.now().isoformat(),
        }
