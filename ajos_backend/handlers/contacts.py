"""
Network contacts command handlers
"""

from typing import Any, Dict

from core.logger import get_logger
from core.views.contacts import build_contacts_view
from system.runtime import get_storage

from . import api_handler
from .records import failure_response, success_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/contacts/view",
    tags=["contacts"],
    summary="Get contacts with role and company split",
)
async def get_contacts_view() -> Dict[str, Any]:
    try:
        contacts = await get_storage().fetch_contacts()
        return success_response(build_contacts_view(contacts))
    except Exception as e:
        logger.error(f"Failed to build contacts view: {e}", exc_info=True)
        return failure_response("build contacts view", e)
