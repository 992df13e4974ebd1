"""
Shell command handlers
Route slugs and the theme preference
"""

from typing import Any, Dict

from core.logger import get_logger
from core.navigation import (
    get_theme,
    reset_theme,
    route_for_view,
    set_theme,
    view_for_route,
)
from models.requests import ThemeRequest
from system.runtime import get_runtime

from . import api_handler
from .records import failure_response, success_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/shell/route/{slug}",
    tags=["shell"],
    summary="Resolve a route slug to a view",
    description="Unknown slugs resolve to the dashboard",
)
async def resolve_route(slug: str) -> Dict[str, Any]:
    view = view_for_route(slug)
    return success_response({"view": view.value, "route": route_for_view(view)})


@api_handler(
    method="GET",
    path="/shell/theme",
    tags=["shell"],
    summary="Get the stored theme",
)
async def get_shell_theme(prefers_dark: bool = False) -> Dict[str, Any]:
    """Saved theme, else dark when the client prefers dark, else light"""
    try:
        return success_response({"theme": get_theme(get_runtime().cache, prefers_dark)})
    except Exception as e:
        logger.error(f"Failed to read theme: {e}", exc_info=True)
        return failure_response("read theme", e)


@api_handler(
    body=ThemeRequest,
    method="POST",
    path="/shell/theme",
    tags=["shell"],
    summary="Store the theme",
)
async def set_shell_theme(body: ThemeRequest) -> Dict[str, Any]:
    try:
        return success_response({"theme": set_theme(get_runtime().cache, body.theme)})
    except Exception as e:
        logger.error(f"Failed to store theme: {e}", exc_info=True)
        return failure_response("store theme", e)


@api_handler(
    method="DELETE",
    path="/shell/theme",
    tags=["shell"],
    summary="Forget the stored theme",
)
async def reset_shell_theme(prefers_dark: bool = False) -> Dict[str, Any]:
    """Drop the saved theme; returns the theme the client falls back to"""
    try:
        cache = get_runtime().cache
        reset_theme(cache)
        return success_response({"theme": get_theme(cache, prefers_dark)})
    except Exception as e:
        logger.error(f"Failed to reset theme: {e}", exc_info=True)
        return failure_response("reset theme", e)
