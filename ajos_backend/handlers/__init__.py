"""
Handler modules with automatic API registration
Every @api_handler function becomes a FastAPI route under the /api prefix;
handlers are keyed by "METHOD path" so two modules cannot claim the same route
"""

import inspect
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Type,
    TypeVar,
)

from core.logger import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI

F = TypeVar("F", bound=Callable[..., Any])

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

logger = get_logger(__name__)

# "METHOD /path" -> handler information
_handler_registry: Dict[str, Dict[str, Any]] = {}


def _first_doc_line(doc: Optional[str]) -> Optional[str]:
    if not doc:
        return None
    return doc.strip().split("\n")[0]


def api_handler(
    body: Optional[Type] = None,
    method: str = "POST",
    path: Optional[str] = None,
    tags: Optional[List[str]] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
):
    """
    API handler decorator; records the function for route registration

    @param body - Request model; the function must take it as a parameter
    @param method - HTTP method (GET, POST, PUT, PATCH, DELETE)
    @param path - Route path below the prefix (defaults to /<function name>)
    @param tags - OpenAPI tags (defaults to the module name)
    @param summary - API summary (defaults to the first docstring line)
    @param description - API description (defaults to the docstring)
    """
    method = method.upper()
    if method not in HTTP_METHODS:
        raise ValueError(f"Unsupported HTTP method: {method}")

    def decorator(func: F) -> F:
        func_name = getattr(func, "__name__", "unknown")
        module_name = (getattr(func, "__module__", "") or "unknown").split(".")[-1]
        func_doc = inspect.getdoc(func)
        route_path = path or f"/{func_name}"
        signature = inspect.signature(func)

        if body is not None and not any(
            p.annotation is body for p in signature.parameters.values()
        ):
            raise TypeError(f"{func_name} declares body {body.__name__} but takes no such parameter")

        key = f"{method} {route_path}"
        if key in _handler_registry:
            raise ValueError(
                f"Route {key} already registered by {_handler_registry[key]['name']}"
            )

        _handler_registry[key] = {
            "name": func_name,
            "func": func,
            "body": body,
            "method": method,
            "path": route_path,
            "tags": tags or [module_name],
            "module": module_name,
            "summary": summary or _first_doc_line(func_doc) or func_name,
            "description": description or func_doc or "",
        }

        # Keep original function unchanged
        return func

    return decorator


def get_registered_handlers() -> Dict[str, Dict[str, Any]]:
    """Copy of the registry, keyed by "METHOD path" """
    return _handler_registry.copy()


def register_fastapi_routes(app: "FastAPI", prefix: str = "/api") -> None:
    """
    Add every registered handler to the app as a route

    @param app - FastAPI application instance
    @param prefix - Route prefix
    """
    logger.info(f"Starting FastAPI route registration, {len(_handler_registry)} handlers")

    for key, info in _handler_registry.items():
        full_path = f"{prefix}{info['path']}"
        try:
            app.add_api_route(
                full_path,
                info["func"],
                methods=[info["method"]],
                name=info["name"],
                tags=info["tags"],
                summary=info["summary"],
                description=info["description"],
                response_model=None,
            )
        except Exception as e:
            logger.error(f"✗ Failed to register route {key}: {e}", exc_info=True)
            continue

        body = info["body"]
        logger.debug(
            f"✓ Registered {info['method']} {full_path} -> {info['module']}.{info['name']}"
            + (f" (body {body.__name__})" if body else "")
        )

    logger.info(f"FastAPI route registration completed: {len(_handler_registry)} routes")


# Import all handler modules to trigger decorator registration
# Note: These imports must be after all decorator definitions to avoid circular imports
# ruff: noqa: E402
from . import (
    contacts,
    daily,
    dashboard,
    discoveries,
    ideas,
    insights,
    records,
    shell,
    system,
    todos,
)

__all__ = [
    "api_handler",
    "register_fastapi_routes",
    "get_registered_handlers",
    "contacts",
    "daily",
    "dashboard",
    "discoveries",
    "ideas",
    "insights",
    "records",
    "shell",
    "system",
    "todos",
]
