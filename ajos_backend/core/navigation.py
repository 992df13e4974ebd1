"""
Shell navigation
Route slugs used in URL fragments, the views they open, and the stored theme
"""

from enum import Enum
from typing import Dict

from core.cache import CacheStore
from core.logger import get_logger

logger = get_logger(__name__)

THEME_KEY = "theme"
THEMES = ("light", "dark")


class View(str, Enum):
    DASHBOARD = "dashboard"
    TODOS = "todos"
    DAILY = "daily"
    IDEAS = "ideas"
    DISCOVERIES = "discoveries"
    CONTACTS = "contacts"
    INSIGHTS = "insights"


VIEW_TO_ROUTE: Dict[View, str] = {
    View.DASHBOARD: "commandcenter",
    View.TODOS: "missioncontrol",
    View.DAILY: "dailylogs",
    View.IDEAS: "ideainbox",
    View.DISCOVERIES: "discoveries",
    View.CONTACTS: "networknode",
    View.INSIGHTS: "insights",
}

ROUTE_TO_VIEW: Dict[str, View] = {route: view for view, route in VIEW_TO_ROUTE.items()}


def view_for_route(slug: str) -> View:
    """Accepts "insights", "#/insights" or "/Insights"; unknown slugs open the dashboard"""
    cleaned = (slug or "").strip().lstrip("#").strip("/").lower()
    return ROUTE_TO_VIEW.get(cleaned, View.DASHBOARD)


def route_for_view(view: View) -> str:
    return VIEW_TO_ROUTE[View(view)]


def get_theme(cache: CacheStore, prefers_dark: bool = False) -> str:
    saved = cache.get(THEME_KEY)
    if saved in THEMES:
        return saved
    return "dark" if prefers_dark else "light"


def set_theme(cache: CacheStore, theme: str) -> str:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme}")
    cache.set(THEME_KEY, theme)
    logger.debug(f"Theme set to {theme}")
    return theme


def reset_theme(cache: CacheStore) -> None:
    """Forget the saved theme so the client preference applies again"""
    cache.delete(THEME_KEY)
