"""
Idea inbox view
"""

from typing import Any, Dict, List

from core.storage import Storage, WriteResult
from models.entities import Category, Idea

from . import RecordNotFoundError


def sort_inbox(ideas: List[Idea]) -> List[Idea]:
    """Unexecuted first, then pinned, then newest trace date"""
    newest_first = sorted(ideas, key=lambda i: i.trace_date or i.date, reverse=True)
    return sorted(newest_first, key=lambda i: (i.executed, not i.pinned))


def with_platform_rule(idea: Idea) -> Idea:
    """A platform only applies to Content ideas"""
    if idea.category != Category.CONTENT and idea.platform is not None:
        return idea.model_copy(update={"platform": None})
    return idea


def build_inbox_view(ideas: List[Idea]) -> Dict[str, Any]:
    return {
        "ideas": [i.model_dump(mode="json") for i in sort_inbox(ideas)],
        "total": len(ideas),
        "contentCount": sum(1 for i in ideas if i.category == Category.CONTENT),
    }


def _find(storage: Storage, idea_id: str) -> Idea:
    for idea in storage.get_ideas():
        if idea.id == idea_id:
            return idea
    raise RecordNotFoundError("Idea", idea_id)


async def _update_and_refresh(storage: Storage, idea: Idea) -> WriteResult:
    result = await storage.update_idea(idea)
    # The inbox re-reads after every edit so server-side ordering is reflected
    refreshed = await storage.fetch_ideas()
    return WriteResult(result.success, refreshed, result.reason)


async def save_idea(storage: Storage, idea: Idea) -> WriteResult:
    result = await storage.save_idea(with_platform_rule(idea))
    if not result.success:
        return result
    return WriteResult(True, await storage.fetch_ideas())


async def update_idea(storage: Storage, idea: Idea) -> WriteResult:
    return await _update_and_refresh(storage, with_platform_rule(idea))


async def toggle_pin(storage: Storage, idea_id: str) -> WriteResult:
    idea = _find(storage, idea_id)
    return await _update_and_refresh(storage, idea.model_copy(update={"pinned": not idea.pinned}))


async def toggle_executed(storage: Storage, idea_id: str) -> WriteResult:
    idea = _find(storage, idea_id)
    return await _update_and_refresh(
        storage, idea.model_copy(update={"executed": not idea.executed})
    )
