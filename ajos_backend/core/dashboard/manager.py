"""
Dashboard Manager

Handles the command-center overview, including:
- Pinned, overdue and due-today tasks
- Latest inbox ideas and discoveries
- Today's log, the current week's outcome and the network size
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.dates import get_local_date
from core.storage import Storage, WriteResult
from core.views import tasks as task_view
from models.entities import DailyEntry, Discovery, Idea, IdeaStatus, Todo, WeeklyOutcome

from core.logger import get_logger

logger = get_logger(__name__)

PREVIEW_SIZE = 3


def time_based_greeting(hour: int) -> str:
    if hour < 5:
        return "Late Night Operations"
    if hour < 12:
        return "Good Morning"
    if hour < 17:
        return "Good Afternoon"
    if hour < 22:
        return "Good Evening"
    return "Late Night Operations"


def pinned_first(items: List[Any]) -> List[Any]:
    """Stable: keeps the fetched order within pinned and unpinned items"""
    return sorted(items, key=lambda item: not item.pinned)


@dataclass
class DashboardSnapshot:
    """Dashboard data structure"""

    greeting: str
    today: str
    pinned_todos: List[Todo] = field(default_factory=list)
    overdue_todos: List[Todo] = field(default_factory=list)
    today_todos: List[Todo] = field(default_factory=list)
    recent_ideas: List[Idea] = field(default_factory=list)
    recent_discoveries: List[Discovery] = field(default_factory=list)
    today_log: Optional[DailyEntry] = None
    current_week: Optional[WeeklyOutcome] = None
    total_contacts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        def dump(items):
            return [item.model_dump(mode="json") for item in items]

        return {
            "greeting": self.greeting,
            "today": self.today,
            "pinnedTodos": dump(self.pinned_todos),
            "overdueTodos": dump(self.overdue_todos),
            "todayTodos": dump(self.today_todos),
            "recentIdeas": dump(self.recent_ideas),
            "recentDiscoveries": dump(self.recent_discoveries),
            "todayLog": self.today_log.model_dump(mode="json") if self.today_log else None,
            "currentWeek": (
                self.current_week.model_dump(mode="json") if self.current_week else None
            ),
            "totalContacts": self.total_contacts,
        }


class DashboardManager:
    """Dashboard manager

    Responsible for assembling the overview from the storage facade
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    @staticmethod
    def build_snapshot(
        todos: List[Todo],
        ideas: List[Idea],
        dailies: List[DailyEntry],
        weekly: List[WeeklyOutcome],
        discoveries: List[Discovery],
        contact_count: int,
        now: Optional[datetime] = None,
    ) -> DashboardSnapshot:
        now = now or datetime.now()
        today = get_local_date(now)

        inbox = [i for i in ideas if i.status == IdeaStatus.INBOX]

        return DashboardSnapshot(
            greeting=time_based_greeting(now.hour),
            today=today,
            pinned_todos=[t for t in todos if t.pinned and not t.completed],
            overdue_todos=[
                t for t in todos if t.deadline < today and not t.completed and not t.pinned
            ],
            today_todos=[
                t for t in todos if t.deadline == today and not t.completed and not t.pinned
            ],
            recent_ideas=pinned_first(inbox)[:PREVIEW_SIZE],
            recent_discoveries=pinned_first(discoveries)[:PREVIEW_SIZE],
            today_log=next((d for d in dailies if d.date == today), None),
            # Outcomes arrive newest first
            current_week=weekly[0] if weekly else None,
            total_contacts=contact_count,
        )

    async def load(self, now: Optional[datetime] = None) -> DashboardSnapshot:
        """Refresh the six collections concurrently and build the overview"""
        todos, ideas, dailies, weekly, discoveries, contacts = await asyncio.gather(
            self.storage.fetch_todos(),
            self.storage.fetch_ideas(),
            self.storage.fetch_daily_entries(),
            self.storage.fetch_weekly_outcomes(),
            self.storage.fetch_discoveries(),
            self.storage.fetch_contacts(),
        )
        snapshot = self.build_snapshot(
            todos, ideas, dailies, weekly, discoveries, len(contacts), now
        )
        logger.debug(
            f"Dashboard loaded: {len(snapshot.pinned_todos)} pinned, "
            f"{len(snapshot.overdue_todos)} overdue, {len(snapshot.today_todos)} today"
        )
        return snapshot

    async def toggle_complete(self, todo_id: str) -> WriteResult:
        return await task_view.toggle_complete(self.storage, todo_id)


def get_dashboard_manager() -> DashboardManager:
    """Dashboard manager bound to the running storage facade"""
    from system.runtime import get_storage

    return DashboardManager(get_storage())
