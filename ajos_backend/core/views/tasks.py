"""
Task list view
Filters, grouping and status operations for todos
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.dates import add_days, format_short_date, get_local_date, timestamp_to_local_date
from core.storage import Storage, WriteResult
from models.entities import TimeSlot, Todo, TodoPriority, TodoStatus

from . import RecordNotFoundError

PRIORITY_RANK: Dict[TodoPriority, int] = {
    TodoPriority.CRITICAL: 0,
    TodoPriority.HIGH: 1,
    TodoPriority.MEDIUM: 2,
    TodoPriority.LOW: 3,
}

TIME_SLOT_RANK: Dict[TimeSlot, int] = {
    TimeSlot.MORNING: 0,
    TimeSlot.AFTERNOON: 1,
    TimeSlot.EVENING: 2,
    TimeSlot.NIGHT: 3,
    TimeSlot.ANYTIME: 4,
}

TASK_FILTERS = ("all", "today", "upcoming", "completed")


@dataclass
class TodoGroup:
    key: str
    label: str
    todos: List[Todo] = field(default_factory=list)
    is_overdue: bool = False
    is_today: bool = False
    is_completed: bool = False
    is_pinned: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "todos": [t.model_dump(mode="json") for t in self.todos],
            "count": len(self.todos),
            "isOverdue": self.is_overdue,
            "isToday": self.is_today,
            "isCompleted": self.is_completed,
            "isPinned": self.is_pinned,
        }


def _pinned_sort_key(todo: Todo):
    return (PRIORITY_RANK[todo.priority], todo.deadline)


def _date_group_sort_key(todo: Todo):
    slot = todo.time_slot or TimeSlot.ANYTIME
    # Tasks with a target time come first, earliest first
    return (
        PRIORITY_RANK[todo.priority],
        TIME_SLOT_RANK[slot],
        todo.target_time is None,
        todo.target_time or "",
    )


def filter_todos(
    todos: List[Todo],
    task_filter: str = "all",
    completed_date: Optional[str] = None,
    today: Optional[str] = None,
) -> List[Todo]:
    today = today or get_local_date()

    if task_filter == "today":
        filtered = [t for t in todos if t.deadline == today and not t.completed]
    elif task_filter == "upcoming":
        filtered = [t for t in todos if t.deadline > today and not t.completed]
    elif task_filter == "completed":
        filtered = [t for t in todos if t.completed]
        if completed_date:
            filtered = [
                t for t in filtered if timestamp_to_local_date(t.completed_at) == completed_date
            ]
    else:
        filtered = list(todos)
    return filtered


def pending_group_label(day: str, today: str) -> str:
    if day == today:
        return "Today"
    if day == add_days(today, 1):
        return "Tomorrow"
    return format_short_date(day)


def completed_group_label(day: str, today: str) -> str:
    if day == "unknown":
        return "Completed (Date Unknown)"
    if day == today:
        return "Completed Today"
    if day == add_days(today, -1):
        return "Completed Yesterday"
    return f"Completed on {format_short_date(day)}"


def group_todos(
    todos: List[Todo], task_filter: str = "all", today: Optional[str] = None
) -> List[TodoGroup]:
    """Pinned group, then pending tasks by deadline, then completed tasks by completion day"""
    today = today or get_local_date()

    pending = [t for t in todos if not t.completed]
    completed = [t for t in todos if t.completed]

    groups: List[TodoGroup] = []

    pinned = [t for t in pending if t.pinned]
    if pinned:
        groups.append(
            TodoGroup(
                key="pinned",
                label="Pinned",
                todos=sorted(pinned, key=_pinned_sort_key),
                is_pinned=True,
            )
        )

    by_deadline: Dict[str, List[Todo]] = {}
    for todo in pending:
        if not todo.pinned:
            by_deadline.setdefault(todo.deadline, []).append(todo)

    # Overdue dates sort before today and future dates lexically
    for day in sorted(by_deadline):
        groups.append(
            TodoGroup(
                key=day,
                label=pending_group_label(day, today),
                todos=sorted(by_deadline[day], key=_date_group_sort_key),
                is_overdue=day < today,
                is_today=day == today,
            )
        )

    if completed and task_filter in ("all", "completed"):
        by_completion: Dict[str, List[Todo]] = {}
        for todo in completed:
            day = timestamp_to_local_date(todo.completed_at) or "unknown"
            by_completion.setdefault(day, []).append(todo)

        days = sorted((d for d in by_completion if d != "unknown"), reverse=True)
        if "unknown" in by_completion:
            days.append("unknown")

        for day in days:
            groups.append(
                TodoGroup(
                    key=day,
                    label=completed_group_label(day, today),
                    todos=sorted(
                        by_completion[day], key=lambda t: t.completed_at or "", reverse=True
                    ),
                    is_completed=True,
                )
            )

    return groups


def todo_counters(todos: List[Todo], today: Optional[str] = None) -> Dict[str, int]:
    today = today or get_local_date()
    return {
        "today": sum(1 for t in todos if t.deadline == today and not t.completed),
        "overdue": sum(1 for t in todos if t.deadline < today and not t.completed),
    }


def build_task_view(
    todos: List[Todo],
    task_filter: str = "all",
    completed_date: Optional[str] = None,
    today: Optional[str] = None,
) -> Dict[str, Any]:
    today = today or get_local_date()
    filtered = filter_todos(todos, task_filter, completed_date, today)
    return {
        "filter": task_filter,
        "completedDate": completed_date,
        "groups": [g.to_dict() for g in group_todos(filtered, task_filter, today)],
        "counters": todo_counters(todos, today),
    }


def _find(storage: Storage, todo_id: str) -> Todo:
    for todo in storage.get_todos():
        if todo.id == todo_id:
            return todo
    raise RecordNotFoundError("Todo", todo_id)


async def toggle_complete(
    storage: Storage, todo_id: str, now: Optional[datetime] = None
) -> WriteResult:
    return await storage.update_todo(_find(storage, todo_id).toggled(now))


async def set_status(
    storage: Storage, todo_id: str, status: TodoStatus, now: Optional[datetime] = None
) -> WriteResult:
    return await storage.update_todo(_find(storage, todo_id).with_status(status, now))


async def toggle_pin(storage: Storage, todo_id: str) -> WriteResult:
    todo = _find(storage, todo_id)
    return await storage.update_todo(todo.model_copy(update={"pinned": not todo.pinned}))
