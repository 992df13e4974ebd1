"""
Daily capture view
Ordering, manual re-positioning and date helpers for daily log entries
"""

import random
from typing import Any, Dict, List, Optional

from core.dates import add_days, format_short_date, get_local_date, parse_local_date
from core.logger import get_logger
from core.storage import Storage, WriteResult
from models.entities import DailyEntry

from . import RecordNotFoundError

logger = get_logger(__name__)


def sort_entries(entries: List[DailyEntry]) -> List[DailyEntry]:
    """Same order the backend applies: pinned, position, newest trace date"""
    newest_first = sorted(entries, key=lambda e: e.trace_date or e.date, reverse=True)
    return sorted(newest_first, key=lambda e: (not e.pinned, e.position))


def format_date_label(day: str, today: Optional[str] = None) -> str:
    today = today or get_local_date()
    if day == today:
        return "Today"
    if day == add_days(today, -1):
        return "Yesterday"
    return format_short_date(day)


def quick_dates(entries: List[DailyEntry], today: Optional[str] = None) -> List[Dict[str, Any]]:
    """The last seven days, newest first, flagged when a log exists"""
    today = today or get_local_date()
    logged = {e.date for e in entries}

    dates = []
    for offset in range(7):
        day = add_days(today, -offset)
        if offset == 0:
            label = "Today"
        elif offset == 1:
            label = "Yesterday"
        else:
            parsed = parse_local_date(day)
            label = f"{parsed:%a} {parsed.day}"
        dates.append({"date": day, "label": label, "hasEntry": day in logged})
    return dates


def build_daily_view(entries: List[DailyEntry], today: Optional[str] = None) -> Dict[str, Any]:
    today = today or get_local_date()
    ordered = sort_entries(entries)
    return {
        "entries": [
            {**e.model_dump(mode="json"), "dateLabel": format_date_label(e.date, today)}
            for e in ordered
        ],
        "quickDates": quick_dates(entries, today),
        "todayLogged": any(e.date == today for e in entries),
    }


async def _persist_all(storage: Storage, entries: List[DailyEntry]) -> WriteResult:
    """Write every entry; one at a time so a failed write only reverts itself"""
    failures = []
    for entry in entries:
        result = await storage.update_daily_entry(entry)
        if not result.success:
            failures.append(result.reason)

    if failures:
        logger.warning(f"{len(failures)} of {len(entries)} daily entries failed to persist")
    return WriteResult(
        not failures,
        sort_entries(storage.get_daily_entries()),
        failures[0] if failures else None,
    )


async def toggle_pin(storage: Storage, entry_id: str) -> WriteResult:
    entry = next((e for e in storage.get_daily_entries() if e.id == entry_id), None)
    if entry is None:
        raise RecordNotFoundError("Daily entry", entry_id)

    result = await storage.update_daily_entry(entry.model_copy(update={"pinned": not entry.pinned}))
    # Ordering depends on the backend sort, so re-read
    refreshed = await storage.fetch_daily_entries()
    return WriteResult(result.success, refreshed, result.reason)


async def move_entry(storage: Storage, entry_id: str, direction: str) -> WriteResult:
    entries = sort_entries(storage.get_daily_entries())
    index = next((i for i, e in enumerate(entries) if e.id == entry_id), None)
    if index is None:
        raise RecordNotFoundError("Daily entry", entry_id)

    target = index - 1 if direction == "up" else index + 1
    if target < 0 or target >= len(entries):
        # Already at the edge
        return WriteResult(True, entries)

    entries[index], entries[target] = entries[target], entries[index]
    repositioned = [e.model_copy(update={"position": i}) for i, e in enumerate(entries)]
    return await _persist_all(storage, repositioned)


async def shuffle_entries(storage: Storage, rng: Optional[random.Random] = None) -> WriteResult:
    """Random order; positions renumbered and pins cleared"""
    entries = storage.get_daily_entries()
    (rng or random).shuffle(entries)
    repositioned = [
        e.model_copy(update={"position": i, "pinned": False}) for i, e in enumerate(entries)
    ]
    return await _persist_all(storage, repositioned)
