"""
Entity table definitions
Maps every record type to its backend table, cache key, default ordering,
sanitized fields and legacy-row handling
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Type

from core.dates import get_local_date, timestamp_to_local_date, utc_timestamp
from core.remote import OrderSpec
from core.sanitize import sanitize_email, sanitize_text, sanitize_url
from models.base import BaseModel
from models.entities import (
    Contact,
    DailyEntry,
    DecisionGate,
    Discovery,
    Expense,
    Idea,
    Todo,
    TodoStatus,
    WeeklyOutcome,
)

Row = Dict[str, Any]


@dataclass(frozen=True)
class SchemaAdapter:
    """Describes the previous backend schema of a table

    added_columns were introduced by the newer schema; a write or read that fails
    against the newer shape is retried once without them, using legacy_order.
    """

    added_columns: Tuple[str, ...]
    legacy_order: OrderSpec

    def legacy_row(self, row: Row) -> Row:
        return {k: v for k, v in row.items() if k not in self.added_columns}


@dataclass(frozen=True)
class EntityTable:
    name: str
    table: str
    cache_key: str
    model: Type[BaseModel]
    order: OrderSpec
    trace_fallback: Callable[[Row], Optional[str]]
    text_fields: Tuple[str, ...] = ()
    url_fields: Tuple[str, ...] = ()
    email_fields: Tuple[str, ...] = ()
    legacy_remap: Optional[Callable[[Row], Row]] = None
    normalize: Optional[Callable[[BaseModel], BaseModel]] = None
    schema_adapter: Optional[SchemaAdapter] = field(default=None)

    def from_row(self, row: Row) -> BaseModel:
        """Backend row (snake_case) -> record; absent or null columns take defaults"""
        values = {k: v for k, v in row.items() if v is not None}
        if self.legacy_remap:
            values = self.legacy_remap(values)
        values["trace_date"] = (
            values.get("trace_date") or self.trace_fallback(values) or ""
        )

        known = set(self.model.model_fields) | set(self.model.model_computed_fields)
        return self.model.model_validate({k: v for k, v in values.items() if k in known})

    def to_row(self, record: BaseModel) -> Row:
        """Record -> backend row; python field names are the column names"""
        return record.model_dump(by_alias=False, mode="json")

    def sanitize(self, record: BaseModel) -> BaseModel:
        updates: Dict[str, Any] = {}
        for name in self.text_fields:
            updates[name] = sanitize_text(getattr(record, name))
        for name in self.url_fields:
            value = getattr(record, name)
            if value is not None:
                updates[name] = sanitize_url(value)
        for name in self.email_fields:
            updates[name] = sanitize_email(getattr(record, name))
        if not updates:
            return record
        return record.model_copy(update=updates)


def _todo_trace_date(row: Row) -> str:
    return timestamp_to_local_date(row.get("created_at")) or get_local_date()


def _normalize_todo(record: Todo) -> Todo:
    """completedAt is present exactly when the task is Completed"""
    if record.status == TodoStatus.COMPLETED:
        if not record.completed_at:
            return record.model_copy(update={"completed_at": utc_timestamp()})
        return record
    if record.completed_at is not None:
        return record.model_copy(update={"completed_at": None})
    return record


def _remap_decision(row: Row) -> Row:
    """Rows written by the first version carried project_title/result"""
    row = dict(row)
    raw_status = row.get("status")
    row["decision"] = row.get("decision") or row.get("project_title") or ""
    if raw_status == "Decided":
        row["outcome"] = row.get("outcome") or row.get("result") or ""
    else:
        row["outcome"] = row.get("outcome") or ""
    row["status"] = raw_status or ("Decided" if row.get("result") == "Approved" else "Pending")
    return row


DAILY_ENTRIES = EntityTable(
    name="daily_entries",
    table="daily_entries",
    cache_key="aj26_daily_logs",
    model=DailyEntry,
    order=(("pinned", False), ("position", True), ("trace_date", False)),
    trace_fallback=lambda row: row.get("date"),
    text_fields=("worked_on", "shipped"),
    schema_adapter=SchemaAdapter(
        added_columns=("pinned", "position"),
        legacy_order=(("trace_date", False),),
    ),
)

IDEAS = EntityTable(
    name="ideas",
    table="ideas",
    cache_key="aj26_ideas",
    model=Idea,
    order=(("trace_date", False),),
    trace_fallback=lambda row: row.get("date"),
    text_fields=("thought",),
)

WEEKLY_OUTCOMES = EntityTable(
    name="weekly_outcomes",
    table="weekly_outcomes",
    cache_key="aj26_weekly_engine",
    model=WeeklyOutcome,
    order=(("trace_date", False),),
    trace_fallback=lambda row: row.get("week_starting"),
    text_fields=("build", "ship", "learn"),
)

TODOS = EntityTable(
    name="todos",
    table="todos",
    cache_key="aj26_todos",
    model=Todo,
    order=(("deadline", True),),
    trace_fallback=_todo_trace_date,
    normalize=_normalize_todo,
    text_fields=("title", "details"),
)

DECISIONS = EntityTable(
    name="decisions",
    table="decision_gates",
    cache_key="aj26_decisions",
    model=DecisionGate,
    order=(("trace_date", False),),
    trace_fallback=lambda row: row.get("date"),
    text_fields=("decision", "outcome"),
    legacy_remap=_remap_decision,
)

CONTACTS = EntityTable(
    name="contacts",
    table="contacts",
    cache_key="aj26_contacts",
    model=Contact,
    order=(("trace_date", False),),
    trace_fallback=lambda row: row.get("date_added"),
    text_fields=("name", "company", "x_account", "notes"),
    url_fields=("linkedin", "avatar_url"),
    email_fields=("email",),
)

DISCOVERIES = EntityTable(
    name="discoveries",
    table="discoveries",
    cache_key="aj26_discoveries",
    model=Discovery,
    order=(("trace_date", False),),
    trace_fallback=lambda row: row.get("date_added"),
    text_fields=("title", "description", "category"),
    url_fields=("url",),
)

EXPENSES = EntityTable(
    name="expenses",
    table="expenses",
    cache_key="aj26_expenses",
    model=Expense,
    order=(("date", False),),
    trace_fallback=lambda row: row.get("date"),
    text_fields=("title",),
)

ALL_TABLES: Tuple[EntityTable, ...] = (
    DAILY_ENTRIES,
    IDEAS,
    WEEKLY_OUTCOMES,
    TODOS,
    DECISIONS,
    CONTACTS,
    DISCOVERIES,
    EXPENSES,
)
