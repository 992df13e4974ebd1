"""
Storage facade
Single access point for every record type: synchronous reads from the local cache,
asynchronous reads and optimistic writes against the remote backend.

Writes update the cache first and restore the previous cache content when the
backend rejects them. Nothing raised by the backend escapes this module.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from core.cache import CacheStore
from core.dates import get_local_date
from core.logger import get_logger
from core.rate_limit import RateLimiter
from core.remote import BackendError, RemoteBackend
from core.tables import (
    ALL_TABLES,
    CONTACTS,
    DAILY_ENTRIES,
    DECISIONS,
    DISCOVERIES,
    EXPENSES,
    IDEAS,
    TODOS,
    WEEKLY_OUTCOMES,
    EntityTable,
    SchemaAdapter,
)
from models.base import BaseModel
from models.entities import (
    Contact,
    DailyEntry,
    DecisionGate,
    Discovery,
    Expense,
    Idea,
    Todo,
    WeeklyOutcome,
)

logger = get_logger(__name__)

RATE_LIMITED = "rate_limited"
NOT_CONFIGURED = "not_configured"
BACKEND_ERROR = "backend_error"


@dataclass
class WriteResult:
    """Outcome of a write; records is the cached collection after the write settled"""

    success: bool
    records: List[Any] = field(default_factory=list)
    reason: Optional[str] = None


class Storage:
    """Cache-first facade over the remote backend"""

    def __init__(
        self,
        cache: CacheStore,
        backend: RemoteBackend,
        rate_limiter: RateLimiter,
        legacy_schema_fallback: bool = True,
    ):
        self.cache = cache
        self.backend = backend
        self.rate_limiter = rate_limiter
        self.legacy_schema_fallback = legacy_schema_fallback

    @property
    def is_configured(self) -> bool:
        return self.backend.is_configured

    # ============ internals ============

    def _get(self, entity: EntityTable) -> List[BaseModel]:
        records: List[BaseModel] = []
        for item in self.cache.read_list(entity.cache_key):
            try:
                records.append(entity.model.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid cached {entity.name} item: {e.error_count()} errors")
        return records

    def _write_cache(self, entity: EntityTable, records: List[BaseModel]) -> None:
        self.cache.write_list(entity.cache_key, [r.model_dump(mode="json") for r in records])

    def _check_preconditions(self, entity: EntityTable, action: str) -> Optional[str]:
        """Reason the remote call must be skipped, None when it may proceed"""
        if not self.rate_limiter.can_make_request():
            logger.warning(f"Skipping {action} on {entity.table}: rate limit exceeded")
            return RATE_LIMITED
        if not self.backend.is_configured:
            logger.debug(f"Skipping {action} on {entity.table}: backend not configured")
            return NOT_CONFIGURED
        return None

    def _adapter(self, entity: EntityTable) -> Optional[SchemaAdapter]:
        if not self.legacy_schema_fallback:
            return None
        return entity.schema_adapter

    def _prepare(self, entity: EntityTable, record: BaseModel) -> BaseModel:
        record = entity.sanitize(record)
        if entity.normalize:
            record = entity.normalize(record)
        return record

    async def _select_rows(self, entity: EntityTable) -> List[Dict[str, Any]]:
        try:
            return await self.backend.select(entity.table, entity.order)
        except BackendError as e:
            adapter = self._adapter(entity)
            if adapter is None:
                raise
            logger.warning(
                f"Fetching {entity.table} with {', '.join(adapter.added_columns)} failed, "
                f"falling back to legacy sort: {e}"
            )
            return await self.backend.select(entity.table, adapter.legacy_order)

    async def _insert_row(self, entity: EntityTable, row: Dict[str, Any]) -> None:
        try:
            await self.backend.insert(entity.table, row)
        except BackendError as e:
            adapter = self._adapter(entity)
            if adapter is None:
                raise
            logger.warning(f"Insert into {entity.table} failed, retrying legacy insert: {e}")
            await self.backend.insert(entity.table, adapter.legacy_row(row))

    async def _update_row(self, entity: EntityTable, record_id: str, values: Dict[str, Any]) -> None:
        try:
            await self.backend.update(entity.table, record_id, values)
        except BackendError as e:
            adapter = self._adapter(entity)
            if adapter is None:
                raise
            logger.warning(f"Update of {entity.table} failed, retrying legacy update: {e}")
            await self.backend.update(entity.table, record_id, adapter.legacy_row(values))

    async def _fetch(self, entity: EntityTable) -> List[BaseModel]:
        if self._check_preconditions(entity, "fetch"):
            return self._get(entity)

        try:
            rows = await self._select_rows(entity)
        except BackendError as e:
            logger.error(f"Error fetching {entity.name}: {e}")
            return self._get(entity)

        records: List[BaseModel] = []
        for row in rows:
            try:
                records.append(entity.from_row(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid {entity.table} row {row.get('id')}: {e.error_count()} errors"
                )

        self._write_cache(entity, records)
        return records

    async def _save(self, entity: EntityTable, record: BaseModel) -> WriteResult:
        reason = self._check_preconditions(entity, "insert")
        if reason:
            return WriteResult(False, self._get(entity), reason)

        record = self._prepare(entity, record)
        if not record.trace_date:
            record = record.model_copy(update={"trace_date": get_local_date()})

        previous = self.cache.read_list(entity.cache_key)
        self._write_cache(entity, [record] + self._get(entity))

        try:
            await self._insert_row(entity, entity.to_row(record))
        except BackendError as e:
            logger.error(f"Error saving {entity.name} {record.id}: {e}")
            self.cache.write_list(entity.cache_key, previous)
            return WriteResult(False, self._get(entity), BACKEND_ERROR)

        return WriteResult(True, self._get(entity))

    async def _update(self, entity: EntityTable, record: BaseModel) -> WriteResult:
        reason = self._check_preconditions(entity, "update")
        if reason:
            return WriteResult(False, self._get(entity), reason)

        record = self._prepare(entity, record)

        previous = self.cache.read_list(entity.cache_key)
        self._write_cache(
            entity, [record if r.id == record.id else r for r in self._get(entity)]
        )

        values = entity.to_row(record)
        values.pop("id", None)
        try:
            await self._update_row(entity, record.id, values)
        except BackendError as e:
            logger.error(f"Error updating {entity.name} {record.id}: {e}")
            self.cache.write_list(entity.cache_key, previous)
            return WriteResult(False, self._get(entity), BACKEND_ERROR)

        return WriteResult(True, self._get(entity))

    async def _delete(self, entity: EntityTable, record_id: str) -> WriteResult:
        reason = self._check_preconditions(entity, "delete")
        if reason:
            return WriteResult(False, self._get(entity), reason)

        previous = self.cache.read_list(entity.cache_key)
        self._write_cache(entity, [r for r in self._get(entity) if r.id != record_id])

        try:
            await self.backend.delete(entity.table, record_id)
        except BackendError as e:
            logger.error(f"Error deleting {entity.name} {record_id}: {e}")
            self.cache.write_list(entity.cache_key, previous)
            return WriteResult(False, self._get(entity), BACKEND_ERROR)

        return WriteResult(True, self._get(entity))

    # ============ daily entries ============

    def get_daily_entries(self) -> List[DailyEntry]:
        return self._get(DAILY_ENTRIES)

    async def fetch_daily_entries(self) -> List[DailyEntry]:
        return await self._fetch(DAILY_ENTRIES)

    async def save_daily_entry(self, entry: DailyEntry) -> WriteResult:
        return await self._save(DAILY_ENTRIES, entry)

    async def update_daily_entry(self, entry: DailyEntry) -> WriteResult:
        return await self._update(DAILY_ENTRIES, entry)

    async def delete_daily_entry(self, entry_id: str) -> WriteResult:
        return await self._delete(DAILY_ENTRIES, entry_id)

    # ============ ideas ============

    def get_ideas(self) -> List[Idea]:
        return self._get(IDEAS)

    async def fetch_ideas(self) -> List[Idea]:
        return await self._fetch(IDEAS)

    async def save_idea(self, idea: Idea) -> WriteResult:
        return await self._save(IDEAS, idea)

    async def update_idea(self, idea: Idea) -> WriteResult:
        return await self._update(IDEAS, idea)

    async def delete_idea(self, idea_id: str) -> WriteResult:
        return await self._delete(IDEAS, idea_id)

    # ============ weekly outcomes ============

    def get_weekly_outcomes(self) -> List[WeeklyOutcome]:
        return self._get(WEEKLY_OUTCOMES)

    async def fetch_weekly_outcomes(self) -> List[WeeklyOutcome]:
        return await self._fetch(WEEKLY_OUTCOMES)

    async def save_weekly_outcome(self, outcome: WeeklyOutcome) -> WriteResult:
        return await self._save(WEEKLY_OUTCOMES, outcome)

    async def update_weekly_outcome(self, outcome: WeeklyOutcome) -> WriteResult:
        return await self._update(WEEKLY_OUTCOMES, outcome)

    async def delete_weekly_outcome(self, outcome_id: str) -> WriteResult:
        return await self._delete(WEEKLY_OUTCOMES, outcome_id)

    # ============ todos ============

    def get_todos(self) -> List[Todo]:
        return self._get(TODOS)

    async def fetch_todos(self) -> List[Todo]:
        return await self._fetch(TODOS)

    async def save_todo(self, todo: Todo) -> WriteResult:
        return await self._save(TODOS, todo)

    async def update_todo(self, todo: Todo) -> WriteResult:
        return await self._update(TODOS, todo)

    async def delete_todo(self, todo_id: str) -> WriteResult:
        return await self._delete(TODOS, todo_id)

    # ============ decisions ============

    def get_decisions(self) -> List[DecisionGate]:
        return self._get(DECISIONS)

    async def fetch_decisions(self) -> List[DecisionGate]:
        return await self._fetch(DECISIONS)

    async def save_decision(self, decision: DecisionGate) -> WriteResult:
        return await self._save(DECISIONS, decision)

    async def update_decision(self, decision: DecisionGate) -> WriteResult:
        return await self._update(DECISIONS, decision)

    async def delete_decision(self, decision_id: str) -> WriteResult:
        return await self._delete(DECISIONS, decision_id)

    # ============ contacts ============

    def get_contacts(self) -> List[Contact]:
        return self._get(CONTACTS)

    async def fetch_contacts(self) -> List[Contact]:
        return await self._fetch(CONTACTS)

    async def save_contact(self, contact: Contact) -> WriteResult:
        return await self._save(CONTACTS, contact)

    async def update_contact(self, contact: Contact) -> WriteResult:
        return await self._update(CONTACTS, contact)

    async def delete_contact(self, contact_id: str) -> WriteResult:
        return await self._delete(CONTACTS, contact_id)

    # ============ discoveries ============

    def get_discoveries(self) -> List[Discovery]:
        return self._get(DISCOVERIES)

    async def fetch_discoveries(self) -> List[Discovery]:
        return await self._fetch(DISCOVERIES)

    async def save_discovery(self, discovery: Discovery) -> WriteResult:
        return await self._save(DISCOVERIES, discovery)

    async def update_discovery(self, discovery: Discovery) -> WriteResult:
        return await self._update(DISCOVERIES, discovery)

    async def delete_discovery(self, discovery_id: str) -> WriteResult:
        return await self._delete(DISCOVERIES, discovery_id)

    # ============ expenses ============

    def get_expenses(self) -> List[Expense]:
        return self._get(EXPENSES)

    async def fetch_expenses(self) -> List[Expense]:
        return await self._fetch(EXPENSES)

    async def save_expense(self, expense: Expense) -> WriteResult:
        return await self._save(EXPENSES, expense)

    async def update_expense(self, expense: Expense) -> WriteResult:
        return await self._update(EXPENSES, expense)

    async def delete_expense(self, expense_id: str) -> WriteResult:
        return await self._delete(EXPENSES, expense_id)

    # ============ bulk ============

    async def sync_all(self) -> Dict[str, List[BaseModel]]:
        """Refresh every collection concurrently; keyed by collection name"""
        results = await asyncio.gather(*(self._fetch(entity) for entity in ALL_TABLES))
        synced = {entity.name: records for entity, records in zip(ALL_TABLES, results)}
        logger.info(
            "✓ Sync completed: "
            + ", ".join(f"{name}={len(records)}" for name, records in synced.items())
        )
        return synced
