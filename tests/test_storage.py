"""
Storage facade tests

Covers cache-first reads, optimistic writes with rollback, column mapping,
the legacy schema fallback, rate limiting and local-only mode.
"""

import asyncio
import json

import pytest

from core.rate_limit import RateLimiter
from core.remote import RemoteBackend
from core.storage import BACKEND_ERROR, NOT_CONFIGURED, RATE_LIMITED, Storage
from models.entities import (
    Category,
    Contact,
    DailyEntry,
    DecisionStatus,
    Idea,
    Todo,
    TodoPriority,
    TodoStatus,
    Urgency,
)


def make_todo(**overrides):
    values = {"title": "Ship report", "deadline": "2026-02-10", "priority": TodoPriority.HIGH}
    values.update(overrides)
    return Todo(**values)


def make_idea(**overrides):
    values = {"thought": "Thread on caching", "category": Category.CONTENT, "urgency": Urgency.LOW}
    values.update(overrides)
    return Idea(**values)


class TestRoundTrip:
    def test_ship_report_save_then_fetch(self, storage):
        """A saved todo comes back from the backend with its fields and defaults"""
        result = asyncio.run(storage.save_todo(make_todo()))
        assert result.success is True

        fetched = asyncio.run(storage.fetch_todos())
        assert len(fetched) == 1
        todo = fetched[0]
        assert todo.title == "Ship report"
        assert todo.deadline == "2026-02-10"
        assert todo.priority == TodoPriority.HIGH
        assert todo.status == TodoStatus.PENDING
        assert todo.completed is False

    def test_rows_use_snake_case_columns(self, storage, fake_backend):
        asyncio.run(storage.save_daily_entry(DailyEntry(worked_on="API", shipped="v1")))

        row = fake_backend.rows("daily_entries")[0]
        assert row["worked_on"] == "API"
        assert row["shipped"] == "v1"
        assert "workedOn" not in row
        assert row["trace_date"]

    def test_save_sets_trace_date_and_prepends(self, storage):
        first = make_idea(thought="first")
        second = make_idea(thought="second")
        asyncio.run(storage.save_idea(first))
        result = asyncio.run(storage.save_idea(second))

        assert [i.thought for i in result.records] == ["second", "first"]
        assert all(i.trace_date for i in storage.get_ideas())

    def test_fetch_is_idempotent(self, storage, fake_backend):
        fake_backend.rows("ideas").extend(
            [
                {"id": "a", "thought": "one", "category": "Life", "urgency": "Low", "date": "2026-02-01"},
                {"id": "b", "thought": "two", "category": "Blog", "urgency": "High", "date": "2026-02-02"},
            ]
        )
        first = asyncio.run(storage.fetch_ideas())
        second = asyncio.run(storage.fetch_ideas())

        assert first == second
        assert storage.get_ideas() == second

    def test_fetch_sends_order_and_auth_headers(self, storage, fake_backend):
        asyncio.run(storage.fetch_daily_entries())

        request = fake_backend.requests_for("GET", "daily_entries")[0]
        assert request.url.params["select"] == "*"
        assert request.url.params["order"] == "pinned.desc,position.asc,trace_date.desc"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["authorization"] == "Bearer anon-key"


class TestUpdateAndDelete:
    def test_update_then_get(self, storage):
        todo = make_todo()
        asyncio.run(storage.save_todo(todo))

        result = asyncio.run(storage.update_todo(todo.model_copy(update={"title": "Ship it"})))

        assert result.success is True
        assert [t.title for t in storage.get_todos()] == ["Ship it"]

    def test_update_sends_every_column_except_id(self, storage, fake_backend):
        todo = make_todo()
        asyncio.run(storage.save_todo(todo))
        asyncio.run(storage.update_todo(todo.model_copy(update={"details": "final"})))

        request = fake_backend.requests_for("PATCH", "todos")[0]
        assert request.url.params["id"] == f"eq.{todo.id}"
        body = json.loads(request.content)
        assert "id" not in body
        assert body["details"] == "final"
        assert body["priority"] == "High"

    def test_delete_then_get(self, storage):
        keep, drop = make_todo(title="keep"), make_todo(title="drop")
        asyncio.run(storage.save_todo(keep))
        asyncio.run(storage.save_todo(drop))

        result = asyncio.run(storage.delete_todo(drop.id))

        assert result.success is True
        assert [t.id for t in storage.get_todos()] == [keep.id]


class TestRollback:
    def test_failed_save_restores_cache(self, storage, fake_backend):
        asyncio.run(storage.save_idea(make_idea(thought="kept")))
        before = storage.get_ideas()
        fake_backend.fail("POST", "ideas")

        result = asyncio.run(storage.save_idea(make_idea(thought="lost")))

        assert result.success is False
        assert result.reason == BACKEND_ERROR
        assert storage.get_ideas() == before
        assert result.records == before

    def test_failed_update_restores_cache(self, storage, fake_backend):
        todo = make_todo()
        asyncio.run(storage.save_todo(todo))
        fake_backend.fail("PATCH", "todos")

        result = asyncio.run(storage.update_todo(todo.model_copy(update={"title": "changed"})))

        assert result.success is False
        assert storage.get_todos()[0].title == "Ship report"

    def test_failed_delete_restores_cache(self, storage, fake_backend):
        todo = make_todo()
        asyncio.run(storage.save_todo(todo))
        fake_backend.fail("DELETE", "todos")

        result = asyncio.run(storage.delete_todo(todo.id))

        assert result.success is False
        assert [t.id for t in storage.get_todos()] == [todo.id]

    def test_failed_fetch_returns_cache(self, storage, fake_backend):
        asyncio.run(storage.save_todo(make_todo()))
        cached = storage.get_todos()
        fake_backend.fail("GET", "todos")

        assert asyncio.run(storage.fetch_todos()) == cached


class TestPreconditions:
    def test_exhausted_rate_limiter_makes_no_request(self, cache, remote, fake_backend):
        limited = Storage(cache, remote, RateLimiter(max_requests=0, window_seconds=60))
        before = cache.read_list("aj26_ideas")

        result = asyncio.run(limited.save_idea(make_idea()))

        assert result.success is False
        assert result.reason == RATE_LIMITED
        assert fake_backend.requests == []
        assert cache.read_list("aj26_ideas") == before

    def test_rate_limit_applies_to_fetches(self, cache, remote, fake_backend):
        limited = Storage(cache, remote, RateLimiter(max_requests=1, window_seconds=60))
        asyncio.run(limited.fetch_ideas())
        asyncio.run(limited.fetch_ideas())

        assert len(fake_backend.requests) == 1

    def test_local_only_mode(self, cache):
        local = Storage(cache, RemoteBackend("", ""), RateLimiter())

        result = asyncio.run(local.save_todo(make_todo()))

        assert local.is_configured is False
        assert result.success is False
        assert result.reason == NOT_CONFIGURED
        assert local.get_todos() == []
        assert asyncio.run(local.fetch_todos()) == []


class TestRowMapping:
    def test_null_columns_take_defaults(self, storage, fake_backend):
        fake_backend.rows("todos").append(
            {
                "id": "t1",
                "title": "Plan",
                "details": None,
                "deadline": "2026-02-10",
                "priority": "Low",
                "status": None,
                "created_at": "2026-02-01T10:00:00.000Z",
            }
        )
        todo = asyncio.run(storage.fetch_todos())[0]

        assert todo.details == ""
        assert todo.status == TodoStatus.PENDING
        assert todo.trace_date

    def test_legacy_completed_flag_becomes_status(self, storage, fake_backend):
        fake_backend.rows("todos").append(
            {"id": "t1", "title": "Old", "deadline": "2026-01-20", "priority": "Medium", "completed": True}
        )
        todo = asyncio.run(storage.fetch_todos())[0]

        assert todo.status == TodoStatus.COMPLETED
        assert todo.completed is True

    def test_invalid_rows_are_skipped(self, storage, fake_backend):
        fake_backend.rows("todos").extend(
            [
                {"id": "ok", "title": "Valid", "deadline": "2026-02-10", "priority": "High"},
                {"id": "bad", "title": "Invalid", "deadline": "2026-02-10", "priority": "Urgent"},
            ]
        )
        assert [t.id for t in asyncio.run(storage.fetch_todos())] == ["ok"]

    def test_legacy_decision_columns_are_remapped(self, storage, fake_backend):
        fake_backend.rows("decision_gates").append(
            {"id": "d1", "date": "2026-01-15", "project_title": "Rewrite API", "result": "Approved"}
        )
        decision = asyncio.run(storage.fetch_decisions())[0]

        assert decision.decision == "Rewrite API"
        assert decision.status == DecisionStatus.DECIDED
        assert decision.trace_date == "2026-01-15"

    def test_unknown_columns_are_ignored(self, storage, fake_backend):
        fake_backend.rows("contacts").append(
            {"id": "c1", "name": "Ada", "date_added": "2026-01-20", "user_id": "u-1"}
        )
        assert asyncio.run(storage.fetch_contacts())[0].name == "Ada"


class TestSanitization:
    def test_text_fields_are_stripped_of_markup(self, storage, fake_backend):
        asyncio.run(storage.save_idea(make_idea(thought="<script>x</script>Launch <b>now</b>")))

        assert storage.get_ideas()[0].thought == "xLaunch now"
        assert fake_backend.rows("ideas")[0]["thought"] == "xLaunch now"

    def test_contact_links_and_email(self, storage):
        contact = Contact(
            name="Ada",
            email="  Ada@Example.COM ",
            linkedin="javascript:alert(1)",
            avatar_url="example.com/ada.png",
        )
        asyncio.run(storage.save_contact(contact))

        saved = storage.get_contacts()[0]
        assert saved.email == "ada@example.com"
        assert saved.linkedin == ""
        assert saved.avatar_url == "https://example.com/ada.png"


class TestSchemaFallback:
    def test_daily_entry_insert_retries_without_new_columns(self, storage, fake_backend):
        fake_backend.missing_columns["daily_entries"] = {"pinned", "position"}

        result = asyncio.run(storage.save_daily_entry(DailyEntry(worked_on="legacy")))

        assert result.success is True
        row = fake_backend.rows("daily_entries")[0]
        assert "pinned" not in row and "position" not in row
        assert len(fake_backend.requests_for("POST", "daily_entries")) == 2

    def test_daily_entry_update_retries_without_new_columns(self, storage, fake_backend):
        fake_backend.rows("daily_entries").append({"id": "e1", "date": "2026-02-01", "worked_on": "x"})
        entry = asyncio.run(storage.fetch_daily_entries())[0]
        fake_backend.missing_columns["daily_entries"] = {"pinned", "position"}

        result = asyncio.run(storage.update_daily_entry(entry.model_copy(update={"worked_on": "y"})))

        assert result.success is True
        patches = fake_backend.requests_for("PATCH", "daily_entries")
        assert len(patches) == 2
        retried = json.loads(patches[-1].content)
        assert "pinned" not in retried and "position" not in retried
        row = fake_backend.rows("daily_entries")[0]
        assert row["worked_on"] == "y"
        assert "pinned" not in row and "position" not in row

    def test_failed_update_retry_reverts_cache(self, storage, fake_backend):
        fake_backend.rows("daily_entries").append({"id": "e1", "date": "2026-02-01", "worked_on": "x"})
        entry = asyncio.run(storage.fetch_daily_entries())[0]
        fake_backend.fail("PATCH", "daily_entries")

        result = asyncio.run(storage.update_daily_entry(entry.model_copy(update={"worked_on": "y"})))

        assert result.success is False
        assert result.reason == "backend_error"
        assert len(fake_backend.requests_for("PATCH", "daily_entries")) == 2
        assert [e.worked_on for e in storage.get_daily_entries()] == ["x"]
        assert [e.worked_on for e in result.records] == ["x"]

    def test_failed_insert_retry_reverts_cache(self, storage, fake_backend):
        fake_backend.fail("POST", "daily_entries")

        result = asyncio.run(storage.save_daily_entry(DailyEntry(worked_on="lost")))

        assert result.success is False
        assert len(fake_backend.requests_for("POST", "daily_entries")) == 2
        assert storage.get_daily_entries() == []

    def test_daily_entry_fetch_falls_back_to_legacy_order(self, storage, fake_backend):
        fake_backend.missing_columns["daily_entries"] = {"pinned", "position"}
        fake_backend.rows("daily_entries").append({"id": "e1", "date": "2026-02-01", "worked_on": "x"})

        entries = asyncio.run(storage.fetch_daily_entries())

        assert [e.id for e in entries] == ["e1"]
        last = fake_backend.requests_for("GET", "daily_entries")[-1]
        assert last.url.params["order"] == "trace_date.desc"

    def test_fallback_can_be_disabled(self, cache, remote, fake_backend):
        strict = Storage(cache, remote, RateLimiter(), legacy_schema_fallback=False)
        fake_backend.missing_columns["daily_entries"] = {"pinned", "position"}

        result = asyncio.run(strict.save_daily_entry(DailyEntry(worked_on="x")))

        assert result.success is False
        assert strict.get_daily_entries() == []

    def test_other_tables_do_not_retry(self, storage, fake_backend):
        fake_backend.fail("POST", "ideas")
        asyncio.run(storage.save_idea(make_idea()))

        assert len(fake_backend.requests_for("POST", "ideas")) == 1


class TestSyncAll:
    def test_sync_all_refreshes_every_collection(self, storage, fake_backend):
        fake_backend.rows("expenses").append(
            {"id": "x1", "title": "Rent", "amount": 1200, "category": "House Rent", "date": "2026-02-01"}
        )
        synced = asyncio.run(storage.sync_all())

        assert set(synced) == {
            "daily_entries",
            "ideas",
            "weekly_outcomes",
            "todos",
            "decisions",
            "contacts",
            "discoveries",
            "expenses",
        }
        assert storage.get_expenses()[0].amount == 1200.0


@pytest.mark.parametrize("corrupt", ["not json", '{"a": 1}', "[1, 2]"])
def test_corrupt_cache_reads_as_empty(cache, storage, corrupt):
    cache.set("aj26_todos", corrupt)
    assert storage.get_todos() == []
