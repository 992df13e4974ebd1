"""
Insights engine tests

Fixed scenario on 2026-02-10 (a Tuesday) with the system started on 2026-01-12.
"""

import asyncio
import json
from datetime import date, datetime

import httpx
import pytest

from core.insights import InsightsManager, build_report, report_filename
from core.insights.metrics import (
    InsightInputs,
    compute_metrics,
    compute_streak,
    compute_weekly_breakdown,
    percent,
    week_label,
)
from llm.client import LLMClient
from models.entities import Contact, DailyEntry, Discovery, Idea, Todo, WeeklyOutcome

TODAY = date(2026, 2, 10)
START = "2026-01-12"


def scenario() -> InsightInputs:
    return InsightInputs(
        daily_logs=[
            DailyEntry(date=d)
            for d in ("2026-02-10", "2026-02-09", "2026-02-08", "2026-02-06", "2026-01-05")
        ],
        todos=[
            Todo(title="overdue", deadline="2026-02-08", priority="Critical"),
            Todo(title="today", deadline="2026-02-10", priority="High", status="In Progress"),
            Todo(title="later", deadline="2026-02-14", priority="Medium"),
            Todo(
                title="done",
                deadline="2026-02-09",
                priority="Low",
                status="Completed",
                completed_at="2026-02-09T12:00:00.000Z",
            ),
        ],
        ideas=[
            Idea(thought="thread", date="2026-01-20", category="Content", urgency="High", platform="X"),
            Idea(thought="habit", date="2026-02-03", category="Life", urgency="Low", executed=True),
        ],
        discoveries=[Discovery(title="agents", impact="Disruptive", date_added="2026-02-03")],
        contacts=[Contact(name="Ada", date_added="2026-02-04")],
        weekly_outcomes=[
            WeeklyOutcome(week_starting="2026-02-02", status="Successful"),
            WeeklyOutcome(week_starting="2026-01-26", status="Failed"),
        ],
    )


class TestStreak:
    def test_three_day_streak_broken_by_gap(self):
        logged = {"2026-02-10", "2026-02-09", "2026-02-08", "2026-02-06"}
        assert compute_streak(logged, TODAY, START) == 3

    def test_unlogged_today_does_not_break_streak(self):
        assert compute_streak({"2026-02-09", "2026-02-08"}, TODAY, START) == 2

    def test_bounded_by_start_date(self):
        logged = {"2026-02-10", "2026-02-09", "2026-02-08"}
        assert compute_streak(logged, TODAY, "2026-02-09") == 2

    def test_no_logs(self):
        assert compute_streak(set(), TODAY, START) == 0


def test_percent_rounds_half_up():
    assert percent(1, 8) == 13
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(0, 0) == 0


class TestMetrics:
    @pytest.fixture
    def metrics(self):
        return compute_metrics(scenario(), TODAY, START)

    def test_daily_log_metrics(self, metrics):
        assert metrics.days_since_start == 29
        assert metrics.streak == 3
        assert metrics.total_logs == 4
        assert metrics.days_logged_this_week == 4
        assert metrics.days_logged_last30 == 4
        assert metrics.consistency_score == 13
        assert metrics.days_since_last_log == 0

    def test_task_metrics(self, metrics):
        assert metrics.pending_tasks == 3
        assert metrics.completed_tasks == 1
        assert metrics.overdue_tasks == 1
        assert metrics.tasks_due_today == 1
        assert metrics.tasks_due_this_week == 2
        assert metrics.in_progress_tasks == 1
        assert metrics.tasks_completed_this_week == 1
        assert metrics.completion_rate == 33
        assert metrics.tasks_by_priority == {"Low": 0, "Medium": 1, "High": 1, "Critical": 1}

    def test_idea_metrics(self, metrics):
        assert metrics.total_ideas == 2
        assert metrics.executed_ideas == 1
        assert metrics.idea_execution_rate == 50
        assert metrics.high_urgency_pending == 1
        assert metrics.content_ideas == 1
        assert metrics.x_ideas == 1
        assert metrics.linked_in_ideas == 0
        assert metrics.oldest_idea_age == 21
        assert metrics.ideas_by_category["Content"] == 1
        assert metrics.ideas_by_category["Random"] == 0

    def test_other_metrics(self, metrics):
        assert metrics.disruptive_discoveries == 1
        assert metrics.contacts_this_month == 1
        assert metrics.total_outcomes == 2
        assert metrics.achieved_outcomes == 1
        assert metrics.outcome_rate == 50

    def test_gaps(self, metrics):
        assert metrics.gaps == [
            "1 overdue task - clear these first",
            "1 high-urgency idea waiting to be executed",
            "1 critical task - handle immediately",
            "Ideas 21+ days old - execute or archive them",
        ]

    def test_wins(self, metrics):
        assert metrics.wins == ["3-day streak - momentum building"]

    def test_missed_yesterday_gap(self):
        inputs = InsightInputs(daily_logs=[DailyEntry(date="2026-02-09")])
        metrics = compute_metrics(inputs, TODAY, START)
        assert metrics.gaps == ["You missed logging yesterday - get back on track today"]

    def test_empty_inputs(self):
        metrics = compute_metrics(InsightInputs(), TODAY, START)
        assert metrics.days_since_last_log == -1
        assert metrics.completion_rate == 0
        assert metrics.gaps == []


class TestWeeklyBreakdown:
    def test_weeks_newest_first(self):
        weeks = compute_weekly_breakdown(scenario(), TODAY, START)

        assert [w.week_start for w in weeks] == [
            "2026-02-09",
            "2026-02-02",
            "2026-01-26",
            "2026-01-19",
            "2026-01-12",
        ]
        assert [w.week_label for w in weeks[:3]] == ["This Week", "Last Week", "2 Weeks Ago"]
        assert weeks[0].week_end == "2026-02-15"

    def test_week_counts(self):
        this_week, last_week = compute_weekly_breakdown(scenario(), TODAY, START)[:2]

        assert this_week.days_logged == 2
        assert this_week.tasks_completed == 1
        assert last_week.days_logged == 2
        assert last_week.ideas_added == 1
        assert last_week.ideas_executed == 1
        assert last_week.contacts_added == 1
        assert last_week.discoveries_added == 1
        assert (last_week.outcomes_achieved, last_week.outcomes_total) == (1, 1)

    def test_first_day(self):
        weeks = compute_weekly_breakdown(InsightInputs(), date(2026, 1, 12), START)
        assert len(weeks) == 1

    def test_week_label(self):
        assert week_label(date(2026, 1, 12), TODAY) == "4 Weeks Ago"


class TestReport:
    def test_report_shape(self):
        inputs = scenario()
        metrics = compute_metrics(inputs, TODAY, START)
        weeks = compute_weekly_breakdown(inputs, TODAY, START)

        report = build_report(metrics, weeks, None, datetime(2026, 2, 10, 9, 0))

        assert report["systemStartDate"] == START
        assert report["overallMetrics"]["streak"] == 3
        assert report["tasks"]["total"] == 4
        assert report["tasks"]["byPriority"]["Critical"] == 1
        assert report["ideas"]["byCategory"]["Life"] == 1
        assert report["weeklyBreakdown"][0]["weekLabel"] == "This Week"
        assert report["gaps"] == metrics.gaps
        assert report["aiInsight"] is None
        assert report["generatedAt"].endswith("Z")

    def test_filename(self):
        assert report_filename(date(2026, 2, 10)) == "ajos-insights-2026-02-10.json"


class TestInsightsManager:
    def test_report_from_backend_rows(self, storage, fake_backend):
        fake_backend.rows("daily_entries").extend(
            {"id": d, "date": d, "worked_on": "x"} for d in ("2026-02-10", "2026-02-09", "2026-02-08")
        )
        fake_backend.rows("todos").append(
            {"id": "t", "title": "Ship report", "deadline": "2026-02-10", "priority": "High"}
        )
        manager = InsightsManager(storage, system_start_date=START)

        report = asyncio.run(manager.report(today=TODAY))

        assert report["dailyLogs"]["streak"] == 3
        assert report["tasks"]["dueToday"] == 1
        assert len(storage.get_daily_entries()) == 3

    def test_ai_insight_uses_the_report_snapshot(self, storage, fake_backend):
        fake_backend.rows("daily_entries").extend(
            {"id": d, "date": d, "worked_on": "x"} for d in ("2026-02-10", "2026-02-09", "2026-02-08")
        )
        prompts = []

        def handler(request):
            prompts.append(json.loads(request.content)["contents"][0]["parts"][0]["text"])
            return httpx.Response(
                200, json={"candidates": [{"content": {"parts": [{"text": "- Keep going"}]}}]}
            )

        client = LLMClient(transport=httpx.MockTransport(handler))
        client.api_key = "test-key"
        manager = InsightsManager(storage, system_start_date=START, client=client)

        report = asyncio.run(manager.report(include_ai_insight=True, today=TODAY))

        assert report["aiInsight"] == "- Keep going"
        assert report["dailyLogs"]["streak"] == 3
        assert "Logging streak: 3 days" in prompts[0]
        assert len(fake_backend.requests_for("GET", "daily_entries")) == 1

    def test_report_from_cache_makes_no_requests(self, storage, fake_backend, cache):
        cache.write_list("aj26_daily_logs", [{"id": "d1", "date": "2026-02-10"}])
        manager = InsightsManager(storage, system_start_date=START)

        report = asyncio.run(manager.report(today=TODAY, refresh=False))

        assert report["dailyLogs"]["streak"] == 1
        assert fake_backend.requests_for("GET") == []
