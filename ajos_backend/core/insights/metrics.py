"""
Insights metrics
Streaks, ratios and threshold-triggered gaps/wins computed from every collection,
restricted to records on or after the system start date
"""

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Set

from core.dates import (
    days_between,
    get_local_date,
    parse_local_date,
    timestamp_to_local_date,
    week_start,
)
from models.base import BaseModel
from models.entities import (
    Category,
    Contact,
    DailyEntry,
    Discovery,
    DiscoveryImpact,
    Idea,
    Platform,
    Todo,
    TodoPriority,
    TodoStatus,
    Urgency,
    WeeklyOutcome,
)

DEFAULT_SYSTEM_START_DATE = "2026-01-12"
WINDOW_DAYS = 30
WEEK_DAYS = 7
MAX_BREAKDOWN_WEEKS = 8


def percent(part: int, whole: int) -> int:
    """Integer percentage rounded half up; 0 for an empty whole"""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


@dataclass
class InsightInputs:
    daily_logs: List[DailyEntry] = field(default_factory=list)
    todos: List[Todo] = field(default_factory=list)
    ideas: List[Idea] = field(default_factory=list)
    discoveries: List[Discovery] = field(default_factory=list)
    contacts: List[Contact] = field(default_factory=list)
    weekly_outcomes: List[WeeklyOutcome] = field(default_factory=list)

    def since(self, start: str) -> "InsightInputs":
        """Drop everything dated before start"""
        return InsightInputs(
            daily_logs=[e for e in self.daily_logs if e.date >= start],
            todos=[t for t in self.todos if (t.trace_date or t.deadline) >= start],
            ideas=[i for i in self.ideas if (i.trace_date or i.date) >= start],
            discoveries=[d for d in self.discoveries if (d.trace_date or d.date_added) >= start],
            contacts=[c for c in self.contacts if (c.trace_date or c.date_added) >= start],
            weekly_outcomes=[
                o for o in self.weekly_outcomes if (o.trace_date or o.week_starting) >= start
            ],
        )


class InsightMetrics(BaseModel):
    system_start_date: str
    days_since_start: int
    # Daily logs
    streak: int
    days_logged_this_week: int
    days_logged_last30: int
    consistency_score: int
    days_since_last_log: int
    total_logs: int
    # Tasks
    pending_tasks: int
    completed_tasks: int
    overdue_tasks: int
    tasks_due_today: int
    tasks_due_this_week: int
    in_progress_tasks: int
    tasks_completed_this_week: int
    completion_rate: int
    tasks_by_priority: Dict[str, int]
    # Ideas
    total_ideas: int
    executed_ideas: int
    pending_ideas: int
    high_urgency_pending: int
    content_ideas: int
    x_ideas: int
    linked_in_ideas: int
    idea_execution_rate: int
    ideas_by_category: Dict[str, int]
    oldest_idea_age: int
    # Discoveries
    total_discoveries: int
    disruptive_discoveries: int
    exponential_discoveries: int
    linear_discoveries: int
    # Contacts
    total_contacts: int
    contacts_this_month: int
    # Weekly outcomes
    total_outcomes: int
    achieved_outcomes: int
    outcome_rate: int
    # Gaps & wins
    gaps: List[str] = []
    wins: List[str] = []


class WeeklyStats(BaseModel):
    week_label: str
    week_start: str
    week_end: str
    days_logged: int
    tasks_created: int
    tasks_completed: int
    ideas_added: int
    ideas_executed: int
    discoveries_added: int
    contacts_added: int
    outcomes_achieved: int
    outcomes_total: int


def _day_list(today: date, count: int) -> List[str]:
    return [get_local_date(today - timedelta(days=i)) for i in range(count)]


def _completed_within(todo: Todo, days: Set[str]) -> bool:
    """Completed todos count by completion day; older rows without it use deadline/trace date"""
    if not todo.completed:
        return False
    completed_day = timestamp_to_local_date(todo.completed_at)
    if completed_day:
        return completed_day in days
    return todo.deadline in days or todo.trace_date in days


def _either_in(days: Set[str], *values: Optional[str]) -> bool:
    return any(v in days for v in values if v)


def compute_streak(log_dates: Iterable[str], today: date, start: str) -> int:
    """Consecutive logged days back from today

    An unlogged today does not break the streak (the day is not over); any earlier
    gap does. Days before start are never counted.
    """
    logged = set(log_dates)
    streak = 0
    offset = 0
    while True:
        day = get_local_date(today - timedelta(days=offset))
        if day < start:
            break
        if day in logged:
            streak += 1
        elif offset > 0:
            break
        offset += 1
    return streak


def detect_gaps(m: InsightMetrics) -> List[str]:
    gaps: List[str] = []

    if m.days_since_last_log > 0 and m.total_logs > 0:
        if m.days_since_last_log == 1:
            gaps.append("You missed logging yesterday - get back on track today")
        else:
            gaps.append(f"{m.days_since_last_log} days since your last log - consistency matters")
    if m.overdue_tasks > 0:
        gaps.append(f"{plural(m.overdue_tasks, 'overdue task')} - clear these first")
    if m.high_urgency_pending > 0:
        gaps.append(f"{plural(m.high_urgency_pending, 'high-urgency idea')} waiting to be executed")
    if m.consistency_score < 50 and m.total_logs > 7:
        gaps.append(
            f"{m.consistency_score}% consistency in last 30 days - aim for daily logging"
        )
    if m.pending_tasks > 15:
        gaps.append(f"{m.pending_tasks} pending tasks - consider pruning or prioritizing")
    critical = m.tasks_by_priority.get(TodoPriority.CRITICAL.value, 0)
    if critical > 0:
        gaps.append(f"{plural(critical, 'critical task')} - handle immediately")
    if m.oldest_idea_age > 14 and m.pending_ideas > 0:
        gaps.append(f"Ideas {m.oldest_idea_age}+ days old - execute or archive them")
    if m.outcome_rate < 50 and m.total_outcomes >= 4:
        gaps.append(f"Only {m.outcome_rate}% of target outcomes achieved - set realistic goals")

    return gaps


def detect_wins(m: InsightMetrics) -> List[str]:
    wins: List[str] = []

    if m.streak >= 10:
        wins.append(f"{m.streak}-day logging streak - exceptional consistency")
    elif m.streak >= 7:
        wins.append(f"{m.streak}-day logging streak - solid week")
    elif m.streak >= 3:
        wins.append(f"{m.streak}-day streak - momentum building")

    if m.completion_rate >= 80:
        wins.append(f"{m.completion_rate}% task completion rate - crushing it")
    elif m.completion_rate >= 60:
        wins.append(f"{m.completion_rate}% task completion - solid progress")

    if m.tasks_completed_this_week >= 5:
        wins.append(f"{m.tasks_completed_this_week} tasks completed this week")

    if m.executed_ideas >= 10:
        wins.append(f"{m.executed_ideas} ideas brought to life")
    elif m.executed_ideas >= 3:
        wins.append(f"{m.executed_ideas} ideas executed")

    if m.disruptive_discoveries >= 3:
        wins.append(f"{m.disruptive_discoveries} disruptive discoveries captured")
    if m.total_contacts >= 20:
        wins.append(f"{m.total_contacts} connections in your network")
    if m.consistency_score >= 80:
        wins.append(f"{m.consistency_score}% consistency - excellent discipline")
    if m.overdue_tasks == 0 and m.pending_tasks > 0:
        wins.append("Zero overdue tasks - staying on top of things")

    return wins


def compute_metrics(
    inputs: InsightInputs,
    today: Optional[date] = None,
    system_start_date: str = DEFAULT_SYSTEM_START_DATE,
) -> InsightMetrics:
    """Compute every metric; inputs are filtered to the start date first"""
    today = today or date.today()
    today_str = get_local_date(today)
    start = system_start_date
    data = inputs.since(start)

    days_since_start = days_between(start, today_str)

    window = min(WINDOW_DAYS, days_since_start + 1)
    last30 = [d for d in _day_list(today, max(window, 0)) if d >= start]
    last7 = last30[:WEEK_DAYS]
    last30_set, last7_set = set(last30), set(last7)
    next7_set = {get_local_date(today + timedelta(days=i)) for i in range(WEEK_DAYS)}

    # ===== Daily logs =====
    log_dates = {e.date for e in data.daily_logs}
    days_logged_last30 = len(log_dates & last30_set)
    latest_log = max(log_dates) if log_dates else None

    # ===== Tasks =====
    pending = [t for t in data.todos if not t.completed]
    completed = [t for t in data.todos if t.completed]
    overdue = [t for t in pending if t.deadline < today_str]
    recent = [t for t in data.todos if _either_in(last30_set, t.deadline, t.trace_date)]
    by_priority = {p.value: 0 for p in TodoPriority}
    for todo in pending:
        by_priority[todo.priority.value] += 1

    # ===== Ideas =====
    executed_ideas = [i for i in data.ideas if i.executed]
    pending_ideas = [i for i in data.ideas if not i.executed]
    content_ideas = [i for i in data.ideas if i.category == Category.CONTENT]
    by_category = {c.value: 0 for c in Category}
    for idea in data.ideas:
        by_category[idea.category.value] += 1
    pending_dates = sorted(
        d for d in (i.date or i.trace_date for i in pending_ideas) if d and d >= start
    )
    oldest_idea_age = (
        days_between(pending_dates[0], today_str) if pending_dates else 0
    )

    # ===== Discoveries =====
    by_impact = {impact: 0 for impact in DiscoveryImpact}
    for discovery in data.discoveries:
        by_impact[discovery.impact] += 1

    # ===== Weekly outcomes =====
    achieved = [o for o in data.weekly_outcomes if o.achieved]

    metrics = InsightMetrics(
        system_start_date=start,
        days_since_start=days_since_start,
        streak=compute_streak(log_dates, today, start),
        days_logged_this_week=len(log_dates & last7_set),
        days_logged_last30=days_logged_last30,
        consistency_score=percent(days_logged_last30, len(last30)),
        days_since_last_log=(
            days_between(latest_log, today_str) if latest_log else -1
        ),
        total_logs=len(data.daily_logs),
        pending_tasks=len(pending),
        completed_tasks=len(completed),
        overdue_tasks=len(overdue),
        tasks_due_today=sum(1 for t in pending if t.deadline == today_str),
        tasks_due_this_week=sum(1 for t in pending if t.deadline in next7_set),
        in_progress_tasks=sum(1 for t in pending if t.status == TodoStatus.IN_PROGRESS),
        tasks_completed_this_week=sum(1 for t in completed if _completed_within(t, last7_set)),
        completion_rate=percent(sum(1 for t in recent if t.completed), len(recent)),
        tasks_by_priority=by_priority,
        total_ideas=len(data.ideas),
        executed_ideas=len(executed_ideas),
        pending_ideas=len(pending_ideas),
        high_urgency_pending=sum(1 for i in pending_ideas if i.urgency == Urgency.HIGH),
        content_ideas=len(content_ideas),
        x_ideas=sum(1 for i in content_ideas if i.platform == Platform.X),
        linked_in_ideas=sum(1 for i in content_ideas if i.platform == Platform.LINKEDIN),
        idea_execution_rate=percent(len(executed_ideas), len(data.ideas)),
        ideas_by_category=by_category,
        oldest_idea_age=oldest_idea_age,
        total_discoveries=len(data.discoveries),
        disruptive_discoveries=by_impact[DiscoveryImpact.DISRUPTIVE],
        exponential_discoveries=by_impact[DiscoveryImpact.EXPONENTIAL],
        linear_discoveries=by_impact[DiscoveryImpact.LINEAR],
        total_contacts=len(data.contacts),
        contacts_this_month=sum(
            1 for c in data.contacts if _either_in(last30_set, c.date_added, c.trace_date)
        ),
        total_outcomes=len(data.weekly_outcomes),
        achieved_outcomes=len(achieved),
        outcome_rate=percent(len(achieved), len(data.weekly_outcomes)),
    )
    metrics.gaps = detect_gaps(metrics)
    metrics.wins = detect_wins(metrics)
    return metrics


def week_label(start_of_week: date, today: date) -> str:
    weeks_ago = (week_start(today) - start_of_week).days // 7
    if weeks_ago == 0:
        return "This Week"
    if weeks_ago == 1:
        return "Last Week"
    return f"{weeks_ago} Weeks Ago"


def compute_weekly_breakdown(
    inputs: InsightInputs,
    today: Optional[date] = None,
    system_start_date: str = DEFAULT_SYSTEM_START_DATE,
) -> List[WeeklyStats]:
    """Per-week counts for up to eight Monday-based weeks, newest first"""
    today = today or date.today()
    start = system_start_date
    start_date = parse_local_date(start).date()
    data = inputs.since(start)

    days_since_start = (today - start_date).days
    max_weeks = min(MAX_BREAKDOWN_WEEKS, math.ceil((days_since_start + 1) / 7))

    log_dates = {e.date for e in data.daily_logs}
    weeks: List[WeeklyStats] = []

    for i in range(max(max_weeks, 0)):
        monday = week_start(today - timedelta(days=7 * i))
        # Weeks that begin before the start date are left out
        if monday < start_date:
            continue

        days = {
            d
            for d in (get_local_date(monday + timedelta(days=j)) for j in range(7))
            if d >= start
        }

        outcomes = [
            o for o in data.weekly_outcomes if _either_in(days, o.trace_date, o.week_starting)
        ]

        weeks.append(
            WeeklyStats(
                week_label=week_label(monday, today),
                week_start=get_local_date(monday),
                week_end=get_local_date(monday + timedelta(days=6)),
                days_logged=len(days & log_dates),
                tasks_created=sum(
                    1
                    for t in data.todos
                    if _either_in(days, t.trace_date, timestamp_to_local_date(t.created_at))
                ),
                tasks_completed=sum(1 for t in data.todos if _completed_within(t, days)),
                ideas_added=sum(1 for i in data.ideas if _either_in(days, i.date, i.trace_date)),
                ideas_executed=sum(
                    1 for i in data.ideas if i.executed and _either_in(days, i.date, i.trace_date)
                ),
                discoveries_added=sum(
                    1 for d in data.discoveries if _either_in(days, d.date_added, d.trace_date)
                ),
                contacts_added=sum(
                    1 for c in data.contacts if _either_in(days, c.date_added, c.trace_date)
                ),
                outcomes_achieved=sum(1 for o in outcomes if o.achieved),
                outcomes_total=len(outcomes),
            )
        )

    return weeks
