"""
Insights report export
Serializes computed metrics into the downloadable JSON document
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from core.dates import get_local_date, utc_timestamp

from .metrics import InsightMetrics, WeeklyStats


def report_filename(day: Optional[date] = None) -> str:
    return f"ajos-insights-{get_local_date(day)}.json"


def build_report(
    metrics: InsightMetrics,
    weekly_breakdown: List[WeeklyStats],
    ai_insight: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    m = metrics
    return {
        "generatedAt": utc_timestamp(generated_at),
        "systemStartDate": m.system_start_date,
        "daysSinceStart": m.days_since_start,
        "overallMetrics": {
            "streak": m.streak,
            "consistencyScore": m.consistency_score,
            "completionRate": m.completion_rate,
            "ideaExecutionRate": m.idea_execution_rate,
            "outcomeRate": m.outcome_rate,
        },
        "tasks": {
            "total": m.pending_tasks + m.completed_tasks,
            "pending": m.pending_tasks,
            "completed": m.completed_tasks,
            "overdue": m.overdue_tasks,
            "inProgress": m.in_progress_tasks,
            "dueToday": m.tasks_due_today,
            "dueThisWeek": m.tasks_due_this_week,
            "completedThisWeek": m.tasks_completed_this_week,
            "byPriority": dict(m.tasks_by_priority),
        },
        "ideas": {
            "total": m.total_ideas,
            "executed": m.executed_ideas,
            "pending": m.pending_ideas,
            "highUrgencyPending": m.high_urgency_pending,
            "contentIdeas": m.content_ideas,
            "xIdeas": m.x_ideas,
            "linkedInIdeas": m.linked_in_ideas,
            "oldestPendingAgeDays": m.oldest_idea_age,
            "byCategory": dict(m.ideas_by_category),
        },
        "dailyLogs": {
            "total": m.total_logs,
            "streak": m.streak,
            "daysLoggedThisWeek": m.days_logged_this_week,
            "daysLoggedLast30": m.days_logged_last30,
            "consistencyPercent": m.consistency_score,
            "daysSinceLastLog": m.days_since_last_log,
        },
        "discoveries": {
            "total": m.total_discoveries,
            "disruptive": m.disruptive_discoveries,
            "exponential": m.exponential_discoveries,
            "linear": m.linear_discoveries,
        },
        "network": {
            "totalContacts": m.total_contacts,
            "addedThisMonth": m.contacts_this_month,
        },
        "weeklyOutcomes": {
            "total": m.total_outcomes,
            "achieved": m.achieved_outcomes,
            "achievementRate": m.outcome_rate,
        },
        "weeklyBreakdown": [w.model_dump() for w in weekly_breakdown],
        "gaps": list(m.gaps),
        "wins": list(m.wins),
        "aiInsight": ai_insight or None,
    }
