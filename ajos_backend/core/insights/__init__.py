"""
Insights module - metrics, weekly breakdown, AI coaching and report export
"""

from .coach import generate_insight
from .manager import InsightsManager
from .metrics import (
    InsightInputs,
    InsightMetrics,
    WeeklyStats,
    compute_metrics,
    compute_weekly_breakdown,
)
from .report import build_report, report_filename

__all__ = [
    "InsightInputs",
    "InsightMetrics",
    "InsightsManager",
    "WeeklyStats",
    "build_report",
    "compute_metrics",
    "compute_weekly_breakdown",
    "generate_insight",
    "report_filename",
]
