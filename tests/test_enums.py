"""Every closed set is handled by the tables that rank or count it"""

from core.insights.metrics import InsightInputs, compute_metrics
from core.navigation import VIEW_TO_ROUTE, View
from core.views.discoveries import build_discoveries_view
from core.views.tasks import PRIORITY_RANK, TIME_SLOT_RANK
from models.entities import Category, DiscoveryImpact, TimeSlot, TodoPriority


def test_priority_rank_covers_every_priority():
    assert set(PRIORITY_RANK) == set(TodoPriority)
    assert PRIORITY_RANK[TodoPriority.CRITICAL] < PRIORITY_RANK[TodoPriority.LOW]


def test_time_slot_rank_covers_every_slot():
    assert set(TIME_SLOT_RANK) == set(TimeSlot)


def test_every_view_has_a_route():
    assert set(VIEW_TO_ROUTE) == set(View)
    assert len(set(VIEW_TO_ROUTE.values())) == len(View)


def test_metric_breakdowns_list_every_member():
    metrics = compute_metrics(InsightInputs(), system_start_date="2026-01-12")
    assert set(metrics.tasks_by_priority) == {p.value for p in TodoPriority}
    assert set(metrics.ideas_by_category) == {c.value for c in Category}


def test_discovery_counts_list_every_impact():
    assert set(build_discoveries_view([])["byImpact"]) == {i.value for i in DiscoveryImpact}
