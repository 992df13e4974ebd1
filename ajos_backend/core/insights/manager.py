"""
Insights Manager
Loads every collection through the storage facade and feeds the metric engine
"""

import asyncio
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from core.logger import get_logger
from core.storage import Storage
from llm.client import LLMClient

from .coach import generate_insight
from .metrics import (
    DEFAULT_SYSTEM_START_DATE,
    InsightInputs,
    InsightMetrics,
    WeeklyStats,
    compute_metrics,
    compute_weekly_breakdown,
)
from .report import build_report

logger = get_logger(__name__)


class InsightsManager:
    def __init__(
        self,
        storage: Storage,
        system_start_date: str = DEFAULT_SYSTEM_START_DATE,
        client: Optional[LLMClient] = None,
    ):
        self.storage = storage
        self.system_start_date = system_start_date
        self.client = client

    async def load_inputs(self) -> InsightInputs:
        """Refresh all six collections concurrently"""
        daily, todos, ideas, discoveries, contacts, weekly = await asyncio.gather(
            self.storage.fetch_daily_entries(),
            self.storage.fetch_todos(),
            self.storage.fetch_ideas(),
            self.storage.fetch_discoveries(),
            self.storage.fetch_contacts(),
            self.storage.fetch_weekly_outcomes(),
        )
        return InsightInputs(
            daily_logs=daily,
            todos=todos,
            ideas=ideas,
            discoveries=discoveries,
            contacts=contacts,
            weekly_outcomes=weekly,
        )

    def cached_inputs(self) -> InsightInputs:
        return InsightInputs(
            daily_logs=self.storage.get_daily_entries(),
            todos=self.storage.get_todos(),
            ideas=self.storage.get_ideas(),
            discoveries=self.storage.get_discoveries(),
            contacts=self.storage.get_contacts(),
            weekly_outcomes=self.storage.get_weekly_outcomes(),
        )

    def analyze(
        self, inputs: InsightInputs, today: Optional[date] = None
    ) -> Dict[str, Any]:
        metrics = compute_metrics(inputs, today, self.system_start_date)
        breakdown = compute_weekly_breakdown(inputs, today, self.system_start_date)
        return {"metrics": metrics, "breakdown": breakdown}

    async def coach(
        self, metrics: InsightMetrics, breakdown: List[WeeklyStats]
    ) -> str:
        return await generate_insight(metrics, breakdown, self.client)

    async def report(
        self,
        include_ai_insight: bool = False,
        today: Optional[date] = None,
        refresh: bool = True,
    ) -> Dict[str, Any]:
        """Report document; the coaching text, when asked for, reads the same snapshot"""
        inputs = await self.load_inputs() if refresh else self.cached_inputs()
        analysis = self.analyze(inputs, today)
        ai_insight = None
        if include_ai_insight:
            ai_insight = await self.coach(analysis["metrics"], analysis["breakdown"])
        logger.debug(
            f"Insights report built: streak {analysis['metrics'].streak}, "
            f"{len(analysis['breakdown'])} weeks"
        )
        return build_report(
            analysis["metrics"], analysis["breakdown"], ai_insight, datetime.now()
        )
