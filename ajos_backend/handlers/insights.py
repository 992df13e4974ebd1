"""
Insights module command handlers
Metrics, weekly breakdown, AI coaching and the JSON report download
"""

from datetime import datetime
from typing import Any, Dict

from fastapi.responses import JSONResponse

from core.insights import InsightsManager, report_filename
from core.insights.metrics import DEFAULT_SYSTEM_START_DATE
from core.logger import get_logger
from system.runtime import get_runtime

from . import api_handler

logger = get_logger(__name__)


def get_insights_manager() -> InsightsManager:
    runtime = get_runtime()
    start = runtime.config.get("insights.system_start_date", DEFAULT_SYSTEM_START_DATE)
    return InsightsManager(runtime.storage, system_start_date=start)


@api_handler(
    method="GET",
    path="/insights/metrics",
    tags=["insights"],
    summary="Get insight metrics",
    description="Streak, consistency, task/idea/outcome rates, gaps, wins and the weekly breakdown",
)
async def get_insight_metrics() -> Dict[str, Any]:
    """Get insight metrics

    @returns metrics and weeklyBreakdown (newest week first)
    """
    try:
        manager = get_insights_manager()
        analysis = manager.analyze(await manager.load_inputs())

        return {
            "success": True,
            "data": {
                "metrics": analysis["metrics"].model_dump(),
                "weeklyBreakdown": [w.model_dump() for w in analysis["breakdown"]],
            },
            "timestamp": datetime.now().isoformat(),
        }

    except Exception as e:
        logger.error(f"Failed to compute insight metrics: {e}", exc_info=True)
        return {
            "success": False,
            "message": f"Failed to compute insight metrics: {str(e)}",
            "timestamp": datetime.now().isoformat(),
        }


@api_handler(
    method="POST",
    path="/insights/ai-coach",
    tags=["insights"],
    summary="Generate AI coaching insight",
    description="Send the current metrics to the configured LLM; fallback messages are returned as the insight text",
)
async def generate_ai_insight() -> Dict[str, Any]:
    try:
        manager = get_insights_manager()
        analysis = manager.analyze(await manager.load_inputs())
        insight = await manager.coach(analysis["metrics"], analysis["breakdown"])

        return {
            "success": True,
            "data": {"insight": insight},
            "timestamp": datetime.now().isoformat(),
        }

    except Exception as e:
        logger.error(f"Failed to generate AI insight: {e}", exc_info=True)
        return {
            "success": False,
            "message": f"Failed to generate AI insight: {str(e)}",
            "timestamp": datetime.now().isoformat(),
        }


@api_handler(
    method="GET",
    path="/insights/report",
    tags=["insights"],
    summary="Download insights report",
    description="JSON document with every metric and the weekly breakdown, served as an attachment",
)
async def export_insights_report(include_ai_insight: bool = False):
    """Download insights report

    @param include_ai_insight - Also ask the LLM for a coaching insight
    """
    try:
        manager = get_insights_manager()
        report = await manager.report(include_ai_insight=include_ai_insight)
        return JSONResponse(
            content=report,
            headers={
                "Content-Disposition": f'attachment; filename="{report_filename()}"'
            },
        )

    except Exception as e:
        logger.error(f"Failed to export insights report: {e}", exc_info=True)
        return {
            "success": False,
            "message": f"Failed to export insights report: {str(e)}",
            "timestamp": datetime.now().isoformat(),
        }
