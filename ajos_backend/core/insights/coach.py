"""
AI coach
Turns computed metrics into a prompt and asks the LLM for three coaching bullets
"""

from typing import Any, Dict, List, Optional

from core.logger import get_logger
from llm.client import (
    STATUS_FAILED,
    STATUS_NOT_CONFIGURED,
    STATUS_OK,
    LLMClient,
    get_llm_client,
)
from llm.prompt_manager import get_prompt_manager

from .metrics import InsightMetrics, WeeklyStats

logger = get_logger(__name__)

PROMPT_CATEGORY = "insight_coach"

NOT_CONFIGURED_MESSAGE = (
    "Gemini API key not configured. Add an API key under [llm] to enable AI insights."
)
FAILED_MESSAGE = "Failed to generate insight. Check your connection."
EMPTY_MESSAGE = "Unable to generate insight."


def build_prompt_params(
    metrics: InsightMetrics, breakdown: List[WeeklyStats]
) -> Dict[str, Any]:
    """Template parameters; the first two breakdown weeks are this week and last week"""
    this_week = breakdown[0] if breakdown else None
    last_week = breakdown[1] if len(breakdown) > 1 else None

    params = metrics.model_dump(by_alias=False, exclude={"gaps", "wins"})
    params.update(
        critical_tasks=metrics.tasks_by_priority.get("Critical", 0),
        high_tasks=metrics.tasks_by_priority.get("High", 0),
        this_week_logs=this_week.days_logged if this_week else 0,
        last_week_logs=last_week.days_logged if last_week else 0,
        this_week_tasks=this_week.tasks_completed if this_week else 0,
        last_week_tasks=last_week.tasks_completed if last_week else 0,
        this_week_ideas=this_week.ideas_added if this_week else 0,
        last_week_ideas=last_week.ideas_added if last_week else 0,
        gaps="; ".join(metrics.gaps) or "None",
        wins="; ".join(metrics.wins) or "Keep pushing",
    )
    return params


async def generate_insight(
    metrics: InsightMetrics,
    breakdown: List[WeeklyStats],
    client: Optional[LLMClient] = None,
) -> str:
    """Coaching text, or a user-facing fallback message when generation is unavailable"""
    client = client or get_llm_client()
    if not client.is_configured:
        return NOT_CONFIGURED_MESSAGE

    prompt_manager = get_prompt_manager()
    prompt = prompt_manager.get_user_prompt(
        PROMPT_CATEGORY, **build_prompt_params(metrics, breakdown)
    )
    if not prompt:
        logger.error("Insight coach prompt template is missing")
        return EMPTY_MESSAGE

    params = prompt_manager.get_config_params(PROMPT_CATEGORY)
    result = await client.generate_content(
        prompt,
        temperature=params.get("temperature", 0.7),
        max_output_tokens=params.get("max_output_tokens", 400),
    )

    status = result.get("status")
    if status == STATUS_OK:
        return result["content"]
    if status == STATUS_NOT_CONFIGURED:
        return NOT_CONFIGURED_MESSAGE
    if status == STATUS_FAILED:
        return FAILED_MESSAGE
    return EMPTY_MESSAGE
