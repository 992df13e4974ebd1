"""
AI coach tests - the generative endpoint is replaced by httpx.MockTransport
"""

import asyncio
import json
from datetime import date

import httpx
import pytest

from core.insights.coach import (
    EMPTY_MESSAGE,
    FAILED_MESSAGE,
    NOT_CONFIGURED_MESSAGE,
    build_prompt_params,
    generate_insight,
)
from core.insights.metrics import compute_metrics, compute_weekly_breakdown
from llm.client import LLMClient

from test_insights import START, TODAY, scenario


@pytest.fixture
def analysis():
    inputs = scenario()
    return (
        compute_metrics(inputs, TODAY, START),
        compute_weekly_breakdown(inputs, TODAY, START),
    )


def make_client(handler) -> LLMClient:
    client = LLMClient(transport=httpx.MockTransport(handler))
    client.api_key = "test-key"
    return client


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestPromptParams:
    def test_week_comparison_and_priorities(self, analysis):
        params = build_prompt_params(*analysis)

        assert params["critical_tasks"] == 1
        assert params["high_tasks"] == 1
        assert params["this_week_logs"] == 2
        assert params["last_week_logs"] == 2
        assert params["this_week_tasks"] == 1
        assert params["streak"] == 3

    def test_gaps_and_wins_joined(self, analysis):
        params = build_prompt_params(*analysis)

        assert params["gaps"].startswith("1 overdue task - clear these first; ")
        assert params["wins"] == "3-day streak - momentum building"

    def test_empty_fallbacks(self, analysis):
        metrics, _ = analysis
        metrics = metrics.model_copy(update={"gaps": [], "wins": []})

        params = build_prompt_params(metrics, [])

        assert params["gaps"] == "None"
        assert params["wins"] == "Keep pushing"
        assert params["this_week_logs"] == 0


class TestGenerateInsight:
    def test_not_configured_makes_no_request(self, analysis):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=gemini_reply("unused"))

        client = LLMClient(transport=httpx.MockTransport(handler))
        client.api_key = ""

        assert asyncio.run(generate_insight(*analysis, client=client)) == NOT_CONFIGURED_MESSAGE
        assert calls == []

    def test_success(self, analysis):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=gemini_reply("- Clear the overdue task"))

        insight = asyncio.run(generate_insight(*analysis, client=make_client(handler)))

        assert insight == "- Clear the overdue task"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path.endswith(":generateContent")
        assert request.url.params["key"] == "test-key"
        body = json.loads(request.content)
        assert body["generationConfig"]["maxOutputTokens"] == 400
        assert body["generationConfig"]["temperature"] == 0.7
        assert "Logging streak: 3 days" in body["contents"][0]["parts"][0]["text"]

    def test_connection_failure(self, analysis):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        insight = asyncio.run(generate_insight(*analysis, client=make_client(handler)))

        assert insight == FAILED_MESSAGE

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(400, json={"error": {"message": "bad request"}}),
            httpx.Response(200, json={"candidates": []}),
        ],
    )
    def test_unusable_response(self, analysis, response):
        insight = asyncio.run(
            generate_insight(*analysis, client=make_client(lambda request: response))
        )

        assert insight == EMPTY_MESSAGE


def test_first_day_has_no_last_week():
    weeks = compute_weekly_breakdown(scenario(), date(2026, 1, 12), START)
    params = build_prompt_params(compute_metrics(scenario(), date(2026, 1, 12), START), weeks)
    assert params["last_week_logs"] == 0
