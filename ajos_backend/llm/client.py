"""
Generative text client
Calls a Gemini-style generateContent endpoint using the [llm] configuration section
"""

import asyncio
import json
from typing import Any, Dict, Optional

import httpx

from config.loader import get_config
from core.logger import get_logger

logger = get_logger(__name__)

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_FAILED = "failed"
STATUS_NOT_CONFIGURED = "not_configured"


class LLMClient:
    """Gemini generateContent client"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key: str = ""
        self.model: str = ""
        self.base_url: str = ""
        self.timeout: httpx.Timeout = httpx.Timeout(30.0)
        self.max_retries = 0
        self.retry_backoff = 1.5
        self.non_retry_status = {400, 401, 403, 404, 422}
        # Injected by tests (httpx.MockTransport)
        self._transport = transport
        self._setup_client()

    def _setup_client(self):
        """Read the [llm] section of the active configuration"""
        config = get_config()
        self.api_key = str(config.get("llm.api_key", "") or "").strip()
        self.model = config.get("llm.model", "gemini-2.0-flash")
        self.base_url = config.get(
            "llm.base_url", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.timeout = httpx.Timeout(float(config.get("llm.timeout", 30.0)))
        self.max_retries = int(config.get("llm.max_retries", 0))

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def _should_retry(self, response: Optional[httpx.Response]) -> bool:
        if response is None:
            return True
        return (
            response.status_code >= 500
            and response.status_code not in self.non_retry_status
        )

    def _log_request_error(
        self,
        exc: Exception,
        attempt: int,
        response: Optional[httpx.Response],
        final_attempt: bool,
    ) -> None:
        level = logger.error if final_attempt else logger.warning
        summary: Dict[str, Any] = {
            "model": self.model,
            "attempt": attempt,
            "max_retries": self.max_retries,
            "error_type": exc.__class__.__name__,
            "error_message": str(exc) or None,
        }
        if response is not None:
            summary["status_code"] = response.status_code
            summary["response_text"] = response.text[:500]
        level(f"LLM API request failed: {json.dumps(summary, ensure_ascii=False)}")

    @staticmethod
    def _extract_text(result: Any) -> str:
        try:
            return result["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            return ""

    async def generate_content(
        self, prompt: str, temperature: float = 0.7, max_output_tokens: int = 400
    ) -> Dict[str, Any]:
        """Generate text for a single prompt

        Returns:
            {"status": ok | empty | failed | not_configured, "content": str}
        """
        if not self.is_configured:
            return {"status": STATUS_NOT_CONFIGURED, "content": ""}

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }
        url = self._build_url()

        for attempt in range(1, self.max_retries + 2):
            response: Optional[httpx.Response] = None
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                ) as client:
                    response = await client.post(
                        url,
                        params={"key": self.api_key},
                        headers={"Content-Type": "application/json"},
                        json=payload,
                    )
                response.raise_for_status()
                text = self._extract_text(response.json())
                if not text:
                    logger.warning("LLM response contained no text")
                    return {"status": STATUS_EMPTY, "content": ""}
                return {"status": STATUS_OK, "content": text}

            except httpx.HTTPStatusError as exc:
                final_attempt = attempt > self.max_retries or not self._should_retry(
                    exc.response
                )
                self._log_request_error(exc, attempt, exc.response, final_attempt)
                if final_attempt:
                    # The service answered; treat as a response without text
                    return {"status": STATUS_EMPTY, "content": ""}

            except (httpx.RequestError, ValueError) as exc:
                final_attempt = attempt > self.max_retries
                self._log_request_error(exc, attempt, None, final_attempt)
                if final_attempt:
                    return {"status": STATUS_FAILED, "content": ""}

            await asyncio.sleep(self.retry_backoff * attempt)

        return {"status": STATUS_FAILED, "content": ""}


def get_llm_client() -> LLMClient:
    """Get LLM client instance"""
    return LLMClient()
