"""OpenAI chat completion client for referral drafting and text cleanup."""

import logging
import time
from dataclasses import dataclass

from ..config import settings
from ..metrics import LLM_REQUEST_DURATION_SECONDS, LLM_REQUESTS_TOTAL, LLM_TOKENS_TOTAL

logger = logging.getLogger(__name__)


class LLMUnavailableError(RuntimeError):
    """No API key is configured for the LLM provider."""


@dataclass
class LLMResponse:
    """Standardized LLM response."""

    content: str
    model: str
    usage: dict  # {"prompt_tokens": int, "completion_tokens": int, "total_tokens": int}


class OpenAIClient:
    """OpenAI API client."""

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self._client = None
        self._api_key = api_key
        self.model = model or settings.LLM_MODEL

    def _get_client(self):
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self._api_key or settings.OPENAI_API_KEY)
        return self._client

    def is_available(self) -> bool:
        return bool(self._api_key or settings.OPENAI_API_KEY)

    async def generate(
        self,
        messages: list[dict],
        temperature: float = 0.3,
        purpose: str = "chat",
    ) -> LLMResponse:
        """Send ``messages`` and return the first choice."""
        if not self.is_available():
            raise LLMUnavailableError("OPENAI_API_KEY is not configured")

        client = self._get_client()
        start = time.perf_counter()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
            )
        except Exception:
            LLM_REQUESTS_TOTAL.labels(model=self.model, purpose=purpose, status="error").inc()
            raise
        finally:
            LLM_REQUEST_DURATION_SECONDS.labels(model=self.model, purpose=purpose).observe(
                time.perf_counter() - start
            )

        LLM_REQUESTS_TOTAL.labels(model=self.model, purpose=purpose, status="ok").inc()
        usage = response.usage
        result = LLMResponse(
            content=response.choices[0].message.content or "",
            model=self.model,
            usage={
                "prompt_tokens": usage.prompt_tokens if usage else 0,
                "completion_tokens": usage.completion_tokens if usage else 0,
                "total_tokens": usage.total_tokens if usage else 0,
            },
        )
        LLM_TOKENS_TOTAL.labels(model=self.model, purpose=purpose, type="input").inc(
            result.usage["prompt_tokens"]
        )
        LLM_TOKENS_TOTAL.labels(model=self.model, purpose=purpose, type="output").inc(
            result.usage["completion_tokens"]
        )
        return result


llm_client = OpenAIClient()


def get_llm_client() -> OpenAIClient:
    """FastAPI dependency for the shared client."""
    return llm_client
