import logging
import time

import openai
from openai import OpenAI

from domain.errors import UpstreamError, UpstreamTimeout

logger = logging.getLogger(__name__)


class OpenAICompletionClient:
    """
    complete(system, user) -> raw text
    Single attempt (max_retries=0) bounded by `timeout` seconds.
    """

    provider = "openai"

    def __init__(self, api_key, model="gpt-4o-mini", *, timeout=15.0, temperature=0.5, max_tokens=400, client=None):
        self.model = model
        self.timeout = float(timeout)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client or OpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        start = time.perf_counter()
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except openai.APITimeoutError as e:
            logger.error("openai timeout after %dms: %s", _elapsed_ms(start), e)
            raise UpstreamTimeout(self.timeout) from e
        except openai.APIStatusError as e:
            logger.error("openai status=%s after %dms: %s", e.status_code, _elapsed_ms(start), e.message)
            raise UpstreamError(e.status_code, detail=str(e.message)) from e
        except openai.APIError as e:
            logger.error("openai error after %dms: %r", _elapsed_ms(start), e)
            raise UpstreamError(None, detail=repr(e)) from e

        choices = getattr(completion, "choices", None) or []
        content = getattr(getattr(choices[0], "message", None), "content", None) if choices else None
        usage = getattr(completion, "usage", None)
        logger.info(
            "openai ok model=%s latency_ms=%d total_tokens=%s",
            self.model, _elapsed_ms(start), getattr(usage, "total_tokens", None),
        )
        return (content or "").strip()


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
