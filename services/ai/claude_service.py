import logging
import time

import anthropic

from domain.errors import UpstreamError, UpstreamTimeout

logger = logging.getLogger(__name__)


class ClaudeCompletionClient:
    """
    Claude 호출 (complete(system, user) -> raw text)
    Same bounds as the OpenAI client: one attempt, hard timeout.
    """

    provider = "claude"

    def __init__(self, api_key, model="claude-3-5-haiku-latest", *, timeout=15.0, temperature=0.5, max_tokens=400, client=None):
        self.model = model
        self.timeout = float(timeout)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client or anthropic.Anthropic(api_key=api_key, timeout=self.timeout, max_retries=0)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        start = time.perf_counter()
        try:
            result = self.client.messages.create(
                model=self.model,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except anthropic.APITimeoutError as e:
            logger.error("claude timeout after %dms: %s", _elapsed_ms(start), e)
            raise UpstreamTimeout(self.timeout) from e
        except anthropic.APIStatusError as e:
            logger.error("claude status=%s after %dms: %s", e.status_code, _elapsed_ms(start), e.message)
            raise UpstreamError(e.status_code, detail=str(e.message)) from e
        except anthropic.APIError as e:
            logger.error("claude error after %dms: %r", _elapsed_ms(start), e)
            raise UpstreamError(None, detail=repr(e)) from e

        logger.info("claude ok model=%s latency_ms=%d", self.model, _elapsed_ms(start))
        return _as_text_from_claude_result(result).strip()


def _as_text_from_claude_result(result) -> str:
    """
    messages.create(...) 반환값 정규화: text 블록만 이어 붙인다
    """
    if result is None:
        return ""
    blocks = getattr(result, "content", None) or []
    parts = []
    for block in blocks:
        if getattr(block, "type", None) == "text":
            parts.append(getattr(block, "text", "") or "")
    return "".join(parts)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
