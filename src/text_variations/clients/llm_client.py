"""Claude API wrapper with async streaming and retry logic."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import anthropic
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from text_variations.clients.base import DEFAULT_TEMPERATURE, LLMResponse, temperature_for_seed
from text_variations.errors import BackendTransportError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"

_RETRYABLE = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)

__all__ = ["DEFAULT_MODEL", "LLMClient", "LLMResponse"]


def _transport_error(exc: anthropic.APIError) -> BackendTransportError:
    if isinstance(exc, anthropic.APIStatusError):
        body = exc.body if exc.body is not None else exc.message
        return BackendTransportError(exc.status_code, str(body))
    return BackendTransportError(None, str(exc))


class LLMClient:
    """Async Claude API client.

    Atomic calls are retried with exponential backoff on connection errors,
    rate limits and 5xx answers. Streams are never retried.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        *,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
        base_temperature: float = DEFAULT_TEMPERATURE,
        max_retries: int = 3,
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.model = model
        self.max_tokens = max_tokens
        self.base_temperature = base_temperature
        self.max_retries = max_retries
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    def _request_kwargs(self, prompt: str, seed: int | None) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": temperature_for_seed(seed, self.base_temperature),
            "messages": [{"role": "user", "content": prompt}],
        }

    async def _call_api(self, **kwargs) -> anthropic.types.Message:
        """Make the actual API call with retry logic."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type(_RETRYABLE),
            reraise=True,
        ):
            with attempt:
                return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        prompt: str,
        *,
        seed: int | None = None,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        kwargs = self._request_kwargs(prompt, seed)
        logger.debug("LLM call: model=%s temperature=%s", self.model, kwargs["temperature"])
        try:
            message = await self._call_api(**kwargs)
        except anthropic.APIError as exc:
            logger.error("LLM call failed", exc_info=True)
            raise _transport_error(exc) from exc
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((self.model, input_tokens, output_tokens))
        return LLMResponse(
            text=message.content[0].text if message.content else "",
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def stream(
        self,
        prompt: str,
        *,
        seed: int | None = None,
    ) -> AsyncIterator[str]:
        """Yield text deltas as Claude produces them."""
        kwargs = self._request_kwargs(prompt, seed)
        logger.debug("LLM stream: model=%s temperature=%s", self.model, kwargs["temperature"])
        try:
            async with self.client.messages.stream(**kwargs) as stream:
                async for delta in stream.text_stream:
                    yield delta
                message = await stream.get_final_message()
        except anthropic.APIError as exc:
            logger.error("LLM stream failed", exc_info=True)
            raise _transport_error(exc) from exc
        self._token_log.append(
            (self.model, message.usage.input_tokens, message.usage.output_tokens)
        )

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary

    async def aclose(self) -> None:
        await self.client.close()
