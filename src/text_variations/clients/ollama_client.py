"""Client for a local Ollama server's chat endpoint."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator

import httpx

from text_variations.clients.base import DEFAULT_TEMPERATURE, LLMResponse, temperature_for_seed
from text_variations.errors import BackendTransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "gpt-oss:20b"


class OllamaClient:
    """Async client for ``POST /api/chat``.

    Unlike the Claude API, Ollama accepts a sampling seed, which is passed
    through as-is alongside the seed-derived temperature.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        *,
        timeout: float = 300.0,
        base_temperature: float = DEFAULT_TEMPERATURE,
        top_p: float = 0.9,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.model = model
        self.base_temperature = base_temperature
        self.top_p = top_p
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )

    def _payload(self, prompt: str, seed: int | None, stream: bool) -> dict:
        options: dict = {
            "temperature": temperature_for_seed(seed, self.base_temperature),
            "top_p": self.top_p,
        }
        if seed is not None:
            options["seed"] = seed
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": stream,
            "options": options,
        }

    async def generate(self, prompt: str, *, seed: int | None = None) -> LLMResponse:
        """Send a prompt and wait for the complete answer."""
        logger.debug("Ollama call: model=%s seed=%s", self.model, seed)
        try:
            response = await self._client.post(
                "/api/chat", json=self._payload(prompt, seed, stream=False)
            )
        except httpx.HTTPError as exc:
            logger.error("Ollama call failed", exc_info=True)
            raise BackendTransportError(None, str(exc) or type(exc).__name__) from exc
        if response.is_error:
            raise BackendTransportError(response.status_code, response.text)
        data = response.json()
        return LLMResponse(
            text=data.get("message", {}).get("content", ""),
            input_tokens=data.get("prompt_eval_count", 0),
            output_tokens=data.get("eval_count", 0),
        )

    async def stream(self, prompt: str, *, seed: int | None = None) -> AsyncIterator[str]:
        """Yield content deltas from Ollama's newline-delimited JSON stream."""
        logger.debug("Ollama stream: model=%s seed=%s", self.model, seed)
        try:
            async with self._client.stream(
                "POST", "/api/chat", json=self._payload(prompt, seed, stream=True)
            ) as response:
                if response.is_error:
                    body = await response.aread()
                    raise BackendTransportError(
                        response.status_code, body.decode("utf-8", errors="replace")
                    )
                async for line in response.aiter_lines():
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        logger.warning("Skipping malformed stream line: %.80s", line)
                        continue
                    if "error" in data:
                        raise BackendTransportError(response.status_code, str(data["error"]))
                    content = data.get("message", {}).get("content", "")
                    if content:
                        yield content
                    if data.get("done"):
                        break
        except httpx.HTTPError as exc:
            logger.error("Ollama stream failed", exc_info=True)
            raise BackendTransportError(None, str(exc) or type(exc).__name__) from exc

    async def aclose(self) -> None:
        await self._client.aclose()
