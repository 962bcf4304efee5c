"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from text_variations.clients.llm_client import LLMClient, LLMResponse
from text_variations.models.operation import Operation
from text_variations.models.request import GenerationRequest


class FakeBackend:
    """Scripted backend: each call consumes the next reply.

    A reply is a string, a list of stream chunks, or an exception to raise.
    Inside a chunk list an exception is raised when the stream reaches it.
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls: list[tuple[str, str, int | None]] = []  # (mode, prompt, seed)

    def _next(self):
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def generate(self, prompt: str, *, seed: int | None = None) -> LLMResponse:
        self.calls.append(("generate", prompt, seed))
        reply = self._next()
        text = "".join(reply) if isinstance(reply, list) else reply
        return LLMResponse(text=text, input_tokens=10, output_tokens=5)

    async def stream(self, prompt: str, *, seed: int | None = None):
        self.calls.append(("stream", prompt, seed))
        reply = self._next()
        for chunk in reply if isinstance(reply, list) else [reply]:
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def sample_text() -> str:
    return "  Me and him goes to the store yesterday and buyed some apple.  "


@pytest.fixture
def grammar_request(sample_text) -> GenerationRequest:
    return GenerationRequest(source_text=sample_text, operation=Operation.GRAMMAR)


@pytest.fixture
def sample_candidates() -> list[str]:
    return [
        "He and I went to the store yesterday and bought some apples.",
        "Me and him went to the store and bought apples.",
        "He and I go to the store yesterday and buy some apple.",
    ]


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client for atomic calls."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="[A,B]", input_tokens=100, output_tokens=5)
    )
    return client
