"""Interface every text-generation backend exposes to the pipeline."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

DEFAULT_TEMPERATURE = 0.7


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


@runtime_checkable
class TextBackend(Protocol):
    """A backend answers a prompt either atomically or as a delta stream.

    Implementations raise BackendTransportError for non-2xx answers and
    network failures.
    """

    async def generate(self, prompt: str, *, seed: int | None = None) -> LLMResponse:
        ...

    def stream(self, prompt: str, *, seed: int | None = None) -> AsyncIterator[str]:
        ...


def temperature_for_seed(seed: int | None, base: float = DEFAULT_TEMPERATURE) -> float:
    """Spread variation seeds over a temperature band.

    No seed keeps ``base``; seeds map to ``0.5 + (seed % 26) / 52``, so any
    26 consecutive seeds give 26 different temperatures in [0.5, 1.0).
    """
    if seed is None:
        return base
    return round(0.5 + (seed % 26) / 52, 4)
