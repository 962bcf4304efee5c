"""Pydantic models for generation and ranking inputs."""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, Field

from text_variations.models.operation import Operation


class GenerationRequest(BaseModel):
    source_text: str
    operation: Operation
    custom_prompt: str | None = None
    target_language: str | None = None
    seed: int | None = None
    # Receives the whole accumulated text after every streamed delta
    on_partial: Callable[[str], None] | None = Field(default=None, exclude=True)

    model_config = {"frozen": True}


class RankingRequest(BaseModel):
    task: str
    candidates: list[str] = Field(min_length=1)

    model_config = {"frozen": True}
