"""Pydantic models for generation and ranking outcomes."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, Field


class GenerationSuccess(BaseModel):
    ok: Literal[True] = True
    text: str = Field(min_length=1)

    model_config = {"frozen": True}


class GenerationFailure(BaseModel):
    ok: Literal[False] = False
    reason: str
    error: str  # taxonomy class name, e.g. "EmptyInput"

    model_config = {"frozen": True}

    @classmethod
    def from_error(cls, exc: Exception) -> GenerationFailure:
        return cls(reason=str(exc) or type(exc).__name__, error=type(exc).__name__)


class RankingSuccess(BaseModel):
    ok: Literal[True] = True
    order: list[int]  # rank position -> original candidate index

    model_config = {"frozen": True}


class RankingFailure(BaseModel):
    ok: Literal[False] = False
    reason: str
    error: str

    model_config = {"frozen": True}

    @classmethod
    def from_error(cls, exc: Exception) -> RankingFailure:
        return cls(reason=str(exc) or type(exc).__name__, error=type(exc).__name__)


GenerationResult = Union[GenerationSuccess, GenerationFailure]
RankingResult = Union[RankingSuccess, RankingFailure]
