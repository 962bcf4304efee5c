"""Data models for the generation and ranking pipeline."""

from text_variations.models.operation import Operation
from text_variations.models.request import GenerationRequest, RankingRequest
from text_variations.models.result import (
    GenerationFailure,
    GenerationResult,
    GenerationSuccess,
    RankingFailure,
    RankingResult,
    RankingSuccess,
)

__all__ = [
    "GenerationFailure",
    "GenerationRequest",
    "GenerationResult",
    "GenerationSuccess",
    "Operation",
    "RankingFailure",
    "RankingRequest",
    "RankingResult",
    "RankingSuccess",
]
