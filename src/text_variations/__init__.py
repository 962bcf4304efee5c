"""Generate, clean and rank LLM text transformations."""

from text_variations.models import (
    GenerationFailure,
    GenerationRequest,
    GenerationSuccess,
    Operation,
    RankingFailure,
    RankingRequest,
    RankingSuccess,
)
from text_variations.pipeline.generator import TextGenerator
from text_variations.pipeline.ranker import GenerationRanker

__version__ = "0.1.0"

__all__ = [
    "GenerationFailure",
    "GenerationRanker",
    "GenerationRequest",
    "GenerationSuccess",
    "Operation",
    "RankingFailure",
    "RankingRequest",
    "RankingSuccess",
    "TextGenerator",
]
