"""Ranking protocol: ask the model to order its own variations.

Each candidate gets a letter by position (A, B, C, ...) and is wrapped in a
``<A>...</A>`` tag pair. The model answers with a letter list such as
``[B,A,C]``, which is parsed back into original candidate indices, best
first.
"""

from __future__ import annotations

import logging
import re
import string

from text_variations.clients.base import TextBackend
from text_variations.errors import (
    BackendUnavailable,
    IncompleteRanking,
    NoRankingFound,
    TextVariationsError,
    TooManyCandidates,
)
from text_variations.models.request import RankingRequest
from text_variations.models.result import RankingFailure, RankingResult, RankingSuccess
from text_variations.prompts import ranking_template, substitute
from text_variations.templates.loader import PromptCatalog

logger = logging.getLogger(__name__)

LETTERS = string.ascii_uppercase
MAX_CANDIDATES = len(LETTERS)

_LETTER_RUN = r"[A-Z](?:\s*,\s*[A-Z])*"
_BRACKETED_RE = re.compile(r"\[\s*(" + _LETTER_RUN + r")\s*\]")
_BARE_RE = re.compile(r"(?<![A-Za-z])(" + _LETTER_RUN + r")(?![A-Za-z])")


def format_generations(candidates: list[str]) -> str:
    """Wrap each candidate in its letter tags, separated by blank lines."""
    return "\n\n".join(
        f"<{letter}>\n{text}\n</{letter}>" for letter, text in zip(LETTERS, candidates)
    )


def build_ranking_prompt(
    task: str, candidates: list[str], catalog: PromptCatalog | None = None
) -> str:
    return substitute(
        ranking_template(catalog),
        {"TASK": task, "GENERATIONS": format_generations(candidates)},
    )


def _find_letter_run(reply: str) -> str | None:
    match = _BRACKETED_RE.search(reply)
    if match:
        return match.group(1)
    # Bare answers may be surrounded by prose ("I think B, A, C"); the
    # longest run wins so a stray capital "I" is not taken for the ranking.
    runs = [m.group(1) for m in _BARE_RE.finditer(reply)]
    if not runs:
        return None
    return max(runs, key=len)


def parse_ranking(reply: str, count: int) -> list[int]:
    """Turn a letter-list reply into candidate indices, best first.

    Letters beyond the candidate count are ignored. The remaining letters
    must name each of the ``count`` candidates exactly once.
    """
    run = _find_letter_run(reply)
    if run is None:
        raise NoRankingFound(reply)

    indices = (LETTERS.index(letter) for letter in re.findall(r"[A-Z]", run))
    order = [index for index in indices if index < count]

    if len(order) != count or len(set(order)) != count:
        raise IncompleteRanking(expected=count, found=len(order))
    return order


def apply_ranking(candidates: list[str], order: list[int]) -> list[tuple[int, str]]:
    """Pair each candidate with its 1-based rank, best first."""
    return [(rank, candidates[index]) for rank, index in enumerate(order, start=1)]


class GenerationRanker:
    """Ranks previously generated variations with a single backend call."""

    def __init__(self, backend: TextBackend | None, *, catalog: PromptCatalog | None = None):
        self.backend = backend
        self.catalog = catalog

    async def rank(self, request: RankingRequest) -> RankingResult:
        count = len(request.candidates)
        if count == 1:
            return RankingSuccess(order=[0])

        try:
            if count > MAX_CANDIDATES:
                raise TooManyCandidates(count, MAX_CANDIDATES)
            if self.backend is None:
                raise BackendUnavailable()
            prompt = build_ranking_prompt(request.task, request.candidates, self.catalog)
            logger.debug("Ranking %d candidates", count)
            response = await self.backend.generate(prompt)
            order = parse_ranking(response.text, count)
        except TextVariationsError as exc:
            logger.warning("Ranking failed: %s", exc)
            return RankingFailure.from_error(exc)
        except Exception as exc:
            logger.exception("Unexpected error during ranking")
            return RankingFailure.from_error(exc)

        logger.debug("Ranking order: %s", order)
        return RankingSuccess(order=order)
