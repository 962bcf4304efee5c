"""Post-processing of raw model output."""

from __future__ import annotations

import logging
import re

from text_variations.errors import CleanedResultEmpty
from text_variations.models.operation import Operation
from text_variations.models.result import GenerationFailure, GenerationResult, GenerationSuccess

logger = logging.getLogger(__name__)

LABEL_PREFIXES = (
    "Rewritten:",
    "Corrected:",
    "Simplified:",
    "Expanded:",
    "Formal version:",
    "Casual version:",
    "Bullet points:",
    "Paragraph:",
    "Cleaned:",
    "Translation:",
    "Text:",
    "Output:",
    "Result:",
)

_LANGUAGE_LABEL_RE = re.compile(r"^\w+ translation:")
_FENCED_BLOCK_RE = re.compile(r"```[\s\S]*?```")
_INLINE_CODE_RE = re.compile(r"`+([^`]+)`+")


def strip_label(text: str) -> str:
    """Remove at most one leading label such as ``Corrected:``."""
    match = _LANGUAGE_LABEL_RE.match(text)
    if match:
        return text[match.end():].strip()
    for prefix in LABEL_PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix):].strip()
    return text


def clean_response(raw: str, operation: Operation | None = None) -> str:
    """Strip the echoed label and markdown artifacts from model output.

    The label set is shared by all operations, so ``operation`` is only
    used for logging.
    """
    cleaned = strip_label(raw.strip())
    cleaned = _FENCED_BLOCK_RE.sub("", cleaned)
    cleaned = _INLINE_CODE_RE.sub(r"\1", cleaned)
    cleaned = cleaned.strip()
    if cleaned != raw:
        logger.debug(
            "Cleaned %s output: %d -> %d chars",
            operation.value if operation else "model",
            len(raw),
            len(cleaned),
        )
    return cleaned


def clean_or_fail(raw: str, operation: Operation | None = None) -> GenerationResult:
    """Clean ``raw`` and wrap it; empty output becomes a failure."""
    cleaned = clean_response(raw, operation)
    if not cleaned:
        return GenerationFailure.from_error(CleanedResultEmpty())
    return GenerationSuccess(text=cleaned)
