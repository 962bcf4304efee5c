"""Prompt template resolution and placeholder substitution."""

from __future__ import annotations

import re
from collections.abc import Mapping

from text_variations.errors import PromptSubstitutionError, TextVariationsError, UnsupportedOperation
from text_variations.models.operation import Operation
from text_variations.models.result import GenerationFailure
from text_variations.templates.loader import PromptCatalog, default_catalog

DEFAULT_LANGUAGE = "English"

PLACEHOLDERS = ("TEXT", "LANGUAGE", "TASK", "GENERATIONS")

_PLACEHOLDER_RE = re.compile(r"\{(" + "|".join(PLACEHOLDERS) + r")\}")


def default_template(
    operation: Operation | str, catalog: PromptCatalog | None = None
) -> str:
    """Return the default template for an operation."""
    op = Operation.parse(operation)
    catalog = catalog or default_catalog()
    try:
        return catalog.operations[op]
    except KeyError:
        raise UnsupportedOperation(op.value) from None


def ranking_template(catalog: PromptCatalog | None = None) -> str:
    return (catalog or default_catalog()).ranking


def substitute(template: str, values: Mapping[str, str | None]) -> str:
    """Replace every occurrence of every recognized placeholder.

    Done in a single pass, so placeholder-like text inside a substituted
    value is left alone. A missing LANGUAGE falls back to English; any
    other missing value raises PromptSubstitutionError.
    """

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        value = values.get(name)
        if value is None:
            if name == "LANGUAGE":
                return DEFAULT_LANGUAGE
            raise PromptSubstitutionError(name)
        return value

    return _PLACEHOLDER_RE.sub(_replace, template)


def target_language(operation: Operation, language: str | None = None) -> str | None:
    """Language to substitute for an operation, or None when not translation-like."""
    if not operation.is_translation:
        return None
    if language and language.strip():
        return language.strip()
    return operation.implied_language or DEFAULT_LANGUAGE


def build_prompt(
    operation: Operation | str,
    text: str,
    *,
    custom_prompt: str | None = None,
    language: str | None = None,
    catalog: PromptCatalog | None = None,
) -> str:
    """Build the full prompt for ``text``; a non-blank custom template wins."""
    op = Operation.parse(operation)
    if custom_prompt and custom_prompt.strip():
        template = custom_prompt
    else:
        template = default_template(op, catalog)
    return substitute(
        template,
        {"TEXT": text, "LANGUAGE": target_language(op, language)},
    )


def resolve_prompt(
    operation: Operation | str,
    text: str,
    *,
    custom_prompt: str | None = None,
    language: str | None = None,
    catalog: PromptCatalog | None = None,
) -> str | GenerationFailure:
    """Like build_prompt, but hands back a failure instead of raising."""
    try:
        return build_prompt(
            operation,
            text,
            custom_prompt=custom_prompt,
            language=language,
            catalog=catalog,
        )
    except TextVariationsError as exc:
        return GenerationFailure.from_error(exc)
