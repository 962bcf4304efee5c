"""Supported text transformations."""

from __future__ import annotations

from enum import Enum

from text_variations.errors import UnsupportedOperation


class Operation(str, Enum):
    REPHRASE = "rephrase"
    GRAMMAR = "grammar"
    SIMPLIFY = "simplify"
    EXPAND = "expand"
    FORMAL = "formal"
    CASUAL = "casual"
    TO_BULLETS = "to-bullets"
    TO_PARAGRAPH = "to-paragraph"
    REMOVE_FILLER = "remove-filler"
    TRANSLATE = "translate"
    TRANSLATE_PT = "translate-pt"
    TRANSLATE_EN = "translate-en"

    @classmethod
    def parse(cls, value: str | Operation) -> Operation:
        """Look up an operation by its wire value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedOperation(str(value)) from None

    @property
    def is_translation(self) -> bool:
        return self in _TRANSLATIONS

    @property
    def implied_language(self) -> str | None:
        """Target language fixed by the operation itself, if any."""
        return _IMPLIED_LANGUAGE.get(self)

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_TRANSLATIONS = frozenset(
    {Operation.TRANSLATE, Operation.TRANSLATE_PT, Operation.TRANSLATE_EN}
)

_IMPLIED_LANGUAGE: dict[Operation, str] = {
    Operation.TRANSLATE_PT: "Portuguese",
    Operation.TRANSLATE_EN: "English",
}

_DESCRIPTIONS: dict[Operation, str] = {
    Operation.REPHRASE: "Making text more concise...",
    Operation.GRAMMAR: "Fixing grammar and punctuation...",
    Operation.SIMPLIFY: "Simplifying text...",
    Operation.EXPAND: "Expanding and elaborating...",
    Operation.FORMAL: "Converting to formal tone...",
    Operation.CASUAL: "Converting to casual tone...",
    Operation.TO_BULLETS: "Converting to bullet points...",
    Operation.TO_PARAGRAPH: "Converting to paragraph...",
    Operation.REMOVE_FILLER: "Removing filler words...",
    Operation.TRANSLATE: "Translating text...",
    Operation.TRANSLATE_PT: "Translating text to Portuguese...",
    Operation.TRANSLATE_EN: "Translating text to English...",
}
