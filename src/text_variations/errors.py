"""Failure taxonomy for the generation and ranking pipeline.

Internals raise these; the public pipeline entry points catch them and hand
back failure results, so callers only ever branch on a result value.
"""

from __future__ import annotations


class TextVariationsError(Exception):
    """Base class for every pipeline failure."""


class EmptyInput(TextVariationsError):
    def __init__(self, message: str = "Please enter some text to process"):
        super().__init__(message)


class UnsupportedOperation(TextVariationsError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Unsupported operation: {operation!r}")


class PromptSubstitutionError(TextVariationsError):
    def __init__(self, placeholder: str):
        self.placeholder = placeholder
        super().__init__(f"No value supplied for placeholder {{{placeholder}}}")


class BackendUnavailable(TextVariationsError):
    def __init__(self, message: str = "Model backend not configured"):
        super().__init__(message)


class BackendTransportError(TextVariationsError):
    """Non-2xx answer or network failure. ``status`` is None for the latter."""

    def __init__(self, status: int | None, body: str):
        self.status = status
        self.body = body
        if status is None:
            message = f"Backend request failed: {body}"
        else:
            message = f"Backend request failed ({status}): {body}"
        super().__init__(message)


class BackendEmptyResponse(TextVariationsError):
    def __init__(self, message: str = "Backend returned no output"):
        super().__init__(message)


class CleanedResultEmpty(TextVariationsError):
    def __init__(self, message: str = "Model output was empty after cleanup"):
        super().__init__(message)


class NoRankingFound(TextVariationsError):
    def __init__(self, reply: str):
        self.reply = reply
        super().__init__(f"Could not find a ranking in model reply: {reply[:200]!r}")


class IncompleteRanking(TextVariationsError):
    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Ranking is incomplete: expected each of {expected} candidates once, got {found} letters"
        )


class TooManyCandidates(TextVariationsError):
    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Cannot rank {count} candidates, the limit is {limit}")
