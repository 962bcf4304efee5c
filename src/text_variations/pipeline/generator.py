"""Generation orchestrator: prompt -> backend -> accumulate -> clean."""

from __future__ import annotations

import logging

from text_variations.clients.base import TextBackend
from text_variations.errors import BackendEmptyResponse, BackendUnavailable, EmptyInput, TextVariationsError
from text_variations.models.request import GenerationRequest
from text_variations.models.result import GenerationFailure, GenerationResult
from text_variations.pipeline.cleaner import clean_or_fail
from text_variations.prompts import build_prompt
from text_variations.templates.loader import PromptCatalog

logger = logging.getLogger(__name__)


class TextGenerator:
    """Runs text transformations against a backend.

    Every public method returns result values; failures never escape as
    exceptions and nothing is retried here.
    """

    def __init__(
        self,
        backend: TextBackend | None,
        *,
        stream: bool = True,
        catalog: PromptCatalog | None = None,
    ):
        self.backend = backend
        self.stream = stream
        self.catalog = catalog

    def _prepare(self, request: GenerationRequest) -> str:
        text = request.source_text.strip()
        if not text:
            raise EmptyInput()
        if self.backend is None:
            raise BackendUnavailable()
        return build_prompt(
            request.operation,
            text,
            custom_prompt=request.custom_prompt,
            language=request.target_language,
            catalog=self.catalog,
        )

    async def _complete(self, prompt: str, request: GenerationRequest, seed: int | None) -> str:
        if not self.stream:
            response = await self.backend.generate(prompt, seed=seed)
            if request.on_partial is not None and response.text:
                request.on_partial(response.text)
            return response.text

        buffer = ""
        async for delta in self.backend.stream(prompt, seed=seed):
            if not delta:
                continue
            buffer += delta
            if request.on_partial is not None:
                request.on_partial(buffer)
        return buffer

    async def _attempt(
        self, prompt: str, request: GenerationRequest, seed: int | None
    ) -> GenerationResult:
        try:
            raw = await self._complete(prompt, request, seed)
            if not raw.strip():
                raise BackendEmptyResponse()
        except TextVariationsError as exc:
            logger.warning("Generation failed (seed=%s): %s", seed, exc)
            return GenerationFailure.from_error(exc)
        except Exception as exc:
            logger.exception("Unexpected error during generation")
            return GenerationFailure.from_error(exc)

        result = clean_or_fail(raw, request.operation)
        if not result.ok:
            logger.warning("Generation failed (seed=%s): %s", seed, result.reason)
        return result

    async def generate_one(self, request: GenerationRequest) -> GenerationResult:
        """Produce a single transformed text."""
        try:
            prompt = self._prepare(request)
        except TextVariationsError as exc:
            logger.warning("Generation rejected: %s", exc)
            return GenerationFailure.from_error(exc)
        return await self._attempt(prompt, request, request.seed)

    async def generate_many(
        self, request: GenerationRequest, count: int
    ) -> list[GenerationResult]:
        """Produce ``count`` variations one after another.

        Seeds are ``request.seed + i`` (or ``i`` without a seed). A failed
        variation is recorded in its slot and the batch carries on.
        """
        if count < 1:
            return []
        try:
            prompt = self._prepare(request)
        except TextVariationsError as exc:
            logger.warning("Generation rejected: %s", exc)
            failure = GenerationFailure.from_error(exc)
            return [failure] * count

        base_seed = request.seed if request.seed is not None else 0
        results: list[GenerationResult] = []
        for i in range(count):
            logger.debug("Generating variation %d of %d", i + 1, count)
            results.append(await self._attempt(prompt, request, base_seed + i))
        return results
