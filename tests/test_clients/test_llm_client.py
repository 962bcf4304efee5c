"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from text_variations.clients.base import TextBackend, temperature_for_seed
from text_variations.clients.llm_client import LLMClient, LLMResponse
from text_variations.errors import BackendTransportError

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(text=text)]
    return message


class _FakeMessageStream:
    """Stand-in for the SDK's MessageStream context manager."""

    def __init__(self, deltas: list[str], message: MagicMock, error: Exception | None = None):
        self._deltas = deltas
        self._message = message
        self._error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    @property
    def text_stream(self):
        async def _gen():
            for delta in self._deltas:
                yield delta
            if self._error is not None:
                raise self._error

        return _gen()

    async def get_final_message(self):
        return self._message


def _status_error(cls, status: int, body: dict):
    response = httpx.Response(status, request=_REQUEST)
    return cls("api error", response=response, body=body)


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        """Creates AsyncAnthropic with no extra kwargs when no args supplied."""
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with()

    def test_init_with_api_key_and_timeout(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(api_key="test-key", timeout=30.0)

    def test_satisfies_backend_protocol(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic"):
            assert isinstance(LLMClient(), TextBackend)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        """generate() wraps API response fields into an LLMResponse dataclass."""
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                return_value=_make_api_message("hello world", input_tokens=100, output_tokens=50)
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            result = await llm.generate("say hello")

        assert isinstance(result, LLMResponse)
        assert result.text == "hello world"
        assert result.input_tokens == 100
        assert result.output_tokens == 50

    async def test_seed_sets_temperature(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=_make_api_message("x"))
            mock_cls.return_value = mock_client

            llm = LLMClient(model="claude-test")
            await llm.generate("prompt", seed=3)

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["temperature"] == temperature_for_seed(3)
        assert kwargs["model"] == "claude-test"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    async def test_no_seed_uses_base_temperature(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=_make_api_message("x"))
            mock_cls.return_value = mock_client

            await LLMClient(base_temperature=0.2).generate("prompt")

        assert mock_client.messages.create.call_args.kwargs["temperature"] == 0.2

    async def test_empty_content_gives_empty_text(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            message = _make_api_message("")
            message.content = []
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=message)
            mock_cls.return_value = mock_client

            result = await LLMClient().generate("prompt")

        assert result.text == ""

    async def test_status_error_becomes_transport_error(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                side_effect=_status_error(
                    anthropic.BadRequestError, 400, {"error": {"message": "prompt too long"}}
                )
            )
            mock_cls.return_value = mock_client

            with pytest.raises(BackendTransportError) as exc_info:
                await LLMClient().generate("prompt")

        assert exc_info.value.status == 400
        assert "prompt too long" in exc_info.value.body
        # 4xx answers are not retried
        assert mock_client.messages.create.await_count == 1

    async def test_connection_error_has_no_status(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                side_effect=anthropic.APIConnectionError(request=_REQUEST)
            )
            mock_cls.return_value = mock_client

            with pytest.raises(BackendTransportError) as exc_info:
                await LLMClient(max_retries=1).generate("prompt")

        assert exc_info.value.status is None

    async def test_rate_limit_is_retried(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                side_effect=[
                    _status_error(anthropic.RateLimitError, 429, {"error": "slow down"}),
                    _make_api_message("recovered"),
                ]
            )
            mock_cls.return_value = mock_client

            result = await LLMClient(max_retries=2).generate("prompt")

        assert result.text == "recovered"
        assert mock_client.messages.create.await_count == 2


class TestLLMClientStream:
    async def test_stream_yields_deltas_and_logs_tokens(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.stream = MagicMock(
                return_value=_FakeMessageStream(
                    ["Hel", "lo"], _make_api_message("Hello", input_tokens=12, output_tokens=3)
                )
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            deltas = [d async for d in llm.stream("say hello", seed=1)]

        assert deltas == ["Hel", "lo"]
        assert mock_client.messages.stream.call_args.kwargs["temperature"] == temperature_for_seed(1)
        _, inp, out = llm._token_log[0]
        assert (inp, out) == (12, 3)

    async def test_stream_error_becomes_transport_error(self):
        error = _status_error(anthropic.InternalServerError, 500, {"error": "overloaded"})
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.stream = MagicMock(
                return_value=_FakeMessageStream(["par"], _make_api_message("par"), error=error)
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            received = []
            with pytest.raises(BackendTransportError) as exc_info:
                async for delta in llm.stream("prompt"):
                    received.append(delta)

        assert received == ["par"]
        assert exc_info.value.status == 500
        # streams are never retried
        assert mock_client.messages.stream.call_count == 1


class TestLLMClientTokenSummary:
    def test_get_token_summary_returns_correct_totals(self):
        """get_token_summary() sums input and output tokens across all log entries."""
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic"):
            llm = LLMClient()
            llm._token_log = [
                ("claude-haiku-4-5-20251001", 100, 50),
                ("claude-haiku-4-5-20251001", 200, 80),
            ]

        summary = llm.get_token_summary()

        assert summary["input"] == 300
        assert summary["output"] == 130
        assert len(summary["calls"]) == 2

    def test_get_token_summary_clears_log_after_return(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic"):
            llm = LLMClient()
            llm._token_log = [("claude-haiku-4-5-20251001", 50, 25)]

        llm.get_token_summary()
        second_summary = llm.get_token_summary()

        assert second_summary["input"] == 0
        assert second_summary["calls"] == []


class TestLLMClientClose:
    async def test_aclose_closes_sdk_client(self):
        with patch("text_variations.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.close = AsyncMock()
            mock_cls.return_value = mock_client

            await LLMClient().aclose()

        mock_client.close.assert_awaited_once()

class TestTemperatureForSeed:
    def test_no_seed_keeps_base(self):
        assert temperature_for_seed(None, 0.3) == 0.3

    def test_deterministic(self):
        assert temperature_for_seed(7) == temperature_for_seed(7)

    def test_consecutive_seeds_differ(self):
        temps = [temperature_for_seed(s) for s in range(26)]
        assert len(set(temps)) == 26
        assert min(temps) == 0.5
        assert max(temps) < 1.0

    def test_offset_seeds_differ(self):
        temps = [temperature_for_seed(s) for s in range(40, 66)]
        assert len(set(temps)) == 26
