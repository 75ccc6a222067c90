# tests/unit/llms/test_openai.py

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import APITimeoutError

from debate_kit.llms.base import Message, Role
from debate_kit.llms.openai import OpenAILLMClient


@pytest.fixture
def mock_openai_response() -> MagicMock:
    """Create a mock OpenAI response."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = '[{"title": "Carbon Taxes"}]'
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = 10
    response.usage.completion_tokens = 8
    response.usage.total_tokens = 18
    return response


def _client_returning(response: MagicMock) -> MagicMock:
    mock_client = MagicMock()
    mock_client.chat.completions.create = AsyncMock(return_value=response)
    return mock_client


class TestOpenAILLMClient:
    @pytest.mark.asyncio
    async def test_complete_basic(self, mock_openai_response: MagicMock) -> None:
        """Test basic completion."""
        with patch("debate_kit.llms.openai.AsyncOpenAI") as mock_openai:
            mock_openai.return_value = _client_returning(mock_openai_response)

            client = OpenAILLMClient(api_key="test-key", model="gpt-4o")
            response = await client.complete(
                messages=[Message(role=Role.USER, content="Hello!")]
            )

            assert response.content == '[{"title": "Carbon Taxes"}]'
            assert response.finish_reason == "stop"
            assert response.usage.total_tokens == 18
            assert response.latency_ms >= 0

    @pytest.mark.asyncio
    async def test_sdk_retries_disabled(self) -> None:
        with patch("debate_kit.llms.openai.AsyncOpenAI") as mock_openai:
            OpenAILLMClient(api_key="k", base_url="https://api.perplexity.ai", timeout=30.0)

            mock_openai.assert_called_once_with(
                api_key="k", base_url="https://api.perplexity.ai", timeout=30.0, max_retries=0
            )

    def test_message_conversion(self) -> None:
        """Test message conversion to OpenAI format."""
        with patch("debate_kit.llms.openai.AsyncOpenAI"):
            client = OpenAILLMClient(api_key="test-key")

            converted = client._convert_messages(
                [
                    Message(role=Role.SYSTEM, content="You are helpful."),
                    Message(role=Role.USER, content="Hello"),
                    Message(role=Role.ASSISTANT, content="Hi there!"),
                ]
            )

            assert converted == [
                {"role": "system", "content": "You are helpful."},
                {"role": "user", "content": "Hello"},
                {"role": "assistant", "content": "Hi there!"},
            ]

    @pytest.mark.asyncio
    async def test_empty_choices_normalized_to_error(self) -> None:
        with patch("debate_kit.llms.openai.AsyncOpenAI") as mock_openai:
            response = MagicMock()
            response.choices = []
            mock_openai.return_value = _client_returning(response)

            client = OpenAILLMClient(api_key="test-key")
            result = await client.complete(messages=[Message(role=Role.USER, content="x")])

            assert result.content is None
            assert result.finish_reason == "error"
            assert result.usage.total_tokens == 0

    @pytest.mark.asyncio
    async def test_unknown_finish_reason_maps_to_error(
        self, mock_openai_response: MagicMock
    ) -> None:
        mock_openai_response.choices[0].finish_reason = "content_filter"
        with patch("debate_kit.llms.openai.AsyncOpenAI") as mock_openai:
            mock_openai.return_value = _client_returning(mock_openai_response)

            client = OpenAILLMClient(api_key="test-key")
            result = await client.complete(messages=[Message(role=Role.USER, content="x")])

            assert result.finish_reason == "error"

    @pytest.mark.asyncio
    async def test_transport_errors_retried_then_raised(self) -> None:
        with patch("debate_kit.llms.openai.AsyncOpenAI") as mock_openai:
            mock_client = MagicMock()
            mock_client.chat.completions.create = AsyncMock(
                side_effect=APITimeoutError(request=MagicMock())
            )
            mock_openai.return_value = mock_client

            client = OpenAILLMClient(api_key="test-key", max_retries=2)
            with patch("asyncio.sleep", new=AsyncMock()):
                with pytest.raises(APITimeoutError):
                    await client.complete(messages=[Message(role=Role.USER, content="x")])

            assert mock_client.chat.completions.create.await_count == 2

    @pytest.mark.asyncio
    async def test_metrics_hook_called(self, mock_openai_response: MagicMock) -> None:
        """Test that metrics hook is called."""
        with patch("debate_kit.llms.openai.AsyncOpenAI") as mock_openai:
            mock_openai.return_value = _client_returning(mock_openai_response)

            metrics_hook = MagicMock()
            client = OpenAILLMClient(
                api_key="test-key", provider="perplexity", model="sonar", metrics_hook=metrics_hook
            )

            await client.complete(messages=[Message(role=Role.USER, content="Hi")])

            metrics_hook.record_latency.assert_called_once()
            call_args = metrics_hook.record_latency.call_args
            assert call_args[0][0] == "llm_completion_duration"
            metrics_hook.increment.assert_any_call(
                "llm_requests_total", labels={"provider": "perplexity", "model": "sonar"}
            )
            metrics_hook.increment.assert_any_call("llm_tokens_total", 18)
