"""
Tests for the unified AI client's provider fallback.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from adaptassess.ai.client import AIClient, get_ai_client

MESSAGES = [{"role": "user", "content": "Generate 1 question"}]


def anthropic_response(text: str | None):
    content = [SimpleNamespace(text=text)] if text is not None else []
    return SimpleNamespace(content=content)


def grok_response(text: str):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def mock_anthropic(response=None, side_effect=None):
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=response, side_effect=side_effect)
    return client


def mock_grok(response=None, side_effect=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response, side_effect=side_effect)
    return client


async def complete(client: AIClient):
    return await client.generate_completion(
        model="claude-haiku-4-5", system="You write questions.", messages=MESSAGES
    )


class TestConfiguration:
    def test_no_keys(self):
        assert AIClient().is_configured is False

    def test_either_key_configures(self):
        assert AIClient(anthropic_api_key="sk-ant").is_configured is True
        assert AIClient(grok_api_key="xai").is_configured is True

    def test_get_ai_client_maps_blank_keys_to_none(self):
        with patch("adaptassess.config.settings") as settings:
            settings.ANTHROPIC_API_KEY = ""
            settings.GROK_API_KEY = "xai-key"

            client = get_ai_client()

        assert client.anthropic_api_key is None
        assert client.grok_api_key == "xai-key"


class TestProviderFallback:
    async def test_no_providers_returns_none(self):
        assert await complete(AIClient()) is None

    async def test_anthropic_first(self):
        anthropic = mock_anthropic(anthropic_response('{"ok": true}'))
        grok = mock_grok(grok_response("unused"))

        with (
            patch("anthropic.AsyncAnthropic", return_value=anthropic),
            patch("openai.AsyncOpenAI", return_value=grok),
        ):
            result = await complete(AIClient(anthropic_api_key="sk-ant", grok_api_key="xai"))

        assert result == '{"ok": true}'
        kwargs = anthropic.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-haiku-4-5"
        assert kwargs["system"] == "You write questions."
        grok.chat.completions.create.assert_not_called()

    async def test_falls_back_to_grok_on_anthropic_error(self):
        anthropic = mock_anthropic(side_effect=RuntimeError("overloaded"))
        grok = mock_grok(grok_response('{"from": "grok"}'))

        with (
            patch("anthropic.AsyncAnthropic", return_value=anthropic),
            patch("openai.AsyncOpenAI", return_value=grok),
        ):
            result = await complete(AIClient(anthropic_api_key="sk-ant", grok_api_key="xai"))

        assert result == '{"from": "grok"}'
        kwargs = grok.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == AIClient.GROK_MODEL
        assert kwargs["messages"][0] == {"role": "system", "content": "You write questions."}
        assert kwargs["messages"][1:] == MESSAGES

    async def test_falls_back_when_anthropic_returns_no_text(self):
        anthropic = mock_anthropic(anthropic_response(None))
        grok = mock_grok(grok_response("fallback"))

        with (
            patch("anthropic.AsyncAnthropic", return_value=anthropic),
            patch("openai.AsyncOpenAI", return_value=grok),
        ):
            result = await complete(AIClient(anthropic_api_key="sk-ant", grok_api_key="xai"))

        assert result == "fallback"

    async def test_all_providers_fail(self):
        anthropic = mock_anthropic(side_effect=RuntimeError("down"))
        grok = mock_grok(side_effect=RuntimeError("down"))

        with (
            patch("anthropic.AsyncAnthropic", return_value=anthropic),
            patch("openai.AsyncOpenAI", return_value=grok),
        ):
            result = await complete(AIClient(anthropic_api_key="sk-ant", grok_api_key="xai"))

        assert result is None
