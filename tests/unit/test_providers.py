"""Tests for vendor completion providers.

SDK clients are replaced with mocks and REST vendors run against
httpx.MockTransport; nothing touches the network.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from manuscript.app.config import Settings
from manuscript.app.llm.errors import ProviderAuthenticationError, ProviderError
from manuscript.app.llm.providers import (
    AnthropicProvider,
    AzureOpenAIProvider,
    CohereProvider,
    CompletionOptions,
    GoogleProvider,
    HuggingFaceProvider,
    OpenAIProvider,
    PerplexityProvider,
    build_providers,
)
from manuscript.app.models.common import ProviderId


def _recording_client(payload: object, seen: list[httpx.Request]) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_openai_provider_requests_json_mode() -> None:
    """Test that OpenAI calls use json_object response format and the fixed limits."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"ok": true}'))]
        )
    )
    provider = OpenAIProvider(api_key="sk-test", model="gpt-4o", client=client)

    text = await provider.complete("Edit this", CompletionOptions(temperature=0.2))

    assert text == '{"ok": true}'
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["messages"] == [{"role": "user", "content": "Edit this"}]
    assert kwargs["temperature"] == 0.2
    assert kwargs["max_tokens"] == 4096
    assert kwargs["response_format"] == {"type": "json_object"}


@pytest.mark.asyncio
async def test_openai_provider_omits_json_mode_when_disabled() -> None:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=None))])
    )
    provider = OpenAIProvider(api_key="sk-test", client=client)

    text = await provider.complete("prompt", CompletionOptions(json_mode=False))

    assert text == ""
    assert "response_format" not in client.chat.completions.create.call_args.kwargs


@pytest.mark.asyncio
async def test_openai_provider_without_key_fails_fast() -> None:
    provider = OpenAIProvider(api_key=None)

    with pytest.raises(ProviderAuthenticationError) as exc_info:
        await provider.complete("prompt", CompletionOptions())

    assert exc_info.value.provider == "openai"


@pytest.mark.asyncio
async def test_azure_provider_requires_endpoint() -> None:
    provider = AzureOpenAIProvider(api_key="az-key", endpoint=None)

    with pytest.raises(ProviderAuthenticationError):
        await provider.complete("prompt", CompletionOptions())


@pytest.mark.asyncio
async def test_azure_provider_uses_deployment_as_model() -> None:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="{}"))])
    )
    provider = AzureOpenAIProvider(
        api_key="az-key", endpoint="https://example.openai.azure.com", deployment="editor-4o",
        client=client,
    )

    await provider.complete("prompt", CompletionOptions())

    assert provider.name == ProviderId.azure
    assert client.chat.completions.create.call_args.kwargs["model"] == "editor-4o"


@pytest.mark.asyncio
async def test_anthropic_provider_joins_text_blocks() -> None:
    client = MagicMock()
    client.messages.create = AsyncMock(
        return_value=SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text='{"summary": '),
                SimpleNamespace(type="tool_use", text="ignored"),
                SimpleNamespace(type="text", text='"ok"}'),
            ]
        )
    )
    provider = AnthropicProvider(api_key="ak-test", model="claude-test", client=client)

    text = await provider.complete("prompt", CompletionOptions(temperature=0.4))

    assert text == '{"summary": "ok"}'
    kwargs = client.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert kwargs["max_tokens"] == 4096
    assert kwargs["temperature"] == 0.4


@pytest.mark.asyncio
async def test_google_provider_calls_generate_content() -> None:
    seen: list[httpx.Request] = []
    client = _recording_client(
        {"candidates": [{"content": {"parts": [{"text": '{"a": '}, {"text": "1}"}]}}]}, seen
    )
    provider = GoogleProvider(
        api_key="g-key",
        model="gemini-1.5-pro-latest",
        base_url="https://generativelanguage.googleapis.com/v1beta/",
        client=client,
    )

    text = await provider.complete("prompt", CompletionOptions(temperature=0.3))

    assert text == '{"a": 1}'
    request = seen[0]
    assert request.url.path == "/v1beta/models/gemini-1.5-pro-latest:generateContent"
    assert request.headers["x-goog-api-key"] == "g-key"
    body = json.loads(request.content)
    assert body["contents"][0]["parts"][0]["text"] == "prompt"
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert body["generationConfig"]["maxOutputTokens"] == 4096
    await client.aclose()


@pytest.mark.asyncio
async def test_google_provider_without_candidates_is_an_error() -> None:
    client = _recording_client({"candidates": []}, [])
    provider = GoogleProvider(api_key="g-key", model="m", base_url="https://g.test", client=client)

    with pytest.raises(ProviderError):
        await provider.complete("prompt", CompletionOptions())
    await client.aclose()


@pytest.mark.asyncio
async def test_rest_provider_raises_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": "rate limited"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    provider = PerplexityProvider(api_key="p-key", model="m", base_url="https://p.test", client=client)

    with pytest.raises(httpx.HTTPStatusError):
        await provider.complete("prompt", CompletionOptions())
    await client.aclose()


@pytest.mark.asyncio
async def test_cohere_provider_reads_text_content() -> None:
    seen: list[httpx.Request] = []
    client = _recording_client(
        {"message": {"content": [{"type": "text", "text": '{"ok": 1}'}]}}, seen
    )
    provider = CohereProvider(
        api_key="c-key", model="command-r-plus", base_url="https://api.cohere.com/v2", client=client
    )

    text = await provider.complete("prompt", CompletionOptions())

    assert text == '{"ok": 1}'
    assert seen[0].url.path == "/v2/chat"
    assert seen[0].headers["authorization"] == "Bearer c-key"
    body = json.loads(seen[0].content)
    assert body["response_format"] == {"type": "json_object"}
    assert body["model"] == "command-r-plus"
    await client.aclose()


@pytest.mark.asyncio
async def test_perplexity_provider_reads_first_choice() -> None:
    seen: list[httpx.Request] = []
    client = _recording_client({"choices": [{"message": {"content": '{"x": 2}'}}]}, seen)
    provider = PerplexityProvider(
        api_key="p-key", model="sonar", base_url="https://api.perplexity.ai", client=client
    )

    text = await provider.complete("prompt", CompletionOptions())

    assert text == '{"x": 2}'
    assert seen[0].url.path == "/chat/completions"
    await client.aclose()


@pytest.mark.parametrize(
    "payload",
    [
        [{"generated_text": '{"y": 3}'}],
        {"generated_text": '{"y": 3}'},
    ],
)
@pytest.mark.asyncio
async def test_huggingface_provider_accepts_list_or_object(payload: object) -> None:
    seen: list[httpx.Request] = []
    client = _recording_client(payload, seen)
    provider = HuggingFaceProvider(
        api_key="hf-key",
        model="org/model",
        base_url="https://api-inference.huggingface.co/models",
        client=client,
    )

    text = await provider.complete("prompt", CompletionOptions(temperature=0.7))

    assert text == '{"y": 3}'
    assert seen[0].url.path == "/models/org/model"
    body = json.loads(seen[0].content)
    assert body["parameters"]["return_full_text"] is False
    assert body["parameters"]["temperature"] == 0.7
    await client.aclose()


@pytest.mark.asyncio
async def test_rest_provider_without_key_makes_no_request() -> None:
    seen: list[httpx.Request] = []
    client = _recording_client({}, seen)
    provider = CohereProvider(api_key=None, model="m", base_url="https://c.test", client=client)

    with pytest.raises(ProviderAuthenticationError):
        await provider.complete("prompt", CompletionOptions())

    assert seen == []
    await client.aclose()


def test_build_providers_registers_every_vendor() -> None:
    settings = Settings(
        _env_file=None,
        openai_api_key="sk-test",
        openai_model="gpt-test",
        cohere_api_key=None,
    )

    providers = build_providers(settings)

    assert set(providers) == set(ProviderId)
    assert all(providers[pid].name == pid for pid in ProviderId)
    assert providers[ProviderId.openai].model == "gpt-test"
    assert providers[ProviderId.openai].api_key == "sk-test"
    assert providers[ProviderId.cohere].api_key is None
