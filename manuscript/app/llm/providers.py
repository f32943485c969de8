"""Completion providers - one binding per LLM vendor.

Every provider exposes the same capability: send a prompt as a single user
turn to a fixed model and return the raw completion text. JSON decoding and
fallback are handled by the gateway.

Security: API keys come from settings only; a provider without a key fails
fast with ProviderAuthenticationError before any network I/O.
"""

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from anthropic import AsyncAnthropic
from openai import AsyncAzureOpenAI, AsyncOpenAI

from manuscript.app.config import Settings
from manuscript.app.llm.errors import ProviderAuthenticationError, ProviderError
from manuscript.app.models.common import ProviderId


@dataclass(frozen=True)
class CompletionOptions:
    """Per-request completion options."""

    temperature: float = 0.3
    json_mode: bool = True
    max_output_tokens: int = 4096


class CompletionProvider(Protocol):
    """Protocol for vendor completion bindings."""

    name: ProviderId
    model: str

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Return the completion text for a single-turn prompt.

        Raises:
            ProviderAuthenticationError: If no credentials are configured
            Exception: Any vendor/network error, wrapped by the gateway
        """
        ...


def _require_key(provider: ProviderId, api_key: str | None) -> str:
    if not api_key:
        raise ProviderAuthenticationError(
            f"No API key configured for provider '{provider.value}'", provider=provider.value
        )
    return api_key


class OpenAIProvider:
    """OpenAI chat completions with native JSON mode."""

    name = ProviderId.openai

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o",
        timeout: float = 120.0,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Fixed model identifier
            timeout: Request timeout in seconds
            client: Optional pre-built client (for testing with mocks)
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.client = client

    def _build_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(api_key=_require_key(self.name, self.api_key), timeout=self.timeout)

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Run a chat completion and return the message content."""
        if self.client is None:
            self.client = self._build_client()

        extra: dict[str, Any] = {}
        if options.json_mode:
            extra["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=options.temperature,
            max_tokens=options.max_output_tokens,
            **extra,
        )
        return response.choices[0].message.content or ""


class AzureOpenAIProvider(OpenAIProvider):
    """Azure-hosted OpenAI deployment; ``model`` is the deployment name."""

    name = ProviderId.azure

    def __init__(
        self,
        api_key: str | None,
        endpoint: str | None,
        deployment: str = "gpt-4o",
        api_version: str = "2024-06-01",
        timeout: float = 120.0,
        client: AsyncOpenAI | None = None,
    ):
        super().__init__(api_key, model=deployment, timeout=timeout, client=client)
        self.endpoint = endpoint
        self.api_version = api_version

    def _build_client(self) -> AsyncOpenAI:
        api_key = _require_key(self.name, self.api_key)
        if not self.endpoint:
            raise ProviderAuthenticationError(
                "Azure OpenAI provider requires an endpoint", provider=self.name.value
            )
        return AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=self.endpoint,
            api_version=self.api_version,
            timeout=self.timeout,
        )


class AnthropicProvider:
    """Anthropic messages API. No native JSON mode; relies on the prompt."""

    name = ProviderId.anthropic

    def __init__(
        self,
        api_key: str | None,
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 120.0,
        client: AsyncAnthropic | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.client = client

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Create a message and join its text blocks."""
        if self.client is None:
            self.client = AsyncAnthropic(
                api_key=_require_key(self.name, self.api_key), timeout=self.timeout
            )

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=options.max_output_tokens,
            messages=[{"role": "user", "content": prompt}],
            temperature=options.temperature,
        )
        return "".join(block.text for block in response.content if block.type == "text")


class _HttpProvider:
    """Shared plumbing for vendors called over plain REST."""

    name: ProviderId

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize REST provider.

        Args:
            api_key: Vendor API key
            model: Fixed model identifier
            base_url: Vendor API base URL
            timeout: Request timeout in seconds
            client: Optional httpx client (for testing with mocks)
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client

    async def _post(self, url: str, payload: dict[str, Any], headers: dict[str, str]) -> Any:
        close_client = False
        client = self.client
        if client is None:
            client = httpx.AsyncClient(timeout=self.timeout)
            close_client = True

        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()
        finally:
            if close_client:
                await client.aclose()


class GoogleProvider(_HttpProvider):
    """Gemini generateContent REST endpoint."""

    name = ProviderId.google

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        api_key = _require_key(self.name, self.api_key)

        generation_config: dict[str, Any] = {
            "temperature": options.temperature,
            "maxOutputTokens": options.max_output_tokens,
        }
        if options.json_mode:
            generation_config["responseMimeType"] = "application/json"

        data = await self._post(
            f"{self.base_url}/models/{self.model}:generateContent",
            {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": generation_config,
            },
            {"x-goog-api-key": api_key},
        )

        candidates = data.get("candidates") or []
        if not candidates:
            raise ProviderError("Gemini returned no candidates", provider=self.name.value)
        parts = candidates[0].get("content", {}).get("parts", [])
        return "".join(part.get("text", "") for part in parts)


class CohereProvider(_HttpProvider):
    """Cohere v2 chat REST endpoint."""

    name = ProviderId.cohere

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        api_key = _require_key(self.name, self.api_key)

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": options.temperature,
            "max_tokens": options.max_output_tokens,
        }
        if options.json_mode:
            payload["response_format"] = {"type": "json_object"}

        data = await self._post(
            f"{self.base_url}/chat", payload, {"Authorization": f"Bearer {api_key}"}
        )

        blocks = data.get("message", {}).get("content", [])
        return "".join(block.get("text", "") for block in blocks if block.get("type") == "text")


class PerplexityProvider(_HttpProvider):
    """Perplexity OpenAI-compatible chat completions endpoint."""

    name = ProviderId.perplexity

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        api_key = _require_key(self.name, self.api_key)

        data = await self._post(
            f"{self.base_url}/chat/completions",
            {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": options.temperature,
                "max_tokens": options.max_output_tokens,
            },
            {"Authorization": f"Bearer {api_key}"},
        )
        return data["choices"][0]["message"]["content"] or ""


class HuggingFaceProvider(_HttpProvider):
    """Hugging Face Inference API text generation."""

    name = ProviderId.huggingface

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        api_key = _require_key(self.name, self.api_key)

        data = await self._post(
            f"{self.base_url}/{self.model}",
            {
                "inputs": prompt,
                "parameters": {
                    "temperature": options.temperature,
                    "max_new_tokens": options.max_output_tokens,
                    "return_full_text": False,
                },
            },
            {"Authorization": f"Bearer {api_key}"},
        )

        # The inference API answers with either a list of generations or a single object
        if isinstance(data, list):
            data = data[0] if data else {}
        return data.get("generated_text") or ""


def _secret(value: Any) -> str | None:
    return value.get_secret_value() if value else None


def build_providers(settings: Settings) -> dict[ProviderId, CompletionProvider]:
    """Build one provider per supported vendor from settings.

    Vendors without a key are still registered so that calling them fails fast
    with an authentication error instead of silently doing nothing.
    """
    timeout = settings.llm_timeout_seconds
    return {
        ProviderId.openai: OpenAIProvider(
            _secret(settings.openai_api_key), settings.openai_model, timeout
        ),
        ProviderId.azure: AzureOpenAIProvider(
            _secret(settings.azure_openai_api_key),
            settings.azure_openai_endpoint,
            settings.azure_openai_deployment,
            settings.azure_openai_api_version,
            timeout,
        ),
        ProviderId.anthropic: AnthropicProvider(
            _secret(settings.anthropic_api_key), settings.anthropic_model, timeout
        ),
        ProviderId.google: GoogleProvider(
            _secret(settings.google_ai_api_key),
            settings.google_model,
            settings.google_base_url,
            timeout,
        ),
        ProviderId.cohere: CohereProvider(
            _secret(settings.cohere_api_key),
            settings.cohere_model,
            settings.cohere_base_url,
            timeout,
        ),
        ProviderId.perplexity: PerplexityProvider(
            _secret(settings.perplexity_api_key),
            settings.perplexity_model,
            settings.perplexity_base_url,
            timeout,
        ),
        ProviderId.huggingface: HuggingFaceProvider(
            _secret(settings.huggingface_api_key),
            settings.huggingface_model,
            settings.huggingface_base_url,
            timeout,
        ),
    }
