"""Provider gateway - one call contract across all LLM vendors.

``get_response(prompt, provider, temperature, json_mode)`` sends the prompt to
the requested vendor, strips a markdown code fence from the reply and parses
it as JSON. If the call fails for any reason (network, auth, parse, schema)
and an alternate provider is configured that differs from the one that
failed, the whole request is retried once against the alternate. There is
never more than one fallback hop.
"""

import asyncio
import json
import logging
import re
import time
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from manuscript.app.config import Settings
from manuscript.app.llm.errors import ProviderError, ResponseParseError, UnsupportedProviderError
from manuscript.app.llm.providers import CompletionOptions, CompletionProvider, build_providers
from manuscript.app.models.common import ProviderId
from manuscript.app.utils.logging import StructuredProviderLogger
from manuscript.app.utils.metrics import PrometheusProviderMetrics

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json (or bare ```) fence and a trailing ``` fence."""
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    return _TRAILING_FENCE.sub("", cleaned)


def parse_response_json(text: str, provider: str | None = None) -> Any:
    """Parse vendor output as JSON after fence stripping.

    Raises:
        ResponseParseError: If the text is not valid JSON (carries the raw text)
    """
    try:
        return json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        logger.error(f"AI response JSON parsing error from {provider}: {e}")
        logger.error(f"Raw response: {text}")
        raise ResponseParseError(
            f"Failed to parse AI response as JSON: {e}", raw_text=text, provider=provider
        ) from e


def resolve_provider(provider: ProviderId | str) -> ProviderId:
    """Normalize a provider id, rejecting unknown names."""
    try:
        return ProviderId(provider)
    except ValueError:
        raise UnsupportedProviderError(
            f"Unsupported AI provider: {provider}", provider=str(provider)
        ) from None


class ProviderGateway:
    """Routes prompts to completion providers with single-hop fallback."""

    def __init__(
        self,
        providers: Mapping[ProviderId, CompletionProvider],
        *,
        fallback_provider: ProviderId | None = None,
        max_output_tokens: int = 4096,
        timeout_seconds: float | None = None,
        structured_logger: StructuredProviderLogger | None = None,
        metrics: PrometheusProviderMetrics | None = None,
    ):
        """Initialize gateway.

        Args:
            providers: Mapping of provider id to its completion binding
            fallback_provider: Alternate used once when a call fails (None disables)
            max_output_tokens: Fixed maximum completion size for every vendor
            timeout_seconds: Upper bound for a single vendor call (None = vendor default)
            structured_logger: Sink for per-attempt structured logs
            metrics: Sink for per-attempt latency and error metrics
        """
        self.providers = dict(providers)
        self.fallback_provider = fallback_provider
        self.max_output_tokens = max_output_tokens
        self.timeout_seconds = timeout_seconds
        self.structured_logger = structured_logger or StructuredProviderLogger()
        self.metrics = metrics or PrometheusProviderMetrics()

    async def get_response(
        self,
        prompt: str,
        provider: ProviderId | str,
        temperature: float = 0.3,
        json_mode: bool = True,
        *,
        allow_fallback: bool = True,
    ) -> Any:
        """Get a parsed JSON response.

        Raises:
            ProviderError: If the provider (and the fallback, when tried) failed
        """
        return await self._dispatch(prompt, provider, temperature, json_mode, None, allow_fallback)

    async def get_structured_response(
        self,
        prompt: str,
        provider: ProviderId | str,
        schema: type[ModelT],
        temperature: float = 0.3,
        json_mode: bool = True,
        *,
        allow_fallback: bool = True,
    ) -> ModelT:
        """Get a response validated against ``schema``.

        A response that is valid JSON but does not fit the schema is a
        ResponseParseError, and counts as a failure for fallback purposes.
        """
        result: ModelT = await self._dispatch(
            prompt, provider, temperature, json_mode, schema, allow_fallback
        )
        return result

    async def _dispatch(
        self,
        prompt: str,
        provider: ProviderId | str,
        temperature: float,
        json_mode: bool,
        schema: type[BaseModel] | None,
        allow_fallback: bool,
    ) -> Any:
        options = CompletionOptions(
            temperature=temperature,
            json_mode=json_mode,
            max_output_tokens=self.max_output_tokens,
        )

        try:
            return await self._attempt(prompt, provider, options, schema, "primary")
        except ProviderError as e:
            alternate = self.fallback_provider
            if not allow_fallback or alternate is None or alternate == provider:
                raise

            logger.error(f"Error with {provider} provider: {e}")
            logger.warning(f"Falling back to {alternate} provider")
            failed = provider.value if isinstance(provider, ProviderId) else str(provider)
            self.metrics.inc_fallback(failed, alternate.value)
            return await self._attempt(prompt, alternate, options, schema, "fallback")

    async def _attempt(
        self,
        prompt: str,
        provider: ProviderId | str,
        options: CompletionOptions,
        schema: type[BaseModel] | None,
        attempt: str,
    ) -> Any:
        """Call one provider, wrapping every failure as a ProviderError."""
        provider_id = resolve_provider(provider)
        binding = self.providers.get(provider_id)
        if binding is None:
            raise UnsupportedProviderError(
                f"Provider '{provider_id.value}' is not registered", provider=provider_id.value
            )

        start = time.perf_counter()
        try:
            if self.timeout_seconds is not None:
                text = await asyncio.wait_for(
                    binding.complete(prompt, options), timeout=self.timeout_seconds
                )
            else:
                text = await binding.complete(prompt, options)
            data = parse_response_json(text, provider=provider_id.value)
            if schema is not None:
                data = self._validate(schema, data, text, provider_id)
        except ResponseParseError as e:
            self._log(binding, attempt, "parse_error", start, str(e))
            raise
        except ProviderError as e:
            self._log(binding, attempt, "error", start, str(e))
            raise
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            self._log(binding, attempt, "error", start, reason)
            raise ProviderError(
                f"{provider_id.value} request failed: {reason}", provider=provider_id.value
            ) from e

        self._log(binding, attempt, "success", start)
        return data

    @staticmethod
    def _validate(
        schema: type[BaseModel], data: Any, raw_text: str, provider: ProviderId
    ) -> BaseModel:
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            logger.error(f"{provider.value} response does not match {schema.__name__}")
            logger.error(f"Raw response: {raw_text}")
            raise ResponseParseError(
                f"AI response does not match {schema.__name__}: {e.error_count()} error(s)",
                raw_text=raw_text,
                provider=provider.value,
            ) from e

    def _log(
        self,
        binding: CompletionProvider,
        attempt: str,
        outcome: str,
        start: float,
        error_reason: str | None = None,
    ) -> None:
        latency_ms = (time.perf_counter() - start) * 1000
        provider = binding.name.value
        self.structured_logger.log_attempt(
            provider=provider,
            model=binding.model,
            attempt=attempt,
            outcome=outcome,
            latency_ms=latency_ms,
            error_reason=error_reason,
        )
        self.metrics.record_latency(provider, outcome, latency_ms)
        if outcome != "success":
            self.metrics.inc_error(provider, outcome)


def build_gateway(settings: Settings) -> ProviderGateway:
    """Build the gateway with every vendor bound from settings.

    The fallback provider only counts as configured when its API key is set.
    """
    providers = build_providers(settings)

    fallback: ProviderId | None = None
    if settings.fallback_provider:
        candidate = resolve_provider(settings.fallback_provider)
        if getattr(providers[candidate], "api_key", None):
            fallback = candidate
        else:
            logger.warning(
                f"Fallback provider '{candidate.value}' has no API key configured; "
                "fallback disabled"
            )

    return ProviderGateway(
        providers,
        fallback_provider=fallback,
        max_output_tokens=settings.llm_max_output_tokens,
        timeout_seconds=settings.llm_timeout_seconds,
    )
