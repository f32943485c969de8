"""Exception types raised by the provider gateway."""

from collections.abc import Sequence


class ProviderError(Exception):
    """An LLM vendor call failed."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderAuthenticationError(ProviderError):
    """No credentials are configured for the vendor."""

    pass


class UnsupportedProviderError(ProviderError):
    """No completion provider is registered under the requested id."""

    pass


class ResponseParseError(ProviderError):
    """Vendor output is not valid JSON or does not fit the expected schema."""

    def __init__(self, message: str, raw_text: str, provider: str | None = None) -> None:
        super().__init__(message, provider=provider)
        self.raw_text = raw_text


class AggregateProviderError(ProviderError):
    """Every provider asked to run an analysis failed."""

    def __init__(self, failures: Sequence[tuple[str, Exception]]) -> None:
        names = ", ".join(provider for provider, _ in failures) or "none"
        super().__init__(f"All AI providers failed to complete analysis ({names})")
        self.failures = list(failures)
