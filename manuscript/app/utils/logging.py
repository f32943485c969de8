"""Structured logging for LLM provider calls."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredProviderLogger:
    """Structured logger for provider attempts."""

    def log_attempt(
        self,
        provider: str,
        model: str | None,
        attempt: str,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log one vendor call with structured data.

        Args:
            provider: Provider id
            model: Model identifier the provider is bound to
            attempt: "primary" or "fallback"
            outcome: "success", "error" or "parse_error"
            latency_ms: Wall time of the call
            error_reason: Exception summary for failed calls
        """
        log_data: dict[str, Any] = {
            "provider": provider,
            "model": model,
            "attempt": attempt,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Provider call: {provider} ({attempt}) - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
