"""Advisory provider selection per analysis task."""

from manuscript.app.models.common import ProviderId

DEFAULT_PROVIDER = ProviderId.openai

OPTIMAL_PROVIDERS: dict[str, ProviderId] = {
    # Character nuance
    "character-voice": ProviderId.anthropic,
    "dialogue": ProviderId.anthropic,
    # Logical consistency
    "world-building": ProviderId.openai,
    "consistency": ProviderId.openai,
    # Semantic analysis
    "themes": ProviderId.google,
    "metaphors": ProviderId.google,
    # Classification-style tasks
    "pacing": ProviderId.cohere,
    "structure": ProviderId.cohere,
    # Live web access
    "fact-checking": ProviderId.perplexity,
    "research": ProviderId.perplexity,
    "creative-writing": ProviderId.huggingface,
}


def get_optimal_provider(analysis_type: str) -> ProviderId:
    """Return the preferred vendor for an analysis task.

    Unknown task names map to the default vendor. The gateway does not enforce
    this choice.
    """
    return OPTIMAL_PROVIDERS.get(analysis_type, DEFAULT_PROVIDER)
