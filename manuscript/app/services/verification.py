"""Multi-provider passes: cross-verification and consensus.

Cross-verification asks a second provider to critique and enhance an existing
analysis. Consensus runs one analysis on several providers concurrently and,
when more than one succeeds, asks the synthesis provider to reconcile them.
"""

import asyncio
import json
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from manuscript.app.llm.errors import AggregateProviderError, ProviderError
from manuscript.app.llm.gateway import ProviderGateway, resolve_provider
from manuscript.app.models.analysis import (
    AnalysisResult,
    ConsensusResult,
    ProviderFailure,
    VerificationMetadata,
    VerifiedAnalysis,
)
from manuscript.app.models.common import ProviderId
from manuscript.app.services.analysis import get_analysis

logger = logging.getLogger(__name__)

CROSS_VERIFY_TEMPERATURE = 0.3
SYNTHESIS_TEMPERATURE = 0.2

DEFAULT_CONSENSUS_PROVIDERS = (ProviderId.openai, ProviderId.google, ProviderId.anthropic)


async def cross_verify_analysis(
    gateway: ProviderGateway,
    original_analysis: Mapping[str, Any],
    analysis_type: str,
    content: str,
    primary_provider: ProviderId | str = ProviderId.openai,
    verification_provider: ProviderId | str = ProviderId.anthropic,
) -> VerifiedAnalysis:
    """Have ``verification_provider`` critique and enhance a prior analysis.

    The enhanced analysis is validated against the registered schema for
    ``analysis_type`` and returned with provenance metadata. The verifier is
    never swapped for the gateway fallback.

    Raises:
        KeyError: If ``analysis_type`` is not registered
        ProviderError: If the verification call failed
    """
    spec = get_analysis(analysis_type)
    primary = resolve_provider(primary_provider)
    verifier = resolve_provider(verification_provider)

    prompt = f"""You are a senior editorial analyst reviewing another AI's analysis. Your task \
is to verify, critique and enhance the provided analysis.

Analysis type: {analysis_type}

Original content:
{content}

AI analysis to review:
{json.dumps(original_analysis, indent=2, default=str)}

Instructions:
1. Verify the accuracy of the original analysis
2. Identify any errors, omissions or weaknesses
3. Enhance the analysis with additional insights
4. Keep the same JSON structure but improve the content
5. Add a "verificationNotes" field explaining your changes

Return the enhanced analysis in the same JSON format with improvements and verification notes."""

    logger.info(f"Cross-verifying {analysis_type} analysis from {primary} with {verifier}")
    enhanced = await gateway.get_structured_response(
        prompt,
        verifier,
        spec.schema,
        temperature=CROSS_VERIFY_TEMPERATURE,
        allow_fallback=False,
    )

    return VerifiedAnalysis(
        analysis=enhanced.model_dump(mode="json", by_alias=True),
        metadata=VerificationMetadata(
            primary_provider=primary,
            verification_provider=verifier,
            analysis_type=analysis_type,
            timestamp=datetime.now(),
        ),
    )


async def enhanced_analysis_with_verification(
    gateway: ProviderGateway,
    content: str,
    analysis_type: str,
    params: Mapping[str, Any] | None = None,
    primary_provider: ProviderId | str = ProviderId.openai,
    verification_provider: ProviderId | str = ProviderId.anthropic,
) -> VerifiedAnalysis:
    """Run an analysis on the primary provider, then cross-verify it."""
    spec = get_analysis(analysis_type)
    initial = await spec(gateway, content, params, primary_provider)
    return await cross_verify_analysis(
        gateway,
        initial.model_dump(mode="json", by_alias=True),
        analysis_type,
        content,
        primary_provider,
        verification_provider,
    )


async def multi_provider_consensus(
    gateway: ProviderGateway,
    content: str,
    analysis_type: str,
    params: Mapping[str, Any] | None = None,
    providers: Sequence[ProviderId | str] = DEFAULT_CONSENSUS_PROVIDERS,
    synthesis_provider: ProviderId | str = ProviderId.openai,
) -> ConsensusResult:
    """Run one analysis across providers and reconcile the results.

    Every provider runs concurrently without the fallback hop, so each result
    really comes from the vendor it is attributed to. Failed providers are
    skipped; with a single success that result is returned as is, with two or
    more one extra call asks ``synthesis_provider`` for a merged analysis.

    Raises:
        KeyError: If ``analysis_type`` is not registered
        AggregateProviderError: If every provider failed
        ProviderError: If the synthesis call failed
    """
    spec = get_analysis(analysis_type)
    provider_ids = [resolve_provider(p) for p in dict.fromkeys(providers)]

    outcomes = await asyncio.gather(
        *(
            spec(gateway, content, params, provider, allow_fallback=False)
            for provider in provider_ids
        ),
        return_exceptions=True,
    )

    analyses: list[tuple[ProviderId, AnalysisResult]] = []
    failures: list[tuple[ProviderId, Exception]] = []
    for provider, outcome in zip(provider_ids, outcomes, strict=True):
        if isinstance(outcome, ProviderError):
            logger.error(f"{provider} {analysis_type} analysis failed: {outcome}")
            failures.append((provider, outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            analyses.append((provider, outcome))

    if not analyses:
        raise AggregateProviderError([(p.value, e) for p, e in failures])

    failed = [ProviderFailure(provider=p, error=str(e)) for p, e in failures]
    succeeded = [p for p, _ in analyses]

    if len(analyses) == 1:
        provider, analysis = analyses[0]
        logger.info(f"Consensus for {analysis_type}: only {provider} succeeded")
        return ConsensusResult(
            analysis=analysis.model_dump(mode="json", by_alias=True),
            providers_succeeded=succeeded,
            providers_failed=failed,
            synthesized=False,
        )

    synthesizer = resolve_provider(synthesis_provider)
    collected = [
        {"provider": p.value, "analysis": a.model_dump(mode="json", by_alias=True)}
        for p, a in analyses
    ]
    prompt = f"""You are a master editor synthesizing multiple AI analyses into a single, \
authoritative result.

Analysis type: {analysis_type}

Original content:
{content}

Multiple AI analyses:
{json.dumps(collected, indent=2)}

Instructions:
1. Compare all analyses for accuracy and completeness
2. Identify areas of agreement and disagreement
3. Synthesize the best insights from each analysis
4. Resolve conflicts using your editorial judgment
5. Create a comprehensive, authoritative final analysis
6. Include a "consensusNotes" field explaining your methodology

Return the final consensus analysis in the same JSON format as the individual analyses."""

    logger.info(
        f"Synthesizing {analysis_type} consensus from {len(analyses)} providers with {synthesizer}"
    )
    merged = await gateway.get_structured_response(
        prompt, synthesizer, spec.schema, temperature=SYNTHESIS_TEMPERATURE
    )
    return ConsensusResult(
        analysis=merged.model_dump(mode="json", by_alias=True),
        providers_succeeded=succeeded,
        providers_failed=failed,
        synthesized=True,
        synthesis_provider=synthesizer,
    )
