"""AI editing and analysis endpoints.

Every handler loads the document from the store, hands its content to a
service and returns the service result. Vendor failures propagate to the
exception handlers (502); unknown documents are a 404.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ConfigDict, Field

from manuscript.app.api.deps import get_gateway, get_store, require_document
from manuscript.app.config import Settings, get_settings
from manuscript.app.db.repositories import ChangeStore
from manuscript.app.llm.gateway import ProviderGateway
from manuscript.app.llm.selection import get_optimal_provider
from manuscript.app.models.analysis import AnalysisResult, ConsensusResult, VerifiedAnalysis
from manuscript.app.models.common import CamelModel, EditType, ProviderId
from manuscript.app.models.documents import ChangeSnapshot
from manuscript.app.services.analysis import ANALYSES, AnalysisSpec
from manuscript.app.services.editing import (
    generate_prompt_suggestions,
    perform_edit,
    review_changes_with_instructions,
)
from manuscript.app.services.revisions import record_revision
from manuscript.app.services.verification import (
    DEFAULT_CONSENSUS_PROVIDERS,
    cross_verify_analysis,
    enhanced_analysis_with_verification,
    multi_provider_consensus,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])


class AIEditRequest(CamelModel):
    """Request body for POST /documents/{id}/ai-edit."""

    instructions: str = Field(..., min_length=1)
    edit_type: EditType
    provider: ProviderId | None = None


class AIEditResponse(CamelModel):
    """Response for POST /documents/{id}/ai-edit."""

    revision_id: int
    edited_content: str
    changes: list[ChangeSnapshot]
    summary: str


class PromptSuggestionsRequest(CamelModel):
    context: str | None = None
    provider: ProviderId | None = None


class PromptSuggestionsResponse(CamelModel):
    suggestions: list[str]


class ReviewChangesRequest(CamelModel):
    """Request body for POST /documents/review-changes."""

    changes: list[ChangeSnapshot] = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1)
    provider: ProviderId | None = None


class ReviewChangesResponse(CamelModel):
    changes: list[ChangeSnapshot]


class AnalysisRequest(CamelModel):
    """Analysis body: ``provider`` plus the task's own parameters."""

    model_config = ConfigDict(extra="allow")

    provider: ProviderId | None = None


class CrossVerifyRequest(CamelModel):
    original_analysis: dict[str, Any]
    analysis_type: str
    primary_provider: ProviderId = ProviderId.openai
    verification_provider: ProviderId = ProviderId.anthropic


class EnhancedAnalysisRequest(CamelModel):
    """Body for enhanced analysis; extra keys are the task's parameters."""

    model_config = ConfigDict(extra="allow")

    analysis_type: str
    primary_provider: ProviderId = ProviderId.openai
    verification_provider: ProviderId = ProviderId.anthropic


class ConsensusRequest(CamelModel):
    """Body for consensus analysis; extra keys are the task's parameters."""

    model_config = ConfigDict(extra="allow")

    analysis_type: str
    providers: list[ProviderId] = Field(
        default_factory=lambda: list(DEFAULT_CONSENSUS_PROVIDERS), min_length=1
    )


class OptimalProviderResponse(CamelModel):
    analysis_type: str
    provider: ProviderId


def _provider(requested: ProviderId | None, settings: Settings) -> ProviderId | str:
    return requested or settings.default_provider


def _registered_analysis(analysis_type: str) -> AnalysisSpec:
    spec = ANALYSES.get(analysis_type)
    if spec is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid analysis type")
    return spec


def _analysis_params(spec: AnalysisSpec, extra: dict[str, Any] | None) -> dict[str, Any]:
    try:
        return spec.collect_params(extra or {})
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


# --- Editing ---


@router.post("/documents/{document_id}/ai-edit", response_model=AIEditResponse)
async def ai_edit(
    document_id: int,
    request: AIEditRequest,
    store: Annotated[ChangeStore, Depends(get_store)],
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AIEditResponse:
    """Run an AI edit and record it as a new revision with pending changes.

    When the AI proposes no change list, the changes are derived with the
    line differ between the current content and the edited content.
    """
    document = require_document(store, document_id)

    result = await perform_edit(
        gateway,
        document.content,
        request.instructions,
        request.edit_type,
        _provider(request.provider, settings),
    )

    revision = record_revision(
        store, document, result.edited_content, changes=result.changes, summary=result.summary
    )
    logger.info(
        f"AI {request.edit_type.value} edit of document {document_id}: "
        f"revision {revision.id} with {len(revision.changes)} change(s)"
    )

    return AIEditResponse(
        revision_id=revision.id,
        edited_content=result.edited_content,
        changes=revision.changes,
        summary=result.summary,
    )


@router.post(
    "/documents/{document_id}/prompt-suggestions", response_model=PromptSuggestionsResponse
)
async def prompt_suggestions(
    document_id: int,
    request: PromptSuggestionsRequest,
    store: Annotated[ChangeStore, Depends(get_store)],
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PromptSuggestionsResponse:
    document = require_document(store, document_id)
    suggestions = await generate_prompt_suggestions(
        gateway, document.content, request.context, _provider(request.provider, settings)
    )
    return PromptSuggestionsResponse(suggestions=suggestions)


@router.post("/documents/review-changes", response_model=ReviewChangesResponse)
async def review_changes(
    request: ReviewChangesRequest,
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReviewChangesResponse:
    """Let the AI accept or reject proposed changes against a style guide."""
    changes = await review_changes_with_instructions(
        gateway, request.changes, request.instructions, _provider(request.provider, settings)
    )
    return ReviewChangesResponse(changes=changes)


# --- Analyses ---


def _analysis_endpoint(spec: AnalysisSpec) -> Any:
    async def endpoint(
        document_id: int,
        request: AnalysisRequest,
        store: Annotated[ChangeStore, Depends(get_store)],
        gateway: Annotated[ProviderGateway, Depends(get_gateway)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> AnalysisResult:
        document = require_document(store, document_id)
        params = _analysis_params(spec, request.model_extra)
        return await spec(gateway, document.content, params, _provider(request.provider, settings))

    endpoint.__name__ = f"analyze_{spec.analysis_type}"
    endpoint.__doc__ = f"Run the {spec.analysis_type} analysis on a document."
    return endpoint


for _spec in ANALYSES.values():
    router.add_api_route(
        f"/documents/{{document_id}}/{_spec.endpoint}",
        _analysis_endpoint(_spec),
        methods=["POST"],
        response_model=_spec.schema,
    )


@router.post("/documents/{document_id}/cross-verify", response_model=VerifiedAnalysis)
async def cross_verify(
    document_id: int,
    request: CrossVerifyRequest,
    store: Annotated[ChangeStore, Depends(get_store)],
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
) -> VerifiedAnalysis:
    """Have a second provider critique and enhance an existing analysis."""
    document = require_document(store, document_id)
    _registered_analysis(request.analysis_type)
    return await cross_verify_analysis(
        gateway,
        request.original_analysis,
        request.analysis_type,
        document.content,
        request.primary_provider,
        request.verification_provider,
    )


@router.post("/documents/{document_id}/enhanced-analysis", response_model=VerifiedAnalysis)
async def enhanced_analysis(
    document_id: int,
    request: EnhancedAnalysisRequest,
    store: Annotated[ChangeStore, Depends(get_store)],
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
) -> VerifiedAnalysis:
    """Run an analysis on the primary provider and cross-verify it."""
    document = require_document(store, document_id)
    spec = _registered_analysis(request.analysis_type)
    params = _analysis_params(spec, request.model_extra)
    return await enhanced_analysis_with_verification(
        gateway,
        document.content,
        request.analysis_type,
        params,
        request.primary_provider,
        request.verification_provider,
    )


@router.post("/documents/{document_id}/consensus-analysis", response_model=ConsensusResult)
async def consensus_analysis(
    document_id: int,
    request: ConsensusRequest,
    store: Annotated[ChangeStore, Depends(get_store)],
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ConsensusResult:
    """Run an analysis on several providers and synthesize a consensus."""
    document = require_document(store, document_id)
    spec = _registered_analysis(request.analysis_type)
    params = _analysis_params(spec, request.model_extra)
    return await multi_provider_consensus(
        gateway,
        document.content,
        request.analysis_type,
        params,
        providers=request.providers,
        synthesis_provider=settings.synthesis_provider,
    )


# --- Provider selection ---


@router.get("/providers/optimal", response_model=OptimalProviderResponse)
async def optimal_provider(
    analysis_type: Annotated[str, Query(alias="analysisType", min_length=1)],
) -> OptimalProviderResponse:
    """Advisory vendor choice for an analysis task."""
    return OptimalProviderResponse(
        analysis_type=analysis_type, provider=get_optimal_provider(analysis_type)
    )
