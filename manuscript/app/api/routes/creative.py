"""Creative writing endpoints - /creative/*."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import Field

from manuscript.app.api.deps import get_gateway
from manuscript.app.config import Settings, get_settings
from manuscript.app.llm.gateway import ProviderGateway
from manuscript.app.models.common import CamelModel, ProviderId
from manuscript.app.models.creative import ChapterOutline, ChapterSample, NovelSkeleton
from manuscript.app.services.creative import (
    generate_chapter_outline,
    generate_chapter_sample,
    generate_novel_skeleton,
)

router = APIRouter(prefix="/creative", tags=["creative"])


class SkeletonRequest(CamelModel):
    concept: str = Field(..., min_length=1)
    provider: ProviderId | None = None


class ChapterOutlineRequest(CamelModel):
    skeleton: NovelSkeleton
    chapter_number: int = Field(..., ge=1)
    provider: ProviderId | None = None


class ChapterSampleRequest(CamelModel):
    outline: ChapterOutline
    world_anvil: str = Field(..., min_length=1, description="Sensory details and world rules")
    provider: ProviderId | None = None


@router.post("/generate-skeleton", response_model=NovelSkeleton)
async def generate_skeleton(
    request: SkeletonRequest,
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> NovelSkeleton:
    """Generate a novel skeleton from a concept."""
    return await generate_novel_skeleton(
        gateway, request.concept, request.provider or settings.default_provider
    )


@router.post("/generate-chapter-outline", response_model=ChapterOutline)
async def generate_outline(
    request: ChapterOutlineRequest,
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ChapterOutline:
    return await generate_chapter_outline(
        gateway,
        request.skeleton,
        request.chapter_number,
        request.provider or settings.default_provider,
    )


@router.post("/generate-chapter-sample", response_model=ChapterSample)
async def generate_sample(
    request: ChapterSampleRequest,
    gateway: Annotated[ProviderGateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ChapterSample:
    """Write sample prose for a chapter outline."""
    return await generate_chapter_sample(
        gateway,
        request.outline,
        request.world_anvil,
        request.provider or settings.default_provider,
    )
