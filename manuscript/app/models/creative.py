"""Creative writing schemas (novel skeletons, chapter outlines, samples)."""

from pydantic import Field

from manuscript.app.models.common import CamelModel


class SkeletonCharacter(CamelModel):
    name: str
    description: str
    motivation: str


class SkeletonPlotPoint(CamelModel):
    act: str
    point: str
    description: str


class NovelSkeleton(CamelModel):
    """High-level plan for a novel generated from a concept."""

    title: str
    logline: str
    themes: list[str] = Field(default_factory=list)
    characters: list[SkeletonCharacter] = Field(default_factory=list)
    plot_points: list[SkeletonPlotPoint] = Field(default_factory=list)


class OutlineScene(CamelModel):
    scene: int
    setting: str
    characters: list[str] = Field(default_factory=list)
    action: str


class ChapterOutline(CamelModel):
    """Scene-by-scene outline of one chapter."""

    chapter: int = Field(..., ge=1)
    title: str
    summary: str
    scenes: list[OutlineScene] = Field(default_factory=list)


class ChapterSample(CamelModel):
    sample: str
