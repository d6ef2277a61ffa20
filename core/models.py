"""Pydantic models for the scene segmentation result."""

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

UNSPECIFIED = "UNSPECIFIED"
MAX_CHARACTERS_PER_SCENE = 10


class SegmentationMethod(str, Enum):
    """How the scenes of a chunk were produced."""

    MODEL = "model"
    HEURISTIC = "heuristic"
    PARAGRAPH = "paragraph"
    PLACEHOLDER = "placeholder"


class Scene(BaseModel):
    """A single scene of a screenplay -- transient, never persisted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    scene_number: int = Field(..., ge=1, description="1-based position in the result")
    heading: str = Field(..., description="Scene heading or model-provided title")
    plot_summary: str = Field(default="", description="Short synopsis of the scene")
    location: str = Field(default=UNSPECIFIED, description="Location from the heading")
    time_of_day: str = Field(default=UNSPECIFIED, description="Time of day from the heading")
    characters: list[str] = Field(
        default_factory=list, description="Speaking characters (UPPERCASE, max 10)"
    )
    content: str = Field(default="", description="Raw script text of the scene")
    page_start: int = Field(default=1, ge=1, description="Estimated first page")
    page_end: int = Field(default=1, ge=1, description="Estimated last page")
    duration: int = Field(default=1, ge=1, description="Estimated screen minutes")
    source_offset: int | None = Field(
        default=None,
        exclude=True,
        description="Absolute offset of the heading in the input (heuristic scenes only)",
    )

    @field_validator("location", "time_of_day", mode="before")
    @classmethod
    def default_unspecified(cls, v: Any) -> str:
        """Never leave location/time empty."""
        if v is None:
            return UNSPECIFIED
        value = " ".join(str(v).split())
        return value or UNSPECIFIED

    @field_validator("characters", mode="before")
    @classmethod
    def normalise_characters(cls, v: Any) -> list[str]:
        """Upper-case, de-duplicate and cap character names."""
        if v is None:
            return []
        names: dict[str, None] = {}
        for raw in v:
            name = " ".join(str(raw).split()).upper()
            if name:
                names.setdefault(name, None)
        return list(names)[:MAX_CHARACTERS_PER_SCENE]

    @model_validator(mode="after")
    def validate_page_range(self) -> "Scene":
        """Page range must not run backwards."""
        if self.page_end < self.page_start:
            raise ValueError(
                f"page_end ({self.page_end}) precedes page_start ({self.page_start})"
            )
        return self


class ScriptAnalysisResult(BaseModel):
    """Final artifact of one pipeline run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = Field(None, description="Script title if detected")
    scenes: list[Scene] = Field(default_factory=list, description="Ordered scenes")
    warnings: list[str] = Field(
        default_factory=list, description="Degradation notes (fallbacks, empty input)"
    )
    metadata: dict[str, Any] = Field(default_factory=dict, description="Pipeline metadata")

    @computed_field(alias="totalScenes")  # type: ignore[prop-decorator]
    @property
    def total_scenes(self) -> int:
        return len(self.scenes)

    @computed_field(alias="estimatedDuration")  # type: ignore[prop-decorator]
    @property
    def estimated_duration(self) -> int:
        return sum(scene.duration for scene in self.scenes)

    @model_validator(mode="after")
    def validate_numbering(self) -> "ScriptAnalysisResult":
        """Scene numbers must run 1..n without gaps or repeats."""
        numbers = [scene.scene_number for scene in self.scenes]
        if numbers != list(range(1, len(numbers) + 1)):
            raise ValueError(f"Scene numbers are not contiguous from 1: {numbers}")
        return self
