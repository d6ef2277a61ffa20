"""Abstract segmenter interface and segmenter factory."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.models import Scene, SegmentationMethod

if TYPE_CHECKING:
    from parsers.chunker import ScriptChunk
    from parsers.pagination import PageEstimator


@dataclass(frozen=True, slots=True)
class ChunkSegmentation:
    """Scenes produced for one chunk, and how they were produced."""

    chunk_index: int
    scenes: list[Scene]
    method: SegmentationMethod
    error: str | None = None
    overlap_headings: int = 0

    @property
    def fell_back(self) -> bool:
        return self.error is not None


class SegmenterBase(ABC):
    """Interface every scene segmenter implements.

    ``segment`` is async so the model-assisted variant can await its LLM
    call; the heuristic variant returns directly.  Implementations never
    raise for bad input or provider failures: they degrade instead.
    """

    @abstractmethod
    async def segment(
        self,
        chunk: "ScriptChunk",
        start_number: int,
        pages: "PageEstimator | None" = None,
    ) -> ChunkSegmentation:
        """Return the scenes of *chunk*, numbered from *start_number*."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short segmenter name used in logs and result metadata."""


def get_segmenter(llm_provider: Any = None, *, use_model: bool = True, **options: Any) -> SegmenterBase:
    """Return the model-assisted segmenter when a provider is available.

    ``use_model=False`` or a missing provider selects the heuristic segmenter.
    Extra *options* go to ``ModelAssistedSegmenter``.
    """
    from parsers.heuristic_segmenter import HeuristicSegmenter
    from parsers.llm_segmenter import ModelAssistedSegmenter

    if use_model and llm_provider is not None:
        return ModelAssistedSegmenter(llm_provider, **options)
    return HeuristicSegmenter()
