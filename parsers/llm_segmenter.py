"""LLM-assisted scene segmentation for script chunks.

Each chunk is sent to the configured LLM with a fixed prompt asking for a
JSON array of ``{sceneNumber, title, plotSummary}`` objects.  Any failure --
provider error, unparsable or empty reply -- hands the whole chunk to the
heuristic segmenter; a reply is either used completely or not at all.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from core.exceptions import ParsingException
from core.models import UNSPECIFIED, Scene, SegmentationMethod
from llm.base import BaseLLMProvider
from llm.prompt_manager import PromptManager, get_prompt_manager
from parsers.base import ChunkSegmentation, SegmenterBase
from parsers.character_heuristics import extract_characters
from parsers.chunker import ScriptChunk
from parsers.heuristic_segmenter import HeuristicSegmenter
from parsers.pagination import PageEstimator

logger = logging.getLogger(__name__)

MODEL_SCENE_DURATION = 2
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_OUTPUT_TOKENS = 8192
MISSING_SUMMARY = "Scene description not available."


class SceneEntry(BaseModel):
    """One object of the model's JSON reply; ``sceneNumber`` is ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str = ""
    plot_summary: str = ""

    @field_validator("title", "plot_summary", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Models sometimes send numbers or null; keep them as trimmed text."""
        return "" if v is None else str(v).strip()


_SCENE_ENTRIES = TypeAdapter(list[SceneEntry])


def build_segmentation_prompt(
    chunk: ScriptChunk,
    start_number: int,
    prompt_manager: PromptManager | None = None,
) -> tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for one chunk."""
    pm = prompt_manager or get_prompt_manager()
    return pm.get(
        "scene_segmentation",
        "chunk",
        start_number=start_number,
        overlap_chars=len(chunk.overlap),
        chunk_text=chunk.text,
    )


def extract_json_array(reply: str) -> list[Any]:
    """Decode the outermost ``[...]`` substring of *reply*.

    Raises ``ParsingException`` if there is no array or it does not decode.
    """
    start = reply.find("[")
    end = reply.rfind("]")
    if start == -1 or end <= start:
        raise ParsingException(
            "No JSON array found in model reply",
            details={"reply_preview": reply[:200]},
        )
    try:
        decoded = json.loads(reply[start : end + 1])
    except json.JSONDecodeError as exc:
        raise ParsingException(
            f"Invalid JSON array in model reply: {exc}",
            details={"reply_preview": reply[:200], "error": str(exc)},
        )
    if not isinstance(decoded, list):
        raise ParsingException("Model reply is not a JSON array")
    return decoded


def parse_scene_entries(entries: list[Any]) -> list[tuple[str, str]]:
    """Validate decoded entries and return ``(title, plot_summary)`` pairs.

    The model's own ``sceneNumber`` is ignored; numbering belongs to the
    assembler.  Raises ``ParsingException`` for an empty list or any entry
    that is not an object.
    """
    if not entries:
        raise ParsingException("Model reply contains no scenes")

    try:
        scenes = _SCENE_ENTRIES.validate_python(entries)
    except ValidationError as exc:
        error = exc.errors()[0]
        position = error["loc"][0] if error["loc"] else None
        raise ParsingException(
            f"Invalid scene entry in model reply: {error['msg']}",
            details={"position": position, "entry": repr(error.get("input"))[:100]},
        )
    return [(scene.title, scene.plot_summary or MISSING_SUMMARY) for scene in scenes]


def scenes_from_entries(
    entries: list[tuple[str, str]],
    chunk: ScriptChunk,
    start_number: int,
    pages: PageEstimator,
) -> list[Scene]:
    """Build model-path scenes; pages are spread evenly over the chunk body."""
    span = max(1, chunk.end - chunk.start)
    step = span / len(entries)
    scenes: list[Scene] = []
    for i, (title, summary) in enumerate(entries):
        number = start_number + i
        page_start, page_end = pages.page_range(
            chunk.start + int(i * step), chunk.start + int((i + 1) * step)
        )
        scenes.append(
            Scene(
                scene_number=number,
                heading=title or f"Scene {number}",
                plot_summary=summary,
                location=UNSPECIFIED,
                time_of_day=UNSPECIFIED,
                characters=extract_characters(summary),
                content=summary,
                page_start=page_start,
                page_end=page_end,
                duration=MODEL_SCENE_DURATION,
            )
        )
    return scenes


class ModelAssistedSegmenter(SegmenterBase):
    """Segment chunks with an LLM, falling back to heuristics per chunk."""

    def __init__(
        self,
        llm_provider: BaseLLMProvider,
        fallback: HeuristicSegmenter | None = None,
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        prompt_manager: PromptManager | None = None,
    ) -> None:
        self._llm = llm_provider
        self._fallback = fallback or HeuristicSegmenter()
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._prompt_manager = prompt_manager

    @property
    def name(self) -> str:
        return "model"

    @property
    def provider_name(self) -> str:
        return self._llm.provider_name

    async def segment(
        self,
        chunk: ScriptChunk,
        start_number: int,
        pages: PageEstimator | None = None,
    ) -> ChunkSegmentation:
        pages = pages or PageEstimator.for_text(chunk.body)
        try:
            scenes = await self._segment_with_llm(chunk, start_number, pages)
        except Exception as exc:
            logger.warning(
                "Chunk %d: model segmentation failed (%s), using heuristic fallback",
                chunk.index + 1, exc,
            )
            fallback = self._fallback.segment_sync(chunk, start_number, pages)
            return ChunkSegmentation(
                chunk_index=fallback.chunk_index,
                scenes=fallback.scenes,
                method=fallback.method,
                error=f"{exc.__class__.__name__}: {exc}",
                overlap_headings=fallback.overlap_headings,
            )

        return ChunkSegmentation(
            chunk_index=chunk.index,
            scenes=scenes,
            method=SegmentationMethod.MODEL,
            overlap_headings=chunk.overlap_headings,
        )

    async def _segment_with_llm(
        self,
        chunk: ScriptChunk,
        start_number: int,
        pages: PageEstimator,
    ) -> list[Scene]:
        system_prompt, user_prompt = build_segmentation_prompt(
            chunk, start_number, self._prompt_manager
        )
        reply = await self._llm.generate(
            prompt=user_prompt,
            system_prompt=system_prompt,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        entries = parse_scene_entries(extract_json_array(reply or ""))
        logger.debug("Chunk %d: model returned %d scenes", chunk.index + 1, len(entries))
        return scenes_from_entries(entries, chunk, start_number, pages)
