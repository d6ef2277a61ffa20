"""Merge per-chunk scene lists into one numbered result."""

import logging
import re
from collections.abc import Sequence
from typing import Any

from core.models import Scene, ScriptAnalysisResult, SegmentationMethod
from parsers.base import ChunkSegmentation
from parsers.heuristic_segmenter import placeholder_scene

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w]+")


def _heading_key(heading: str) -> str:
    return _NON_WORD_RE.sub(" ", heading.upper()).strip()


def _drop_overlap_duplicates(
    outcome: ChunkSegmentation, previous: list[Scene]
) -> list[Scene]:
    """Drop leading model scenes already reported from the previous chunk.

    Only the first ``overlap_headings`` scenes can come from the overlap, and
    they are only compared with the last ``overlap_headings`` kept scenes.
    Heuristic chunks segment their body only and never repeat a scene.
    """
    window = outcome.overlap_headings
    if outcome.method != SegmentationMethod.MODEL or window == 0 or not previous:
        return list(outcome.scenes)

    seen = {_heading_key(scene.heading) for scene in previous[-window:]}
    kept: list[Scene] = []
    for position, scene in enumerate(outcome.scenes):
        if position < window and _heading_key(scene.heading) in seen:
            logger.debug(
                "Chunk %d: dropping overlap duplicate %r", outcome.chunk_index + 1, scene.heading
            )
            continue
        kept.append(scene)
    return kept


def assemble(
    outcomes: Sequence[ChunkSegmentation],
    title: str | None = None,
    *,
    warnings: list[str] | None = None,
    metadata: dict[str, Any] | None = None,
) -> ScriptAnalysisResult:
    """Concatenate chunk scenes in order and renumber them ``1..n``.

    Segmenter-proposed numbers are discarded.  An empty outcome list (or one
    with no scenes at all) yields a single placeholder scene.
    """
    warnings = list(warnings or [])
    metadata = dict(metadata or {})
    merged: list[Scene] = []
    for outcome in sorted(outcomes, key=lambda o: o.chunk_index):
        merged.extend(_drop_overlap_duplicates(outcome, merged))

    if not merged:
        warnings.append("No scenes could be extracted; returning a placeholder scene.")
        merged = [placeholder_scene()]
        metadata["chunk_methods"] = {
            **metadata.get("chunk_methods", {}),
            SegmentationMethod.PLACEHOLDER.value: 1,
        }

    scenes = [
        scene if scene.scene_number == number else scene.model_copy(update={"scene_number": number})
        for number, scene in enumerate(merged, start=1)
    ]

    return ScriptAnalysisResult(
        title=title,
        scenes=scenes,
        warnings=warnings,
        metadata=metadata,
    )
