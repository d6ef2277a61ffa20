"""Deterministic scene segmentation built on the heading matcher.

Used directly when no LLM is configured and as the per-chunk fallback of the
model-assisted segmenter.  Scenes cover the whole input: the text of each
scene runs from its heading to the next one, and anything before the first
heading is kept with the first scene.
"""

import re

from core.models import UNSPECIFIED, Scene, SegmentationMethod
from parsers.base import ChunkSegmentation, SegmenterBase
from parsers.character_heuristics import extract_characters
from parsers.chunker import ScriptChunk
from parsers.pagination import PageEstimator
from parsers.scene_heading import (
    HeadingMatch,
    find_heading_matches,
    is_transition,
    looks_like_heading,
)

CHARS_PER_MINUTE = 1000
PARAGRAPHS_PER_SCENE = 5
SUMMARY_MAX_LINES = 3
SUMMARY_MAX_CHARS = 150
SUMMARY_MIN_LINE_CHARS = 10
FALLBACK_HEADING_WORDS = 6
NO_SUMMARY = "Scene content available."
PLACEHOLDER_HEADING = "UNREADABLE SCRIPT"
PLACEHOLDER_SUMMARY = (
    "No scene structure could be extracted: the script text was empty or unreadable."
)

_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t\r]*\n\s*")
_LOOSE_HEADING_RE = re.compile(r"\b(?:INT|EXT)\.?[ \t.]+[^\n]+", re.IGNORECASE)


def estimate_duration(content: str) -> int:
    """Screen minutes from content length, never below one."""
    return max(1, len(content) // CHARS_PER_MINUTE)


def summarize_content(content: str) -> str:
    """Build a short excerpt from the first meaningful action/dialogue lines."""
    picked: list[str] = []
    for raw in content.splitlines():
        line = raw.strip()
        if len(line) <= SUMMARY_MIN_LINE_CHARS:
            continue
        if looks_like_heading(line) or is_transition(line):
            continue
        picked.append(line)
        if len(picked) == SUMMARY_MAX_LINES:
            break

    summary = " ".join(picked)
    if not summary:
        return NO_SUMMARY
    if len(summary) > SUMMARY_MAX_CHARS:
        return summary[:SUMMARY_MAX_CHARS].rstrip() + "..."
    return summary


def placeholder_scene(scene_number: int = 1) -> Scene:
    """The single explanatory scene returned for empty or unreadable input."""
    return Scene(
        scene_number=scene_number,
        heading=PLACEHOLDER_HEADING,
        plot_summary=PLACEHOLDER_SUMMARY,
        content="",
        duration=1,
    )


def _scene_from_span(
    text: str,
    span_start: int,
    span_end: int,
    scene_number: int,
    heading: str,
    *,
    match: HeadingMatch | None,
    summary_from: int,
    base_offset: int,
    pages: PageEstimator,
) -> Scene:
    content = text[span_start:span_end].strip()
    page_start, page_end = pages.page_range(base_offset + span_start, base_offset + span_end)
    return Scene(
        scene_number=scene_number,
        heading=heading,
        plot_summary=summarize_content(text[summary_from:span_end]),
        location=match.location if match and match.location else UNSPECIFIED,
        time_of_day=match.time_of_day if match and match.time_of_day else UNSPECIFIED,
        characters=extract_characters(content),
        content=content,
        page_start=page_start,
        page_end=page_end,
        duration=estimate_duration(content),
        source_offset=base_offset + (match.offset if match else span_start),
    )


def _fallback_heading(group_text: str) -> str:
    loose = _LOOSE_HEADING_RE.search(group_text)
    if loose:
        return loose.group(0).strip()
    words = group_text.split()
    heading = " ".join(words[:FALLBACK_HEADING_WORDS])
    return heading + "..." if len(words) > FALLBACK_HEADING_WORDS else heading


def segment_paragraphs(
    text: str,
    start_number: int = 1,
    *,
    base_offset: int = 0,
    pages: PageEstimator | None = None,
) -> list[Scene]:
    """Group blank-line separated paragraphs into scenes of five."""
    if not text.strip():
        return []
    pages = pages or PageEstimator.for_text(text)

    breaks = [m.end() for m in _PARAGRAPH_BREAK_RE.finditer(text) if m.end() < len(text)]
    bounds = [0, *breaks, len(text)]
    paragraph_starts = [s for s, e in zip(bounds, bounds[1:]) if text[s:e].strip()]

    scenes: list[Scene] = []
    group_starts = paragraph_starts[::PARAGRAPHS_PER_SCENE]
    for i, group_start in enumerate(group_starts):
        span_start = 0 if i == 0 else group_start
        span_end = group_starts[i + 1] if i + 1 < len(group_starts) else len(text)
        scenes.append(
            _scene_from_span(
                text,
                span_start,
                span_end,
                start_number + len(scenes),
                _fallback_heading(text[span_start:span_end]),
                match=None,
                summary_from=span_start,
                base_offset=base_offset,
                pages=pages,
            )
        )
    return scenes


def segment_text(
    text: str,
    start_number: int = 1,
    *,
    base_offset: int = 0,
    pages: PageEstimator | None = None,
) -> list[Scene]:
    """Split *text* into scenes at heading matches.

    *base_offset* is the absolute position of ``text[0]`` in the full script
    and *pages* the estimator built from the full script, so page numbers
    stay global when *text* is only a chunk.  Falls back to paragraph groups
    when *text* contains no heading at all.
    """
    if not text.strip():
        return []
    pages = pages or PageEstimator.for_text(text)

    matches = find_heading_matches(text)
    if not matches:
        return segment_paragraphs(text, start_number, base_offset=base_offset, pages=pages)

    scenes: list[Scene] = []
    for i, match in enumerate(matches):
        span_start = 0 if i == 0 else match.offset
        span_end = matches[i + 1].offset if i + 1 < len(matches) else len(text)
        scenes.append(
            _scene_from_span(
                text,
                span_start,
                span_end,
                start_number + i,
                match.matched_text,
                match=match,
                summary_from=match.offset,
                base_offset=base_offset,
                pages=pages,
            )
        )
    return scenes


class HeuristicSegmenter(SegmenterBase):
    """Regex-only segmenter; no network, same output for the same input."""

    @property
    def name(self) -> str:
        return "heuristic"

    async def segment(
        self,
        chunk: ScriptChunk,
        start_number: int,
        pages: PageEstimator | None = None,
    ) -> ChunkSegmentation:
        return self.segment_sync(chunk, start_number, pages)

    def segment_sync(
        self,
        chunk: ScriptChunk,
        start_number: int,
        pages: PageEstimator | None = None,
    ) -> ChunkSegmentation:
        """Segment the chunk body; the overlap prefix is context only."""
        body = chunk.body
        has_headings = bool(find_heading_matches(body))
        scenes = segment_text(body, start_number, base_offset=chunk.start, pages=pages)
        return ChunkSegmentation(
            chunk_index=chunk.index,
            scenes=scenes,
            method=SegmentationMethod.HEURISTIC if has_headings else SegmentationMethod.PARAGRAPH,
            overlap_headings=chunk.overlap_headings,
        )
