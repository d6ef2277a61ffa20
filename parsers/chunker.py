"""Split a screenplay into model-sized chunks along scene boundaries.

Chunk bodies are contiguous slices of the input (their concatenation is the
input).  Every chunk after the first also carries a short tail of the
previous body as ``overlap``: context for the model, never scene content.
"""

import logging
import re
from dataclasses import dataclass

from core.exceptions import ConfigurationException
from parsers.scene_heading import find_heading_matches

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_CHARS = 15000
DEFAULT_OVERLAP_RATIO = 0.1

_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t\r]*\n\s*")


@dataclass(frozen=True, slots=True)
class ScriptChunk:
    """One chunk of the script handed to a segmenter."""

    index: int
    start: int  # absolute offset of the body
    end: int
    text: str  # overlap + body
    overlap: str = ""
    overlap_headings: int = 0  # scene headings inside the overlap

    @property
    def body(self) -> str:
        return self.text[len(self.overlap) :]

    @property
    def text_offset(self) -> int:
        """Absolute offset of ``text[0]`` (the overlap is the slice just before ``start``)."""
        return self.start - len(self.overlap)


def _split_points(text: str) -> list[int]:
    """Offsets where a chunk may start: headings, else paragraph breaks.

    The first heading is never a split point when text precedes it; the
    preamble belongs to the first scene's segment.
    """
    headings = [m.offset for m in find_heading_matches(text)]
    if headings:
        return headings[1:] if headings[0] > 0 else headings
    logger.debug("No scene headings found, chunking on paragraph boundaries")
    return [m.end() for m in _PARAGRAPH_BREAK_RE.finditer(text) if m.end() < len(text)]


def chunk_script(
    text: str,
    max_chars: int = DEFAULT_MAX_CHUNK_CHARS,
    overlap_ratio: float = DEFAULT_OVERLAP_RATIO,
) -> list[ScriptChunk]:
    """Split *text* into ordered chunks whose bodies stay under *max_chars*.

    A body only exceeds *max_chars* when one segment (a single scene, or a
    single paragraph when there are no headings) is larger on its own.

    Returns an empty list for empty/whitespace input.
    """
    if max_chars < 1:
        raise ConfigurationException(f"max_chars must be positive, got {max_chars}")
    if not 0.0 <= overlap_ratio <= 0.5:
        raise ConfigurationException(
            f"overlap_ratio must be within [0, 0.5], got {overlap_ratio}"
        )
    if not text or not text.strip():
        return []

    points = [p for p in _split_points(text) if 0 < p < len(text)]
    boundaries = [0, *points, len(text)]
    segments = [(s, e) for s, e in zip(boundaries, boundaries[1:]) if e > s]

    spans: list[tuple[int, int]] = []
    chunk_start, chunk_end = segments[0]
    for seg_start, seg_end in segments[1:]:
        if seg_end - chunk_start > max_chars:
            spans.append((chunk_start, chunk_end))
            chunk_start = seg_start
        chunk_end = seg_end
    spans.append((chunk_start, chunk_end))

    overlap_size = int(max_chars * overlap_ratio)
    chunks: list[ScriptChunk] = []
    for index, (start, end) in enumerate(spans):
        overlap = ""
        if index > 0 and overlap_size > 0:
            prev_start, _ = spans[index - 1]
            overlap = text[max(prev_start, start - overlap_size) : start]
        chunks.append(
            ScriptChunk(
                index=index,
                start=start,
                end=end,
                text=overlap + text[start:end],
                overlap=overlap,
                overlap_headings=len(find_heading_matches(overlap)) if overlap else 0,
            )
        )

    logger.debug(
        "Chunked %d characters into %d chunks (max %d, overlap %d)",
        len(text), len(chunks), max_chars, overlap_size,
    )
    return chunks
