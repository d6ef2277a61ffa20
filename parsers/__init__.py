"""Scene segmentation: heading matcher, chunker, segmenters and assembler."""

from parsers.assembler import assemble
from parsers.base import ChunkSegmentation, SegmenterBase, get_segmenter
from parsers.chunker import ScriptChunk, chunk_script
from parsers.heuristic_segmenter import HeuristicSegmenter
from parsers.llm_segmenter import ModelAssistedSegmenter

__all__ = [
    "ChunkSegmentation",
    "HeuristicSegmenter",
    "ModelAssistedSegmenter",
    "ScriptChunk",
    "SegmenterBase",
    "assemble",
    "chunk_script",
    "get_segmenter",
]
