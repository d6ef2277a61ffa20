"""Screenplay scene segmentation pipeline.

Pipeline:
1. Optional text normalisation
2. Heading-aligned chunking with overlap
3. Per-chunk segmentation (LLM with heuristic fallback, or heuristics only)
4. Assembly: overlap de-duplication, renumbering, totals

A run always produces a ``ScriptAnalysisResult``; failures only lower the
fidelity of the scenes (model summaries -> heuristic excerpts -> placeholder).
"""

import asyncio
import logging
import time
from collections import Counter
from collections.abc import Awaitable, Callable
from typing import Any

from core.config import Settings
from core.exceptions import ConfigurationException
from core.models import ScriptAnalysisResult
from llm.base import BaseLLMProvider
from llm.factory import get_llm_provider
from llm.prompt_manager import PromptManager, get_prompt_manager
from parsers.assembler import assemble
from parsers.base import ChunkSegmentation, get_segmenter
from parsers.character_heuristics import extract_title
from parsers.chunker import DEFAULT_MAX_CHUNK_CHARS, DEFAULT_OVERLAP_RATIO, chunk_script
from parsers.llm_segmenter import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_TEMPERATURE
from parsers.pagination import PageEstimator
from parsers.scene_heading import count_scene_markers
from parsers.text_cleaner import clean_screenplay_text

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_DELAY_SECONDS = 1.0


class ScriptAnalyzer:
    """Turn plain screenplay text into a numbered scene list.

    The LLM provider is injected; ``None`` runs the heuristic segmenter for
    every chunk.  *sleep* is the coroutine used for the pause between model
    calls and can be replaced in tests.
    """

    def __init__(
        self,
        llm_provider: BaseLLMProvider | None = None,
        *,
        max_chunk_chars: int = DEFAULT_MAX_CHUNK_CHARS,
        overlap_ratio: float = DEFAULT_OVERLAP_RATIO,
        chunk_delay_seconds: float = DEFAULT_CHUNK_DELAY_SECONDS,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        normalize_text: bool = False,
        prompt_manager: PromptManager | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_chunk_chars < 1:
            raise ConfigurationException(
                f"max_chunk_chars must be positive, got {max_chunk_chars}",
                details={"max_chunk_chars": max_chunk_chars},
            )
        if not 0.0 <= overlap_ratio <= 0.5:
            raise ConfigurationException(
                f"overlap_ratio must be within [0, 0.5], got {overlap_ratio}",
                details={"overlap_ratio": overlap_ratio},
            )
        self._llm = llm_provider
        self._max_chunk_chars = max_chunk_chars
        self._overlap_ratio = overlap_ratio
        self._chunk_delay_seconds = max(0.0, chunk_delay_seconds)
        self._normalize_text = normalize_text
        self._sleep = sleep
        self._segmenter = get_segmenter(
            llm_provider,
            temperature=temperature,
            max_tokens=max_output_tokens,
            prompt_manager=prompt_manager,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        llm_provider: BaseLLMProvider | None = None,
        **overrides: Any,
    ) -> "ScriptAnalyzer":
        """Build an analyzer from ``Settings``; the provider comes from the factory unless given."""
        if llm_provider is None:
            llm_provider = get_llm_provider(settings)
        options: dict[str, Any] = {
            "max_chunk_chars": settings.segmentation_max_chunk_chars,
            "overlap_ratio": settings.segmentation_overlap_ratio,
            "chunk_delay_seconds": settings.segmentation_chunk_delay_seconds,
            "temperature": settings.segmentation_temperature,
            "max_output_tokens": settings.segmentation_max_output_tokens,
            "normalize_text": settings.segmentation_normalize_text,
        }
        if settings.prompts_path:
            options["prompt_manager"] = get_prompt_manager(settings.prompts_path)
        options.update(overrides)
        return cls(llm_provider, **options)

    @property
    def uses_model(self) -> bool:
        return self._segmenter.name == "model"

    async def analyze(self, script_text: str) -> ScriptAnalysisResult:
        """Segment *script_text* into scenes.  Never raises for string input."""
        t0 = time.monotonic()
        text = script_text or ""
        if self._normalize_text:
            text = clean_screenplay_text(text)

        if not text.strip():
            logger.info("Empty script text, returning placeholder scene")
            return assemble(
                [],
                warnings=["Script text is empty."],
                metadata=self._metadata([], 0, t0),
            )

        title = extract_title(text)
        pages = PageEstimator.for_text(text)
        chunks = chunk_script(text, self._max_chunk_chars, self._overlap_ratio)

        logger.info(
            "Script analysis: %d characters, %d chunks, %d potential scene markers, segmenter=%s",
            len(text), len(chunks), count_scene_markers(text), self._segmenter.name,
        )

        outcomes: list[ChunkSegmentation] = []
        warnings: list[str] = []
        next_number = 1
        for i, chunk in enumerate(chunks):
            logger.debug(
                "Processing chunk %d/%d (%d characters)", i + 1, len(chunks), len(chunk.text)
            )
            outcome = await self._segmenter.segment(chunk, next_number, pages)
            if outcome.fell_back:
                warnings.append(
                    f"Chunk {i + 1}: model segmentation failed ({outcome.error}); "
                    f"heuristic segmentation used"
                )
            outcomes.append(outcome)
            next_number += len(outcome.scenes)

            if self.uses_model and i < len(chunks) - 1 and self._chunk_delay_seconds > 0:
                await self._sleep(self._chunk_delay_seconds)

        result = assemble(
            outcomes,
            title,
            warnings=warnings,
            metadata=self._metadata(outcomes, len(chunks), t0),
        )

        logger.info(
            "Script analysed: %d scenes, ~%d minutes, %d fallback chunks in %.1fs",
            result.total_scenes,
            result.estimated_duration,
            sum(1 for o in outcomes if o.fell_back),
            time.monotonic() - t0,
        )
        return result

    def _metadata(
        self, outcomes: list[ChunkSegmentation], chunk_count: int, t0: float
    ) -> dict[str, Any]:
        methods = Counter(outcome.method.value for outcome in outcomes)
        return {
            "segmenter": self._segmenter.name,
            "provider": self._llm.provider_name if self._llm is not None else None,
            "chunks": chunk_count,
            "chunk_methods": dict(methods),
            "fallback_chunks": sum(1 for o in outcomes if o.fell_back),
            "parsing_time_seconds": round(time.monotonic() - t0, 3),
        }


def analyze_script(
    script_text: str,
    llm_provider: BaseLLMProvider | None = None,
    **options: Any,
) -> ScriptAnalysisResult:
    """Synchronous convenience wrapper around ``ScriptAnalyzer.analyze``."""
    analyzer = ScriptAnalyzer(llm_provider, **options)
    return asyncio.run(analyzer.analyze(script_text))
