#!/usr/bin/env python3
"""Segment a plain-text screenplay into scenes and print the JSON result."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import get_settings
from services.script_analyzer import ScriptAnalyzer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path, help="Plain-text screenplay file ('-' for stdin)")
    parser.add_argument(
        "--heuristic-only",
        action="store_true",
        help="Skip the LLM even if a provider is configured",
    )
    parser.add_argument("--max-chunk-chars", type=int, default=None, help="Override chunk size")
    parser.add_argument(
        "--normalize",
        action="store_true",
        help="Strip page numbers and CONTINUED markers before segmenting",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout")
    return parser


async def main(argv: list[str] | None = None) -> int:
    """Run the pipeline once and emit the result."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if str(args.path) == "-":
        text = sys.stdin.read()
    else:
        try:
            text = args.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error(f"Cannot read script file {args.path}: {e}")
            return 1

    overrides: dict = {}
    if args.max_chunk_chars:
        overrides["max_chunk_chars"] = args.max_chunk_chars
    if args.normalize:
        overrides["normalize_text"] = True

    if args.heuristic_only:
        analyzer = ScriptAnalyzer(
            None,
            max_chunk_chars=overrides.get("max_chunk_chars", settings.segmentation_max_chunk_chars),
            overlap_ratio=settings.segmentation_overlap_ratio,
            normalize_text=overrides.get("normalize_text", settings.segmentation_normalize_text),
        )
    else:
        analyzer = ScriptAnalyzer.from_settings(settings, **overrides)

    result = await analyzer.analyze(text)
    payload = result.model_dump_json(by_alias=True, indent=2)

    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Wrote {result.total_scenes} scenes to {args.output}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
