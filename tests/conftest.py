"""Pytest configuration and fixtures."""

import json
from typing import Any, Callable

import pytest

from core.exceptions import LLMException
from llm.base import BaseLLMProvider

KITCHEN_STREET = "INT. KITCHEN - DAY\nJohn enters.\n\nEXT. STREET - NIGHT\nJohn leaves."

SHORT_SCRIPT = """THE LAST TRAIN

Written by
Jane Doe

FADE IN:

INT. STATION - NIGHT

Rain hammers the glass roof. A clock reads 11:58.

ANNA
(breathless)
Is this the last one?

CONDUCTOR
Last one tonight, miss.

EXT. PLATFORM - CONTINUOUS

Anna runs along the platform as the doors begin to close.

INT. TRAIN CARRIAGE - NIGHT

Anna drops into a seat opposite an OLD MAN reading a newspaper.

OLD MAN
You nearly missed it.

ANNA
I always nearly miss it.

CUT TO:

EXT. COUNTRYSIDE - DAWN

The train crosses a bridge as the sun comes up.
"""


class StubLLMProvider(BaseLLMProvider):
    """In-memory provider returning queued replies (or raising)."""

    def __init__(self, replies: list[Any] | None = None, error: Exception | None = None) -> None:
        super().__init__({})
        self.replies = list(replies or [])
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 8192,
        **kwargs: Any,
    ) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "system_prompt": system_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        if not self.replies:
            raise LLMException("No stub reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def health_check(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return "stub"


def scene_reply(*titles: str) -> str:
    """A well-formed model reply with one entry per title."""
    return json.dumps(
        [
            {"sceneNumber": i + 1, "title": title, "plotSummary": f"Summary of {title}."}
            for i, title in enumerate(titles)
        ]
    )


SPEAKERS = ("ANNA", "BEN", "CLARA", "DAVID")

# Three scenes of 118, 42 and 138 characters; headings at 0, 118 and 160.
HALL_STAIRS_ROOF = (
    "INT. HALL - DAY\n" + "A" * 100 + "\n\n"
    + "INT. STAIRS - NIGHT\n" + "B" * 20 + "\n\n"
    + "EXT. ROOF - DAWN\n" + "C" * 120 + "\n"
)


def build_script(scene_count: int, action_lines: int = 6) -> str:
    """A synthetic screenplay with numbered INT/EXT scenes."""
    parts = []
    for i in range(1, scene_count + 1):
        prefix = "INT." if i % 2 else "EXT."
        time_of_day = "DAY" if i % 3 else "NIGHT"
        lines = [f"{prefix} LOCATION {i} - {time_of_day}", ""]
        lines += [f"Action line {j} of scene {i} describes what happens next." for j in range(action_lines)]
        lines += ["", SPEAKERS[i % len(SPEAKERS)], "Some dialogue goes here.", ""]
        parts.append("\n".join(lines))
    return "\n".join(parts)


@pytest.fixture
def make_stub_provider() -> Callable[..., StubLLMProvider]:
    """Factory for stub LLM providers."""
    return StubLLMProvider


@pytest.fixture
def kitchen_street() -> str:
    return KITCHEN_STREET


@pytest.fixture
def short_script() -> str:
    return SHORT_SCRIPT


@pytest.fixture
def hall_stairs_roof() -> str:
    return HALL_STAIRS_ROOF


@pytest.fixture
def long_script() -> str:
    return build_script(40)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep real credentials and LLM settings out of tests."""
    for name in (
        "LLM_PROVIDER",
        "GEMINI_API_KEY",
        "GEMINI_API_KEY_FILE",
        "MISTRAL_API_KEY",
        "MISTRAL_API_KEY_FILE",
        "ENV",
        "DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
