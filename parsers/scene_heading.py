"""Scene heading (slug line) matcher.

Recognises headings such as::

    INT. KITCHEN - DAY          -> location "KITCHEN", time "DAY"
    EXT. STREET NIGHT           -> location "STREET", time "NIGHT"
    INT./EXT. CAR - MOMENTS LATER
    12 INT. OFFICE              -> scene number "12", no time
    12. THE ROOFTOP             -> numbered heading

Every call builds fresh ``finditer`` iterators over module-level compiled
patterns, so callers never share a scan position.
"""

import heapq
import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum

# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

TIME_OF_DAY_TOKENS: tuple[str, ...] = (
    "MOMENTS LATER",
    "SAME TIME",
    "CONTINUOUS",
    "AFTERNOON",
    "MORNING",
    "EVENING",
    "NIGHT",
    "LATER",
    "DAWN",
    "DUSK",
    "DAY",
)

_TIME = "(?i:" + "|".join(t.replace(" ", r"[ \t]+") for t in TIME_OF_DAY_TOKENS) + ")"

# Dotted forms are accepted in any case, bare words only in upper case
# ("Interior design..." is prose, "INTERIOR HOUSE" is a heading).
_MARKED_PREFIX = (
    r"(?i:INT\.?[ \t]*[/\-][ \t]*EXT\.?|EXT\.?[ \t]*[/\-][ \t]*INT\.?|INT\.|EXT\.)"
    r"|I\.?[ \t]*[/\-][ \t]*E\.?"
)
_BARE_PREFIX = r"INTERIOR|EXTERIOR|INT|EXT"
_PREFIX = r"(?:" + _MARKED_PREFIX + "|" + _BARE_PREFIX + r")(?![A-Za-z])"

# Without a time of day a bare prefix needs a short upper-case location
# that does not end like a sentence ("EXTERIOR WALLS CRUMBLE INTO DUST.").
_BARE_LOCATION = r"(?:[A-Z0-9'&/.\-]+[ \t]+){0,2}[A-Z0-9'&/.\-]*[A-Z0-9']"

_SCENE_NUMBER = r"(?:(?P<number>\d{1,4}[A-Z]?)[.):]?[ \t]+)?"

_TRAILER = r"[ \t.]*(?:\([^\n)]*\)[ \t]*)?(?:\d{1,4}[A-Z]?)?[ \t\r]*$"

_HEADING_WITH_TIME_RE = re.compile(
    r"^[ \t]*" + _SCENE_NUMBER
    + r"(?P<prefix>" + _PREFIX + r")[ \t.\-]*"
    + r"(?P<location>[^\n]*?)(?:[ \t]*[-–—,][ \t]*|[ \t]+)"
    + r"(?P<time>" + _TIME + r")" + _TRAILER,
    re.MULTILINE,
)

_HEADING_RE = re.compile(
    r"^[ \t]*" + _SCENE_NUMBER
    + r"(?P<prefix>(?:" + _MARKED_PREFIX + r")(?![A-Za-z]))"
    + r"(?:[ \t.\-]+(?P<location>[^\n]*?))?[ \t\r]*$",
    re.MULTILINE,
)

_BARE_HEADING_RE = re.compile(
    r"^[ \t]*" + _SCENE_NUMBER
    + r"(?P<prefix>(?:" + _BARE_PREFIX + r")(?![A-Za-z]))[ \t.\-]+"
    + r"(?P<location>" + _BARE_LOCATION + r")[ \t\r]*$",
    re.MULTILINE,
)

_NUMBERED_HEADING_RE = re.compile(
    r"^[ \t]*(?P<number>\d{1,4})[.)][ \t]+(?!" + _PREFIX + r")"
    r"(?P<location>[A-Z][A-Z0-9 '&/,:.\-]*?)[ \t\r]*$",
    re.MULTILINE,
)

TRANSITION_RE = re.compile(
    r"^[ \t]*(?:FADE[ \t]+(?:IN|OUT|TO(?:[ \t]+BLACK)?)|CUT[ \t]+TO|DISSOLVE[ \t]+TO"
    r"|SMASH[ \t]+CUT(?:[ \t]+TO)?|MATCH[ \t]+CUT(?:[ \t]+TO)?)[ \t]*[:.]?[ \t\r]*$",
    re.MULTILINE | re.IGNORECASE,
)

_LOCATION_STRIP = " \t.-–—,"


class HeadingKind(IntEnum):
    """Heading forms; lower value wins when two forms match the same line."""

    STANDARD_WITH_TIME = 0
    STANDARD = 1
    NUMBERED = 2


_PATTERNS: tuple[tuple[re.Pattern[str], HeadingKind], ...] = (
    (_HEADING_WITH_TIME_RE, HeadingKind.STANDARD_WITH_TIME),
    (_HEADING_RE, HeadingKind.STANDARD),
    (_BARE_HEADING_RE, HeadingKind.STANDARD),
    (_NUMBERED_HEADING_RE, HeadingKind.NUMBERED),
)


@dataclass(frozen=True, slots=True)
class HeadingMatch:
    """A scene heading found in a text span."""

    offset: int
    end: int
    matched_text: str
    kind: HeadingKind
    location: str | None = None
    time_of_day: str | None = None
    scene_number: str | None = None


def _to_match(m: re.Match[str], kind: HeadingKind) -> HeadingMatch:
    groups = m.groupdict()
    location = (groups.get("location") or "").strip(_LOCATION_STRIP) or None
    raw_time = groups.get("time")
    time_of_day = " ".join(raw_time.upper().split()) if raw_time else None
    return HeadingMatch(
        offset=m.start(),
        end=m.end(),
        matched_text=m.group(0).strip(),
        kind=kind,
        location=location,
        time_of_day=time_of_day,
        scene_number=groups.get("number"),
    )


def _scan(pattern: re.Pattern[str], kind: HeadingKind, text: str) -> Iterator[HeadingMatch]:
    for m in pattern.finditer(text):
        yield _to_match(m, kind)


def iter_heading_matches(text: str) -> Iterator[HeadingMatch]:
    """Yield scene headings in *text*, ordered by offset and non-overlapping.

    When several forms match the same line the one with the lowest
    ``HeadingKind`` value is kept.
    """
    merged = heapq.merge(
        *(_scan(pattern, kind, text) for pattern, kind in _PATTERNS),
        key=lambda match: (match.offset, match.kind),
    )
    last_end = -1
    for match in merged:
        if match.offset < last_end:
            continue
        last_end = match.end
        yield match


def find_heading_matches(text: str) -> list[HeadingMatch]:
    """Eager variant of :func:`iter_heading_matches`."""
    return list(iter_heading_matches(text))


def iter_transition_cues(text: str) -> Iterator[re.Match[str]]:
    """Yield transition lines (``FADE IN:``, ``CUT TO:`` ...)."""
    return TRANSITION_RE.finditer(text)


def looks_like_heading(line: str) -> bool:
    """Return True if *line* on its own is a scene heading."""
    return next(iter_heading_matches(line.strip()), None) is not None


def is_transition(line: str) -> bool:
    """Return True if *line* on its own is a transition cue."""
    return TRANSITION_RE.fullmatch(line.strip()) is not None


def count_scene_markers(text: str) -> int:
    """Count headings plus transitions; used for diagnostics only."""
    headings = sum(1 for _ in iter_heading_matches(text))
    transitions = sum(1 for _ in iter_transition_cues(text))
    return headings + transitions
