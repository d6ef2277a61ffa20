"""Title and character-name heuristics working on raw script text."""

import re

from core.models import MAX_CHARACTERS_PER_SCENE
from parsers.scene_heading import is_transition, looks_like_heading

_TITLE_SCAN_LINES = 10

# A dialogue cue: upper-case name, optional parenthetical ("(V.O.)") or colon.
_CUE_RE = re.compile(
    r"^[ \t]*(?P<name>[A-Z][A-Z '.\-]*?)[ \t]*(?:\([^)\n]*\)|:)?[ \t\r]*$",
    re.MULTILINE,
)

CUE_STOPWORDS: frozenset[str] = frozenset(
    {
        "INT", "EXT", "FADE", "CUT", "DISSOLVE", "INTERIOR", "EXTERIOR",
        "SCENE", "ACT", "THE", "END", "TITLE", "CONTINUED", "MORE",
        "SMASH", "MATCH", "INSERT", "SUPER", "BACK", "ANGLE", "CLOSE",
        "MONTAGE", "INTERCUT", "SERIES", "FLASHBACK", "BEGIN", "OMITTED",
        "SUPERIMPOSE", "CREDITS", "BLACK", "FREEZE", "WIDE", "POV",
        "ESTABLISHING", "LATER", "CONTINUOUS", "SAME", "MOMENTS",
        "DAY", "NIGHT", "MORNING", "EVENING", "DAWN", "DUSK",
    }
)


def extract_title(text: str) -> str | None:
    """Guess the script title from the first non-blank lines.

    The title is the first line that is entirely upper case, 4-49 characters
    long, and neither a scene heading, a transition nor digit-leading.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for line in lines[:_TITLE_SCAN_LINES]:
        if not 4 <= len(line) <= 49:
            continue
        if line != line.upper() or not any(ch.isalpha() for ch in line):
            continue
        if line[0].isdigit() or "INT." in line or "EXT." in line:
            continue
        if looks_like_heading(line) or is_transition(line):
            continue
        return line
    return None


def _is_character_name(name: str) -> bool:
    if not 2 <= len(name) <= 29:
        return False
    words = name.split()
    if len(words) > 3:
        return False
    return words[0].strip(".'-") not in CUE_STOPWORDS


def extract_characters(content: str, limit: int = MAX_CHARACTERS_PER_SCENE) -> list[str]:
    """Return distinct speaking-character names found in dialogue cues."""
    names: dict[str, None] = {}
    for m in _CUE_RE.finditer(content):
        name = " ".join(m.group("name").split())
        if _is_character_name(name):
            names.setdefault(name, None)
            if len(names) >= limit:
                break
    return list(names)
