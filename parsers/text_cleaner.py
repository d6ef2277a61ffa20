"""Optional normalisation of extracted screenplay text."""

import re

_PAGE_NUMBER_LINE_RE = re.compile(r"^[ \t]*\d+\.?[ \t]*$", re.MULTILINE)
_CONTINUED_LINE_RE = re.compile(
    r"^[ \t]*\(?(?:CONTINUED|CONT'D|MORE)\)?:?[ \t]*$", re.MULTILINE | re.IGNORECASE
)
_EXCESS_BLANK_LINES_RE = re.compile(r"\n{4,}")
_WIDE_SPACING_RE = re.compile(r"[ \t]{3,}")


def clean_screenplay_text(text: str) -> str:
    """Normalise line endings and drop pagination noise.

    Removes bare page-number lines and ``CONTINUED``/``(MORE)`` markers left
    behind by PDF extraction, collapses long runs of blank lines and wide
    horizontal spacing.  Scene headings and dialogue are left untouched.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _PAGE_NUMBER_LINE_RE.sub("", text)
    text = _CONTINUED_LINE_RE.sub("", text)
    text = _EXCESS_BLANK_LINES_RE.sub("\n\n\n", text)
    text = _WIDE_SPACING_RE.sub("  ", text)
    return text.strip()
