"""Offset-to-page estimation for plain screenplay text."""

from dataclasses import dataclass

LINES_PER_PAGE = 55


@dataclass(frozen=True, slots=True)
class PageEstimator:
    """Map character offsets to estimated 1-based page numbers."""

    chars_per_page: float

    @classmethod
    def for_text(cls, text: str) -> "PageEstimator":
        """Derive the average page size from *text* (~55 lines per page)."""
        line_count = max(1, text.count("\n") + 1)
        return cls(chars_per_page=max(1.0, len(text) * LINES_PER_PAGE / line_count))

    def page_at(self, offset: int) -> int:
        return int(max(0, offset) // self.chars_per_page) + 1

    def page_range(self, start: int, end: int) -> tuple[int, int]:
        first = self.page_at(start)
        return first, max(first, self.page_at(max(start, end - 1)))
