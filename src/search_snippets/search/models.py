"""Snippet data models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Match:
    """A match occurrence: offset into the normalized page text plus its length."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class Snippet:
    """A half-open context window ``[start, end)`` with its highlight sub-ranges.

    Highlights are ``(start, end)`` pairs kept sorted by start offset.
    """

    start: int
    end: int
    highlights: tuple[tuple[int, int], ...] = field(default_factory=tuple)

    @property
    def highlight_count(self) -> int:
        return len(self.highlights)
