"""Domain models for rendered search results.

Value Objects are immutable (frozen=True) so a PageResult, once emitted,
cannot be mutated by the UI layer that renders it.
"""

from pydantic import BaseModel, ConfigDict, Field


class NavigationIndexError(LookupError):
    """Raised when a navigation index was never emitted for the current search."""


class HighlightResult(BaseModel):
    """Value object for one highlighted match inside a snippet.

    ``navigation_index`` is global across the search; ``match_index`` is the
    ordinal of this highlight among all highlights emitted for its page.
    """

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    navigation_index: int
    match_index: int


class SnippetResult(BaseModel):
    """Value object for a context window ready for display."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    text: str
    rendered: str
    leading_ellipsis: bool
    trailing_ellipsis: bool
    highlights: list[HighlightResult] = Field(default_factory=list)


class PageResult(BaseModel):
    """Value object for all snippets emitted for one page (1-based page number)."""

    model_config = ConfigDict(frozen=True)

    page_number: int
    snippets: list[SnippetResult] = Field(default_factory=list)

    @property
    def highlight_count(self) -> int:
        return sum(len(snippet.highlights) for snippet in self.snippets)


class ResultStatus(BaseModel):
    """Rendered highlight count and whether the result cap cut results short."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    truncated: bool = False


class NavigationTarget(BaseModel):
    """Location of a highlight, in the terms the find engine expects for jump-to-match."""

    model_config = ConfigDict(frozen=True)

    page_number: int
    match_index: int

    @property
    def page_index(self) -> int:
        """Zero-based page index."""
        return self.page_number - 1
