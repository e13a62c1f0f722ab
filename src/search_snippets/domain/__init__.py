"""Domain layer - result value objects with no infrastructure dependencies.

Following Cosmic Python value-object conventions, everything here is an
immutable Pydantic model that the external UI can render or serialize:
- PageResult: a page number plus its merged snippets
- ResultStatus: rendered highlight count and truncation flag
- NavigationTarget: where a clicked highlight lives in the document
"""

from search_snippets.domain.results import (
    HighlightResult,
    NavigationIndexError,
    NavigationTarget,
    PageResult,
    ResultStatus,
    SnippetResult,
)


__all__ = [
    "HighlightResult",
    "NavigationIndexError",
    "NavigationTarget",
    "PageResult",
    "ResultStatus",
    "SnippetResult",
]
