"""Context snippets and navigable highlights for paginated find results."""

from search_snippets.config import Settings
from search_snippets.domain import NavigationTarget, PageResult, ResultStatus
from search_snippets.search.models import Match, Snippet
from search_snippets.search.snippet import build_snippets, render_snippet
from search_snippets.service_layer import ResultPresenter


__all__ = [
    "Match",
    "NavigationTarget",
    "PageResult",
    "ResultPresenter",
    "ResultStatus",
    "Settings",
    "Snippet",
    "build_snippets",
    "render_snippet",
]
