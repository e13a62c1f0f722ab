"""Result presenter orchestration layer.

Collects snippets page by page for one search, enforces the global result
cap, and numbers every highlight so a click in the UI can be mapped back to
the find engine's jump-to-match coordinates.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
import logging
from uuid import uuid4

from search_snippets.config import Settings
from search_snippets.domain.results import (
    HighlightResult,
    NavigationIndexError,
    NavigationTarget,
    PageResult,
    ResultStatus,
    SnippetResult,
)
from search_snippets.observability.metrics import (
    HIGHLIGHTS_EMITTED,
    PAGES_PROCESSED,
    RESULT_TRUNCATIONS,
    SNIPPET_BUILD_LATENCY,
    track_latency,
)
from search_snippets.observability.tracing import create_span
from search_snippets.search.models import Snippet
from search_snippets.search.normalize import Normalizer, default_match_length, normalize
from search_snippets.search.snippet import (
    build_matches,
    build_snippets,
    has_leading_ellipsis,
    has_trailing_ellipsis,
    render_snippet,
)
from search_snippets.service_layer.find_controller import FindControllerProtocol


logger = logging.getLogger(__name__)


class ResultState(str, Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    CAPPED = "capped"


class ResultPresenter:
    """Accumulates per-page snippets into a capped, navigable result set.

    The presenter exclusively owns its result set. PageResults are appended
    and never changed afterwards; ``reset()`` or ``start_search()`` discards
    the whole set. Calls must be serialized by the caller.
    """

    def __init__(self, settings: Settings | None = None, normalizer: Normalizer = normalize):
        """Initialize presenter.

        Args:
            settings: Window constants, result cap and highlight style
            normalizer: Query normalization matching the find engine's
        """
        self.settings = settings or Settings()
        self._normalizer = normalizer
        self._query = ""
        self._default_length = 0
        self._search_id = uuid4().hex[:12]
        self._pages: list[PageResult] = []
        self._processed_pages: set[int] = set()
        self._targets: list[NavigationTarget] = []
        self._count = 0
        self._truncated = False

    @property
    def cap(self) -> int:
        return self.settings.result_cap

    @property
    def query(self) -> str:
        return self._query

    @property
    def state(self) -> ResultState:
        if self._count >= self.cap:
            return ResultState.CAPPED
        if self._processed_pages:
            return ResultState.ACCUMULATING
        return ResultState.EMPTY

    def reset(self) -> None:
        """Drop all page results, navigation indices and the truncation flag."""
        self._pages = []
        self._processed_pages = set()
        self._targets = []
        self._count = 0
        self._truncated = False

    def start_search(self, query: str) -> None:
        """Begin a new result set for ``query``.

        The normalized query length becomes the highlight length for pages
        whose matches carry no explicit lengths.
        """
        self.reset()
        self._query = query
        self._default_length = default_match_length(query, self._normalizer)
        self._search_id = uuid4().hex[:12]
        logger.debug("Search started", extra={"search_id": self._search_id, "query_length": self._default_length})

    def add_page(
        self,
        page_number: int,
        matches: Sequence[int],
        page_text: str,
        match_lengths: Sequence[int] | None = None,
    ) -> None:
        """Build and append the snippets for one page.

        Pages already processed in this result set, and pages without
        matches, are ignored. A snippet that does not fit the remaining budget
        is left out while later pages may still fill it. Once the count
        reaches the cap, pages with matches left over mark the results as
        truncated.

        Args:
            page_number: 1-based page number
            matches: Match offsets in ascending order
            page_text: Page text in the same normalized coordinates as ``matches``
            match_lengths: Per-match lengths; the normalized query length otherwise

        Raises:
            ValueError: No lengths were given and there is no active query
        """
        if page_number in self._processed_pages or not matches:
            PAGES_PROCESSED.labels(outcome="skipped").inc()
            return

        if self.state is ResultState.CAPPED:
            PAGES_PROCESSED.labels(outcome="capped").inc()
            self._mark_truncated()
            return

        if match_lengths is None and self._default_length <= 0:
            raise ValueError("Match lengths are required when no search query is active")

        budget = self.cap - self._count
        page_matches = build_matches(matches, match_lengths, self._default_length)
        span_attributes = {"page.number": page_number, "page.matches": len(page_matches)}
        with create_span("snippets.add_page", attributes=span_attributes) as span:
            with track_latency(SNIPPET_BUILD_LATENCY):
                snippets = build_snippets(page_text, page_matches, budget, self.settings)
            emitted = sum(snippet.highlight_count for snippet in snippets)
            span.set_attribute("page.highlights", emitted)

        self._processed_pages.add(page_number)
        if snippets:
            self._pages.append(self._page_result(page_number, page_text, snippets))
        self._count += emitted
        HIGHLIGHTS_EMITTED.labels().inc(emitted)
        PAGES_PROCESSED.labels(outcome="rendered").inc()

        logger.debug(
            f"Page {page_number}: {len(snippets)} snippets, {emitted}/{len(page_matches)} highlights",
            extra={"search_id": self._search_id},
        )

        if self._count >= self.cap and emitted < len(page_matches):
            self._mark_truncated()

    def update_results(
        self,
        page_matches: Sequence[Sequence[int] | None],
        page_contents: Sequence[str],
        page_match_lengths: Sequence[Sequence[int] | None] | None = None,
    ) -> None:
        """Offer every page of the document in order, stopping once results are truncated.

        Args:
            page_matches: Match offsets per zero-based page (None or empty for no matches)
            page_contents: Page text per zero-based page
            page_match_lengths: Optional per-page match lengths
        """
        for page_index, matches in enumerate(page_matches):
            if self._truncated:
                break
            lengths = page_match_lengths[page_index] if page_match_lengths else None
            self.add_page(page_index + 1, matches or (), page_contents[page_index], lengths)

    def handle_matches_update(
        self,
        query: str,
        page_matches: Sequence[Sequence[int] | None],
        page_contents: Sequence[str],
        page_match_lengths: Sequence[Sequence[int] | None] | None = None,
    ) -> ResultStatus:
        """Rebuild results from scratch for a fresh match count update."""
        self.start_search(query)
        self.update_results(page_matches, page_contents, page_match_lengths)
        return self.status()

    def results(self) -> tuple[PageResult, ...]:
        """PageResults in emission order."""
        return tuple(self._pages)

    def status(self) -> ResultStatus:
        return ResultStatus(count=self._count, truncated=self._truncated)

    def select(self, navigation_index: int) -> NavigationTarget:
        """Resolve a navigation index to its page and per-page match ordinal.

        Raises:
            NavigationIndexError: The index was not emitted in this result set
        """
        if not 0 <= navigation_index < len(self._targets):
            raise NavigationIndexError(
                f"Navigation index {navigation_index} out of range (0..{len(self._targets) - 1})"
            )
        return self._targets[navigation_index]

    def navigate(self, navigation_index: int, controller: FindControllerProtocol) -> NavigationTarget:
        """Jump the find engine to the highlight behind ``navigation_index``."""
        target = self.select(navigation_index)
        controller.go_to_match(target.page_index, target.match_index)
        return target

    def _page_result(self, page_number: int, page_text: str, snippets: Sequence[Snippet]) -> PageResult:
        style = self.settings.highlight_style
        match_index = 0
        snippet_results: list[SnippetResult] = []
        for snippet in snippets:
            highlights: list[HighlightResult] = []
            for start, end in snippet.highlights:
                target = NavigationTarget(page_number=page_number, match_index=match_index)
                highlights.append(
                    HighlightResult(
                        start=start,
                        end=end,
                        navigation_index=len(self._targets),
                        match_index=match_index,
                    )
                )
                self._targets.append(target)
                match_index += 1
            snippet_results.append(
                SnippetResult(
                    start=snippet.start,
                    end=snippet.end,
                    text=page_text[snippet.start : snippet.end],
                    rendered=render_snippet(page_text, snippet, style),
                    leading_ellipsis=has_leading_ellipsis(snippet),
                    trailing_ellipsis=has_trailing_ellipsis(page_text, snippet),
                    highlights=highlights,
                )
            )
        return PageResult(page_number=page_number, snippets=snippet_results)

    def _mark_truncated(self) -> None:
        if self._truncated:
            return
        self._truncated = True
        RESULT_TRUNCATIONS.labels().inc()
        logger.info(
            "Search results truncated at %d highlights",
            self._count,
            extra={"search_id": self._search_id, "cap": self.cap},
        )
