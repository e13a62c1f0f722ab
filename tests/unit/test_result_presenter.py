"""Unit tests for ResultPresenter accumulation, truncation and navigation."""

from unittest.mock import Mock

import pytest

from search_snippets.config import Settings
from search_snippets.domain.results import NavigationIndexError, NavigationTarget, ResultStatus
from search_snippets.service_layer.find_controller import FindControllerProtocol
from search_snippets.service_layer.result_presenter import ResultPresenter, ResultState


FOX = "the quick brown fox jumps over the lazy dog"
LOREM = "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor"


@pytest.fixture
def presenter() -> ResultPresenter:
    presenter = ResultPresenter(Settings())
    presenter.start_search("QUICK")
    return presenter


def _navigation_indices(presenter: ResultPresenter) -> list[int]:
    return [
        highlight.navigation_index
        for page in presenter.results()
        for snippet in page.snippets
        for highlight in snippet.highlights
    ]


@pytest.mark.unit
class TestAddPage:
    """Tests for adding single pages."""

    def test_single_match_uses_query_length(self, presenter):
        presenter.add_page(1, [4], FOX)

        (page,) = presenter.results()
        (snippet,) = page.snippets
        assert page.page_number == 1
        assert (snippet.start, snippet.end) == (0, len(FOX))
        assert [(h.start, h.end) for h in snippet.highlights] == [(4, 9)]
        assert snippet.text == FOX
        assert snippet.rendered == "the [[quick]] brown fox jumps over the lazy dog"
        assert not snippet.leading_ellipsis
        assert not snippet.trailing_ellipsis
        assert presenter.status() == ResultStatus(count=1, truncated=False)

    def test_explicit_lengths_override_query(self, presenter):
        presenter.add_page(1, [10, 13], LOREM, match_lengths=[3, 3])

        (snippet,) = presenter.results()[0].snippets
        assert [(h.start, h.end) for h in snippet.highlights] == [(10, 13), (13, 16)]
        assert presenter.status().count == 2

    def test_duplicate_page_is_ignored(self, presenter):
        presenter.add_page(1, [4], FOX)
        presenter.add_page(1, [4], FOX)

        assert len(presenter.results()) == 1
        assert presenter.status().count == 1

    def test_page_without_matches_is_ignored(self, presenter):
        presenter.add_page(1, [], FOX)

        assert presenter.results() == ()
        assert presenter.state is ResultState.EMPTY

    def test_missing_lengths_without_query_raises(self):
        presenter = ResultPresenter(Settings())
        with pytest.raises(ValueError, match="Match lengths are required"):
            presenter.add_page(1, [4], FOX)

    def test_html_style_from_settings(self):
        presenter = ResultPresenter(Settings(highlight_style="html"))
        presenter.add_page(1, [16], FOX, match_lengths=[3])

        snippet = presenter.results()[0].snippets[0]
        assert snippet.rendered == 'the quick brown <span class="highlighted">fox</span> jumps over the lazy dog'

    def test_state_moves_to_accumulating(self, presenter):
        assert presenter.state is ResultState.EMPTY
        presenter.add_page(1, [4], FOX)
        assert presenter.state is ResultState.ACCUMULATING


@pytest.mark.unit
class TestTruncation:
    """Tests for the global result cap."""

    def test_cap_on_single_page(self, presenter, make_spread_page):
        text, offsets = make_spread_page(150)
        presenter.add_page(1, offsets, text, match_lengths=[3] * 150)

        assert presenter.status() == ResultStatus(count=100, truncated=True)
        assert presenter.state is ResultState.CAPPED
        snippets = presenter.results()[0].snippets
        assert len(snippets) == 100
        assert snippets[-1].highlights[-1].start == offsets[99]
        assert all(snippet.start > offsets[100] or snippet.end < offsets[100] for snippet in snippets)

    def test_snippet_larger_than_budget_is_excluded(self, make_spread_page):
        presenter = ResultPresenter(Settings(result_cap=3))
        text, offsets = make_spread_page(2)
        presenter.add_page(1, offsets, text, match_lengths=[3, 3])
        presenter.add_page(2, [10, 13], LOREM, match_lengths=[3, 3])

        assert presenter.status() == ResultStatus(count=2, truncated=False)
        assert [page.page_number for page in presenter.results()] == [1]
        assert presenter.state is ResultState.ACCUMULATING

    def test_later_page_fills_leftover_budget(self, make_spread_page):
        presenter = ResultPresenter(Settings(result_cap=3))
        text, offsets = make_spread_page(2)
        presenter.add_page(1, offsets, text, match_lengths=[3, 3])
        presenter.add_page(2, [10, 13], LOREM, match_lengths=[3, 3])
        presenter.add_page(3, [4], FOX, match_lengths=[5])

        assert presenter.status() == ResultStatus(count=3, truncated=False)
        assert [page.page_number for page in presenter.results()] == [1, 3]
        assert presenter.state is ResultState.CAPPED
        assert presenter.select(2) == NavigationTarget(page_number=3, match_index=0)

    def test_oversized_snippet_does_not_block_smaller_pages(self, make_spread_page):
        presenter = ResultPresenter(Settings(result_cap=3))
        text, offsets = make_spread_page(1)
        presenter.add_page(1, offsets, text, match_lengths=[3])
        presenter.add_page(2, [10, 13, 16], LOREM, match_lengths=[3, 3, 3])
        presenter.add_page(3, offsets, text, match_lengths=[3])

        assert presenter.status() == ResultStatus(count=2, truncated=False)
        assert [page.page_number for page in presenter.results()] == [1, 3]

    def test_exact_cap_truncates_only_when_more_matches_arrive(self, make_spread_page):
        presenter = ResultPresenter(Settings(result_cap=3))
        text, offsets = make_spread_page(3)
        presenter.add_page(1, offsets, text, match_lengths=[3, 3, 3])

        assert presenter.status() == ResultStatus(count=3, truncated=False)
        assert presenter.state is ResultState.CAPPED

        presenter.add_page(2, [4], FOX, match_lengths=[5])
        assert presenter.status() == ResultStatus(count=3, truncated=True)
        assert len(presenter.results()) == 1

    def test_total_never_exceeds_cap(self, make_spread_page):
        presenter = ResultPresenter(Settings(result_cap=7))
        presenter.start_search("hit")
        for page_number in range(1, 6):
            text, offsets = make_spread_page(page_number)
            presenter.add_page(page_number, offsets, text)

        assert presenter.status().count <= 7
        assert sum(page.highlight_count for page in presenter.results()) == presenter.status().count


@pytest.mark.unit
class TestNavigation:
    """Tests for navigation index assignment and select()."""

    def test_indices_are_contiguous_across_pages(self, presenter, make_spread_page):
        text, offsets = make_spread_page(3)
        presenter.add_page(1, [10, 13], LOREM, match_lengths=[3, 3])
        presenter.add_page(2, offsets, text, match_lengths=[3, 3, 3])

        assert _navigation_indices(presenter) == [0, 1, 2, 3, 4]

    def test_select_inverts_emission(self, presenter, make_spread_page):
        text, offsets = make_spread_page(3)
        presenter.add_page(1, [10, 13], LOREM, match_lengths=[3, 3])
        presenter.add_page(2, offsets, text, match_lengths=[3, 3, 3])

        for page in presenter.results():
            for snippet in page.snippets:
                for highlight in snippet.highlights:
                    target = presenter.select(highlight.navigation_index)
                    assert target == NavigationTarget(page_number=page.page_number, match_index=highlight.match_index)

        assert presenter.select(3) == NavigationTarget(page_number=2, match_index=1)
        assert presenter.select(1) == NavigationTarget(page_number=1, match_index=1)

    def test_match_index_counts_across_snippets(self, presenter, make_spread_page):
        text, offsets = make_spread_page(4)
        presenter.add_page(5, offsets, text, match_lengths=[3] * 4)

        assert [presenter.select(index).match_index for index in range(4)] == [0, 1, 2, 3]
        assert presenter.select(2).page_index == 4

    @pytest.mark.parametrize("index", [-1, 1, 50])
    def test_select_unknown_index_raises(self, presenter, index):
        presenter.add_page(1, [4], FOX)
        with pytest.raises(NavigationIndexError):
            presenter.select(index)

    def test_navigate_calls_find_controller(self, presenter, make_spread_page):
        text, offsets = make_spread_page(3)
        presenter.add_page(2, offsets, text, match_lengths=[3, 3, 3])
        controller = Mock(spec=FindControllerProtocol)

        target = presenter.navigate(1, controller)

        controller.go_to_match.assert_called_once_with(1, 1)
        assert target == NavigationTarget(page_number=2, match_index=1)


@pytest.mark.unit
class TestBatchUpdates:
    """Tests for whole-document updates and search restarts."""

    def test_update_results_skips_empty_pages(self, presenter):
        presenter.update_results(
            [[4], None, [], [10, 13]],
            [FOX, "", "nothing here", LOREM],
            [[5], None, None, [3, 3]],
        )

        assert [page.page_number for page in presenter.results()] == [1, 4]
        assert presenter.status() == ResultStatus(count=3, truncated=False)

    def test_update_results_stops_after_truncation(self, make_spread_page):
        presenter = ResultPresenter(Settings(result_cap=2))
        presenter.start_search("hit")
        text, offsets = make_spread_page(1)

        presenter.update_results([offsets, offsets, offsets, offsets], [text] * 4)

        assert presenter.status() == ResultStatus(count=2, truncated=True)
        assert [page.page_number for page in presenter.results()] == [1, 2]

    def test_update_results_does_not_reprocess_pages(self, presenter):
        presenter.update_results([[4]], [FOX])
        presenter.update_results([[4], [4]], [FOX, FOX])

        assert [page.page_number for page in presenter.results()] == [1, 2]
        assert presenter.status().count == 2

    def test_handle_matches_update_starts_fresh(self, presenter):
        presenter.add_page(1, [4], FOX)

        status = presenter.handle_matches_update("fox", [None, [16]], ["", FOX])

        assert status == ResultStatus(count=1, truncated=False)
        assert presenter.query == "fox"
        assert [page.page_number for page in presenter.results()] == [2]
        assert presenter.select(0) == NavigationTarget(page_number=2, match_index=0)


@pytest.mark.unit
class TestReset:
    """Tests for reset()."""

    def _populate(self, presenter: ResultPresenter, make_spread_page) -> None:
        text, offsets = make_spread_page(150)
        presenter.add_page(1, [10, 13], LOREM, match_lengths=[3, 3])
        presenter.add_page(2, offsets, text, match_lengths=[3] * 150)

    def test_reset_clears_everything(self, presenter, make_spread_page):
        self._populate(presenter, make_spread_page)
        presenter.reset()

        assert presenter.results() == ()
        assert presenter.status() == ResultStatus()
        assert presenter.state is ResultState.EMPTY
        with pytest.raises(NavigationIndexError):
            presenter.select(0)

    def test_reset_is_idempotent(self, presenter):
        presenter.reset()
        presenter.reset()
        assert presenter.status() == ResultStatus(count=0, truncated=False)

    def test_reset_behaves_like_fresh_presenter(self, presenter, make_spread_page):
        self._populate(presenter, make_spread_page)
        presenter.reset()
        self._populate(presenter, make_spread_page)

        fresh = ResultPresenter(Settings())
        fresh.start_search("QUICK")
        self._populate(fresh, make_spread_page)

        assert presenter.results() == fresh.results()
        assert presenter.status() == fresh.status()
        assert presenter.select(50) == fresh.select(50)

    def test_reset_keeps_active_query(self, presenter):
        presenter.reset()
        presenter.add_page(1, [4], FOX)
        assert presenter.results()[0].snippets[0].highlights[0].end == 9
