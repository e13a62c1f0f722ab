"""Interface of the external find engine that owns match navigation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FindControllerProtocol(Protocol):
    """Surface the presenter needs to jump to a match."""

    def go_to_match(self, page_index: int, match_index: int) -> None:  # pragma: no cover - Protocol only
        """Scroll to the ``match_index``-th match on the zero-based page ``page_index``."""
