"""Context snippet extraction around find matches.

Each match is widened to a window bounded by nearby spaces, overlapping
windows are coalesced, and the result is cut to the remaining highlight
budget without ever splitting a snippet.

Defaults (overridable through ``Settings``):
- look back ``prev_chars`` and ahead ``next_chars`` from the match offset
- snap to the nearest space, unless it sits ``max_chars`` or more away
- touching windows (``end == next.start``) merge
"""

from __future__ import annotations

from collections.abc import Sequence
import html

from search_snippets.config import Settings
from search_snippets.search.models import Match, Snippet


PREV_CHARS = 30
NEXT_CHARS = 50
MAX_CHARS = 200

LEADING_ELLIPSIS = "..."
TRAILING_ELLIPSIS = " ..."


def find_window_start(
    text: str,
    position: int,
    prev_chars: int = PREV_CHARS,
    max_chars: int = MAX_CHARS,
) -> int:
    """Find where the context window for a match at ``position`` begins.

    Args:
        text: The page text.
        position: Match offset.
        prev_chars: Characters to look back before searching for a space.
        max_chars: A space found this far back or further is ignored.

    Returns:
        Index of the last space at or before ``position - prev_chars`` (0 if
        none), or ``max(0, position - prev_chars)`` when that space is too far.
    """
    anchor = max(0, position - prev_chars)
    start = max(0, text.rfind(" ", 0, anchor + 1))
    if start <= position - max_chars:
        start = anchor
    return start


def find_window_end(
    text: str,
    position: int,
    next_chars: int = NEXT_CHARS,
    max_chars: int = MAX_CHARS,
) -> int:
    """Find where the context window for a match at ``position`` ends.

    Args:
        text: The page text.
        position: Match offset.
        next_chars: Characters to look ahead before searching for a space.
        max_chars: A space found this far ahead or further is ignored.

    Returns:
        Index of the first space at or after ``position + next_chars``, or
        ``min(len(text), position + next_chars)`` when there is none in reach.
    """
    anchor = min(len(text), position + next_chars)
    end = text.find(" ", anchor)
    if end == -1 or end >= position + max_chars:
        end = anchor
    return end


def build_matches(
    offsets: Sequence[int],
    lengths: Sequence[int] | None,
    default_length: int,
) -> list[Match]:
    """Pair match offsets with explicit lengths, or ``default_length`` when none are given."""
    if lengths is None:
        return [Match(offset, default_length) for offset in offsets]
    return [Match(offset, length) for offset, length in zip(offsets, lengths, strict=True)]


def expand_matches(
    text: str,
    matches: Sequence[Match],
    prev_chars: int = PREV_CHARS,
    next_chars: int = NEXT_CHARS,
    max_chars: int = MAX_CHARS,
) -> list[Snippet]:
    """Widen every match into its own single-highlight window.

    A match longer than the look-ahead still ends inside its window.
    """
    return [
        Snippet(
            start=find_window_start(text, match.offset, prev_chars, max_chars),
            end=max(match.end, find_window_end(text, match.offset, next_chars, max_chars)),
            highlights=((match.offset, match.end),),
        )
        for match in matches
    ]


def merge_snippets(snippets: Sequence[Snippet]) -> list[Snippet]:
    """Coalesce overlapping or touching windows into non-overlapping snippets.

    Windows are ordered by start and swept once, so chains of overlaps merge
    transitively. Highlights of merged windows are concatenated and re-sorted.
    Merging an already merged list returns an equal list.
    """
    if not snippets:
        return []
    ordered = sorted(snippets, key=lambda snippet: (snippet.start, snippet.end))
    merged: list[Snippet] = [ordered[0]]
    for current in ordered[1:]:
        previous = merged[-1]
        if previous.end >= current.start:
            merged[-1] = Snippet(
                start=previous.start,
                end=max(previous.end, current.end),
                highlights=previous.highlights + current.highlights,
            )
        else:
            merged.append(current)
    return [
        Snippet(snippet.start, snippet.end, tuple(sorted(snippet.highlights, key=lambda h: h[0])))
        for snippet in merged
    ]


def limit_snippets(snippets: Sequence[Snippet], cap: int) -> list[Snippet]:
    """Keep leading snippets while their cumulative highlight count stays within ``cap``.

    Processing stops at the first snippet that does not fit; snippets are
    never split.
    """
    kept: list[Snippet] = []
    total = 0
    for snippet in snippets:
        if total + snippet.highlight_count > cap:
            break
        kept.append(snippet)
        total += snippet.highlight_count
    return kept


def build_snippets(
    text: str,
    matches: Sequence[Match],
    cap: int,
    settings: Settings | None = None,
) -> list[Snippet]:
    """Build merged, highlight-annotated snippets for one page.

    This is the main entry point for snippet extraction.

    Args:
        text: Page text in the same normalized coordinates as the match offsets.
        matches: Matches in ascending offset order. Offsets and lengths must
            lie inside ``text``; they are not validated.
        cap: Highlights this page may still contribute.
        settings: Window constants; defaults are used when omitted.

    Returns:
        Snippets in ascending start order, holding at most ``cap`` highlights.
    """
    if not matches or cap <= 0:
        return []
    if settings is None:
        prev_chars, next_chars, max_chars = PREV_CHARS, NEXT_CHARS, MAX_CHARS
    else:
        prev_chars, next_chars, max_chars = settings.prev_chars, settings.next_chars, settings.max_chars

    windows = expand_matches(text, matches, prev_chars, next_chars, max_chars)
    return limit_snippets(merge_snippets(windows), cap)


def has_leading_ellipsis(snippet: Snippet) -> bool:
    return snippet.start != 0


def has_trailing_ellipsis(text: str, snippet: Snippet) -> bool:
    return snippet.end != len(text)


def render_snippet(text: str, snippet: Snippet, style: str = "plain") -> str:
    """Render a snippet as display text with its highlights marked.

    Args:
        text: The page text the snippet offsets refer to.
        snippet: The snippet to render.
        style: "plain" for [[term]] or "html" for escaped text with
            <span class="highlighted">term</span>.

    Returns:
        The snippet text, prefixed with "..." unless it starts the page and
        suffixed with " ..." unless it ends the page.
    """
    escape = html.escape if style == "html" else str

    def mark(fragment: str) -> str:
        if style == "html":
            return f'<span class="highlighted">{fragment}</span>'
        return f"[[{fragment}]]"

    parts: list[str] = []
    if has_leading_ellipsis(snippet):
        parts.append(LEADING_ELLIPSIS)

    cursor = snippet.start
    for start, end in snippet.highlights:
        parts.append(escape(text[cursor:start]))
        parts.append(mark(escape(text[start:end])))
        cursor = end
    parts.append(escape(text[cursor : snippet.end]))

    if has_trailing_ellipsis(text, snippet):
        parts.append(TRAILING_ELLIPSIS)
    return "".join(parts)
