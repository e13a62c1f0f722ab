"""Case and diacritic folding for query text.

Match offsets are produced by the external find engine in its own normalized
coordinate space. The only thing this package needs from normalization is the
length of the normalized query, which becomes the highlight length whenever the
engine does not report per-match lengths.
"""

from __future__ import annotations

from collections.abc import Callable
import unicodedata


Normalizer = Callable[[str], str]


def normalize(text: str) -> str:
    """Fold case and strip combining diacritics (``"Café"`` -> ``"cafe"``)."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def default_match_length(query: str, normalizer: Normalizer = normalize) -> int:
    """Length of the normalized query, used when matches carry no explicit length."""
    if not query:
        return 0
    return len(normalizer(query))
