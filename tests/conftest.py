"""Shared test fixtures and configuration."""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep host SEARCH_SNIPPETS_* variables from leaking into Settings()."""
    for key in list(os.environ):
        if key.upper().startswith("SEARCH_SNIPPETS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))


def spread_page(count: int, word: str = "hit", filler_words: int = 20) -> tuple[str, list[int]]:
    """Page whose ``count`` matches sit far enough apart to never share a snippet."""
    segment = word + " filler" * filler_words
    return segment * count, [index * len(segment) for index in range(count)]


@pytest.fixture
def make_spread_page():
    return spread_page
