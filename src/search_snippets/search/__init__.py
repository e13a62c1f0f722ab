"""
Snippet extraction package.

This package turns raw page text plus match offsets into context windows:
- models: Match and Snippet value types
- normalize: default query normalization used for implicit match lengths
- snippet: window expansion, interval merging, budget truncation and rendering
"""
