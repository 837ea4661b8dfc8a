"""Lexical scoring strategies."""
from .scoring import KeywordFrequencyStrategy, ScoringStrategy, tokenize_query
from .snippets import extract_snippet

__all__ = [
    "KeywordFrequencyStrategy",
    "ScoringStrategy",
    "tokenize_query",
    "extract_snippet",
]
