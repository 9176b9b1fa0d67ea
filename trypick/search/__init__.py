"""Fuzzy search primitives used by the selector."""

from .fuzzy import (
    CandidateEntry,
    Matcher,
    ScoredMatch,
    fold_text,
    score_candidate,
    score_text,
)

__all__ = [
    "CandidateEntry",
    "Matcher",
    "ScoredMatch",
    "fold_text",
    "score_candidate",
    "score_text",
]
