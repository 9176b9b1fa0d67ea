"""Fuzzy subsequence scoring and ranking for trial directory names."""

from __future__ import annotations

import math
from dataclasses import dataclass

GAP_TABLE_SIZE = 17
_GAP_BONUS = tuple(2.0 / math.sqrt(gap + 1) for gap in range(GAP_TABLE_SIZE))


@dataclass(frozen=True)
class CandidateEntry:
    """One selectable directory with its query-independent base score."""

    text: str
    basename: str
    path: str
    modified_at: float
    base_score: float


@dataclass(frozen=True)
class ScoredMatch:
    entry: CandidateEntry
    score: float
    positions: tuple[int, ...] = ()


def fold_text(text: str) -> str:
    """Lower-case ``text`` one character at a time.

    Keeps a 1:1 index mapping with the original so highlight positions can be
    applied to the unfolded name.
    """
    return "".join(ch.lower()[0] for ch in text)


def _is_word_char(ch: str) -> bool:
    return "a" <= ch <= "z" or "0" <= ch <= "9"


def _gap_bonus(gap: int) -> float:
    if gap < GAP_TABLE_SIZE:
        return _GAP_BONUS[gap]
    return 2.0 / math.sqrt(gap + 1)


def score_text(
    text: str,
    query: str,
    base_score: float = 0.0,
    text_folded: str | None = None,
) -> tuple[float, tuple[int, ...]] | None:
    """Score ``query`` as a greedy leftmost subsequence of ``text``.

    Returns ``(score, positions)`` or ``None`` when some query character has no
    remaining occurrence. An empty query matches with ``base_score``.
    """
    if not query:
        return base_score, ()
    if text_folded is None:
        text_folded = fold_text(text)
    query_folded = fold_text(query)

    score = base_score
    positions: list[int] = []
    last_idx = -1
    for needle in query_folded:
        idx = text_folded.find(needle, last_idx + 1)
        if idx < 0:
            return None
        positions.append(idx)
        score += 1.0
        if idx == 0 or not _is_word_char(text_folded[idx - 1]):
            score += 1.0
        if last_idx >= 0:
            score += _gap_bonus(idx - last_idx - 1)
        last_idx = idx

    score *= len(query_folded) / (last_idx + 1)
    score *= 10.0 / (len(text) + 10.0)
    return score, tuple(positions)


def score_candidate(entry: CandidateEntry, query: str) -> tuple[float, tuple[int, ...]] | None:
    return score_text(entry.text, query, entry.base_score)


class Matcher:
    """Rank a fixed candidate set against successive queries."""

    def __init__(self, entries: list[CandidateEntry]) -> None:
        self._entries = list(entries)
        self._folded = [fold_text(entry.text) for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[CandidateEntry]:
        return list(self._entries)

    def match(self, query: str) -> list[ScoredMatch]:
        """Return matching candidates by descending score.

        The sort is stable, so equal scores keep candidate order.
        """
        results: list[ScoredMatch] = []
        for entry, folded in zip(self._entries, self._folded):
            scored = score_text(entry.text, query, entry.base_score, text_folded=folded)
            if scored is None:
                continue
            score, positions = scored
            results.append(ScoredMatch(entry=entry, score=score, positions=positions))
        results.sort(key=lambda match: -match.score)
        return results
