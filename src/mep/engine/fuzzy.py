"""Fuzzy matching utilities.

Matches if all query characters appear in order (not necessarily
consecutive), compared case-insensitively one character at a time so the
returned indices point into the candidate as given.
Higher score = better match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")

_SEPARATORS = frozenset("_-./")


@dataclass(frozen=True)
class FuzzyWeights:
    """Tunable scoring constants."""

    match: float = 1
    start_of_string: float = 5
    after_separator: float = 4
    camel_hump: float = 3
    consecutive_step: float = 2
    length_penalty: float = 0.1
    spread_penalty: float = 0.5


DEFAULT_WEIGHTS = FuzzyWeights()


@dataclass(frozen=True)
class MatchResult:
    score: float
    indices: tuple[int, ...] = ()


@dataclass(frozen=True)
class RankedMatch(Generic[T]):
    item: T
    index: int
    result: MatchResult

    @property
    def score(self) -> float:
        return self.result.score


def _follows_separator(ch: str) -> bool:
    return ch.isspace() or ch in _SEPARATORS


def fuzzy_match(
    query: str,
    candidate: str,
    weights: FuzzyWeights = DEFAULT_WEIGHTS,
) -> MatchResult | None:
    """Match *query* as an ordered subsequence of *candidate*.

    Returns ``None`` when some query character cannot be found in order.
    An empty query matches everything with score 0 and no indices.

    Per matched character: ``match`` base, a consecutive-run bonus growing
    by ``consecutive_step`` per step of the run, ``start_of_string`` at
    index 0, ``after_separator`` when the previous candidate character is
    whitespace or one of ``_ - . /``, otherwise ``camel_hump`` on a
    lower-to-upper boundary.  Afterwards the candidate length and the
    first-to-last spread are subtracted as penalties.
    """
    if not query:
        return MatchResult(score=0, indices=())

    if len(query) > len(candidate):
        return None

    indices: list[int] = []
    score: float = 0
    run = 0
    pos = 0

    for q in query:
        q_folded = q.lower()
        while pos < len(candidate) and candidate[pos].lower() != q_folded:
            pos += 1
        if pos >= len(candidate):
            return None

        ch = candidate[pos]
        score += weights.match

        if indices and indices[-1] == pos - 1:
            run += 1
            score += weights.consecutive_step * run
        else:
            run = 0

        if pos == 0:
            score += weights.start_of_string
        else:
            prev = candidate[pos - 1]
            if _follows_separator(prev):
                score += weights.after_separator
            elif prev.islower() and ch.isupper():
                score += weights.camel_hump

        indices.append(pos)
        pos += 1

    score -= weights.length_penalty * len(candidate)
    if len(indices) > 1:
        score -= weights.spread_penalty * (indices[-1] - indices[0])

    return MatchResult(score=score, indices=tuple(indices))


def rank_all(
    query: str,
    candidates: Sequence[T],
    get_text: Callable[[T], str] = str,
    weights: FuzzyWeights = DEFAULT_WEIGHTS,
) -> list[RankedMatch[T]]:
    """Match *query* against every candidate, best first.

    Non-matching candidates are dropped.  The sort is stable, so equal
    scores keep their input order.
    """
    ranked: list[RankedMatch[T]] = []
    for i, item in enumerate(candidates):
        result = fuzzy_match(query, get_text(item), weights)
        if result is not None:
            ranked.append(RankedMatch(item=item, index=i, result=result))

    ranked.sort(key=lambda r: r.result.score, reverse=True)
    return ranked


def fuzzy_filter(
    items: list[T], query: str, get_text: Callable[[T], str]
) -> list[T]:
    """Filter and sort items by fuzzy match quality (best matches first).

    Supports space-separated tokens: all tokens must match and their
    scores are summed.
    """
    tokens = query.split()
    if not tokens:
        return items

    results: list[tuple[T, float]] = []

    for item in items:
        text = get_text(item)
        total_score: float = 0
        all_match = True

        for token in tokens:
            match = fuzzy_match(token, text)
            if match is None:
                all_match = False
                break
            total_score += match.score

        if all_match:
            results.append((item, total_score))

    results.sort(key=lambda r: r[1], reverse=True)
    return [r[0] for r in results]
