"""Filter chain applied to scored recommendations.

Filter order:
  1. ExactDuplicateFilter: same title and company, first wins
  2. AppliedTitleFilter  : drop titles similar to ones the user applied to
  3. SavedTitlePenalty   : lower the score of titles similar to saved jobs
"""

import logging
import re
from collections.abc import Callable

from hiddenjobs.core.schemas import Recommendation

logger = logging.getLogger(__name__)

# A filter is a callable that takes recommendations and returns a subset (or rescored copies).
Filter = Callable[[list[Recommendation]], list[Recommendation]]

_WORD = re.compile(r"[a-z0-9+#]+")


def significant_words(title: str) -> list[str]:
    """Words longer than three characters, lowercased."""
    return [w for w in _WORD.findall(title.lower()) if len(w) > 3]


def titles_similar(a: str, b: str) -> bool:
    """True when at least half of the shorter title's significant words match the other title.

    Words match when either contains the other. Titles with no significant
    words are never similar.
    """
    words_a, words_b = significant_words(a), significant_words(b)
    if not words_a or not words_b:
        return False
    shorter, longer = (words_a, words_b) if len(words_a) <= len(words_b) else (words_b, words_a)
    matches = sum(1 for w in shorter if any(w in o or o in w for o in longer))
    return matches >= len(shorter) / 2


class ExactDuplicateFilter:
    """Remove recommendations repeating an earlier (title, company) pair."""

    def __call__(self, recommendations: list[Recommendation]) -> list[Recommendation]:
        seen: set[tuple[str, str]] = set()
        result: list[Recommendation] = []
        for r in recommendations:
            key = (r.job.title.lower().strip(), r.job.company.lower().strip())
            if key not in seen:
                seen.add(key)
                result.append(r)
        removed = len(recommendations) - len(result)
        if removed:
            logger.debug("ExactDuplicateFilter: removed %d duplicates", removed)
        return result


class AppliedTitleFilter:
    """Exclude jobs similar to a title the user already applied to."""

    def __init__(self, applied_titles: tuple[str, ...] | list[str]) -> None:
        self._titles = [t for t in applied_titles if t.strip()]

    def __call__(self, recommendations: list[Recommendation]) -> list[Recommendation]:
        if not self._titles:
            return recommendations
        result = [
            r for r in recommendations
            if not any(titles_similar(r.job.title, t) for t in self._titles)
        ]
        removed = len(recommendations) - len(result)
        if removed:
            logger.debug("AppliedTitleFilter: removed %d already-applied matches", removed)
        return result


class SavedTitlePenalty:
    """Keep jobs similar to saved ones, but lower their score (never below the floor)."""

    def __init__(self, saved_titles: tuple[str, ...] | list[str], penalty: float, floor: float) -> None:
        self._titles = [t for t in saved_titles if t.strip()]
        self._penalty = penalty
        self._floor = floor

    def __call__(self, recommendations: list[Recommendation]) -> list[Recommendation]:
        if not self._titles:
            return recommendations
        result: list[Recommendation] = []
        penalized = 0
        for r in recommendations:
            if any(titles_similar(r.job.title, t) for t in self._titles):
                score = round(max(self._floor, r.score - self._penalty))
                r = r.model_copy(update={"score": min(score, r.score)})
                penalized += 1
            result.append(r)
        if penalized:
            logger.debug("SavedTitlePenalty: penalized %d saved-job matches", penalized)
        return result


def run_filter_chain(
    recommendations: list[Recommendation],
    filters: list[Filter],
) -> list[Recommendation]:
    """Apply filters in order, returning the surviving recommendations."""
    result = recommendations
    for f in filters:
        result = f(result)
    return result
