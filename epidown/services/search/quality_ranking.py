"""
Quality ranking module.

Orders release reports best first: higher quality tier first, then
proper/repack releases before regular ones. Releases equal on both keys keep
their original relative order.
"""

from functools import cmp_to_key
from typing import Iterable, List

from epidown.core.domain.entities import EpisodeParseResult


def compare_candidates(a: EpisodeParseResult, b: EpisodeParseResult) -> int:
    """
    Compare two release reports for ranking.

    Args:
        a: First release report.
        b: Second release report.

    Returns:
        Negative if ``a`` ranks before ``b``, positive if after, 0 if equal.
    """
    if a.quality != b.quality:
        return -1 if a.quality > b.quality else 1
    if a.proper != b.proper:
        return -1 if a.proper else 1
    return 0


def rank_candidates(candidates: Iterable[EpisodeParseResult]) -> List[EpisodeParseResult]:
    """
    Return a new, ranked list of release reports (best first).

    The input is never modified. ``sorted`` is stable, so ties keep their
    input order.

    Args:
        candidates: Release reports of one indexer.

    Returns:
        Ranked copy of the reports.
    """
    return sorted(candidates, key=cmp_to_key(compare_candidates))
