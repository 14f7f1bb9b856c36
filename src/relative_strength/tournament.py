"""
Tournament-style elimination over a candidate set.

Candidates are paired in order, each pair is reduced to one winner by a
comparison function, an odd candidate out advances unopposed, and the
survivors are shuffled before the next round. Rounds continue until at
most ``exit_condition`` candidates remain.
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..trend_analysis.errors import TrendAnalysisError

logger = logging.getLogger(__name__)

CompareFn = Callable[[str, str], str]

DEFAULT_EXCLUDED_SUFFIXES = (".BJ",)


def filter_candidates(
    codes: Iterable[str],
    excluded_suffixes: Sequence[str] = DEFAULT_EXCLUDED_SUFFIXES,
    include_only: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    Deduplicate and filter instrument codes.

    Args:
        codes: Candidate codes.
        excluded_suffixes: Codes ending with any of these are dropped.
        include_only: Optional external shortlist to intersect with.

    Returns:
        Sorted list of remaining codes.
    """
    candidates = set(codes)
    if include_only is not None:
        candidates &= set(include_only)
    return sorted(c for c in candidates if not c.endswith(tuple(excluded_suffixes)))


def pair_candidates(remaining: Sequence[str]) -> Tuple[List[Tuple[str, str]], Optional[str]]:
    """Pair (0,1), (2,3), ...; return the pairs and the odd candidate out."""
    pairs = [
        (remaining[i], remaining[i + 1])
        for i in range(0, len(remaining) - 1, 2)
    ]
    odd = remaining[-1] if len(remaining) % 2 == 1 else None
    return pairs, odd


def _play_match(compare: CompareFn, pair: Tuple[str, str]) -> str:
    code_a, code_b = pair
    try:
        return compare(code_a, code_b)
    except TrendAnalysisError as e:
        logger.warning(f"{code_a} vs {code_b}: {e}; advancing {code_a}")
        return code_a


def tournament_elimination(
    candidates: Iterable[str],
    compare: CompareFn,
    exit_condition: int,
    rng: Optional[random.Random] = None,
    max_workers: Optional[int] = None,
) -> List[str]:
    """
    Reduce candidates pairwise until at most exit_condition remain.

    Args:
        candidates: Instrument codes.
        compare: Returns the winning code of (code_a, code_b).
        exit_condition: Target number of survivors (>= 1).
        rng: Random source for shuffling survivors between rounds.
        max_workers: If > 1, run a round's matches on a thread pool.

    Returns:
        Surviving codes.
    """
    if exit_condition < 1:
        raise ValueError(f"exit_condition must be >= 1, got {exit_condition}")

    rng = rng or random.Random()
    remaining = list(candidates)
    round_number = 1

    while len(remaining) > exit_condition:
        pairs, odd = pair_candidates(remaining)
        logger.info(f"Round {round_number}: {len(remaining)} candidates, {len(pairs)} matches")

        if max_workers and max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                survived = list(executor.map(lambda p: _play_match(compare, p), pairs))
        else:
            survived = [_play_match(compare, pair) for pair in pairs]

        if odd is not None:
            survived.append(odd)

        rng.shuffle(survived)
        remaining = survived
        round_number += 1

    return remaining
