"""
Cyclical / time-series scorer.

Numbers are scored by how well the draw being predicted lines up with
their usual gap between appearances, blended with recent frequency and
how long they have been absent.
"""
from collections import Counter

from dlt_ai.config import (
    TIME_SERIES_MIN_HISTORY, TIME_SERIES_RECENT, TIME_SERIES_WEIGHT_FLOOR, logger
)
from dlt_ai.core.sampling import ZONES, uniform_pick, draw_weighted_scores
from dlt_ai.core.stats import appearance_positions

CYCLIC_WEIGHT = 0.5
RECENT_WEIGHT = 0.3
COLD_WEIGHT = 0.2
NON_REPEATER_SCORE = 1.0


def modal_gap(positions):
    """
    Most frequent gap between consecutive appearances and how often it
    occurs. Ties go to the smallest gap.
    """
    gaps = Counter(b - a for a, b in zip(positions, positions[1:]))
    if not gaps:
        return 0, 0
    best = max(gaps.values())
    return min(g for g, c in gaps.items() if c == best), best


def number_score(positions, n_records, recent=TIME_SERIES_RECENT):
    if len(positions) <= 1:
        return NON_REPEATER_SCORE

    current = n_records
    gap, gap_count = modal_gap(positions)
    last = positions[-1]

    cyclic = 0.0
    if gap > 0 and gap_count > 1:
        cyclic = max(0, 10 - abs(current - (last + gap)))

    recent_span = min(recent, n_records)
    recent_hits = sum(1 for p in positions if p >= n_records - recent_span)
    recent_score = recent_hits / recent_span * 5

    cold = min(5, (current - last - 1) * 0.5)

    return CYCLIC_WEIGHT * cyclic + RECENT_WEIGHT * recent_score + COLD_WEIGHT * cold


def score_numbers(records, zone):
    lo, hi, _ = ZONES[zone]
    positions = appearance_positions(records, zone)
    return {
        num: number_score(positions.get(num, []), len(records))
        for num in range(lo, hi + 1)
    }


def time_series_numbers(records, zone, rng):
    lo, hi, n = ZONES[zone]
    if len(records) < TIME_SERIES_MIN_HISTORY:
        logger.warning(f"Time series {zone}: {len(records)} draws < "
                       f"{TIME_SERIES_MIN_HISTORY}, using random")
        return uniform_pick(lo, hi, n, rng)

    scores = score_numbers(records, zone)
    return draw_weighted_scores(scores, n, rng, floor=TIME_SERIES_WEIGHT_FLOOR)


def time_series_group(records, rng):
    return time_series_numbers(records, "front", rng), time_series_numbers(records, "back", rng)
