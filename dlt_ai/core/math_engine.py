"""
Prize tiers, score changes and exact tier odds.
"""
import numpy as np
from math import comb
from scipy import stats as scipy_stats
from dlt_ai.config import (
    FRONT_MIN, FRONT_MAX, FRONT_PICK, BACK_MIN, BACK_MAX, BACK_PICK,
    PRIZE_LEVELS, SCORE_CHANGES, MISS_PENALTY, logger
)

PRIZE_NAMES = {
    0: "no prize",
    1: "1st prize",
    2: "2nd prize",
    3: "3rd prize",
    4: "4th prize",
    5: "5th prize",
    6: "6th prize",
    7: "7th prize",
    8: "8th prize",
    9: "9th prize",
}


def count_matches(front, back, winning_front, winning_back):
    """(front hits, back hits) of one ticket against a draw"""
    return len(set(front) & set(winning_front)), len(set(back) & set(winning_back))


def determine_prize_level(front_hits, back_hits):
    """Prize tier 1-9 for the hit counts, 0 when nothing is won"""
    return PRIZE_LEVELS.get((front_hits, back_hits), 0)


def score_change(level):
    return SCORE_CHANGES.get(level, MISS_PENALTY)


def prize_text(level):
    return PRIZE_NAMES.get(level, PRIZE_NAMES[0])


def zone_match_probability(k, n_pool, n_draw):
    """
    Exact probability of matching exactly k numbers in one zone.
    Hypergeometric distribution.
    """
    if k < 0 or k > n_draw:
        return 0.0
    remaining = n_pool - n_draw
    needed_from_remaining = n_draw - k
    if needed_from_remaining > remaining:
        return 0.0
    return comb(n_draw, k) * comb(remaining, needed_from_remaining) / comb(n_pool, n_draw)


def tier_probability(level):
    """Probability that one random ticket lands exactly in the tier"""
    n_front = FRONT_MAX - FRONT_MIN + 1
    n_back = BACK_MAX - BACK_MIN + 1
    total = 0.0
    for front_hits in range(FRONT_PICK + 1):
        for back_hits in range(BACK_PICK + 1):
            if determine_prize_level(front_hits, back_hits) == level:
                total += (zone_match_probability(front_hits, n_front, FRONT_PICK) *
                          zone_match_probability(back_hits, n_back, BACK_PICK))
    return total


def expected_score_per_ticket():
    """Expected score change for one random ticket, with a per-tier breakdown"""
    expected = 0.0
    breakdown = {}
    for level in range(0, 10):
        p = tier_probability(level)
        contribution = p * score_change(level)
        expected += contribution
        breakdown[level] = {
            'probability': p,
            'score_change': score_change(level),
            'expected_contribution': contribution,
            'odds': f"1 in {int(1/p):,}" if p > 0 else "impossible"
        }
    return {'expected_score': expected, 'breakdown': breakdown}


def uniformity_check(records, zone="front"):
    """
    Chi-square test of number frequencies against a uniform draw.
    Needs at least one record; returns None otherwise.
    """
    if zone == "front":
        lo, hi = FRONT_MIN, FRONT_MAX
    else:
        lo, hi = BACK_MIN, BACK_MAX

    observed = np.zeros(hi - lo + 1)
    for record in records:
        for n in (record.front if zone == "front" else record.back):
            observed[n - lo] += 1

    total = float(observed.sum())
    if total == 0:
        logger.warning(f"Uniformity check on empty {zone} history")
        return None

    expected = np.full(len(observed), total / len(observed))
    chi2_stat, chi2_p = scipy_stats.chisquare(observed, expected)
    return {
        'zone': zone,
        'n_draws': len(records),
        'statistic': float(chi2_stat),
        'p_value': float(chi2_p),
        'degrees_of_freedom': len(observed) - 1,
        'is_uniform': chi2_p > 0.05,
    }
