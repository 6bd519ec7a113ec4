"""
First-order Markov chain over whole draws.

The state is the exact set of numbers in a draw; the transition counts
record which numbers showed up in the following draw.
"""
from collections import Counter, defaultdict

from dlt_ai.config import MARKOV_MIN_HISTORY, logger
from dlt_ai.core.sampling import ZONES, uniform_pick, draw_weighted_counts
from dlt_ai.core.stats import zone_numbers


def build_transitions(records, zone):
    """frozenset(draw numbers) -> Counter of numbers in the next draw"""
    transitions = defaultdict(Counter)
    for current, following in zip(records, records[1:]):
        state = frozenset(zone_numbers(current, zone))
        transitions[state].update(zone_numbers(following, zone))
    return transitions


def next_draw_weights(records, zone, smoothing=1):
    """Laplace-smoothed transition counts out of the latest draw's state"""
    lo, hi, _ = ZONES[zone]
    transitions = build_transitions(records, zone)
    last_state = frozenset(zone_numbers(records[-1], zone))
    observed = transitions.get(last_state, Counter())
    return {num: observed[num] + smoothing for num in range(lo, hi + 1)}


def markov_numbers(records, zone, rng):
    lo, hi, n = ZONES[zone]
    if len(records) < MARKOV_MIN_HISTORY:
        logger.warning(f"Markov {zone}: {len(records)} draws < {MARKOV_MIN_HISTORY}, using random")
        return uniform_pick(lo, hi, n, rng)

    weights = next_draw_weights(records, zone)
    return draw_weighted_counts(weights, n, rng)


def markov_group(records, rng):
    return markov_numbers(records, "front", rng), markov_numbers(records, "back", rng)
