"""
Pure random baseline, also the fallback for every other policy
"""
from dlt_ai.core.sampling import ZONES, uniform_pick


def random_numbers(zone, rng):
    lo, hi, n = ZONES[zone]
    return uniform_pick(lo, hi, n, rng)


def random_group(rng):
    return random_numbers("front", rng), random_numbers("back", rng)
