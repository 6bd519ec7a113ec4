"""
Window-frequency policies (groups 1-6) and the least-used-among-generated
policy (group 13).

Every function works on one zone ("front" or "back") and returns a sorted
list of exactly the zone's pick count. The per-group wrappers at the bottom
return (front, back) pairs for the engine.
"""
from dlt_ai.core.sampling import (
    ZONES, exclude_set, sample_exactly, select_by_extreme_count,
    pad_from_least_seen, pick_by_count_tiers, fill_uniform
)
from dlt_ai.core.stats import FrequencyTable


def exclusion_numbers(table, zone, rng):
    """
    Numbers absent from the window. When fewer than needed are absent, all
    of them are taken and the rest comes from the least-seen numbers.
    """
    lo, hi, n = ZONES[zone]
    pool = exclude_set(lo, hi, table.seen)
    if len(pool) >= n:
        return sorted(rng.sample(pool, n))

    chosen = pad_from_least_seen(pool, table, n, rng)
    return sample_exactly(chosen, n, lo, hi, rng)


def hot_numbers(table, zone, rng, n=None):
    lo, hi, pick = ZONES[zone]
    return select_by_extreme_count(table, n or pick, True, lo, hi, rng)


def cold_seen_numbers(table, zone, rng):
    """Least frequent among numbers that appeared in the window"""
    lo, hi, n = ZONES[zone]
    chosen = select_by_extreme_count(table, n, False, lo, hi, rng, only_seen=True)
    return sample_exactly(chosen, n, lo, hi, rng)


def hybrid_numbers(table, zone, rng):
    """
    Hottest numbers (2 front / 1 back) plus absent numbers for the rest.
    A short absent pool is topped up from the least-seen numbers.
    """
    lo, hi, n = ZONES[zone]
    n_hot = 2 if zone == "front" else 1
    chosen = hot_numbers(table, zone, rng, n=n_hot)

    pool = [num for num in exclude_set(lo, hi, table.seen) if num not in chosen]
    need = n - len(chosen)
    if len(pool) >= need:
        chosen += rng.sample(pool, need)
    else:
        chosen = pad_from_least_seen(chosen + pool, table, n, rng)

    return sample_exactly(chosen, n, lo, hi, rng)


def _active_groups(prior_groups, upto):
    return [g for g in prior_groups if g.index <= upto and not g.blocked]


def union_exclusion_numbers(prior_groups, zone, rng):
    """Numbers not used by any unblocked group 1-4"""
    lo, hi, n = ZONES[zone]
    used = set()
    for group in _active_groups(prior_groups, 4):
        used.update(group.front if zone == "front" else group.back)
    return sample_exactly(exclude_set(lo, hi, used), n, lo, hi, rng)


def consensus_numbers(prior_groups, zone, rng):
    """Numbers repeated most often across unblocked groups 1-4"""
    table = FrequencyTable.from_groups(_active_groups(prior_groups, 4), zone)
    return hot_numbers(table, zone, rng)


def least_generated_numbers(prior_groups, zone, rng):
    """
    Tally the numbers of unblocked groups 1-12 and prefer the least used
    ones among them, moving to the next count tier when a tier runs out.
    """
    lo, hi, n = ZONES[zone]
    table = FrequencyTable.from_groups(_active_groups(prior_groups, 12), zone)
    chosen = pick_by_count_tiers(table, n, rng)
    return sorted(fill_uniform(chosen, n, lo, hi, rng))


# ============================================
# GROUP WRAPPERS
# ============================================
def exclusion_group(stats, rng):
    return (exclusion_numbers(stats.front, "front", rng),
            exclusion_numbers(stats.back, "back", rng))


def hot_group(stats, rng):
    return hot_numbers(stats.front, "front", rng), hot_numbers(stats.back, "back", rng)


def cold_group(stats, rng):
    return (cold_seen_numbers(stats.front, "front", rng),
            cold_seen_numbers(stats.back, "back", rng))


def hybrid_group(stats, rng):
    return hybrid_numbers(stats.front, "front", rng), hybrid_numbers(stats.back, "back", rng)


def union_exclusion_group(prior_groups, rng):
    return (union_exclusion_numbers(prior_groups, "front", rng),
            union_exclusion_numbers(prior_groups, "back", rng))


def consensus_group(prior_groups, rng):
    return (consensus_numbers(prior_groups, "front", rng),
            consensus_numbers(prior_groups, "back", rng))


def least_generated_group(prior_groups, rng):
    return (least_generated_numbers(prior_groups, "front", rng),
            least_generated_numbers(prior_groups, "back", rng))
