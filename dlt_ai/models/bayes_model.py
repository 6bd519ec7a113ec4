"""
Positional naive-Bayes model.

Each slot of a draw (in the order the numbers were stored, not sorted)
gets its own smoothed distribution, and one number is drawn per slot.
"""
from dlt_ai.config import BAYES_MIN_HISTORY, logger
from dlt_ai.core.sampling import ZONES, uniform_pick, fill_uniform
from dlt_ai.core.stats import zone_numbers


def position_counts(records, zone):
    """List (one per slot) of {number: times seen in that slot}"""
    lo, hi, n = ZONES[zone]
    counts = [{num: 0 for num in range(lo, hi + 1)} for _ in range(n)]
    for record in records:
        for slot, num in enumerate(zone_numbers(record, zone)[:n]):
            counts[slot][num] += 1
    return counts


def _draw_slot(weights, chosen, rng):
    """One weighted pick among numbers not yet chosen, or None"""
    total = sum(w for num, w in weights.items() if num not in chosen)
    if total <= 0:
        return None
    r = rng.randrange(total)
    acc = 0
    for num in sorted(weights):
        if num in chosen:
            continue
        acc += weights[num]
        if r < acc:
            return num
    return None


def bayes_numbers(records, zone, rng, smoothing=1):
    lo, hi, n = ZONES[zone]
    if len(records) < BAYES_MIN_HISTORY:
        logger.warning(f"Bayes {zone}: no history, using random")
        return uniform_pick(lo, hi, n, rng)

    domain_size = hi - lo + 1
    chosen = []
    for slot_counts in position_counts(records, zone):
        weights = {num: c + smoothing for num, c in slot_counts.items()}

        picked = None
        for _ in range(domain_size):
            picked = _draw_slot(weights, chosen, rng)
            if picked is not None:
                break

        if picked is None:
            remaining = [num for num in range(lo, hi + 1) if num not in chosen]
            if not remaining:
                break
            picked = rng.choice(remaining)
        chosen.append(picked)

    return sorted(fill_uniform(chosen, n, lo, hi, rng))


def bayes_group(records, rng):
    return bayes_numbers(records, "front", rng), bayes_numbers(records, "back", rng)
