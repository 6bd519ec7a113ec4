"""
Candidate pools and samplers used by every generation policy.

All randomness comes from the `rng` argument (a random.Random instance),
so a seeded generator reproduces a whole engine run.
"""
from dlt_ai.config import (
    FRONT_MIN, FRONT_MAX, FRONT_PICK, BACK_MIN, BACK_MAX, BACK_PICK
)

# zone -> (min, max, numbers per group)
ZONES = {
    "front": (FRONT_MIN, FRONT_MAX, FRONT_PICK),
    "back": (BACK_MIN, BACK_MAX, BACK_PICK),
}


def exclude_set(lo, hi, excluded):
    """All numbers in [lo, hi] not in `excluded`, ascending"""
    excluded = set(excluded)
    return [n for n in range(lo, hi + 1) if n not in excluded]


def shuffled(items, rng):
    items = list(items)
    rng.shuffle(items)
    return items


def sample_exactly(pool, n, lo, hi, rng):
    """
    Shuffle the pool and take `n`. A short pool is padded by scanning
    lo..hi in order for numbers not yet chosen. Result sorted.
    """
    chosen = shuffled(dict.fromkeys(pool), rng)[:n]
    if len(chosen) < n:
        taken = set(chosen)
        for candidate in range(lo, hi + 1):
            if len(chosen) >= n:
                break
            if candidate not in taken:
                chosen.append(candidate)
                taken.add(candidate)
    return sorted(chosen)


def uniform_pick(lo, hi, n, rng):
    """Pure random group: n distinct numbers from [lo, hi]"""
    return sorted(rng.sample(range(lo, hi + 1), n))


def fill_uniform(chosen, target, lo, hi, rng, avoid=()):
    """
    Append uniformly chosen numbers until `target` is reached.
    Numbers in `avoid` are used only once everything else is taken.
    """
    chosen = list(chosen)
    avoid = set(avoid)
    while len(chosen) < target:
        remaining = [n for n in range(lo, hi + 1) if n not in chosen and n not in avoid]
        if not remaining:
            remaining = [n for n in range(lo, hi + 1) if n not in chosen]
        if not remaining:
            break
        chosen.append(rng.choice(remaining))
    return chosen


def select_by_extreme_count(table, n, most, lo, hi, rng, only_seen=False):
    """
    Numbers tied at the highest (most=True) or lowest count, ties shuffled.
    If fewer than `n` tie, the rest of the domain fills in by count order
    (descending for most, ascending for least). Result sorted.

    With only_seen=True numbers that never appeared are not candidates.
    """
    candidates = [
        num for num in range(lo, hi + 1)
        if not only_seen or table.count(num) > 0
    ]
    if not candidates:
        return []

    counts = [table.count(num) for num in candidates]
    target = max(counts) if most else min(counts)

    tied = shuffled([num for num in candidates if table.count(num) == target], rng)
    result = tied[:n]

    if len(result) < n:
        taken = set(result)
        rest = [num for num in candidates if num not in taken]
        rest.sort(key=lambda num: -table.count(num) if most else table.count(num))
        for num in rest:
            if len(result) >= n:
                break
            result.append(num)

    return sorted(result)


def pad_from_least_seen(chosen, table, target, rng):
    """
    Top up `chosen` from the numbers seen in the window, lowest count first.
    Each count tier is shuffled and consumed before moving to the next one.
    """
    chosen = list(chosen)
    pool = {n for n in table.seen if n not in chosen}
    while len(chosen) < target and pool:
        min_count = min(table.count(n) for n in pool)
        tier = shuffled(sorted(n for n in pool if table.count(n) == min_count), rng)
        for num in tier:
            if len(chosen) >= target:
                break
            chosen.append(num)
        pool -= set(tier)
    return chosen


def pick_by_count_tiers(table, n, rng):
    """
    Least used numbers first among those with count > 0; ties are shuffled
    and the next tier fills whatever is still missing.
    """
    result = []
    pool = set(table.seen)
    while len(result) < n and pool:
        min_count = min(table.count(num) for num in pool)
        tier = shuffled(sorted(num for num in pool if table.count(num) == min_count), rng)
        result.extend(tier[:n - len(result)])
        pool -= set(tier)
    return result


def draw_weighted_counts(weights, n, rng):
    """
    Draw n distinct numbers without replacement from integer weights.

    Each draw sums the weight of the numbers not yet chosen, takes a
    uniform integer in [0, total) and walks the numbers in ascending
    order until the running sum passes it.
    """
    chosen = []
    numbers = sorted(weights)
    while len(chosen) < n:
        total = sum(weights[num] for num in numbers if num not in chosen)
        if total <= 0:
            raise ValueError(f"No positive weight left after {len(chosen)} picks")
        r = rng.randrange(total)
        acc = 0
        for num in numbers:
            if num in chosen:
                continue
            acc += weights[num]
            if r < acc:
                chosen.append(num)
                break
    return sorted(chosen)


def draw_weighted_scores(weights, n, rng, floor=0.0):
    """
    Draw n distinct numbers without replacement from real-valued weights.
    Weights below `floor` are raised to it.
    """
    chosen = []
    numbers = sorted(weights)
    while len(chosen) < n:
        remaining = [num for num in numbers if num not in chosen]
        if not remaining:
            raise ValueError(f"Ran out of numbers after {len(chosen)} picks")
        total = sum(max(floor, weights[num]) for num in remaining)
        if not total > 0:
            raise ValueError(f"No positive weight left after {len(chosen)} picks")
        r = rng.random() * total
        acc = 0.0
        picked = None
        for num in remaining:
            acc += max(floor, weights[num])
            if r <= acc:
                picked = num
                break
        # Float rounding can leave r just above the final running sum
        chosen.append(picked if picked is not None else remaining[-1])
    return sorted(chosen)
