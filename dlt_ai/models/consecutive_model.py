"""
Consecutive-number heuristic (group 12).

Front: if the latest draw contained two adjacent numbers, take 1-3 numbers
absent from the window and top up with the least frequent ones. Otherwise
take one absent number, two least frequent ones and an adjacent pair from
the second-least-frequent tier.

Back: one absent and one least frequent number, never repeating the
latest draw's back numbers.
"""
from dlt_ai.config import FRONT_MIN, FRONT_MAX, FRONT_PICK, BACK_MIN, BACK_MAX, BACK_PICK
from dlt_ai.core.sampling import exclude_set, shuffled, fill_uniform
from dlt_ai.core.stats import has_consecutive_numbers


def count_tier(table, rank):
    """Seen numbers at the rank-th smallest distinct count (0 = least)"""
    counts = sorted({table.count(n) for n in table.seen})
    if rank >= len(counts):
        return []
    return sorted(n for n in table.seen if table.count(n) == counts[rank])


def adjacent_pair(candidates, excluded, rng):
    """
    A random pair of adjacent integers from candidates minus excluded.
    Without any adjacent pair, up to two arbitrary candidates.
    """
    available = sorted(n for n in candidates if n not in excluded)
    pairs = [
        [a, b] for a, b in zip(available, available[1:]) if b - a == 1
    ]
    if pairs:
        return rng.choice(pairs)
    return shuffled(available, rng)[:2]


def consecutive_front(table, last_front, rng):
    never = exclude_set(FRONT_MIN, FRONT_MAX, table.seen)
    least = count_tier(table, 0)
    second_least = count_tier(table, 1)
    chosen = []

    if has_consecutive_numbers(last_front):
        take = min(3, max(1, len(never)))
        if rng.random() < 0.5 and take > 1:
            take = rng.randint(1, take)
        chosen.extend(shuffled(never, rng)[:take])

        for num in shuffled(least, rng):
            if len(chosen) >= FRONT_PICK:
                break
            if num not in chosen:
                chosen.append(num)
    else:
        if never:
            chosen.append(rng.choice(never))

        added = 0
        for num in shuffled(least, rng):
            if added >= 2:
                break
            if num not in chosen:
                chosen.append(num)
                added += 1

        chosen.extend(adjacent_pair(second_least, chosen, rng))

    return sorted(fill_uniform(chosen[:FRONT_PICK], FRONT_PICK, FRONT_MIN, FRONT_MAX, rng))


def consecutive_back(table, last_back, rng):
    last_back = set(last_back)
    never = [n for n in exclude_set(BACK_MIN, BACK_MAX, table.seen) if n not in last_back]
    least = [n for n in count_tier(table, 0) if n not in last_back]
    chosen = []

    if never:
        chosen.append(rng.choice(never))
    for num in shuffled(least, rng):
        if num not in chosen:
            chosen.append(num)
            break

    while len(chosen) < BACK_PICK:
        remaining = [n for n in range(BACK_MIN, BACK_MAX + 1)
                     if n not in chosen and n not in last_back]
        if remaining:
            chosen.append(rng.choice(remaining))
        else:
            chosen.append(next(n for n in range(BACK_MIN, BACK_MAX + 1) if n not in chosen))

    return sorted(chosen)


def consecutive_group(stats, last_record, rng):
    return (consecutive_front(stats.front, last_record.front, rng),
            consecutive_back(stats.back, last_record.back, rng))
