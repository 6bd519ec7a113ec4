"""
Tests for the 13-group generation engine
Run directly (python test_engine.py) or through pytest
"""
import sys
import random
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from dlt_ai.core.records import DrawRecord, GroupResult
from dlt_ai.core.stats import WindowStats, FrequencyTable, filter_history
from dlt_ai.core.sampling import (
    sample_exactly, select_by_extreme_count, draw_weighted_counts,
    draw_weighted_scores, uniform_pick, exclude_set
)
from dlt_ai.core.generator import generate_all_numbers, run_group, NO_DATA_MESSAGE
from dlt_ai.models.frequency_model import (
    exclusion_numbers, hybrid_numbers, hybrid_group, union_exclusion_numbers,
    least_generated_numbers
)
from dlt_ai.models.markov_model import next_draw_weights, markov_numbers
from dlt_ai.models.bayes_model import position_counts, bayes_numbers
from dlt_ai.models.neural_model import presence_matrix, neural_numbers
from dlt_ai.models.time_series_model import modal_gap, number_score, time_series_numbers
from dlt_ai.models.consecutive_model import consecutive_front, consecutive_back


def draw(front, back, issue="", blocked=False):
    return DrawRecord(issue, "", front, back, blocked=blocked)


def sample_history(n, seed=7):
    rng = random.Random(seed)
    return [
        draw(rng.sample(range(1, 36), 5), rng.sample(range(1, 13), 2), issue=f"26{i + 1:03d}")
        for i in range(n)
    ]


def assert_valid_group(group):
    assert len(group.front) == 5, f"Group {group.index} front size: {group.front}"
    assert len(set(group.front)) == 5, f"Group {group.index} front duplicates: {group.front}"
    assert all(1 <= n <= 35 for n in group.front), f"Group {group.index} front range: {group.front}"
    assert group.front == sorted(group.front)
    assert len(group.back) == 2, f"Group {group.index} back size: {group.back}"
    assert len(set(group.back)) == 2, f"Group {group.index} back duplicates: {group.back}"
    assert all(1 <= n <= 12 for n in group.back), f"Group {group.index} back range: {group.back}"
    assert group.back == sorted(group.back)


def test_every_group_valid():
    print("=" * 60)
    print("TEST 1: Every group has valid shape")
    print("=" * 60)
    for n_draws in (1, 2, 5, 10, 30):
        for seed in range(5):
            result = generate_all_numbers(sample_history(n_draws, seed), rng=random.Random(seed))
            assert not result.insufficient_data
            assert len(result.groups) == 13
            assert [g.index for g in result.groups] == list(range(1, 14))
            for group in result.groups:
                assert_valid_group(group)
    print("  PASSED")


def test_blocked_groups():
    print("\n" + "=" * 60)
    print("TEST 2: Blocked groups stay empty")
    print("=" * 60)
    blocked = {2, 5, 9, 13}
    result = generate_all_numbers(sample_history(12), blocked, rng=random.Random(3))
    lines = result.display_text.splitlines()
    assert len(lines) == 13
    for group in result.groups:
        if group.index in blocked:
            assert group.front == [] and group.back == []
            assert group.blocked
            assert lines[group.index - 1] == f"Group {group.index}: [blocked] no numbers generated"
        else:
            assert_valid_group(group)
    print("  PASSED")


def test_blocked_draws_ignored():
    print("\n" + "=" * 60)
    print("TEST 3: Blocked draws are ignored")
    print("=" * 60)
    history = sample_history(5)
    history.append(draw([1, 2, 3, 4, 5], [1, 2], blocked=True))
    assert len(filter_history(history)) == 5

    with_blocked = generate_all_numbers(history, rng=random.Random(11))
    without = generate_all_numbers(history[:-1], rng=random.Random(11))
    assert with_blocked.display_text == without.display_text
    print("  PASSED")


def test_empty_history():
    print("\n" + "=" * 60)
    print("TEST 4: Empty history returns the no-data result")
    print("=" * 60)
    for history in ([], [draw([1, 2, 3, 4, 5], [1, 2], blocked=True)]):
        result = generate_all_numbers(history, rng=random.Random(1))
        assert result.insufficient_data
        assert result.display_text == NO_DATA_MESSAGE
        assert result.groups == []
        assert result.front_numbers == [] and result.back_numbers == []
    print("  PASSED")


def test_seeded_runs_repeat():
    print("\n" + "=" * 60)
    print("TEST 5: Same seed, same numbers")
    print("=" * 60)
    history = sample_history(15)
    first = generate_all_numbers(history, {4}, rng=random.Random(99))
    second = generate_all_numbers(history, {4}, rng=random.Random(99))
    assert first.display_text == second.display_text
    print("  PASSED")


def test_exclusion_pad():
    print("\n" + "=" * 60)
    print("TEST 6: Exclusion pads from least frequent")
    print("=" * 60)
    # Window covers 1-32, leaving 33, 34, 35 unseen; 16-32 are seen once
    fronts = [list(range(s, s + 5)) for s in range(1, 31, 5)]
    fronts += [[31, 32, 1, 2, 3], [1, 2, 3, 4, 5], [6, 7, 8, 9, 10], [11, 12, 13, 14, 15]]
    history = [draw(f, [1, 2]) for f in fronts]
    stats = WindowStats(history)
    assert exclude_set(1, 35, stats.front.seen) == [33, 34, 35]

    for seed in range(20):
        front = exclusion_numbers(stats.front, "front", random.Random(seed))
        assert len(front) == 5 and len(set(front)) == 5
        assert {33, 34, 35} <= set(front)
        extra = set(front) - {33, 34, 35}
        assert all(stats.front.count(n) == 1 for n in extra), front
    print("  PASSED")


def test_identical_draws():
    print("\n" + "=" * 60)
    print("TEST 7: Ten identical draws")
    print("=" * 60)
    history = [draw([1, 2, 3, 4, 5], [1, 2]) for _ in range(10)]
    stats = WindowStats(history)
    assert stats.front.as_dict() == {1: 10, 2: 10, 3: 10, 4: 10, 5: 10}
    assert stats.back.as_dict() == {1: 10, 2: 10}

    result = generate_all_numbers(history, rng=random.Random(5))
    for index in (2, 3):
        group = result.group(index)
        assert group.front == [1, 2, 3, 4, 5], group
        assert group.back == [1, 2], group
    assert not set(result.group(1).front) & {1, 2, 3, 4, 5}
    print("  PASSED")


def test_single_draw():
    print("\n" + "=" * 60)
    print("TEST 8: One draw - thresholds fall back to random")
    print("=" * 60)
    history = [draw([1, 2, 3, 4, 5], [1, 2])]
    result = generate_all_numbers(history, rng=random.Random(2))
    for group in result.groups:
        assert_valid_group(group)

    # Below threshold the policy output is the plain random pick
    assert markov_numbers(history, "front", random.Random(4)) == uniform_pick(1, 35, 5, random.Random(4))
    nine = sample_history(9)
    assert neural_numbers(nine, "front", random.Random(4)) == uniform_pick(1, 35, 5, random.Random(4))
    assert time_series_numbers(nine, "back", random.Random(4)) == uniform_pick(1, 12, 2, random.Random(4))
    print("  PASSED")


def test_consecutive_branch():
    print("\n" + "=" * 60)
    print("TEST 9: Consecutive heuristic")
    print("=" * 60)
    # Latest draw has 7, 8: numbers come only from unseen and least frequent
    last = draw([7, 8, 14, 20, 30], [3, 4])
    history = [draw([1, 2, 3, 4, 5], [1, 2]), draw([1, 2, 3, 4, 5], [1, 2]), last]
    stats = WindowStats(history)
    for seed in range(30):
        front = consecutive_front(stats.front, last.front, random.Random(seed))
        assert len(set(front)) == 5
        assert not set(front) & {1, 2, 3, 4, 5}, front
        assert 2 <= len(set(front) & {7, 8, 14, 20, 30}) <= 4, front
        back = consecutive_back(stats.back, last.back, random.Random(seed))
        assert len(set(back)) == 2 and not set(back) & {3, 4}, back

    # No adjacent numbers: 1 unseen, 2 least frequent, adjacent pair from second tier
    last = draw([3, 9, 14, 20, 30], [5, 6])
    history = [draw([1, 2, 4, 5, 11], [1, 2]), draw([1, 2, 4, 5, 11], [1, 2]), last]
    stats = WindowStats(history)
    for seed in range(30):
        front = set(consecutive_front(stats.front, last.front, random.Random(seed)))
        assert len(front) == 5
        assert len(front & {3, 9, 14, 20, 30}) == 2, front
        assert front & {1, 2, 4, 5, 11} in ({1, 2}, {4, 5}), front
        assert len(front - {1, 2, 3, 4, 5, 9, 11, 14, 20, 30}) == 1, front
    print("  PASSED")


def test_prior_group_policies():
    print("\n" + "=" * 60)
    print("TEST 10: Groups built from earlier groups")
    print("=" * 60)
    for seed in range(10):
        result = generate_all_numbers(sample_history(20, seed), rng=random.Random(seed))
        used_front = set().union(*(result.group(i).front for i in range(1, 5)))
        used_back = set().union(*(result.group(i).back for i in range(1, 5)))
        assert not set(result.group(5).front) & used_front
        assert not set(result.group(5).back) & used_back
        assert set(result.group(6).front) <= used_front
        assert set(result.group(6).back) <= used_back
        used_12 = set().union(*(result.group(i).front for i in range(1, 13)))
        assert set(result.group(13).front) <= used_12

    # Least used among generated numbers, next tier when short
    prior = [
        GroupResult(1, [1, 2, 3, 4, 5], [1, 2]),
        GroupResult(2, [1, 2, 3, 4, 6], [1, 3]),
        GroupResult(3, [1, 2, 3, 7, 8], [1, 3]),
        GroupResult.blocked_group(4),
    ]
    front = least_generated_numbers(prior, "front", random.Random(1))
    assert set(front) == {4, 5, 6, 7, 8}
    back = least_generated_numbers(prior, "back", random.Random(1))
    assert back == [2, 3]

    # Blocked groups do not count as used
    assert union_exclusion_numbers([GroupResult.blocked_group(1)], "back", random.Random(1)) != []
    print("  PASSED")


def test_group_guard():
    print("\n" + "=" * 60)
    print("TEST 11: Failing policy falls back to random")
    print("=" * 60)

    def broken(prior, rng):
        raise ValueError("no weight left")

    def wrong_size(prior, rng):
        return [1, 2, 3], [1, 2]

    for policy in (broken, wrong_size):
        group = run_group(7, policy, [], random.Random(8))
        assert_valid_group(group)
    print("  PASSED")


def test_samplers():
    print("\n" + "=" * 60)
    print("TEST 12: Pool and sampler helpers")
    print("=" * 60)
    rng = random.Random(1)
    assert exclude_set(1, 12, {2, 3, 12}) == [1, 4, 5, 6, 7, 8, 9, 10, 11]
    assert sample_exactly([], 5, 1, 35, rng) == [1, 2, 3, 4, 5]
    assert sample_exactly([9], 2, 1, 12, rng) == [1, 9]

    table = FrequencyTable({3: 4, 7: 4, 9: 1})
    assert select_by_extreme_count(table, 2, True, 1, 12, rng) == [3, 7]
    assert select_by_extreme_count(table, 3, True, 1, 12, rng) == [3, 7, 9]
    assert select_by_extreme_count(table, 1, False, 1, 12, rng, only_seen=True) == [9]
    assert len(select_by_extreme_count(table, 2, False, 1, 12, rng)) == 2

    picks = draw_weighted_counts({1: 0, 2: 5, 3: 5}, 2, rng)
    assert picks == [2, 3]
    picks = draw_weighted_scores({1: 0.0, 2: 0.0, 3: 0.0}, 2, rng, floor=0.1)
    assert len(set(picks)) == 2
    try:
        draw_weighted_counts({1: 0, 2: 0}, 1, rng)
        assert False, "zero total weight must raise"
    except ValueError:
        pass
    print("  PASSED")


def test_model_internals():
    print("\n" + "=" * 60)
    print("TEST 13: Markov, Bayes, neural and time series internals")
    print("=" * 60)
    a = draw([1, 2, 3, 4, 5], [1, 2])
    b = draw([10, 11, 12, 13, 14], [5, 6])
    weights = next_draw_weights([a, b, a], "front")
    assert all(weights[n] == 2 for n in (10, 11, 12, 13, 14))
    assert weights[1] == 1 and weights[35] == 1 and len(weights) == 35

    counts = position_counts([draw([5, 4, 3, 2, 1], [12, 1])], "front")
    assert counts[0][5] == 1 and counts[4][1] == 1 and counts[0][1] == 0

    matrix = presence_matrix(sample_history(12), "back")
    assert matrix.shape == (10, 12)
    assert matrix.sum() == 20

    assert modal_gap([0, 2, 4, 7, 10]) == (2, 2)
    assert number_score([5], 12) == 1.0
    assert abs(number_score([0, 3, 6, 9], 10) - 4.6) < 1e-9
    print("  PASSED")


def test_hybrid_policy():
    print("\n" + "=" * 60)
    print("TEST 14: Hybrid hot plus absent numbers")
    print("=" * 60)
    # front: 7 hottest, 9 next, 31-35 absent
    front_counts = {n: 1 for n in range(1, 31)}
    front_counts.update({7: 5, 9: 4})
    front_table = FrequencyTable(front_counts)
    for seed in range(30):
        front = hybrid_numbers(front_table, "front", random.Random(seed))
        assert len(front) == 5 and front == sorted(front)
        assert {7, 9} <= set(front), front
        assert set(front) - {7, 9} <= {31, 32, 33, 34, 35}, front

    # front: absent pool too small, the rest comes from the lowest count tier
    short_counts = {n: 1 for n in range(10, 34)}
    short_counts.update({n: 2 for n in range(1, 10)})
    short_counts[7] = 5
    short_table = FrequencyTable(short_counts)
    for seed in range(30):
        front = hybrid_numbers(short_table, "front", random.Random(seed))
        assert {1, 7, 34, 35} <= set(front), front
        extra = set(front) - {1, 7, 34, 35}
        assert len(extra) == 1 and short_table.count(extra.pop()) == 1, front

    # back: 4 hottest, 9-12 absent
    back_counts = {n: 1 for n in range(1, 9)}
    back_counts[4] = 3
    back_table = FrequencyTable(back_counts)
    for seed in range(30):
        back = hybrid_numbers(back_table, "back", random.Random(seed))
        assert 4 in back and (set(back) - {4}) <= {9, 10, 11, 12}, back

    # back: every number seen, so the second one is from the least seen tier
    all_seen = {n: 2 for n in range(1, 13)}
    all_seen.update({1: 4, 3: 1, 6: 1, 11: 1})
    all_table = FrequencyTable(all_seen)
    picked = set()
    for seed in range(50):
        back = hybrid_numbers(all_table, "back", random.Random(seed))
        assert back[0] == 1 and all_table.count(back[1]) == 1, back
        picked.add(back[1])
    assert picked == {3, 6, 11}

    stats = WindowStats([draw([1, 2, 3, 4, 5], [1, 2])])
    group = GroupResult(4, *hybrid_group(stats, random.Random(1)))
    assert_valid_group(group)
    print("  PASSED")


def test_bayes_slot_preference():
    print("\n" + "=" * 60)
    print("TEST 15: Bayes favours each slot's observed numbers")
    print("=" * 60)
    observed_front = [3, 17, 8, 25, 30]
    observed_back = [4, 9]

    # one record: smoothed weight 2 against 1 for every other number
    single = [draw(observed_front, observed_back)]
    hits = Counter()
    runs = 4000
    for seed in range(runs):
        hits.update(bayes_numbers(single, "front", random.Random(seed)))
    observed_mean = sum(hits[n] for n in observed_front) / 5
    others = [n for n in range(1, 36) if n not in observed_front]
    other_mean = sum(hits[n] for n in others) / len(others)
    assert observed_mean > 1.08 * other_mean, (observed_mean, other_mean)

    # many identical records: the observed numbers dominate
    repeated = [draw(observed_front, observed_back) for _ in range(100)]
    front_hits, back_hits = Counter(), Counter()
    for seed in range(400):
        rng = random.Random(seed)
        front = bayes_numbers(repeated, "front", rng)
        back = bayes_numbers(repeated, "back", rng)
        assert len(set(front)) == 5 and len(set(back)) == 2
        front_hits.update(front)
        back_hits.update(back)
    top_other = max(front_hits[n] for n in others)
    assert min(front_hits[n] for n in observed_front) > 3 * top_other, front_hits
    top_other_back = max(back_hits[n] for n in range(1, 13) if n not in observed_back)
    assert min(back_hits[n] for n in observed_back) > 3 * top_other_back, back_hits
    print("  PASSED")


def main():
    tests = [
        test_every_group_valid,
        test_blocked_groups,
        test_blocked_draws_ignored,
        test_empty_history,
        test_seeded_runs_repeat,
        test_exclusion_pad,
        test_identical_draws,
        test_single_draw,
        test_consecutive_branch,
        test_prior_group_policies,
        test_group_guard,
        test_samplers,
        test_model_internals,
        test_hybrid_policy,
        test_bayes_slot_preference,
    ]
    results = []
    for test in tests:
        try:
            test()
            results.append(True)
        except Exception as e:
            print(f"  FAILED: {e}")
            import traceback
            traceback.print_exc()
            results.append(False)

    print("\n" + "=" * 60)
    print(f"RESULTS: {sum(results)}/{len(results)} passed")
    print("=" * 60)
    return all(results)


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
