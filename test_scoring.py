"""
Tests for display text parsing, prize tiers and group scores
Run directly (python test_scoring.py) or through pytest
"""
import sys
import random
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from dlt_ai.core.db import configure_database
from dlt_ai.core.records import DrawRecord, GroupResult
from dlt_ai.core.formatter import render_generation, parse_generation, FORMAT_VERSION
from dlt_ai.core.generator import generate_all_numbers
from dlt_ai.core.math_engine import (
    count_matches, determine_prize_level, score_change, prize_text,
    tier_probability, expected_score_per_ticket
)
from dlt_ai.core.scoring import ScoreManager

MISS = GroupResult(0, [31, 32, 33, 34, 35], [11, 12])


def confirmed_text(special=None, blocked=()):
    """13 groups, all missing [1..5]+[1, 2] unless given in `special`"""
    special = special or {}
    groups = []
    for i in range(1, 14):
        if i in blocked:
            groups.append(GroupResult.blocked_group(i))
        elif i in special:
            front, back = special[i]
            groups.append(GroupResult(i, front, back))
        else:
            groups.append(GroupResult(i, MISS.front, MISS.back))
    return render_generation(groups)


def winning(front=(1, 2, 3, 4, 5), back=(1, 2), issue="26100"):
    return DrawRecord(issue, "2026-08-29", front, back)


def test_render_and_parse():
    print("=" * 60)
    print("TEST 1: Display text round trip")
    print("=" * 60)
    history = [DrawRecord("", "", random.Random(i).sample(range(1, 36), 5),
                          random.Random(i).sample(range(1, 13), 2)) for i in range(12)]
    result = generate_all_numbers(history, {3, 11}, rng=random.Random(6))
    parsed = parse_generation(result.display_text)
    assert len(parsed) == 13
    for original, recovered in zip(result.groups, parsed):
        assert original == recovered, (original, recovered)

    assert FORMAT_VERSION == 1
    line = result.display_text.splitlines()[0]
    assert line.startswith("Group 1: front[") and "] back[" in line
    assert render_generation([GroupResult(2, [5, 1, 3, 2, 4], [9, 8])]) == \
        "Group 2: front[1, 2, 3, 4, 5] back[8, 9]\n"
    print("  PASSED")


def test_parse_skips_garbage():
    print("\n" + "=" * 60)
    print("TEST 2: Unparsable lines are skipped")
    print("=" * 60)
    text = ("Header line\n"
            "Group 1: front[1, 2, 3, 4, 5] back[1, 2]\n"
            "Group 2: front[1, x, 3] back[1, 2]\n"
            "\n"
            "Group 3: [blocked] no numbers generated\n")
    parsed = parse_generation(text)
    assert [g.index for g in parsed] == [1, 3]
    assert parsed[1].blocked and parsed[1].is_empty()
    assert parse_generation("") == []
    assert parse_generation(None) == []
    print("  PASSED")


def test_prize_levels():
    print("\n" + "=" * 60)
    print("TEST 3: Prize tiers and score changes")
    print("=" * 60)
    expected = {
        (5, 2): 1, (5, 1): 2, (5, 0): 3, (4, 2): 4, (4, 1): 5, (3, 2): 6,
        (4, 0): 7, (3, 1): 8, (2, 2): 8, (3, 0): 9, (1, 2): 9, (2, 1): 9,
        (0, 2): 9, (2, 0): 0, (1, 1): 0, (0, 1): 0, (0, 0): 0, (1, 0): 0,
    }
    for (f, b), level in expected.items():
        assert determine_prize_level(f, b) == level, (f, b)

    changes = [9999998, 99998, 9998, 2998, 298, 198, 98, 13, 3]
    for level, change in enumerate(changes, 1):
        assert score_change(level) == change
    assert score_change(0) == -2
    assert prize_text(1) == "1st prize" and prize_text(0) == "no prize"

    assert count_matches([1, 2, 3, 4, 6], [1, 3], [1, 2, 3, 4, 5], [1, 2]) == (4, 1)

    total = sum(tier_probability(level) for level in range(10))
    assert abs(total - 1.0) < 1e-12
    assert abs(tier_probability(1) - 1 / 21425712) < 1e-15
    assert expected_score_per_ticket()['expected_score'] < 0
    print("  PASSED")


def test_winning_scores():
    print("\n" + "=" * 60)
    print("TEST 4: Scoring a confirmed selection")
    print("=" * 60)
    configure_database("sqlite:///:memory:")
    scores = ScoreManager()

    text = confirmed_text({1: ([1, 2, 3, 4, 5], [1, 2]), 2: ([1, 2, 3, 4, 6], [1, 3])},
                          blocked={3})
    result = scores.calculate_winning_scores(text, winning())
    assert result.success, result.message
    # group 1 jackpot, group 2 4+1, group 3 blocked, ten misses
    assert result.total_change == 9999998 + 298 - 20
    assert len(result.outcomes) == 12
    assert "Group 1: 1st prize (+9999998 pts)" in result.message
    assert "Group 4: no prize (-2 pts)" in result.message

    group_scores = scores.get_scores()
    assert group_scores[1] == 9999998 and group_scores[2] == 298
    assert group_scores[3] == 0 and group_scores[4] == -2
    assert scores.get_total_score() == result.total_change
    assert scores.get_best_prize(1) == (1, 1)
    assert scores.get_best_prize(4) == (None, 0)
    assert scores.get_prize_history(2) == [("26100", 5)]
    print("  PASSED")


def test_best_prize_tracking():
    print("\n" + "=" * 60)
    print("TEST 5: Best tier and hit count")
    print("=" * 60)
    configure_database("sqlite:///:memory:")
    scores = ScoreManager()
    text = confirmed_text({2: ([1, 2, 3, 4, 6], [1, 3])})

    scores.calculate_winning_scores(text, winning(issue="26101"))
    scores.calculate_winning_scores(text, winning(issue="26102"))
    assert scores.get_best_prize(2) == (5, 2)

    # 4+2 is a better tier: count restarts
    scores.calculate_winning_scores(text, winning(back=(1, 3), issue="26103"))
    assert scores.get_best_prize(2) == (4, 1)

    # a worse tier leaves the best alone but still goes to history
    scores.calculate_winning_scores(text, winning(front=(1, 2, 3, 20, 21), back=(1, 3), issue="26104"))
    assert scores.get_best_prize(2) == (4, 1)
    assert [level for _, level in scores.get_prize_history(2)] == [5, 5, 4, 6]

    info = scores.get_all_scores_info()
    assert info.startswith(f"Total score: {scores.get_total_score()}")
    assert "Group 2: " in info and "best: 4th prize(1 times)" in info
    assert "Group 5: -8 pts | best: none" in info
    print("  PASSED")


def test_blocked_and_clear():
    print("\n" + "=" * 60)
    print("TEST 6: Blocked groups and clearing scores")
    print("=" * 60)
    configure_database("sqlite:///:memory:")
    scores = ScoreManager()
    scores.block(4)
    scores.block(4)
    assert scores.get_blocked() == {4}
    assert scores.is_blocked(4) and not scores.is_blocked(5)

    result = scores.calculate_winning_scores(confirmed_text(), winning())
    assert len(result.outcomes) == 12
    assert scores.get_score(4) == 0
    assert result.total_change == -24

    assert scores.clear_all_scores()
    assert scores.get_total_score() == 0
    assert scores.get_blocked() == set()
    assert scores.get_prize_history(1) == []

    try:
        scores.block(14)
        assert False, "group 14 must be rejected"
    except ValueError:
        pass
    print("  PASSED")


def test_malformed_confirmation():
    print("\n" + "=" * 60)
    print("TEST 7: Malformed confirmed text")
    print("=" * 60)
    configure_database("sqlite:///:memory:")
    scores = ScoreManager()

    assert scores.calculate_winning_scores("", winning()) is None

    truncated = "\n".join(confirmed_text().splitlines()[:12])
    result = scores.calculate_winning_scores(truncated, winning())
    assert not result.success
    assert result.total_change == 0
    assert "12" in result.message
    assert scores.get_total_score() == 0

    # a group line with the wrong size or range does not count as a group
    lines = confirmed_text().splitlines()
    lines[2] = "Group 3: front[1, 2] back[99]"
    result = scores.calculate_winning_scores("\n".join(lines), winning())
    assert not result.success
    assert result.total_change == 0
    assert scores.get_total_score() == 0

    lines[2] = "Group 3: front[1, 2, 3, 4, 36] back[1, 2]"
    assert len(parse_generation("\n".join(lines))) == 12
    lines[2] = "Group 3: front[1, 1, 3, 4, 5] back[1, 2]"
    assert len(parse_generation("\n".join(lines))) == 12
    lines[2] = "Group 3: front[1, 2, 3, 4, 5] back[1, 2, 3]"
    assert len(parse_generation("\n".join(lines))) == 12
    lines[2] = "Group 3: front[1, 2, 3, 4, 5] back[1, 12]"
    assert len(parse_generation("\n".join(lines))) == 13
    print("  PASSED")


def main():
    tests = [
        test_render_and_parse,
        test_parse_skips_garbage,
        test_prize_levels,
        test_winning_scores,
        test_best_prize_tracking,
        test_blocked_and_clear,
        test_malformed_confirmation,
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
