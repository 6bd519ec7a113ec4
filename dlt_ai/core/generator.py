"""
Multi-strategy generation engine.

Runs the thirteen group policies in index order over the unblocked
history and returns the display text with the structured groups.
"""
import random

from dlt_ai.config import TOTAL_GROUPS, logger
from dlt_ai.core.formatter import render_generation
from dlt_ai.core.records import GroupResult, GenerationResult
from dlt_ai.core.sampling import ZONES
from dlt_ai.core.stats import filter_history, WindowStats
from dlt_ai.models.bayes_model import bayes_group
from dlt_ai.models.consecutive_model import consecutive_group
from dlt_ai.models.frequency_model import (
    exclusion_group, hot_group, cold_group, hybrid_group,
    union_exclusion_group, consensus_group, least_generated_group
)
from dlt_ai.models.markov_model import markov_group
from dlt_ai.models.neural_model import neural_group
from dlt_ai.models.random_model import random_group
from dlt_ai.models.time_series_model import time_series_group

NO_DATA_MESSAGE = "Please save at least one unblocked draw first!"

GROUP_NAMES = {
    1: "exclusion",
    2: "hot",
    3: "cold",
    4: "hybrid",
    5: "union exclusion",
    6: "consensus",
    7: "markov",
    8: "bayes",
    9: "neural",
    10: "time series",
    11: "random",
    12: "consecutive",
    13: "least generated",
}

GROUP_RULES = {
    1: "Numbers absent from the last 10 draws; short pools are topped up "
       "with the least frequent numbers.",
    2: "Most frequent numbers of the last 10 draws.",
    3: "Least frequent numbers that did appear in the last 10 draws.",
    4: "Two hottest front numbers (one back) plus numbers absent from the "
       "last 10 draws.",
    5: "Numbers not used by groups 1-4.",
    6: "Numbers repeated most often across groups 1-4.",
    7: "Markov chain: what followed the latest draw's numbers in the past.",
    8: "Positional Bayes: per-slot frequency of every number over all draws.",
    9: "Randomly initialised neural network fed the last 10 draws.",
    10: "Time series: cyclic gap, recent frequency and coldness of each number.",
    11: "Completely random.",
    12: "Consecutive check: reacts to adjacent numbers in the latest draw.",
    13: "Least used numbers among those generated by groups 1-12.",
}


def _policy_table(history, stats):
    last = history[-1]
    return {
        1: lambda prior, rng: exclusion_group(stats, rng),
        2: lambda prior, rng: hot_group(stats, rng),
        3: lambda prior, rng: cold_group(stats, rng),
        4: lambda prior, rng: hybrid_group(stats, rng),
        5: lambda prior, rng: union_exclusion_group(prior, rng),
        6: lambda prior, rng: consensus_group(prior, rng),
        7: lambda prior, rng: markov_group(history, rng),
        8: lambda prior, rng: bayes_group(history, rng),
        9: lambda prior, rng: neural_group(history, rng),
        10: lambda prior, rng: time_series_group(history, rng),
        11: lambda prior, rng: random_group(rng),
        12: lambda prior, rng: consecutive_group(stats, last, rng),
        13: lambda prior, rng: least_generated_group(prior, rng),
    }


def check_numbers(numbers, zone):
    """Raise ValueError unless numbers are a sorted, distinct, full-size pick"""
    lo, hi, n = ZONES[zone]
    if len(numbers) != n or len(set(numbers)) != n:
        raise ValueError(f"{zone} has wrong size or duplicates: {numbers}")
    if any(num < lo or num > hi for num in numbers):
        raise ValueError(f"{zone} out of range: {numbers}")
    if list(numbers) != sorted(numbers):
        raise ValueError(f"{zone} not sorted: {numbers}")


def run_group(index, policy, prior, rng):
    """Run one policy, degrading to random numbers on any failure"""
    try:
        front, back = policy(prior, rng)
        check_numbers(front, "front")
        check_numbers(back, "back")
    except Exception as e:
        logger.warning(f"Group {index} ({GROUP_NAMES[index]}) failed, using random: {e}")
        front, back = random_group(rng)

    logger.debug(f"Group {index} ({GROUP_NAMES[index]}): {front} + {back}")
    return GroupResult(index, front, back)


def generate_all_numbers(records, blocked_groups=(), rng=None):
    """
    Generate all groups from draw history.

    Args:
        records: DrawRecords, oldest first. Blocked draws are ignored.
        blocked_groups: group indices (1-13) to leave empty
        rng: random.Random used for every random choice

    Returns:
        GenerationResult; with no usable draws its groups are empty and
        insufficient_data is set.
    """
    rng = rng or random.Random()
    blocked = set(blocked_groups or ())

    history = filter_history(records)
    if not history:
        logger.warning("No unblocked draws, nothing to generate")
        return GenerationResult(NO_DATA_MESSAGE, [], insufficient_data=True)

    logger.info(f"Generating {TOTAL_GROUPS} groups from {len(history)} draws "
                f"(blocked groups: {sorted(blocked) or 'none'})")

    policies = _policy_table(history, WindowStats(history))
    groups = []
    for index in range(1, TOTAL_GROUPS + 1):
        if index in blocked:
            groups.append(GroupResult.blocked_group(index))
            continue
        groups.append(run_group(index, policies[index], list(groups), rng))

    return GenerationResult(render_generation(groups), groups)
