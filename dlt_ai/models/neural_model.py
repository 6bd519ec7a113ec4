"""
Untrained feed-forward scorer.

Input is a presence matrix of the last draws; weights are drawn fresh from
a Gaussian on every call, so nothing is learned or persisted. The output
activations are used as sampling weights.
"""
import numpy as np
from scipy.special import expit

from dlt_ai.config import (
    NEURAL_MIN_HISTORY, NEURAL_INPUT_DRAWS, NEURAL_HIDDEN_FRONT,
    NEURAL_HIDDEN_BACK, NEURAL_WEIGHT_MEAN, NEURAL_WEIGHT_STD, logger
)
from dlt_ai.core.sampling import ZONES, uniform_pick, draw_weighted_scores
from dlt_ai.core.stats import window_slice, zone_numbers


def presence_matrix(records, zone, n_draws=NEURAL_INPUT_DRAWS):
    """
    (n_draws, domain) matrix with 1.0 where a number appeared.
    Rows are the most recent draws, oldest first; missing rows stay zero.
    """
    lo, hi, _ = ZONES[zone]
    inputs = np.zeros((n_draws, hi - lo + 1))
    for row, record in enumerate(window_slice(records, n_draws)):
        for num in zone_numbers(record, zone):
            inputs[row, num - lo] = 1.0
    return inputs


def forward(inputs, n_hidden, np_rng):
    """
    Two sigmoid layers with N(mean, std) weights.
    Every hidden unit has its own weight per input cell.
    """
    domain = inputs.shape[1]
    w_hidden = np_rng.normal(NEURAL_WEIGHT_MEAN, NEURAL_WEIGHT_STD,
                             size=(n_hidden,) + inputs.shape)
    hidden = expit((w_hidden * inputs).sum(axis=(1, 2)))

    w_out = np_rng.normal(NEURAL_WEIGHT_MEAN, NEURAL_WEIGHT_STD, size=(domain, n_hidden))
    return expit(w_out @ hidden)


def neural_numbers(records, zone, rng):
    lo, hi, n = ZONES[zone]
    if len(records) < NEURAL_MIN_HISTORY:
        logger.warning(f"Neural {zone}: {len(records)} draws < {NEURAL_MIN_HISTORY}, using random")
        return uniform_pick(lo, hi, n, rng)

    n_hidden = NEURAL_HIDDEN_FRONT if zone == "front" else NEURAL_HIDDEN_BACK
    np_rng = np.random.default_rng(rng.randrange(2 ** 32))

    output = forward(presence_matrix(records, zone), n_hidden, np_rng)
    weights = {lo + i: float(act) for i, act in enumerate(output)}
    return draw_weighted_scores(weights, n, rng)


def neural_group(records, rng):
    return neural_numbers(records, "front", rng), neural_numbers(records, "back", rng)
