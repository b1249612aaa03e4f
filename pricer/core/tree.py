"""Cox-Ross-Rubinstein binomial tree for European options."""

import numpy as np

from .bsm import expiry_result, invalid_inputs
from .types import OptionKind, PricingResult, ZERO_RESULT

VEGA_BUMP = 1e-4
VEGA_SCALE = 0.01  # report vega per one vol point


def _payoff(spots: np.ndarray, K: float, kind: OptionKind) -> np.ndarray:
    if kind == OptionKind.CALL:
        return np.maximum(spots - K, 0.0)
    return np.maximum(K - spots, 0.0)


def _induct(S, K, r, sigma, T, steps, kind):
    """Run the lattice back to the root.

    Returns (root, level_one, spread) where level_one holds the two node
    values one step after the root, up node first, and spread is S * (u - d).
    """
    dt = T / steps
    u = np.exp(sigma * np.sqrt(dt))
    d = 1.0 / u
    disc = np.exp(-r * dt)
    q = (np.exp(r * dt) - d) / (u - d)

    i = np.arange(steps + 1)
    spots = S * u ** (steps - i) * d**i
    values = _payoff(spots, K, kind)

    for _ in range(steps - 1, 0, -1):
        values = disc * (q * values[:-1] + (1.0 - q) * values[1:])

    root = disc * (q * values[0] + (1.0 - q) * values[1])
    return float(root), values, S * (u - d)


def _tree_price(S, K, r, sigma, T, steps, kind) -> float:
    root, _, _ = _induct(S, K, r, sigma, T, steps, kind)
    return root


def binomial_tree(S, K, r, sigma, T, steps, kind=OptionKind.CALL) -> PricingResult:
    """Price, delta and vega from a CRR lattice with `steps` time steps.

    Delta is the one-step difference (value[1] - value[0]) / (S * (u - d)),
    value[0] being the root and value[1] the lower node of the first level,
    i.e. the array an in-place backward induction leaves behind. Deployed
    clients depend on this value. Vega bumps sigma by 1e-4, reprices the
    whole tree and scales the difference to a one vol point move.

    With T == 0 or sigma == 0 the lattice has no spread and the result is the
    deterministic one shared with the closed form.
    """
    if steps < 1:
        raise ValueError("steps must be >= 1")
    if invalid_inputs(S, K, T, sigma):
        return ZERO_RESULT

    if T == 0.0:
        return expiry_result(S, K, kind)
    if sigma == 0.0:
        # spot grows at r with certainty: compare it to the discounted strike
        return expiry_result(S, K * np.exp(-r * T), kind)

    price, level_one, spread = _induct(S, K, r, sigma, T, steps, kind)
    delta = float((level_one[1] - price) / spread)

    bumped = _tree_price(S, K, r, sigma + VEGA_BUMP, T, steps, kind)
    vega = (bumped - price) / VEGA_BUMP * VEGA_SCALE

    return PricingResult(price=float(price), delta=delta, vega=float(vega))
