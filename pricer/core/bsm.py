from numpy import log, sqrt, exp
from scipy.stats import norm

from .types import OptionKind, PricingResult, ZERO_RESULT


def invalid_inputs(S, K, T, sigma):
    """Inputs outside the model's domain; priced as a zero quote."""
    return S <= 0.0 or K <= 0.0 or T < 0.0 or sigma < 0.0


def intrinsic(S, K, kind):
    if kind == OptionKind.CALL:
        return max(S - K, 0.0)
    return max(K - S, 0.0)


def expiry_result(S, K, kind) -> PricingResult:
    """Value at T == 0: intrinsic price, step delta, no vega."""
    if kind == OptionKind.CALL:
        delta = 1.0 if S > K else 0.0
    else:
        delta = -1.0 if S < K else 0.0
    return PricingResult(price=intrinsic(S, K, kind), delta=delta, vega=0.0)


def _d1_d2(S, K, T, r, sigma):
    vol_sqrt_t = sigma * sqrt(T)
    d1 = (log(S / K) + (r + 0.5 * sigma * sigma) * T) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t
    return d1, d2


def black_scholes(S, K, r, sigma, T, kind=OptionKind.CALL) -> PricingResult:
    """European Black-Scholes price, delta and vega (vega per 1.0 vol)."""
    if invalid_inputs(S, K, T, sigma):
        return ZERO_RESULT
    if T == 0.0:
        return expiry_result(S, K, kind)

    disc_k = K * exp(-r * T)
    if sigma == 0.0:
        # deterministic limit: the forward either finishes in or out of the money
        return expiry_result(S, disc_k, kind)

    d1, d2 = _d1_d2(S, K, T, r, sigma)
    if kind == OptionKind.CALL:
        value = S * norm.cdf(d1) - disc_k * norm.cdf(d2)
        delta = norm.cdf(d1)
    else:
        value = disc_k * norm.cdf(-d2) - S * norm.cdf(-d1)
        delta = norm.cdf(d1) - 1.0
    vega = S * norm.pdf(d1) * sqrt(T)

    return PricingResult(price=float(value), delta=float(delta), vega=float(vega))
