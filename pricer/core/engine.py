import logging

from .bsm import black_scholes, invalid_inputs
from .tree import binomial_tree
from .types import ClosedForm, PricingRequest, PricingResult, Tree, ZERO_RESULT

logger = logging.getLogger(__name__)


def _compute(req: PricingRequest) -> PricingResult:
    method = req.method
    if isinstance(method, Tree):
        return binomial_tree(req.S, req.K, req.r, req.sigma, req.T, method.steps, req.kind)
    if isinstance(method, ClosedForm):
        return black_scholes(req.S, req.K, req.r, req.sigma, req.T, req.kind)
    raise TypeError(f"Unknown pricing method: {method!r}")


def price_option(req: PricingRequest) -> PricingResult:
    """Dispatch on the request's method: closed form or CRR tree.

    Never raises for a decodable request; arithmetic blow-ups fall back to
    the zero quote.
    """
    if invalid_inputs(req.S, req.K, req.T, req.sigma):
        # answered as a zero quote, indistinguishable on the wire
        logger.debug("Out-of-domain inputs priced as zero: %s", req)

    try:
        return _compute(req)
    except ArithmeticError as e:
        logger.warning("Arithmetic error pricing %s, answering zero: %s", req, e)
        return ZERO_RESULT
