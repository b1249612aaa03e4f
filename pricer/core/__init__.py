from .bsm import black_scholes
from .engine import price_option
from .tree import binomial_tree
from .types import (
    CalcMethod,
    ClosedForm,
    Method,
    OptionKind,
    PricingRequest,
    PricingResult,
    Tree,
    select_method,
)

__all__ = [
    "CalcMethod",
    "ClosedForm",
    "Method",
    "OptionKind",
    "PricingRequest",
    "PricingResult",
    "Tree",
    "binomial_tree",
    "black_scholes",
    "price_option",
    "select_method",
]
