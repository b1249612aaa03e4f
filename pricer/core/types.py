from dataclasses import dataclass
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

MAX_STEPS = 0xFFFF  # steps travels as a uint16


class OptionKind(str, Enum):
    CALL = "call"
    PUT = "put"


class CalcMethod(str, Enum):
    """Label stored next to every output row."""
    CLOSED_FORM = "closed_form"
    TREE = "tree"


@dataclass(frozen=True)
class ClosedForm:
    label = CalcMethod.CLOSED_FORM


@dataclass(frozen=True)
class Tree:
    steps: int
    label = CalcMethod.TREE


Method = Union[ClosedForm, Tree]


def select_method(steps: int) -> Method:
    """steps == 0 selects Black-Scholes, anything else a CRR tree with that many steps."""
    if steps < 0:
        raise ValueError("steps must be >= 0")
    return Tree(steps) if steps > 0 else ClosedForm()


class PricingRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    S: float; K: float; r: float; sigma: float; T: float
    kind: OptionKind = OptionKind.CALL
    steps: int = Field(default=0, ge=0, le=MAX_STEPS)

    @property
    def method(self) -> Method:
        return select_method(self.steps)


class PricingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: float = 0.0
    delta: float = 0.0
    vega: float = 0.0


ZERO_RESULT = PricingResult()
