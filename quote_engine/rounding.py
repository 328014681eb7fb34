"""
Rounding strategies for monthly and setup fees.

Calculators receive one of these functions as an explicit argument so the
rounding regime applied to a fee is visible at the call site.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from functools import partial
from typing import Callable

# A rounding strategy maps an unrounded Decimal amount to whole currency units.
RoundingStrategy = Callable[[Decimal], int]

COARSE_ROUNDING_STEP = 25


def round_half_up(value: Decimal) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_up_to_step(value: Decimal, step: int = COARSE_ROUNDING_STEP) -> int:
    """Round up to the next multiple of step (180 -> 200 for step 25)."""
    if step <= 0:
        raise ValueError(f"rounding step must be positive, got: {step}")
    step_dec = Decimal(step)
    multiples = (Decimal(value) / step_dec).to_integral_value(rounding=ROUND_CEILING)
    return int(multiples * step_dec)


def coarse_rounding(step: int = COARSE_ROUNDING_STEP) -> RoundingStrategy:
    """Return the step rounding used by tax-as-a-service and discounted fees."""
    if step == COARSE_ROUNDING_STEP:
        return round_up_to_25
    return partial(round_up_to_step, step=step)


def round_up_to_25(value: Decimal) -> int:
    return round_up_to_step(value, COARSE_ROUNDING_STEP)
