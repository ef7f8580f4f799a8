"""
Market equilibrium solver.

Both curves are written as ``Q = a·P + b``.  Demand ``(aD, bD)`` and supply
``(aS, bS)`` meet where ``aD·P + bD = aS·P + bS``, i.e.

    P* = (bD - bS) / (aS - aD)        Q* = aD·P* + bD

A shift is a constant added to a curve's intercept (a parallel move).
"""

import math
from dataclasses import dataclass, field
from typing import Optional

PARALLEL_SLOPES_MSG = (
    "Supply and demand have the same slope: the lines are parallel or "
    "identical, so there is no unique equilibrium point."
)
NO_VALID_EQUILIBRIUM_MSG = (
    "Could not find a valid equilibrium for the given equations, "
    "even with the shifts applied."
)


@dataclass(frozen=True)
class LinearFunction:
    """``quantity = slope × price + intercept``."""

    slope: float
    intercept: float

    def shifted(self, shift: float) -> "LinearFunction":
        return LinearFunction(self.slope, self.intercept + shift)

    def quantity_at(self, price: float) -> float:
        return self.slope * price + self.intercept

    def price_at(self, quantity: float) -> Optional[float]:
        """Invert the line. ``None`` when undefined (flat line) or negative."""
        if self.slope == 0:
            return None
        price = (quantity - self.intercept) / self.slope
        if not math.isfinite(price) or price < 0:
            return None
        return price + 0.0


@dataclass(frozen=True)
class EquilibriumPoint:
    price: float
    quantity: float


@dataclass(frozen=True)
class Equilibrium:
    demand: LinearFunction
    supply: LinearFunction
    demand_shifted: LinearFunction
    supply_shifted: LinearFunction
    original: Optional[EquilibriumPoint] = None
    shifted: Optional[EquilibriumPoint] = None
    parallel: bool = False
    error: str = field(default="")


def intersect(demand: LinearFunction,
              supply: LinearFunction) -> Optional[EquilibriumPoint]:
    """Return the economically valid intersection of two curves, or None.

    Raises ``ZeroDivisionError`` when the slopes are equal.
    """
    denom = supply.slope - demand.slope
    if denom == 0:
        raise ZeroDivisionError("parallel slopes")
    price = (demand.intercept - supply.intercept) / denom
    quantity = demand.quantity_at(price)
    if not (math.isfinite(price) and math.isfinite(quantity)):
        return None
    if price < 0 or quantity < 0:
        return None
    # +0.0 folds -0.0 into 0.0
    return EquilibriumPoint(price=price + 0.0, quantity=quantity + 0.0)


def solve_equilibrium(demand: LinearFunction, supply: LinearFunction,
                      demand_shift: float = 0.0,
                      supply_shift: float = 0.0) -> Equilibrium:
    """Solve the original and the shifted market.

    The shifted equilibrium is always computed, even with both shifts at
    zero; hiding it is up to the caller.
    """
    demand_shifted = demand.shifted(demand_shift)
    supply_shifted = supply.shifted(supply_shift)

    if supply.slope == demand.slope:
        return Equilibrium(
            demand, supply, demand_shifted, supply_shifted,
            parallel=True, error=PARALLEL_SLOPES_MSG,
        )

    original = intersect(demand, supply)
    shifted = intersect(demand_shifted, supply_shifted)

    error = ""
    shifts_active = demand_shift != 0 or supply_shift != 0
    if original is None and shifted is None and shifts_active:
        error = NO_VALID_EQUILIBRIUM_MSG

    return Equilibrium(
        demand, supply, demand_shifted, supply_shifted,
        original=original, shifted=shifted, error=error,
    )
