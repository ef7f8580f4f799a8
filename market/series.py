"""
Chart and table data for the supply / demand curves.

Quantity is the independent (X) axis; each curve's price is found by
inverting ``Q = a·P + b``.  A price that is undefined or negative is kept as
``None`` so that "no data" stays distinguishable from a zero price.
"""

import math
import sys
from dataclasses import dataclass
from typing import Optional

import numpy as np

from market.equilibrium import Equilibrium

EPSILON = 0.01            # "is this the equilibrium row" tolerance
INTEGER_TOLERANCE = EPSILON * 10
SAMPLE_STEPS = 50
MIN_QUANTITY_MAX = 20.0
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class SamplePoint:
    quantity: float
    demand_price: Optional[float]
    supply_price: Optional[float]
    shifted_demand_price: Optional[float]
    shifted_supply_price: Optional[float]


@dataclass(frozen=True)
class TableRow:
    quantity: float
    label: str
    demand_price: str
    supply_price: str
    shifted_demand_price: str
    shifted_supply_price: str
    highlight: Optional[str] = None     # "shifted" | "original" | None

    @property
    def cells(self) -> tuple[str, str, str, str, str]:
        return (self.label, self.demand_price, self.supply_price,
                self.shifted_demand_price, self.shifted_supply_price)


def quantity_max(eq: Equilibrium) -> float:
    """Upper end of the quantity axis.

    Largest of: 1.5 × each equilibrium quantity, 1.1 × each positive
    quantity-intercept of a downward demand / upward supply curve, and 20.
    Clamped to the largest finite float when the scaling overflows.
    """
    candidates = [MIN_QUANTITY_MAX]
    for point in (eq.original, eq.shifted):
        if point is not None:
            candidates.append(point.quantity * 1.5)
    for fn in (eq.demand, eq.demand_shifted):
        if fn.slope < 0 and fn.intercept > 0:
            candidates.append(fn.intercept * 1.1)
    for fn in (eq.supply, eq.supply_shifted):
        if fn.slope > 0 and fn.intercept > 0:
            candidates.append(fn.intercept * 1.1)
    q_max = max(candidates)
    return q_max if math.isfinite(q_max) else sys.float_info.max


def _sample(eq: Equilibrium, quantity: float) -> SamplePoint:
    return SamplePoint(
        quantity=quantity,
        demand_price=eq.demand.price_at(quantity),
        supply_price=eq.supply.price_at(quantity),
        shifted_demand_price=eq.demand_shifted.price_at(quantity),
        shifted_supply_price=eq.supply_shifted.price_at(quantity),
    )


def sample_curves(eq: Equilibrium, q_max: float) -> list[SamplePoint]:
    """Sample all four curves at ``SAMPLE_STEPS + 1`` points over [0, q_max]."""
    quantities = np.linspace(0.0, q_max, SAMPLE_STEPS + 1)
    return [_sample(eq, float(q)) for q in quantities]


def _fmt_price(price: Optional[float]) -> str:
    return NOT_AVAILABLE if price is None else f"{price:.2f}"


def _near(value: float, target: Optional[float]) -> bool:
    return target is not None and abs(value - target) < EPSILON


def build_table(eq: Equilibrium, series: list[SamplePoint],
                shifts_active: bool) -> list[TableRow]:
    """Human-readable development table.

    Round quantities (multiples of 5, or within 0.1 of an integer) from the
    sampled series, plus every equilibrium quantity at full precision.
    """
    original_q = eq.original.quantity if eq.original else None
    shifted_q = eq.shifted.quantity if eq.shifted else None
    eq_quantities = [q for q in (original_q, shifted_q) if q is not None]

    rounded: set[float] = set()
    for point in series:
        q = point.quantity
        if not math.isfinite(q):
            continue
        if q % 5 == 0 or abs(q - round(q)) < INTEGER_TOLERANCE:
            rounded.add(float(round(q)))

    # An equilibrium row replaces any rounded row it would duplicate
    quantities = {q for q in rounded
                  if not any(abs(q - e) < EPSILON for e in eq_quantities)}
    quantities.update(eq_quantities)

    rows: list[TableRow] = []
    for q in sorted(quantities):
        is_eq = _near(q, original_q) or _near(q, shifted_q)
        if shifts_active and _near(q, shifted_q):
            highlight = "shifted"
        elif _near(q, original_q):
            highlight = "original"
        else:
            highlight = None
        point = _sample(eq, q)
        rows.append(TableRow(
            quantity=q,
            label=f"{q:.2f}" if is_eq else f"{q:.0f}",
            demand_price=_fmt_price(point.demand_price),
            supply_price=_fmt_price(point.supply_price),
            shifted_demand_price=_fmt_price(point.shifted_demand_price),
            shifted_supply_price=_fmt_price(point.shifted_supply_price),
            highlight=highlight,
        ))
    return rows


def curve_arrays(series: list[SamplePoint], attr: str) -> tuple[np.ndarray, np.ndarray]:
    """Quantities and prices for one curve, absent prices as NaN (plot gaps)."""
    q = np.array([p.quantity for p in series], dtype=float)
    prices = np.array(
        [np.nan if getattr(p, attr) is None else getattr(p, attr) for p in series],
        dtype=float,
    )
    return q, prices
