"""
Supply & demand pipeline.

``compute_market`` is the single entry point used by the desktop app and the
HTTP API.  Given the two equation strings and the two shifts it parses,
solves, samples and tabulates everything from scratch; it holds no state, so
calling it twice with the same inputs gives the same result.

It also produces a step-by-step derivation of each equilibrium with SymPy,
using exact rationals so that ``0.5P`` is shown as ``P/2``.
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Optional

from sympy import Eq, Rational, expand, simplify, solve, symbols

from market.equilibrium import (
    Equilibrium,
    EquilibriumPoint,
    LinearFunction,
    solve_equilibrium,
)
from market.parser import ParsedEquation, parse_equation
from market.series import (
    SamplePoint,
    TableRow,
    build_table,
    quantity_max,
    sample_curves,
)

P = symbols("P")


@dataclass
class MarketResult:
    demand_equation: str
    supply_equation: str
    demand_shift: float
    supply_shift: float
    demand: ParsedEquation
    supply: ParsedEquation
    equilibrium: Equilibrium
    quantity_max: float
    series: list[SamplePoint]
    table: list[TableRow]
    error: str = ""
    steps: dict = field(default_factory=dict)

    @property
    def shifts_active(self) -> bool:
        return self.demand_shift != 0 or self.supply_shift != 0

    @property
    def original(self) -> Optional[EquilibriumPoint]:
        return self.equilibrium.original

    @property
    def shifted(self) -> Optional[EquilibriumPoint]:
        return self.equilibrium.shifted

    @property
    def display_shifted(self) -> Optional[EquilibriumPoint]:
        """The shifted equilibrium, hidden while both shifts are zero."""
        return self.equilibrium.shifted if self.shifts_active else None

    @property
    def parallel(self) -> bool:
        return self.equilibrium.parallel

    def equilibrium_dots(self) -> list[dict]:
        """Chart markers: ``E0`` for the original, ``E1`` for the shifted one."""
        dots = []
        if self.original is not None:
            dots.append({"label": "E0", "kind": "original",
                         "price": self.original.price,
                         "quantity": self.original.quantity})
        if self.display_shifted is not None:
            dots.append({"label": "E1", "kind": "shifted",
                         "price": self.display_shifted.price,
                         "quantity": self.display_shifted.quantity})
        return dots

    def to_dict(self) -> dict:
        def _point(pt):
            return None if pt is None else {"price": pt.price, "quantity": pt.quantity}

        return {
            "demand_equation": self.demand_equation,
            "supply_equation": self.supply_equation,
            "demand_shift": self.demand_shift,
            "supply_shift": self.supply_shift,
            "demand": asdict(self.demand),
            "supply": asdict(self.supply),
            "original_equilibrium": _point(self.original),
            "shifted_equilibrium": _point(self.shifted),
            "shifts_active": self.shifts_active,
            "parallel": self.parallel,
            "error": self.error,
            "quantity_max": self.quantity_max,
            "series": [asdict(p) for p in self.series],
            "table": [asdict(r) for r in self.table],
            "steps": self.steps,
        }


# ── Input helpers ───────────────────────────────────────────────────────────

def parse_shift(text) -> float:
    """Convert a shift field to a float. Blank means 0."""
    if text is None:
        return 0.0
    s = str(text).strip()
    if not s:
        return 0.0
    try:
        value = float(s)
    except ValueError:
        raise ValueError(f"Shift must be a number, got '{s}'.")
    if not math.isfinite(value):
        raise ValueError(f"Shift must be a finite number, got '{s}'.")
    return value


# ── Derivation steps ────────────────────────────────────────────────────────

def _exact(value: float):
    return Rational(repr(float(value)))


def _format_expr(expr) -> str:
    """Format a SymPy expression into a readable string."""
    s = str(expr)
    return s.replace('**', '^').replace('*', '·')


def _curve_expr(fn: LinearFunction):
    return _exact(fn.slope) * P + _exact(fn.intercept)


def derive_steps(demand: LinearFunction, supply: LinearFunction) -> list[dict]:
    """Explain how the intersection of *demand* and *supply* is found."""
    qd = _curve_expr(demand)
    qs = _curve_expr(supply)
    steps = []

    steps.append({
        "description": "Set demand equal to supply",
        "expression": f"{_format_expr(qd)} = {_format_expr(qs)}",
        "explanation": (
            "At equilibrium the quantity buyers want equals the quantity "
            "sellers offer, so we solve Qd = Qs for P."
        ),
    })

    coeff = expand(qs - qd).coeff(P)
    const = expand(qd - qs).subs(P, 0)
    steps.append({
        "description": "Collect the price terms",
        "expression": f"{_format_expr(coeff * P)} = {_format_expr(const)}",
        "explanation": (
            f"Gather the P-terms on one side and the constants on the other: "
            f"the P coefficient is {_format_expr(_exact(supply.slope))} - "
            f"({_format_expr(_exact(demand.slope))}) = {_format_expr(coeff)}, "
            f"the constant is {_format_expr(_exact(demand.intercept))} - "
            f"({_format_expr(_exact(supply.intercept))}) = {_format_expr(const)}."
        ),
    })

    price = solve(Eq(qd, qs), P)[0]
    if coeff != 1:
        steps.append({
            "description": f"Divide both sides by {_format_expr(coeff)}",
            "expression": f"P = {_format_expr(price)}",
            "explanation": (
                f"Dividing {_format_expr(const)} by {_format_expr(coeff)} "
                f"isolates the price."
            ),
        })

    quantity = simplify(qd.subs(P, price))
    substituted = _format_expr(qd).replace('P', f'({_format_expr(price)})')
    steps.append({
        "description": "Substitute the price into the demand curve",
        "expression": f"Q = {substituted} = {_format_expr(quantity)}",
        "explanation": (
            f"Plugging P = {_format_expr(price)} into Qd gives the traded "
            f"quantity; the supply curve gives the same value."
        ),
    })

    p_val, q_val = float(price), float(quantity)
    if p_val < 0 or q_val < 0:
        steps.append({
            "description": "Check the economic region",
            "expression": f"P = {p_val:.2f},  Q = {q_val:.2f}",
            "explanation": (
                "Prices and quantities cannot be negative, so this "
                "intersection is not a valid market equilibrium."
            ),
        })
    else:
        steps.append({
            "description": "Equilibrium",
            "expression": f"P = {p_val:.2f},  Q = {q_val:.2f}",
            "explanation": "Both values are non-negative, so this is the market equilibrium.",
        })
    return steps


# ── Pipeline ────────────────────────────────────────────────────────────────

def _function(parsed: ParsedEquation) -> LinearFunction:
    return LinearFunction(parsed.slope, parsed.intercept)


def compute_market(demand_equation: str, supply_equation: str,
                   demand_shift: float = 0.0,
                   supply_shift: float = 0.0) -> MarketResult:
    """Parse, solve, sample and tabulate one market."""
    demand = parse_equation(demand_equation)
    supply = parse_equation(supply_equation)
    demand_fn = _function(demand)
    supply_fn = _function(supply)

    error = ""
    if demand.error:
        error = f"Demand equation error: {demand.error}"
    elif supply.error:
        error = f"Supply equation error: {supply.error}"
    elif not math.isfinite(demand_shift):
        error = "Demand shift must be a finite number."
    elif not math.isfinite(supply_shift):
        error = "Supply shift must be a finite number."

    solved = False
    if error:
        # Nothing is solved, but the curves that did parse are still sampled
        safe_d = demand_shift if math.isfinite(demand_shift) else 0.0
        safe_s = supply_shift if math.isfinite(supply_shift) else 0.0
        eq = Equilibrium(
            demand_fn, supply_fn,
            demand_fn.shifted(safe_d), supply_fn.shifted(safe_s),
            error=error,
        )
    else:
        eq = solve_equilibrium(demand_fn, supply_fn, demand_shift, supply_shift)
        error = eq.error
        solved = not eq.parallel

    shifts_active = demand_shift != 0 or supply_shift != 0
    q_max = quantity_max(eq)
    series = sample_curves(eq, q_max)
    table = build_table(eq, series, shifts_active)

    steps = {}
    if solved:
        steps["original"] = derive_steps(eq.demand, eq.supply)
        if shifts_active:
            steps["shifted"] = derive_steps(eq.demand_shifted, eq.supply_shifted)

    return MarketResult(
        demand_equation=demand_equation,
        supply_equation=supply_equation,
        demand_shift=demand_shift,
        supply_shift=supply_shift,
        demand=demand,
        supply=supply,
        equilibrium=eq,
        quantity_max=q_max,
        series=series,
        table=table,
        error=error,
        steps=steps,
    )
