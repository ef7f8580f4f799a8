import sys

import numpy as np
import pytest

from market.equilibrium import LinearFunction, solve_equilibrium
from market.series import (
    NOT_AVAILABLE,
    SAMPLE_STEPS,
    build_table,
    curve_arrays,
    quantity_max,
    sample_curves,
)

DEMAND = LinearFunction(-1.0, 16.0)
SUPPLY = LinearFunction(1.0, 4.0)


def _table(demand_shift=0.0, supply_shift=0.0, demand=DEMAND, supply=SUPPLY):
    eq = solve_equilibrium(demand, supply, demand_shift, supply_shift)
    series = sample_curves(eq, quantity_max(eq))
    active = demand_shift != 0 or supply_shift != 0
    return eq, series, build_table(eq, series, active)


def test_quantity_max_has_a_floor() -> None:
    assert quantity_max(solve_equilibrium(DEMAND, SUPPLY)) == 20.0


def test_quantity_max_follows_intercepts_and_equilibria() -> None:
    eq = solve_equilibrium(LinearFunction(-2.0, 100.0), LinearFunction(3.0, 0.0))
    # 1.5 × Q* = 90, 1.1 × demand intercept = 110
    assert quantity_max(eq) == pytest.approx(110.0)

    eq = solve_equilibrium(DEMAND, SUPPLY, demand_shift=4)
    # shifted demand intercept 20 → 22
    assert quantity_max(eq) == pytest.approx(22.0)


def test_sample_curves_spans_axis() -> None:
    eq = solve_equilibrium(DEMAND, SUPPLY)
    series = sample_curves(eq, 20.0)
    assert len(series) == SAMPLE_STEPS + 1
    assert series[0].quantity == 0.0
    assert series[-1].quantity == pytest.approx(20.0)
    assert series[0].demand_price == pytest.approx(16.0)
    assert series[0].supply_price is None


def test_table_without_shifts() -> None:
    _, _, rows = _table()
    quantities = [r.quantity for r in rows]
    assert quantities == sorted(quantities)
    assert len(set(quantities)) == len(quantities)
    assert quantities == pytest.approx([0, 2, 4, 6, 8, 10, 12, 14, 16, 18, 20])

    eq_rows = [r for r in rows if r.highlight]
    assert len(eq_rows) == 1
    row = eq_rows[0]
    assert row.highlight == "original"
    assert row.label == "10.00"
    assert row.demand_price == "6.00"
    assert row.supply_price == "6.00"

    first = rows[0]
    assert first.label == "0"
    assert first.cells == ("0", "16.00", NOT_AVAILABLE, "16.00", NOT_AVAILABLE)


def test_table_with_shift_marks_both_equilibria() -> None:
    _, _, rows = _table(demand_shift=4)
    by_highlight = {r.highlight: r for r in rows if r.highlight}
    assert by_highlight["original"].label == "10.00"
    assert by_highlight["shifted"].label == "12.00"
    assert by_highlight["shifted"].shifted_demand_price == "8.00"
    assert by_highlight["shifted"].shifted_supply_price == "8.00"


def test_shifted_highlight_wins_when_quantities_coincide() -> None:
    # demand +2 and supply -2 keep Q* = 10 but move P* to 8
    eq, _, rows = _table(demand_shift=2, supply_shift=-2)
    assert eq.original.quantity == pytest.approx(eq.shifted.quantity)
    highlighted = [r for r in rows if r.highlight]
    assert [r.highlight for r in highlighted] == ["shifted"]


def test_table_without_equilibrium_has_only_round_rows() -> None:
    _, _, rows = _table(demand=LinearFunction(-1.0, 2.0),
                        supply=LinearFunction(1.0, 10.0))
    assert all(r.highlight is None for r in rows)
    assert all("." not in r.label for r in rows)


def test_curve_arrays_uses_nan_for_missing_prices() -> None:
    eq = solve_equilibrium(DEMAND, SUPPLY)
    series = sample_curves(eq, 20.0)
    q, prices = curve_arrays(series, "supply_price")
    assert q.shape == prices.shape == (SAMPLE_STEPS + 1,)
    assert np.isnan(prices[0])
    assert prices[-1] == pytest.approx(16.0)


def test_quantity_max_stays_finite_for_huge_intercepts() -> None:
    eq = solve_equilibrium(DEMAND, SUPPLY, demand_shift=1.7e308)
    q_max = quantity_max(eq)
    assert np.isfinite(q_max)
    assert q_max == sys.float_info.max

    series = sample_curves(eq, q_max)
    rows = build_table(eq, series, True)
    assert all(np.isfinite(r.quantity) for r in rows)
    assert any(r.highlight == "shifted" for r in rows)
