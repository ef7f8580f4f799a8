import math

import pytest

from market.equilibrium import (
    NO_VALID_EQUILIBRIUM_MSG,
    PARALLEL_SLOPES_MSG,
    EquilibriumPoint,
    LinearFunction,
    intersect,
    solve_equilibrium,
)

DEMAND = LinearFunction(-1.0, 16.0)
SUPPLY = LinearFunction(1.0, 4.0)


def test_linear_function_helpers() -> None:
    assert DEMAND.shifted(4) == LinearFunction(-1.0, 20.0)
    assert DEMAND.quantity_at(6) == 10
    assert DEMAND.price_at(10) == 6
    assert DEMAND.price_at(20) is None          # negative price
    assert LinearFunction(0.0, 5.0).price_at(3) is None


def test_price_at_never_returns_negative_zero() -> None:
    price = DEMAND.price_at(16)
    assert price == 0.0
    assert math.copysign(1.0, price) == 1.0


def test_intersect_basic_market() -> None:
    assert intersect(DEMAND, SUPPLY) == EquilibriumPoint(price=6.0, quantity=10.0)


def test_intersect_rejects_negative_and_raises_on_parallel() -> None:
    assert intersect(LinearFunction(-1.0, 2.0), LinearFunction(1.0, 10.0)) is None
    with pytest.raises(ZeroDivisionError):
        intersect(LinearFunction(1.0, 5.0), LinearFunction(1.0, 2.0))


def test_solve_equilibrium_without_shifts() -> None:
    eq = solve_equilibrium(DEMAND, SUPPLY)
    assert eq.original == EquilibriumPoint(6.0, 10.0)
    # computed even though nothing moved
    assert eq.shifted == eq.original
    assert eq.error == ""
    assert not eq.parallel


def test_solve_equilibrium_with_demand_shift() -> None:
    eq = solve_equilibrium(DEMAND, SUPPLY, demand_shift=4)
    assert eq.demand_shifted == LinearFunction(-1.0, 20.0)
    assert eq.supply_shifted == SUPPLY
    assert eq.shifted.price == pytest.approx(8.0)
    assert eq.shifted.quantity == pytest.approx(12.0)


def test_solve_equilibrium_parallel_curves() -> None:
    eq = solve_equilibrium(LinearFunction(1.0, 5.0), LinearFunction(1.0, 2.0), 3, 0)
    assert eq.parallel
    assert eq.error == PARALLEL_SLOPES_MSG
    assert eq.original is None and eq.shifted is None


def test_solve_equilibrium_no_valid_point() -> None:
    demand = LinearFunction(-1.0, 2.0)
    supply = LinearFunction(1.0, 10.0)

    eq = solve_equilibrium(demand, supply)
    assert eq.original is None
    assert eq.error == ""

    eq = solve_equilibrium(demand, supply, demand_shift=1)
    assert eq.shifted is None
    assert eq.error == NO_VALID_EQUILIBRIUM_MSG


def test_solve_equilibrium_shift_can_create_valid_point() -> None:
    demand = LinearFunction(-1.0, 2.0)
    supply = LinearFunction(1.0, 10.0)
    eq = solve_equilibrium(demand, supply, demand_shift=20)
    assert eq.original is None
    assert eq.shifted == EquilibriumPoint(6.0, 16.0)
    assert eq.error == ""
