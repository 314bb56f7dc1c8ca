import pytest

from rentcalc.domain.models import NO_PRIOR_RENT_CHF, InvestmentInput
from rentcalc.domain.rent import (
    allowed_interest_pct,
    annual_charges,
    compute_rent_adjustment,
    round_to_5_cents,
)


def _input(**overrides) -> InvestmentInput:
    data = dict(
        current_rent_chf=1000,
        investment_chf=100_000,
        value_increasing_share_pct=50,
        lifespan_years=12,
    )
    data.update(overrides)
    return InvestmentInput(**data)


def test_worked_example_1000_rent_100k_investment():
    """
    Reference rate 1.25 %, rent 1000, investment 100'000, 50 % value-increasing,
    12 years, default maintenance 10 %:

      share        50'000
      depreciation  4'166.67  -> 4'166.65
      interest 0.875 %  437.50
      intermediate  4'604.17
      maintenance     460.42  ->   460.40
      added / month (4'604.17 + 460.42) / 12 = 422.05
    """
    r = compute_rent_adjustment(_input(), mortgage_rate=1.25)

    assert r.allowed_interest_pct == pytest.approx(0.875)
    assert r.value_increasing_share_chf == pytest.approx(50_000.0)
    assert r.depreciation_chf == pytest.approx(4166.65)
    assert r.interest_chf == pytest.approx(437.5)
    assert r.maintenance_chf == pytest.approx(460.4)
    assert r.total_added_rent_monthly_chf == pytest.approx(422.05)
    assert r.total_new_rent_monthly_chf == pytest.approx(1422.05)
    assert r.mortgage_rate == 1.25


def test_unrounded_charges_follow_the_formula_chain():
    c = annual_charges(
        investment_chf=100_000,
        value_increasing_share_pct=50,
        lifespan_years=12,
        maintenance_rate_pct=10,
        mortgage_rate=1.25,
    )
    assert c.value_increasing_share == pytest.approx(50_000.0)
    assert c.depreciation == pytest.approx(4166.6667, rel=1e-6)
    assert c.interest == pytest.approx(437.5)
    assert c.intermediate == pytest.approx(4604.1667, rel=1e-6)
    assert c.maintenance == pytest.approx(460.41667, rel=1e-6)
    assert c.total == pytest.approx(5064.5833, rel=1e-6)


@pytest.mark.parametrize(
    "rate, expected",
    [(1.25, 0.875), (1.5, 1.0), (0.0, 0.25), (3.5, 2.0)],
)
def test_allowed_interest_is_half_of_rate_plus_half_point(rate, expected):
    assert allowed_interest_pct(rate) == pytest.approx(expected)


def test_result_is_deterministic():
    inp = _input(maintenance_rate_pct=8)
    assert compute_rent_adjustment(inp, 1.5) == compute_rent_adjustment(inp, 1.5)


def test_all_outputs_are_multiples_of_5_cents():
    r = compute_rent_adjustment(_input(investment_chf=123_456.78, lifespan_years=17), 1.75)
    for name in (
        "value_increasing_share_chf",
        "depreciation_chf",
        "interest_chf",
        "maintenance_chf",
        "total_added_rent_monthly_chf",
        "total_new_rent_monthly_chf",
    ):
        cents = round(getattr(r, name) * 100)
        assert cents % 5 == 0, name


@pytest.mark.parametrize(
    "value, expected",
    [(1.02, 1.0), (1.03, 1.05), (12.34, 12.35), (4166.6667, 4166.65), (0.0, 0.0), (1422.0486, 1422.05)],
)
def test_round_to_5_cents(value, expected):
    assert round_to_5_cents(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", [0.01, 1.03, 99.99, 421.88, 4166.6667, 12345.678, 0.000001])
def test_round_to_5_cents_is_idempotent(value):
    once = round_to_5_cents(value)
    assert round_to_5_cents(once) == once


def test_new_building_rent_equals_added_rent():
    """Initial rent of a new unit: 500'000, 100 %, 50 years, 8 % maintenance."""
    inp = _input(
        current_rent_chf=NO_PRIOR_RENT_CHF,
        investment_chf=500_000,
        value_increasing_share_pct=100,
        lifespan_years=50,
        maintenance_rate_pct=8,
    )
    r = compute_rent_adjustment(inp, 1.25)

    # 10'000 depreciation + 4'375 interest, + 8 % = 15'525 per year
    assert r.total_added_rent_monthly_chf == pytest.approx(1293.75)
    assert r.total_new_rent_monthly_chf == pytest.approx(r.total_added_rent_monthly_chf)


def test_zero_investment_adds_nothing():
    r = compute_rent_adjustment(_input(investment_chf=0), 1.25)
    assert r.total_added_rent_monthly_chf == 0.0
    assert r.total_new_rent_monthly_chf == pytest.approx(1000.0)
