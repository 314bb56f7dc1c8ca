# src/rentcalc/domain/rent.py
"""
Statutory rent increase after a value-adding investment (Art. 14 VMWG).

The landlord may pass on, per year:
  - straight-line depreciation of the value-increasing share,
  - interest on that share at half of (reference rate + 0.5 pp),
  - a maintenance surcharge on the sum of the two (10 % by default,
    following Federal Supreme Court practice).
"""
from __future__ import annotations

from typing import Sequence

from rentcalc.domain.models import (
    NO_PRIOR_RENT_CHF,
    AnnualCharges,
    ComponentInvestment,
    ComponentsResult,
    InvestmentInput,
    RentAdjustmentResult,
)

INTEREST_MARKUP_PCT = 0.5
MONTHS_PER_YEAR = 12


def round_to_5_cents(value: float) -> float:
    # Swiss 5-centime rounding; the outer round() drops float noise (421.90000000000003)
    return round(round(value / 5, 2) * 5, 2)


def allowed_interest_pct(mortgage_rate: float) -> float:
    return (mortgage_rate + INTEREST_MARKUP_PCT) / 2


def annual_charges(
    *,
    investment_chf: float,
    value_increasing_share_pct: float,
    lifespan_years: float,
    maintenance_rate_pct: float,
    mortgage_rate: float,
) -> AnnualCharges:
    share = investment_chf * value_increasing_share_pct / 100
    depreciation = share / lifespan_years

    interest_pct = allowed_interest_pct(mortgage_rate)
    interest = share * interest_pct / 100

    maintenance = (depreciation + interest) * maintenance_rate_pct / 100

    return AnnualCharges(
        value_increasing_share=share,
        depreciation=depreciation,
        interest=interest,
        maintenance=maintenance,
        allowed_interest_pct=interest_pct,
    )


def _result(
    charges: AnnualCharges, current_rent_chf: float, mortgage_rate: float
) -> RentAdjustmentResult:
    added_monthly = charges.total / MONTHS_PER_YEAR
    new_monthly = (MONTHS_PER_YEAR * current_rent_chf + charges.total) / MONTHS_PER_YEAR

    return RentAdjustmentResult(
        value_increasing_share_chf=round_to_5_cents(charges.value_increasing_share),
        depreciation_chf=round_to_5_cents(charges.depreciation),
        interest_chf=round_to_5_cents(charges.interest),
        maintenance_chf=round_to_5_cents(charges.maintenance),
        total_added_rent_monthly_chf=round_to_5_cents(added_monthly),
        total_new_rent_monthly_chf=round_to_5_cents(new_monthly),
        mortgage_rate=mortgage_rate,
        allowed_interest_pct=charges.allowed_interest_pct,
    )


def compute_rent_adjustment(inp: InvestmentInput, mortgage_rate: float) -> RentAdjustmentResult:
    """
    Pure: same (input, mortgage_rate) always gives the same rounded result.
    """
    charges = annual_charges(
        investment_chf=inp.investment_chf,
        value_increasing_share_pct=inp.value_increasing_share_pct,
        lifespan_years=inp.lifespan_years,
        maintenance_rate_pct=inp.maintenance_rate_pct,
        mortgage_rate=mortgage_rate,
    )
    return _result(charges, inp.current_rent_chf, mortgage_rate)


def compute_components(
    current_rent_chf: float,
    components: Sequence[ComponentInvestment],
    mortgage_rate: float,
) -> ComponentsResult:
    """
    Several components with different lifespans, e.g.

        kitchen   30'000 CHF  100 %  15 years  8 %
        bathroom  50'000 CHF  100 %  30 years  8 %
        windows   40'000 CHF  100 %  20 years  8 %

    Each component is shown on its own (added rent only). The total sums the
    unrounded charges and rounds once, so it can differ by 5 cts from the sum
    of the rounded rows.
    """
    per_component: dict[str, RentAdjustmentResult] = {}
    summed = dict(share=0.0, depreciation=0.0, interest=0.0, maintenance=0.0)

    for comp in components:
        charges = annual_charges(
            investment_chf=comp.investment_chf,
            value_increasing_share_pct=comp.value_increasing_share_pct,
            lifespan_years=comp.lifespan_years,
            maintenance_rate_pct=comp.maintenance_rate_pct,
            mortgage_rate=mortgage_rate,
        )
        per_component[comp.name] = _result(charges, NO_PRIOR_RENT_CHF, mortgage_rate)

        summed["share"] += charges.value_increasing_share
        summed["depreciation"] += charges.depreciation
        summed["interest"] += charges.interest
        summed["maintenance"] += charges.maintenance

    total_charges = AnnualCharges(
        value_increasing_share=summed["share"],
        depreciation=summed["depreciation"],
        interest=summed["interest"],
        maintenance=summed["maintenance"],
        allowed_interest_pct=allowed_interest_pct(mortgage_rate),
    )

    return ComponentsResult(
        current_rent_chf=current_rent_chf,
        components=per_component,
        total=_result(total_charges, current_rent_chf, mortgage_rate),
    )
