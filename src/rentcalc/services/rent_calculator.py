# src/rentcalc/services/rent_calculator.py
from __future__ import annotations

from typing import Any, Iterable, Optional

from rentcalc.adapters.logging_utils import get_logger, log_context
from rentcalc.domain.models import (
    NO_PRIOR_RENT_CHF,
    ComponentsResult,
    InvestmentInput,
    RentAdjustmentResult,
)
from rentcalc.domain.ports import ReferenceDataProvider
from rentcalc.domain.rent import compute_components, compute_rent_adjustment
from rentcalc.reporting.console import print_components, print_rent_adjustment
from rentcalc.services.reference_data import ReferenceDataFetcher
from rentcalc.services.validation import (
    ComponentLike,
    build_components,
    build_investment_input,
    validate_current_rent,
    validate_mortgage_rate,
)

logger = get_logger(__name__)


class RentAdjustmentCalculator:
    """
    Rent increase after a value-adding investment, at today's mortgage
    reference rate.

    Input is validated first, so a bad call never hits the network.
    """

    def __init__(self, reference_data: Optional[ReferenceDataProvider] = None):
        self.reference_data = reference_data or ReferenceDataFetcher()

    def current_mortgage_rate(self) -> float:
        return self.reference_data.fetch().mortgage_rate

    def calculate(
        self,
        current_rent_chf: Any,
        investment_chf: Any,
        value_increasing_share_pct: Any,
        lifespan_years: Any,
        maintenance_rate_pct: Any = None,
    ) -> RentAdjustmentResult:
        inp = build_investment_input(
            current_rent_chf=current_rent_chf,
            investment_chf=investment_chf,
            value_increasing_share_pct=value_increasing_share_pct,
            lifespan_years=lifespan_years,
            maintenance_rate_pct=maintenance_rate_pct,
        )
        return self.calculate_with_rate(inp, self.current_mortgage_rate())

    def calculate_with_rate(self, inp: InvestmentInput, mortgage_rate: float) -> RentAdjustmentResult:
        """No network: the caller supplies the reference rate."""
        mortgage_rate = validate_mortgage_rate(mortgage_rate)
        result = compute_rent_adjustment(inp, mortgage_rate)
        logger.info(
            "rent_adjustment_computed",
            extra=log_context(
                mortgage_rate=mortgage_rate,
                investment_chf=inp.investment_chf,
                added_monthly_chf=result.total_added_rent_monthly_chf,
            ),
        )
        return result

    def calculate_components(
        self,
        current_rent_chf: Any,
        components: Iterable[ComponentLike],
        mortgage_rate: Optional[float] = None,
    ) -> ComponentsResult:
        rent = validate_current_rent(current_rent_chf)
        comps = build_components(components)
        rate = self.current_mortgage_rate() if mortgage_rate is None else mortgage_rate
        return compute_components(rent, comps, validate_mortgage_rate(rate))


def calculate_rent_adjustment(
    current_rent_chf: Any,
    investment_chf: Any,
    value_increasing_share_pct: Any,
    lifespan_years: Any,
    maintenance_rate_pct: Any = None,
    *,
    report: bool = False,
    calculator: Optional[RentAdjustmentCalculator] = None,
) -> RentAdjustmentResult:
    """
    e.g. calculate_rent_adjustment(1000, 100000, 50, 12)

    report=True prints the summary table as well.
    """
    inp = build_investment_input(
        current_rent_chf=current_rent_chf,
        investment_chf=investment_chf,
        value_increasing_share_pct=value_increasing_share_pct,
        lifespan_years=lifespan_years,
        maintenance_rate_pct=maintenance_rate_pct,
    )
    calc = calculator or RentAdjustmentCalculator()
    result = calc.calculate_with_rate(inp, calc.current_mortgage_rate())
    if report:
        print_rent_adjustment(inp, result)
    return result


def calculate_initial_rent(
    investment_chf: Any,
    value_increasing_share_pct: Any = 100,
    lifespan_years: Any = 50,
    maintenance_rate_pct: Any = None,
    *,
    report: bool = False,
    calculator: Optional[RentAdjustmentCalculator] = None,
) -> RentAdjustmentResult:
    """
    Rent for a unit that has never been let (new building, freshly bought flat).

    The rent cannot start at zero, so a negligible current rent is used and the
    new rent equals the added rent. Use an average lifespan over all building
    parts, or calculate_components() for a finer split.
    """
    return calculate_rent_adjustment(
        NO_PRIOR_RENT_CHF,
        investment_chf,
        value_increasing_share_pct,
        lifespan_years,
        maintenance_rate_pct,
        report=report,
        calculator=calculator,
    )


def calculate_components(
    current_rent_chf: Any,
    components: Iterable[ComponentLike],
    *,
    report: bool = False,
    calculator: Optional[RentAdjustmentCalculator] = None,
) -> ComponentsResult:
    result = (calculator or RentAdjustmentCalculator()).calculate_components(current_rent_chf, components)
    if report:
        print_components(result)
    return result
