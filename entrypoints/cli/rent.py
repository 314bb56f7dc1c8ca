from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from loguru import logger

from rentcalc.domain.errors import RentCalcError
from rentcalc.domain.models import NO_PRIOR_RENT_CHF
from rentcalc.reporting.console import (
    print_components,
    print_reference_data,
    print_rent_adjustment,
)
from rentcalc.services.reference_data import ReferenceDataFetcher
from rentcalc.services.rent_calculator import RentAdjustmentCalculator
from rentcalc.services.validation import build_investment_input

app = typer.Typer(help="Swiss rent adjustment after value-adding investments.")


def _make_fetcher(concurrent: Optional[bool] = None) -> ReferenceDataFetcher:
    return ReferenceDataFetcher(concurrent=concurrent)


def _fail(e: RentCalcError) -> typer.Exit:
    logger.error("{} failed: {}", e.stage, e)
    return typer.Exit(code=1)


def _run_calculation(
    current_rent: str | float,
    investment: str,
    share: str,
    lifespan: str,
    maintenance_rate: Optional[str],
    mortgage_rate: Optional[float],
) -> None:
    try:
        inp = build_investment_input(
            current_rent_chf=current_rent,
            investment_chf=investment,
            value_increasing_share_pct=share,
            lifespan_years=lifespan,
            maintenance_rate_pct=maintenance_rate,
        )
        calc = RentAdjustmentCalculator(_make_fetcher())
        rate = calc.current_mortgage_rate() if mortgage_rate is None else mortgage_rate
        result = calc.calculate_with_rate(inp, rate)
    except RentCalcError as e:
        raise _fail(e) from e

    logger.info("Calculated at mortgage reference rate {}%", rate)
    print_rent_adjustment(inp, result)


@app.command("reference-data")
def reference_data(
    concurrent: Optional[bool] = typer.Option(
        None, "--concurrent/--sequential", help="Download both sources in parallel (default: RENTCALC_FETCH_CONCURRENTLY)."
    ),
) -> None:
    """
    Print the current mortgage reference rate, date and inflation index.
    """
    try:
        data = _make_fetcher(concurrent=concurrent).fetch()
    except RentCalcError as e:
        raise _fail(e) from e
    print_reference_data(data)


@app.command()
def calculate(
    current_rent: str = typer.Option(..., "--current-rent", help="Current net rent per month in CHF"),
    investment: str = typer.Option(..., "--investment", help="Total investment in CHF"),
    share: str = typer.Option(..., "--share", help="Value-increasing share in %"),
    lifespan: str = typer.Option(..., "--lifespan", help="Lifespan of the investment in years"),
    maintenance_rate: Optional[str] = typer.Option(None, "--maintenance-rate", help="Maintenance surcharge in % (default 10)"),
    mortgage_rate: Optional[float] = typer.Option(
        None, "--mortgage-rate", help="Use this reference rate instead of fetching it from the BWO"
    ),
) -> None:
    """
    Rent increase after a value-adding investment.
    """
    _run_calculation(current_rent, investment, share, lifespan, maintenance_rate, mortgage_rate)


@app.command("initial-rent")
def initial_rent(
    investment: str = typer.Option(..., "--investment", help="Value of the unit in CHF"),
    share: str = typer.Option("100", "--share", help="Value-increasing share in %"),
    lifespan: str = typer.Option("50", "--lifespan", help="Average lifespan over all building parts"),
    maintenance_rate: Optional[str] = typer.Option(None, "--maintenance-rate"),
    mortgage_rate: Optional[float] = typer.Option(None, "--mortgage-rate"),
) -> None:
    """
    Rent of a unit that has never been let (new building, purchased flat).
    """
    _run_calculation(NO_PRIOR_RENT_CHF, investment, share, lifespan, maintenance_rate, mortgage_rate)


@app.command()
def components(
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV with one row per component"),
    current_rent: Optional[str] = typer.Option(None, "--current-rent", help="Current rent per month in CHF (default: none)"),
    mortgage_rate: Optional[float] = typer.Option(None, "--mortgage-rate"),
) -> None:
    """
    Investment split into components with their own lifespans.

    CSV columns: name, investment_chf, value_increasing_share_pct,
    lifespan_years[, maintenance_rate_pct]
    """
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    rows = [{k: (v if v != "" else None) for k, v in rec.items()} for rec in df.to_dict(orient="records")]

    try:
        result = RentAdjustmentCalculator(_make_fetcher()).calculate_components(
            NO_PRIOR_RENT_CHF if current_rent is None else current_rent, rows, mortgage_rate=mortgage_rate
        )
    except RentCalcError as e:
        raise _fail(e) from e

    print_components(result)


if __name__ == "__main__":
    app()
