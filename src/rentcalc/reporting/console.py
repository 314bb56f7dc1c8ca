# src/rentcalc/reporting/console.py
"""
Plain-text reports for a terminal. Presentation only: nothing in the
calculation path calls these, the caller opts in (report=True, CLI).
"""
from __future__ import annotations

import pandas as pd

from rentcalc.domain.models import (
    ComponentsResult,
    InvestmentInput,
    ReferenceData,
    RentAdjustmentResult,
)
from rentcalc.domain.rent import round_to_5_cents

RULE = "*" * 79

BREAKDOWN_FIELDS = [
    "value_increasing_share_chf",
    "depreciation_chf",
    "interest_chf",
    "maintenance_chf",
    "total_added_rent_monthly_chf",
    "total_new_rent_monthly_chf",
]


def _two_columns(labels: list[str], values: list[object]) -> str:
    table = pd.DataFrame({"": labels, "value": values})
    return table.to_string(index=False, header=False)


def format_reference_data(data: ReferenceData) -> str:
    return _two_columns(
        [
            "The current mortgage reference rate in % is:",
            "The current date is:",
            "The current inflation index is (points, basis December 2015 = 100):",
        ],
        [f"{data.mortgage_rate:g}", data.as_of_date.isoformat(), f"{data.inflation_index:g}"],
    )


def _breakdown(result: RentAdjustmentResult) -> str:
    row = {name: f"{getattr(result, name):.2f}" for name in BREAKDOWN_FIELDS}
    return pd.DataFrame([row], index=["CHF"]).to_string()


def format_rent_adjustment(inp: InvestmentInput, result: RentAdjustmentResult) -> str:
    summary = _two_columns(
        [
            "Your current rent per month in CHF is:",
            "The additional rent per month in CHF is:",
            "And the new total rent per month in CHF is:",
        ],
        [
            f"{round_to_5_cents(inp.current_rent_chf):.2f}",
            f"{result.total_added_rent_monthly_chf:.2f}",
            f"{result.total_new_rent_monthly_chf:.2f}",
        ],
    )
    return "\n".join([summary, RULE, _breakdown(result)])


def format_components(result: ComponentsResult) -> str:
    rows = {name: r.to_dict() for name, r in result.components.items()}
    if result.total is not None:
        rows["total"] = result.total.to_dict()

    table = pd.DataFrame.from_dict(rows, orient="index")[BREAKDOWN_FIELDS]
    table = table.rename(columns=lambda c: c.removesuffix("_chf"))
    return "\n".join(
        [
            f"Current rent per month in CHF: {round_to_5_cents(result.current_rent_chf):.2f}",
            RULE,
            table.to_string(float_format=lambda v: f"{v:.2f}"),
        ]
    )


def print_reference_data(data: ReferenceData) -> None:
    print(format_reference_data(data))


def print_rent_adjustment(inp: InvestmentInput, result: RentAdjustmentResult) -> None:
    print(format_rent_adjustment(inp, result))


def print_components(result: ComponentsResult) -> None:
    print(format_components(result))
