# src/rentcalc/domain/selection.py
"""
Row selection policies for the two reference tables.

Both operate on already-cleaned frames (see adapters.bwo_rates and
adapters.bfs_inflation) and return None when there is nothing to select, so the
caller decides which error to raise.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

RATE_COL = "mortgage_rate"
VALID_FROM_COL = "valid_from"
YEAR_COL = "year"
MONTH_COLS = list(range(1, 13))


@dataclass(frozen=True)
class RateRow:
    mortgage_rate: float
    valid_from: date


@dataclass(frozen=True)
class IndexPoint:
    year: int
    month: int
    value: float


def most_recent_complete_row(rates: pd.DataFrame) -> Optional[RateRow]:
    """
    Latest reference rate by effective date.

    Rows missing either column are ignored. The BWO lists newest first, but the
    order is not relied upon: rows are sorted by `valid_from` (stable, so for equal
    dates the first listed row wins).
    """
    d = rates.dropna(subset=[RATE_COL, VALID_FROM_COL])
    if d.empty:
        return None

    d = d.sort_values(VALID_FROM_COL, ascending=False, kind="stable")
    top = d.iloc[0]
    return RateRow(
        mortgage_rate=float(top[RATE_COL]),
        valid_from=pd.Timestamp(top[VALID_FROM_COL]).date(),
    )


def last_non_missing_in_latest_year(index: pd.DataFrame) -> Optional[IndexPoint]:
    """
    Most recent published index value: in the row of the highest year, the last
    month that has a value.

    Returns None when there are no year rows or the latest year has no values yet.
    """
    d = index.dropna(subset=[YEAR_COL])
    if d.empty:
        return None

    latest = d.sort_values(YEAR_COL, ascending=False, kind="stable").iloc[0]
    months = [m for m in MONTH_COLS if m in latest.index]
    values = pd.to_numeric(latest.loc[months], errors="coerce").dropna()
    if values.empty:
        return None

    month = int(values.index[-1])
    return IndexPoint(year=int(latest[YEAR_COL]), month=month, value=float(values.iloc[-1]))
