# src/rentcalc/adapters/bfs_inflation.py
"""
Reader for the BFS consumer price index workbook (LIK, "Landesindex der
Konsumentenpreise"), one sheet per index basis.

Sheet layout (no usable header, title and footnote rows around the data):

    col 0     col 1 .. col 12        col 13 ..
    year      Jan .. Dec index       annual averages / changes

Year cells come as numbers (2024), text ("2024", "2024 1)") or, in some
editions, as Excel dates. All of them are reduced to the calendar year.
"""
from __future__ import annotations

import io
import numbers
import re
from datetime import date, datetime
from typing import Any

import pandas as pd

from rentcalc.adapters.logging_utils import get_logger, log_context
from rentcalc.domain.errors import SourceFormatError
from rentcalc.domain.selection import MONTH_COLS, YEAR_COL

logger = get_logger(__name__)

STAGE = "inflation"

_YEAR_RE = re.compile(r"\s*(\d{4})\b")


def parse_year(value: Any) -> int | None:
    if value is None or isinstance(value, bool) or pd.isna(value):
        return None
    if isinstance(value, (datetime, date)):
        return value.year
    if isinstance(value, numbers.Real):
        f = float(value)
        if not f.is_integer():
            return None
        year = int(f)
        return year if 1000 <= year <= 9999 else None

    m = _YEAR_RE.match(str(value))
    return int(m.group(1)) if m else None


def read_index_sheet(content: bytes, sheet: str) -> pd.DataFrame:
    """
    Returns ['year', 1, 2, ..., 12] for every row with a parseable year,
    sorted by year descending. Month values are floats (NaN when not yet published).
    """
    try:
        raw = pd.read_excel(io.BytesIO(content), sheet_name=sheet, header=None, engine="openpyxl")
    except Exception as e:
        raise SourceFormatError(STAGE, f"cannot read sheet {sheet!r} from the index workbook: {e}") from e

    if raw.shape[1] < 2:
        raise SourceFormatError(STAGE, f"sheet {sheet!r} has {raw.shape[1]} column(s), expected year + months")

    d = raw.iloc[:, : 1 + len(MONTH_COLS)].copy()
    d.columns = [YEAR_COL, *MONTH_COLS[: d.shape[1] - 1]]

    d[YEAR_COL] = d[YEAR_COL].map(parse_year)
    d = d.dropna(subset=[YEAR_COL]).copy()
    if d.empty:
        raise SourceFormatError(STAGE, f"sheet {sheet!r} has no row with a year label")

    d[YEAR_COL] = d[YEAR_COL].astype(int)
    for m in d.columns[1:]:
        d[m] = pd.to_numeric(d[m], errors="coerce")

    d = d.sort_values(YEAR_COL, ascending=False, kind="stable").reset_index(drop=True)
    logger.debug(
        "bfs_sheet_read",
        extra=log_context(sheet=sheet, years=len(d), latest_year=int(d[YEAR_COL].iloc[0])),
    )
    return d
