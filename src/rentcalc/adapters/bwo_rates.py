# src/rentcalc/adapters/bwo_rates.py
"""
Parser for the BWO page "Entwicklung Referenzzinssatz und Durchschnittszinssatz".

The page carries one table, newest first:

    Referenzzinssatz | gültig ab  | Durchschnittszinssatz | ...
    1,25 %           | 03.09.2025 | 1,30 %                | ...

Only the first two columns matter. Footnote rows ("Berechnungsmethode ...")
have no parseable rate or date and are dropped.
"""
from __future__ import annotations

import re
from typing import Any

import pandas as pd
from bs4 import BeautifulSoup

from rentcalc.adapters.logging_utils import get_logger, log_context
from rentcalc.domain.errors import SourceFormatError
from rentcalc.domain.selection import RATE_COL, VALID_FROM_COL

logger = get_logger(__name__)

STAGE = "mortgage"

_NUMBER_RE = re.compile(r"-?\d+(?:[.,]\d+)?")
_DATE_RE = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})")


def parse_rate(text: Any) -> float | None:
    """'1,25 %' -> 1.25 (comma decimal mark, first number wins)."""
    if text is None:
        return None
    m = _NUMBER_RE.search(str(text))
    if not m:
        return None
    return float(m.group(0).replace(",", "."))


def parse_swiss_date(text: Any) -> str | None:
    """'1.9.2025' / 'ab 01.09.2025' -> '01.09.2025'."""
    if text is None:
        return None
    m = _DATE_RE.search(str(text))
    if not m:
        return None
    day, month, year = m.groups()
    return f"{day.zfill(2)}.{month.zfill(2)}.{year}"


def _table_rows(html: bytes) -> list[list[str]]:
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        raise SourceFormatError(STAGE, "no <table> on the reference rate page")

    rows: list[list[str]] = []
    for tr in table.find_all("tr"):
        cells = [c.get_text(" ", strip=True) for c in tr.find_all(["th", "td"])]
        if cells:
            rows.append(cells)
    return rows


def parse_rate_table(html: bytes) -> pd.DataFrame:
    """
    Returns the complete rows as a frame with columns
    ['mortgage_rate' (float, %), 'valid_from' (datetime64)], in page order.

    Raises SourceFormatError when the table is missing, has fewer than two
    columns, or yields no complete row.
    """
    rows = _table_rows(html)
    if len(rows) < 2:
        raise SourceFormatError(STAGE, f"reference rate table has {len(rows)} row(s), expected a header and data")

    header, body = rows[0], rows[1:]
    width = max(len(r) for r in rows)
    if width < 2:
        raise SourceFormatError(STAGE, f"reference rate table has {width} column(s), expected at least 2")

    logger.debug("bwo_table_header", extra=log_context(header=header, rows=len(body)))

    raw = pd.DataFrame(
        [(r[0], r[1] if len(r) > 1 else None) for r in body],
        columns=[RATE_COL, VALID_FROM_COL],
    )
    raw[RATE_COL] = pd.to_numeric(raw[RATE_COL].map(parse_rate), errors="coerce")
    raw[VALID_FROM_COL] = pd.to_datetime(
        raw[VALID_FROM_COL].map(parse_swiss_date), format="%d.%m.%Y", errors="coerce"
    )

    clean = raw.dropna(subset=[RATE_COL, VALID_FROM_COL]).reset_index(drop=True)
    if clean.empty:
        raise SourceFormatError(STAGE, "no complete (rate, valid_from) row in the reference rate table")

    dropped = len(raw) - len(clean)
    if dropped:
        logger.info("bwo_incomplete_rows_dropped", extra=log_context(dropped=dropped))

    return clean
