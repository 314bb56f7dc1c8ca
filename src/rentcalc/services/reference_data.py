# src/rentcalc/services/reference_data.py
from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from datetime import date
from typing import Optional

import requests

from rentcalc.adapters.bfs_inflation import read_index_sheet
from rentcalc.adapters.bwo_rates import parse_rate_table
from rentcalc.adapters.config import config
from rentcalc.adapters.http_client import make_http_client
from rentcalc.adapters.logging_utils import get_logger, log_context
from rentcalc.domain.errors import HttpFetchError, SourceFormatError, SourceUnavailableError
from rentcalc.domain.models import ReferenceData
from rentcalc.domain.ports import Clock, DocumentSource, IndexSheetReader, RateTableParser
from rentcalc.domain.selection import (
    IndexPoint,
    RateRow,
    last_non_missing_in_latest_year,
    most_recent_complete_row,
)
from rentcalc.reporting.console import print_reference_data

logger = get_logger(__name__)


def _log_abandoned(fut: Future) -> None:
    """Outcome of the download left behind when the other one failed first."""
    if fut.cancelled():
        logger.debug("reference_fetch_abandoned", extra=log_context(outcome="cancelled"))
        return
    err = fut.exception()
    logger.debug(
        "reference_fetch_abandoned",
        extra=log_context(
            outcome="ok" if err is None else "failed",
            stage=getattr(err, "stage", None),
            error=None if err is None else str(err),
        ),
    )


class ReferenceDataFetcher:
    """
    Collects the three facts a rent review needs:

      - mortgage reference rate (BWO table, most recent complete row)
      - today's date (local system date)
      - consumer price index, December 2015 = 100 (BFS workbook, last value
        published in the latest year)

    Every collaborator is injectable so tests never touch the network. The
    workbook is read from memory; nothing is written to disk.
    """

    def __init__(
        self,
        source: Optional[DocumentSource] = None,
        *,
        rate_table_parser: RateTableParser = parse_rate_table,
        index_sheet_reader: IndexSheetReader = read_index_sheet,
        today: Clock = date.today,
        mortgage_rate_url: Optional[str] = None,
        inflation_index_url: Optional[str] = None,
        inflation_sheet: Optional[str] = None,
        concurrent: Optional[bool] = None,
    ):
        self.source = source or make_http_client()
        self.rate_table_parser = rate_table_parser
        self.index_sheet_reader = index_sheet_reader
        self.today = today
        self.mortgage_rate_url = mortgage_rate_url or config.MORTGAGE_RATE_URL
        self.inflation_index_url = inflation_index_url or config.INFLATION_INDEX_URL
        self.inflation_sheet = inflation_sheet or config.INFLATION_SHEET
        self.concurrent = config.FETCH_CONCURRENTLY if concurrent is None else concurrent

    # --------- single sources ---------

    def _download(self, stage: str, url: str) -> bytes:
        try:
            return self.source.get_bytes(url)
        except (HttpFetchError, requests.RequestException, OSError) as e:
            raise SourceUnavailableError(stage, f"download of {url} failed: {e}") from e

    def fetch_mortgage_rate(self) -> RateRow:
        html = self._download("mortgage", self.mortgage_rate_url)
        row = most_recent_complete_row(self.rate_table_parser(html))
        if row is None:
            raise SourceFormatError("mortgage", "no complete row in the reference rate table")

        logger.info(
            "mortgage_rate_selected",
            extra=log_context(mortgage_rate=row.mortgage_rate, valid_from=row.valid_from.isoformat()),
        )
        return row

    def fetch_inflation_index(self) -> IndexPoint:
        content = self._download("inflation", self.inflation_index_url)
        point = last_non_missing_in_latest_year(self.index_sheet_reader(content, self.inflation_sheet))
        if point is None:
            raise SourceFormatError(
                "inflation", f"latest year in sheet {self.inflation_sheet!r} has no published index value"
            )

        logger.info(
            "inflation_index_selected",
            extra=log_context(year=point.year, month=point.month, index=point.value),
        )
        return point

    # --------- combined ---------

    def _fetch_both_concurrently(self) -> tuple[RateRow, IndexPoint]:
        ex = ThreadPoolExecutor(max_workers=2, thread_name_prefix="rentcalc-fetch")
        try:
            fut_rate = ex.submit(self.fetch_mortgage_rate)
            fut_index = ex.submit(self.fetch_inflation_index)

            # fail fast: the first error wins. The other download is not waited for;
            # its outcome is only logged once it settles.
            done, _ = wait([fut_rate, fut_index], return_when=FIRST_EXCEPTION)
            for fut in done:
                err = fut.exception()
                if err is not None:
                    other = fut_index if fut is fut_rate else fut_rate
                    other.add_done_callback(_log_abandoned)
                    raise err

            return fut_rate.result(), fut_index.result()
        finally:
            ex.shutdown(wait=False, cancel_futures=True)

    def fetch(self) -> ReferenceData:
        try:
            if self.concurrent:
                rate, point = self._fetch_both_concurrently()
            else:
                rate = self.fetch_mortgage_rate()
                point = self.fetch_inflation_index()
        except Exception as e:
            logger.error(
                "reference_fetch_failed",
                extra=log_context(stage=getattr(e, "stage", "unknown"), error=str(e)),
            )
            raise

        return ReferenceData(
            mortgage_rate=rate.mortgage_rate,
            as_of_date=self.today(),
            inflation_index=point.value,
            mortgage_rate_valid_from=rate.valid_from,
            inflation_year=point.year,
            inflation_month=point.month,
        )


def fetch_reference_data(*, report: bool = False, fetcher: Optional[ReferenceDataFetcher] = None) -> ReferenceData:
    """
    Current mortgage rate, date and inflation index.

    report=True prints the three-line overview as well.
    """
    data = (fetcher or ReferenceDataFetcher()).fetch()
    if report:
        print_reference_data(data)
    return data
