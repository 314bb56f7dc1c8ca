# src/rentcalc/domain/errors.py
from __future__ import annotations

from typing import Iterable


class RentCalcError(Exception):
    """Base class for every failure the calculator reports to its caller."""

    stage: str = "unknown"


class ReferenceDataError(RentCalcError, RuntimeError):
    """
    A reference data point could not be obtained.

    `stage` is "mortgage" (BWO reference rate table) or "inflation"
    (BFS consumer price index workbook).
    """

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"[{stage}] {message}")


class SourceUnavailableError(ReferenceDataError):
    """Transport failure: connection refused, timeout, HTTP status >= 400."""


class SourceFormatError(ReferenceDataError):
    """The remote document was fetched but no longer has the expected shape."""


class InvestmentInputError(RentCalcError, ValueError):
    stage = "validation"

    def __init__(self, message: str, fields: Iterable[str] = ()):
        self.fields = list(fields)
        super().__init__(f"[validation] {message}")


class HttpFetchError(RuntimeError):
    pass
