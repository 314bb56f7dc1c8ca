# src/rentcalc/domain/ports.py
from __future__ import annotations

from datetime import date
from typing import Protocol

import pandas as pd

from rentcalc.domain.models import ReferenceData


# ----------------------------
# Remote documents
# ----------------------------

class DocumentSource(Protocol):
    def get_bytes(self, url: str) -> bytes:
        ...


# ----------------------------
# Parsers (bytes -> cleaned frame)
# ----------------------------

class RateTableParser(Protocol):
    def __call__(self, html: bytes) -> pd.DataFrame:
        ...


class IndexSheetReader(Protocol):
    def __call__(self, content: bytes, sheet: str) -> pd.DataFrame:
        ...


class Clock(Protocol):
    def __call__(self) -> date:
        ...


# ----------------------------
# Reference data for the calculator
# ----------------------------

class ReferenceDataProvider(Protocol):
    def fetch(self) -> ReferenceData:
        ...
