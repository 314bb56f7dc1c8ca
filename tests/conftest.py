# tests/conftest.py
import io
from datetime import date

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from rentcalc.api import http
from rentcalc.domain.models import ReferenceData
from rentcalc.services.reference_data import ReferenceDataFetcher
from rentcalc.services.rent_calculator import RentAdjustmentCalculator

RATES_URL = "https://bwo.test/referenzzinssatz.html"
INDEX_URL = "https://bfs.test/lik.xlsx"
TODAY = date(2025, 10, 17)


RATE_TABLE_HTML = """
<html><body>
<h1>Entwicklung Referenzzinssatz und Durchschnittszinssatz</h1>
<table>
  <thead>
    <tr><th>Referenzzinssatz</th><th>gültig ab</th><th>Durchschnittszinssatz</th></tr>
  </thead>
  <tbody>
    <tr><td>1,25 %</td><td>03.09.2025</td><td>1,30 %</td></tr>
    <tr><td>1,50 %</td><td>02.06.2025</td><td>1,47 %</td></tr>
    <tr><td>1,75 %</td><td>2.12.2024</td><td>1,69 %</td></tr>
    <tr><td colspan="3">Berechnungsmethode des Durchschnittszinssatzes ab 2008 angepasst</td></tr>
  </tbody>
</table>
</body></html>
""".encode("utf-8")


def make_index_workbook(rows_2015=None, sheet="2015") -> bytes:
    """
    Small LIK-like workbook: title rows, a header row, year rows and a
    footnote; an extra sheet for another index basis.
    """
    if rows_2015 is None:
        rows_2015 = [
            [2022] + [104.0 + i * 0.1 for i in range(12)] + [104.6],
            [2023] + [106.0 + i * 0.1 for i in range(12)] + [106.6],
            # only January to September published, annual average column filled in
            [2024] + [107.0, 107.1, 107.2, 107.3, 107.4, 107.5, 107.6, 107.7, 107.8] + [None] * 3 + [107.4],
        ]

    wb = Workbook()
    ws = wb.active
    ws.title = sheet
    ws.append(["Landesindex der Konsumentenpreise, Basis Dezember 2015 = 100"])
    ws.append(["Jahr", "Jan", "Feb", "Mär", "Apr", "Mai", "Jun", "Jul", "Aug", "Sep", "Okt", "Nov", "Dez", "Mittel"])
    for row in rows_2015:
        ws.append(row)
    ws.append(["1) Quelle: BFS"])

    other = wb.create_sheet("2010")
    other.append(["Jahr", "Jan"])
    other.append([2024, 99.0])

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


class FakeSource:
    """DocumentSource serving canned bytes (or raising canned errors) per URL."""

    def __init__(self, docs):
        self.docs = docs
        self.calls = []

    def get_bytes(self, url: str) -> bytes:
        self.calls.append(url)
        doc = self.docs[url]
        if isinstance(doc, Exception):
            raise doc
        return doc


class FakeProvider:
    def __init__(self, mortgage_rate=1.25, error=None):
        self.mortgage_rate = mortgage_rate
        self.error = error
        self.calls = 0

    def fetch(self) -> ReferenceData:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ReferenceData(mortgage_rate=self.mortgage_rate, as_of_date=TODAY, inflation_index=107.8)


@pytest.fixture
def index_workbook() -> bytes:
    return make_index_workbook()


@pytest.fixture
def fake_source(index_workbook) -> FakeSource:
    return FakeSource({RATES_URL: RATE_TABLE_HTML, INDEX_URL: index_workbook})


@pytest.fixture
def make_fetcher():
    def _make(source, **kwargs) -> ReferenceDataFetcher:
        return ReferenceDataFetcher(
            source,
            today=lambda: TODAY,
            mortgage_rate_url=RATES_URL,
            inflation_index_url=INDEX_URL,
            inflation_sheet="2015",
            **kwargs,
        )

    return _make


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def client(monkeypatch, provider):
    monkeypatch.setattr(http, "_calculator", RentAdjustmentCalculator(provider))
    return TestClient(http.app)
