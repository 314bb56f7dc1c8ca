import math
from datetime import datetime

import pytest

from conftest import make_index_workbook
from rentcalc.adapters.bfs_inflation import parse_year, read_index_sheet
from rentcalc.domain.errors import SourceFormatError


@pytest.mark.parametrize(
    "value, expected",
    [
        (2024, 2024),
        (2024.0, 2024),
        ("2024", 2024),
        ("2023 1)", 2023),
        (datetime(2022, 1, 1), 2022),
        ("Jahr", None),
        ("1) Quelle: BFS", None),
        (104.3, None),
        (float("nan"), None),
        (None, None),
        (True, None),
    ],
)
def test_parse_year(value, expected):
    assert parse_year(value) == expected


def test_year_rows_sorted_descending(index_workbook):
    df = read_index_sheet(index_workbook, "2015")

    assert df["year"].tolist() == [2024, 2023, 2022]
    assert list(df.columns) == ["year", *range(1, 13)]


def test_unpublished_months_are_nan(index_workbook):
    latest = read_index_sheet(index_workbook, "2015").iloc[0]

    assert latest.loc[9] == pytest.approx(107.8)
    assert math.isnan(latest.loc[10])
    assert math.isnan(latest.loc[12])


def test_other_sheet_can_be_selected(index_workbook):
    df = read_index_sheet(index_workbook, "2010")
    assert df["year"].tolist() == [2024]
    assert df[1].tolist() == [99.0]


def test_missing_sheet_is_a_format_error(index_workbook):
    with pytest.raises(SourceFormatError) as exc:
        read_index_sheet(index_workbook, "2020")
    assert exc.value.stage == "inflation"


def test_garbage_bytes_are_a_format_error():
    with pytest.raises(SourceFormatError):
        read_index_sheet(b"<html>not a workbook</html>", "2015")


def test_sheet_without_year_rows_is_a_format_error():
    content = make_index_workbook(rows_2015=[["Mittel", 100.0, 101.0]])
    with pytest.raises(SourceFormatError, match="year"):
        read_index_sheet(content, "2015")
