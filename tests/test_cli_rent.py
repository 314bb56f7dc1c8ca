import pytest
from typer.testing import CliRunner

from conftest import INDEX_URL, RATES_URL, FakeSource
from entrypoints.cli import rent
from rentcalc.domain.errors import HttpFetchError

runner = CliRunner()


@pytest.fixture
def use_source(monkeypatch, make_fetcher):
    def _use(source):
        monkeypatch.setattr(rent, "_make_fetcher", lambda concurrent=None: make_fetcher(source, concurrent=concurrent))
        return source

    return _use


def test_reference_data_command(use_source, fake_source):
    use_source(fake_source)

    result = runner.invoke(rent.app, ["reference-data"])

    assert result.exit_code == 0, result.output
    assert "1.25" in result.stdout
    assert "107.8" in result.stdout


def test_calculate_command(use_source, fake_source):
    use_source(fake_source)

    result = runner.invoke(
        rent.app,
        ["calculate", "--current-rent", "1000", "--investment", "100000", "--share", "50", "--lifespan", "12"],
    )

    assert result.exit_code == 0, result.output
    assert "422.05" in result.stdout
    assert "1422.05" in result.stdout


def test_calculate_with_rate_override_does_not_download(use_source):
    source = use_source(FakeSource({}))

    result = runner.invoke(
        rent.app,
        [
            "calculate",
            "--current-rent", "1000",
            "--investment", "100000",
            "--share", "50%",
            "--lifespan", "12",
            "--mortgage-rate", "1.25",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "1422.05" in result.stdout
    assert source.calls == []


def test_invalid_input_exits_with_error(use_source):
    use_source(FakeSource({}))

    result = runner.invoke(
        rent.app,
        ["calculate", "--current-rent", "1000", "--investment=-5", "--share", "50", "--lifespan", "12"],
    )

    assert result.exit_code == 1


def test_unreachable_source_exits_with_error(use_source):
    use_source(FakeSource({RATES_URL: HttpFetchError("HTTP 503"), INDEX_URL: HttpFetchError("HTTP 503")}))

    result = runner.invoke(rent.app, ["reference-data"])

    assert result.exit_code == 1


def test_initial_rent_command(use_source):
    use_source(FakeSource({}))

    result = runner.invoke(
        rent.app,
        ["initial-rent", "--investment", "500000", "--maintenance-rate", "8", "--mortgage-rate", "1.25"],
    )

    assert result.exit_code == 0, result.output
    assert "1293.75" in result.stdout


def test_components_command(use_source, tmp_path):
    use_source(FakeSource({}))
    csv = tmp_path / "components.csv"
    csv.write_text(
        "name,investment_chf,value_increasing_share_pct,lifespan_years,maintenance_rate_pct\n"
        "kitchen,30000,100,15,8\n"
        "windows,40000,100,20,\n",
        encoding="utf-8",
    )

    result = runner.invoke(rent.app, ["components", str(csv), "--current-rent", "1000", "--mortgage-rate", "1.25"])

    assert result.exit_code == 0, result.output
    assert "kitchen" in result.stdout
    assert "windows" in result.stdout
    assert "total" in result.stdout


@pytest.mark.parametrize("rate", ["-20", "nan"])
def test_bad_mortgage_rate_override_exits_with_error(use_source, rate):
    source = use_source(FakeSource({}))

    result = runner.invoke(
        rent.app,
        [
            "calculate",
            "--current-rent", "1000",
            "--investment", "100000",
            "--share", "50",
            "--lifespan", "12",
            f"--mortgage-rate={rate}",
        ],
    )

    assert result.exit_code == 1
    assert "nan" not in result.stdout
    assert source.calls == []
