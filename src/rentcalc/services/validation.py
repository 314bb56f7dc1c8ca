# src/rentcalc/services/validation.py

from typing import Any, Iterable, Mapping, Union

from pydantic import ValidationError

from rentcalc.adapters.config import config
from rentcalc.domain.errors import InvestmentInputError
from rentcalc.domain.models import ComponentInvestment, InvestmentInput, MortgageRate

_REQUIRED_TERMS = ("investment_chf", "value_increasing_share_pct", "lifespan_years")


def _as_input_error(err: ValidationError, prefix: str = "") -> InvestmentInputError:
    """
    Flatten pydantic's error list into one readable message, e.g.
      "lifespan_years: Input should be greater than 0"
    """
    fields: list[str] = []
    parts: list[str] = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()))
        name = f"{prefix}{loc}" if loc else prefix.rstrip(".") or "input"
        fields.append(name)
        parts.append(f"{name}: {e.get('msg')}")
    return InvestmentInputError("; ".join(parts), fields=fields)


def _require(data: Mapping[str, Any], names: Iterable[str], prefix: str = "") -> None:
    missing = [f"{prefix}{n}" for n in names if data.get(n) is None]
    if missing:
        raise InvestmentInputError(f"Missing required field(s): {', '.join(missing)}", fields=missing)


def build_investment_input(
    *,
    current_rent_chf: Any,
    investment_chf: Any,
    value_increasing_share_pct: Any,
    lifespan_years: Any,
    maintenance_rate_pct: Any = None,
) -> InvestmentInput:
    """
    Validate user input before any network access happens.

    maintenance_rate_pct=None means "use the configured default" (10 %).
    """
    data: dict[str, Any] = {
        "current_rent_chf": current_rent_chf,
        "investment_chf": investment_chf,
        "value_increasing_share_pct": value_increasing_share_pct,
        "lifespan_years": lifespan_years,
        "maintenance_rate_pct": (
            config.DEFAULT_MAINTENANCE_RATE if maintenance_rate_pct is None else maintenance_rate_pct
        ),
    }

    _require(data, ("current_rent_chf", *_REQUIRED_TERMS))
    try:
        return InvestmentInput(**data)
    except ValidationError as e:
        raise _as_input_error(e) from e


ComponentLike = Union[ComponentInvestment, Mapping[str, Any]]


def build_components(items: Iterable[ComponentLike]) -> list[ComponentInvestment]:
    out: list[ComponentInvestment] = []
    seen: set[str] = set()

    for i, item in enumerate(items):
        if isinstance(item, ComponentInvestment):
            comp = item
        else:
            raw = dict(item)
            if raw.get("maintenance_rate_pct") is None:
                raw["maintenance_rate_pct"] = config.DEFAULT_MAINTENANCE_RATE
            _require(raw, ("name", *_REQUIRED_TERMS), prefix=f"components[{i}].")
            try:
                comp = ComponentInvestment(**raw)
            except ValidationError as e:
                raise _as_input_error(e, prefix=f"components[{i}].") from e

        if comp.name in seen:
            raise InvestmentInputError(f"duplicate component name {comp.name!r}", fields=[f"components[{i}].name"])
        seen.add(comp.name)
        out.append(comp)

    if not out:
        raise InvestmentInputError("at least one component is required", fields=["components"])
    return out


def validate_current_rent(current_rent_chf: Any) -> float:
    """Same rule as InvestmentInput.current_rent_chf: strictly positive."""
    # neutral terms, so only the rent can fail
    return build_investment_input(
        current_rent_chf=current_rent_chf,
        investment_chf=0,
        value_increasing_share_pct=0,
        lifespan_years=1,
    ).current_rent_chf


def validate_mortgage_rate(mortgage_rate: Any) -> float:
    """Finite and within 0..MAX_MORTGAGE_RATE_PCT, whether fetched or given."""
    _require({"mortgage_rate": mortgage_rate}, ("mortgage_rate",))
    try:
        return MortgageRate(mortgage_rate=mortgage_rate).mortgage_rate
    except ValidationError as e:
        raise _as_input_error(e) from e
