# src/rentcalc/domain/models.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAINTENANCE_RATE_PCT = 10.0

# Rent of a unit that has never been let. Must stay > 0.
NO_PRIOR_RENT_CHF = 0.000001

# Highest reference rate (%) a calculation accepts
MAX_MORTGAGE_RATE_PCT = 20.0


def _to_number(v: Any) -> Any:
    """
    Accept the spellings people actually type:
      - 1000, 1000.0
      - "1000", "1'000", "1 000"
      - "50%", "50 %"
      - "8,5" (comma decimal mark)
    Anything else is handed to pydantic unchanged so it reports the type error.
    """
    if isinstance(v, str):
        s = v.strip().replace("'", "").replace("’", "").replace(" ", "")
        if s.endswith("%"):
            s = s[:-1]
        if "," in s and "." not in s:
            s = s.replace(",", ".")
        return s
    return v


class _InvestmentTerms(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    investment_chf: float = Field(ge=0)
    value_increasing_share_pct: float = Field(ge=0, le=100)
    lifespan_years: float = Field(gt=0)
    maintenance_rate_pct: float = Field(default=DEFAULT_MAINTENANCE_RATE_PCT, ge=0, le=100)

    @field_validator(
        "investment_chf",
        "value_increasing_share_pct",
        "lifespan_years",
        "maintenance_rate_pct",
        mode="before",
    )
    @classmethod
    def _coerce_number(cls, v: Any) -> Any:
        return _to_number(v)


class InvestmentInput(_InvestmentTerms):
    """User-supplied parameters of one investment in a let unit."""

    current_rent_chf: float = Field(gt=0)

    @field_validator("current_rent_chf", mode="before")
    @classmethod
    def _coerce_rent(cls, v: Any) -> Any:
        return _to_number(v)


class ComponentInvestment(_InvestmentTerms):
    """One building component (kitchen, windows, ...) with its own lifespan."""

    name: str = Field(min_length=1)


class MortgageRate(BaseModel):
    """Reference rate a calculation runs at, fetched or given by the caller."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    mortgage_rate: float = Field(ge=0, le=MAX_MORTGAGE_RATE_PCT)

    @field_validator("mortgage_rate", mode="before")
    @classmethod
    def _coerce_rate(cls, v: Any) -> Any:
        return _to_number(v)


@dataclass(frozen=True)
class ReferenceData:
    mortgage_rate: float          # %, e.g. 1.25
    as_of_date: date
    inflation_index: float        # points, December 2015 = 100

    # provenance of the selected rows
    mortgage_rate_valid_from: Optional[date] = None
    inflation_year: Optional[int] = None
    inflation_month: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AnnualCharges:
    """Unrounded yearly amounts of the formula chain, all in CHF."""

    value_increasing_share: float
    depreciation: float
    interest: float
    maintenance: float
    allowed_interest_pct: float

    @property
    def intermediate(self) -> float:
        return self.depreciation + self.interest

    @property
    def total(self) -> float:
        return self.intermediate + self.maintenance


@dataclass(frozen=True)
class RentAdjustmentResult:
    value_increasing_share_chf: float
    depreciation_chf: float
    interest_chf: float
    maintenance_chf: float
    total_added_rent_monthly_chf: float
    total_new_rent_monthly_chf: float

    mortgage_rate: float
    allowed_interest_pct: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ComponentsResult:
    current_rent_chf: float
    components: Dict[str, RentAdjustmentResult] = field(default_factory=dict)
    total: Optional[RentAdjustmentResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_rent_chf": self.current_rent_chf,
            "components": {k: v.to_dict() for k, v in self.components.items()},
            "total": self.total.to_dict() if self.total else None,
        }
