# src/rentcalc/api/schemas.py
from __future__ import annotations

from datetime import date
from typing import Optional, Union

from pydantic import BaseModel

# Numbers may arrive as strings ("1'000", "50%"). Every input field is optional
# here: services.validation coerces, range-checks and reports missing fields, so
# all input errors come back as 400 with the field name.
Number = Union[float, str]


# --------------------------------------------
# Reference data
# --------------------------------------------

class ReferenceDataResponse(BaseModel):
    mortgage_rate: float
    as_of_date: date
    inflation_index: float
    mortgage_rate_valid_from: Optional[date] = None
    inflation_year: Optional[int] = None
    inflation_month: Optional[int] = None


# --------------------------------------------
# Rent adjustment
# --------------------------------------------

class RentAdjustmentRequest(BaseModel):
    current_rent_chf: Optional[Number] = None
    investment_chf: Optional[Number] = None
    value_increasing_share_pct: Optional[Number] = None
    lifespan_years: Optional[Number] = None
    maintenance_rate_pct: Optional[Number] = None

    # skip the BWO lookup and calculate at this reference rate
    mortgage_rate: Optional[Number] = None


class RentAdjustmentResponse(BaseModel):
    value_increasing_share_chf: float
    depreciation_chf: float
    interest_chf: float
    maintenance_chf: float
    total_added_rent_monthly_chf: float
    total_new_rent_monthly_chf: float
    mortgage_rate: float
    allowed_interest_pct: float


class ComponentItem(BaseModel):
    name: Optional[str] = None
    investment_chf: Optional[Number] = None
    value_increasing_share_pct: Optional[Number] = None
    lifespan_years: Optional[Number] = None
    maintenance_rate_pct: Optional[Number] = None


class ComponentsRequest(BaseModel):
    current_rent_chf: Optional[Number] = None
    components: list[ComponentItem] = []
    mortgage_rate: Optional[Number] = None


class ComponentsResponse(BaseModel):
    current_rent_chf: float
    components: dict[str, RentAdjustmentResponse]
    total: RentAdjustmentResponse
