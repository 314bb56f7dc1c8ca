# src/rentcalc/api/http.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, HTTPException

from rentcalc.adapters.logging_utils import get_logger, log_context
from rentcalc.domain.errors import InvestmentInputError, ReferenceDataError, SourceFormatError
from rentcalc.services.rent_calculator import RentAdjustmentCalculator
from rentcalc.services.validation import (
    build_components,
    build_investment_input,
    validate_current_rent,
    validate_mortgage_rate,
)

from .schemas import (
    ComponentsRequest,
    ComponentsResponse,
    ReferenceDataResponse,
    RentAdjustmentRequest,
    RentAdjustmentResponse,
)

logger = get_logger(__name__)

app = FastAPI(title="rentcalc")

# single init at startup; the fetcher only opens connections on demand
_calculator = RentAdjustmentCalculator()


def _bad_gateway(e: ReferenceDataError) -> HTTPException:
    logger.warning("reference_data_unavailable", extra=log_context(stage=e.stage, error=str(e)))
    return HTTPException(status_code=502, detail={"stage": e.stage, "error": str(e)})


def _bad_request(e: InvestmentInputError) -> HTTPException:
    return HTTPException(status_code=400, detail={"stage": e.stage, "fields": e.fields, "error": str(e)})


def _override(rate: Any) -> Optional[float]:
    return None if rate is None else validate_mortgage_rate(rate)


def _mortgage_rate(override: Optional[float]) -> float:
    if override is not None:
        return override
    try:
        rate = _calculator.current_mortgage_rate()
    except ReferenceDataError as e:
        raise _bad_gateway(e) from e
    try:
        return validate_mortgage_rate(rate)
    except InvestmentInputError as e:
        # the published rate itself is out of range
        raise _bad_gateway(SourceFormatError("mortgage", str(e))) from e


@app.get("/reference-data", response_model=ReferenceDataResponse)
def reference_data() -> ReferenceDataResponse:
    try:
        data = _calculator.reference_data.fetch()
    except ReferenceDataError as e:
        raise _bad_gateway(e) from e
    return ReferenceDataResponse(**data.to_dict())


@app.post("/rent-adjustment", response_model=RentAdjustmentResponse)
def rent_adjustment(payload: RentAdjustmentRequest) -> RentAdjustmentResponse:
    """
    Validate first (400), then look up the reference rate unless one is given (502 on failure).
    """
    try:
        inp = build_investment_input(
            current_rent_chf=payload.current_rent_chf,
            investment_chf=payload.investment_chf,
            value_increasing_share_pct=payload.value_increasing_share_pct,
            lifespan_years=payload.lifespan_years,
            maintenance_rate_pct=payload.maintenance_rate_pct,
        )
        override = _override(payload.mortgage_rate)
    except InvestmentInputError as e:
        raise _bad_request(e) from e

    result = _calculator.calculate_with_rate(inp, _mortgage_rate(override))
    return RentAdjustmentResponse(**result.to_dict())


@app.post("/rent-adjustment/components", response_model=ComponentsResponse)
def rent_adjustment_components(payload: ComponentsRequest) -> ComponentsResponse:
    try:
        # validate before the (possibly remote) rate lookup
        rent = validate_current_rent(payload.current_rent_chf)
        comps = build_components(c.model_dump() for c in payload.components)
        override = _override(payload.mortgage_rate)
    except InvestmentInputError as e:
        raise _bad_request(e) from e

    result = _calculator.calculate_components(rent, comps, mortgage_rate=_mortgage_rate(override))
    return ComponentsResponse(**result.to_dict())
