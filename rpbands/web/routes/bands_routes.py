"""
Realized price bands API routes
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from rpbands.core.exceptions.base import DataValidationError
from rpbands.core.models.records import BandsFailure
from rpbands.core.services.bands import BandsService
from rpbands.core.services.valuation import classify_position
from rpbands.web.models import APIResponse, PositionData
from rpbands.web.utils import REQUEST_ID_HEADER, request_trace

router = APIRouter()


def _service(request: Request) -> BandsService:
    return request.app.state.bands_service


def _failure_response(failure: BandsFailure, trace_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=failure.status_code,
        content=failure.to_payload(),
        headers={REQUEST_ID_HEADER: trace_id},
    )


@router.get("/bands")
async def get_bands(request: Request) -> JSONResponse:
    """
    Merged realized price bands dataset

    Returns the full chart payload on success, or an error object with
    status 502 (upstream data insufficient) or 500 (internal fault).
    """
    with request_trace(request) as trace_id:
        result = await _service(request).query()
    if isinstance(result, BandsFailure):
        return _failure_response(result, trace_id)
    return JSONResponse(content=result.to_payload(), headers={REQUEST_ID_HEADER: trace_id})


@router.get("/bands/position", response_model=APIResponse)
async def get_position(request: Request):
    """
    Current price position within the bands
    """
    with request_trace(request) as trace_id:
        result = await _service(request).query()
    if isinstance(result, BandsFailure):
        return _failure_response(result, trace_id)

    try:
        assessment = classify_position(result.latest_price, result.latest_rp, _service(request).config.band_multipliers)
    except DataValidationError as exc:
        return APIResponse(success=False, message=exc.message, request_id=trace_id)

    position = PositionData(
        price=assessment.price,
        rp=assessment.rp,
        rp_date=result.latest_rp_date,
        ratio=assessment.ratio,
        zone=assessment.zone.value,
        sentiment=assessment.sentiment,
        above_decision_line=assessment.above_decision_line,
        band_levels=dict(assessment.band_levels),
        sth_rp=result.latest_sth,
        lth_rp=result.latest_lth,
    )
    return APIResponse(
        success=True,
        data=position.model_dump(mode="json"),
        message=f"BTC is {assessment.ratio}x realized price ({assessment.sentiment})",
        request_id=trace_id,
    )
