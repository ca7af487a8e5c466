"""Driving report API endpoints.

Thin FastAPI adapter: resolves the caller, checks car access, calls the
report service and serializes the outcome.
"""

from __future__ import annotations

import asyncio
from datetime import datetime

import structlog
from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse

from drivescore.api.auth import check_access, error_response
from drivescore.core.models import EmptyDataset

log = structlog.get_logger()

router = APIRouter(prefix="/api/v1/telemetry")


async def _respond(outcome_coro, car_id: int, kind: str) -> JSONResponse:
    try:
        outcome = await outcome_coro
    except asyncio.TimeoutError:
        return error_response(504, "telemetry store timed out")

    if isinstance(outcome, EmptyDataset):
        return JSONResponse(status_code=404, content=outcome.to_dict())

    log.debug("report_served", car_id=car_id, kind=kind)
    return JSONResponse(content=outcome.to_dict())


@router.get("/report")
async def get_report(
    car_id: int = Query(...),
    start: datetime = Query(...),
    end: datetime = Query(...),
    x_user_id: str | None = Header(default=None),
) -> JSONResponse:
    """Full driving behavior report for a car over [start, end]."""
    from drivescore.main import get_service

    denied = await check_access(x_user_id, car_id, full_report=True)
    if denied is not None:
        return denied
    return await _respond(get_service().generate_report(car_id, start, end), car_id, "report")


@router.get("/insurance-summary")
async def get_insurance_summary(
    car_id: int = Query(...),
    start: datetime = Query(...),
    end: datetime = Query(...),
    x_user_id: str | None = Header(default=None),
) -> JSONResponse:
    """Score, risk level, premium multiplier and incident count."""
    from drivescore.main import get_service

    denied = await check_access(x_user_id, car_id)
    if denied is not None:
        return denied
    return await _respond(
        get_service().generate_insurance_summary(car_id, start, end), car_id, "insurance",
    )


@router.get("/reseller-summary")
async def get_reseller_summary(
    car_id: int = Query(...),
    start: datetime = Query(...),
    end: datetime = Query(...),
    x_user_id: str | None = Header(default=None),
) -> JSONResponse:
    """Condition rating, wear levels and maintenance outlook."""
    from drivescore.main import get_service

    denied = await check_access(x_user_id, car_id)
    if denied is not None:
        return denied
    return await _respond(
        get_service().generate_reseller_summary(car_id, start, end), car_id, "reseller",
    )


@router.get("/route")
async def get_route(
    car_id: int = Query(...),
    start: datetime = Query(...),
    end: datetime = Query(...),
    x_user_id: str | None = Header(default=None),
) -> JSONResponse:
    """GPS + speed polyline for map display."""
    from drivescore.main import get_service

    denied = await check_access(x_user_id, car_id)
    if denied is not None:
        return denied
    return await _respond(get_service().get_route(car_id, start, end), car_id, "route")
