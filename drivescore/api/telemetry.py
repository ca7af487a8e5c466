"""Telemetry upload and removal endpoints.

Thin FastAPI adapter. It parses the JSON body, checks car access and hands
raw readings to the service, which validates and stores them verbatim.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse

from drivescore.api.auth import check_access, error_response

router = APIRouter(prefix="/api/v1/telemetry")


def _readings_from_body(body: object) -> list[object]:
    """Accept one reading object or {"readings": [...]}."""
    if isinstance(body, dict) and "readings" in body:
        readings = body["readings"]
        return readings if isinstance(readings, list) else [readings]
    return [body]


@router.post("/{car_id}")
async def upload_telemetry(
    car_id: int,
    request: Request,
    x_user_id: str | None = Header(default=None),
) -> JSONResponse:
    """Receive sensor readings for a car.

    Invalid readings are rejected individually; the rest are stored.
    """
    from drivescore.main import get_service

    denied = await check_access(x_user_id, car_id, write=True)
    if denied is not None:
        return denied

    body_bytes = await request.body()
    try:
        body = json.loads(body_bytes)
    except ValueError:
        return error_response(400, "invalid JSON")

    readings = _readings_from_body(body)
    result = await get_service().ingest(car_id, readings, len(body_bytes))

    status = 200 if result.stored_ids else 422
    return JSONResponse(
        status_code=status,
        content={
            "accepted": bool(result.stored_ids),
            "stored": len(result.stored_ids),
            "record_ids": result.stored_ids,
            "errors": result.errors,
        },
    )


@router.delete("/{car_id}")
async def delete_telemetry(
    car_id: int,
    request: Request,
    x_user_id: str | None = Header(default=None),
) -> JSONResponse:
    """Soft-delete cached records by id.

    Body: {"record_ids": [1, 2, 3]}
    """
    from drivescore.main import get_service

    denied = await check_access(x_user_id, car_id, write=True)
    if denied is not None:
        return denied

    try:
        body = json.loads(await request.body())
    except ValueError:
        return error_response(400, "invalid JSON")

    record_ids = body.get("record_ids", []) if isinstance(body, dict) else []
    if not isinstance(record_ids, list) or not all(isinstance(i, int) for i in record_ids):
        return error_response(400, "record_ids must be a list of integers")
    if not record_ids:
        return JSONResponse(content={"deleted": 0})

    deleted = await get_service().delete(car_id, set(record_ids))
    return JSONResponse(content={"deleted": deleted})
