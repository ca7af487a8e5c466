"""Caller resolution and car access checks shared by the API routers.

The identity service in front of us verifies the user and forwards the id in
the ``X-User-Id`` header.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse

from drivescore.core.access import ROLE_VIEWER, can_view_report


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def parse_user_id(x_user_id: str | None) -> int | None:
    if not x_user_id:
        return None
    try:
        return int(x_user_id)
    except ValueError:
        return None


async def check_access(x_user_id: str | None, car_id: int, *,
                       full_report: bool = False,
                       write: bool = False) -> JSONResponse | None:
    """Return an error response when the caller may not use this car."""
    from drivescore.main import get_access_policy

    user_id = parse_user_id(x_user_id)
    if user_id is None:
        return error_response(401, "missing or invalid user id")

    role = await get_access_policy().role_for(user_id, car_id)
    if role is None:
        return error_response(403, "no access to this car")
    if full_report and not can_view_report(role):
        return error_response(403, "viewers do not have access to driving reports")
    if write and role == ROLE_VIEWER:
        return error_response(403, "viewers cannot modify telemetry")
    return None
