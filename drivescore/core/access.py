"""Car access checks.

Who may see which car is owned by an external relationship service; the
report endpoints only ask it for the caller's role on a car.
"""

from __future__ import annotations

from typing import Protocol

ROLE_OWNER = "OWNER"
ROLE_DRIVER = "DRIVER"
ROLE_VIEWER = "VIEWER"

# Roles that may not open the full driving report (summaries and routes are
# still allowed).
REPORT_DENIED_ROLES = frozenset({ROLE_VIEWER})


class AccessPolicy(Protocol):
    """Port: returns the user's role on a car, or None without access."""

    async def role_for(self, user_id: int, car_id: int) -> str | None: ...


class OpenAccessPolicy:
    """Every user owns every car. For single-tenant deployments and dev."""

    async def role_for(self, user_id: int, car_id: int) -> str | None:
        return ROLE_OWNER


class StaticAccessPolicy:
    """Access table held in memory: {(user_id, car_id): role}."""

    def __init__(self, roles: dict[tuple[int, int], str]) -> None:
        self._roles = dict(roles)

    async def role_for(self, user_id: int, car_id: int) -> str | None:
        return self._roles.get((user_id, car_id))


def can_view_report(role: str | None) -> bool:
    return role is not None and role not in REPORT_DENIED_ROLES
