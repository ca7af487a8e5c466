"""Storage interface (port) for cached raw telemetry."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from drivescore.core.models import RawTelemetryRecord


class TelemetryStore(Protocol):
    """Port: holds raw telemetry payloads per car.

    ``fetch`` returns live (not soft-deleted) records whose insert time falls
    inside [start, end], ordered by insert time ascending.
    """

    async def fetch(self, car_id: int, start: datetime, end: datetime) -> list[RawTelemetryRecord]: ...

    async def append(self, car_id: int, car_data: str,
                     insert_time: datetime | None = None) -> RawTelemetryRecord: ...

    async def soft_delete(self, car_id: int, record_ids: set[int]) -> int: ...
