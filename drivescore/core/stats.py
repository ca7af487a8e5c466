"""Service statistics and active-car tracking.

Tracks in-memory counters and a sliding window of cars that recently
uploaded telemetry. No framework dependencies.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass


@dataclass
class CarActivity:
    """Tracks a single car's recent uploads."""
    last_seen: float          # time.monotonic() timestamp
    readings_sent: int = 0


class ServiceStats:
    """Thread-safe service counters.

    A car is "active" while its last upload is within
    ``active_window_seconds`` (default 120s).
    """

    def __init__(self, active_window_seconds: float = 120.0) -> None:
        self._lock = threading.Lock()
        self._started_at = time.time()
        self._active_window = active_window_seconds

        # Counters
        self.readings_ingested: int = 0
        self.bytes_ingested: int = 0
        self.readings_rejected: int = 0
        self.records_deleted: int = 0
        self.reports_generated: int = 0
        self.routes_generated: int = 0
        self.empty_datasets: int = 0
        self.records_decoded: int = 0
        self.records_skipped: int = 0
        self.fetch_timeouts: int = 0

        # Car tracking: car_id → CarActivity
        self._cars: dict[int, CarActivity] = {}

    def record_ingested(self, car_id: int, count: int, size_bytes: int) -> None:
        """Record that readings were uploaded for a car."""
        now = time.monotonic()
        with self._lock:
            self.readings_ingested += count
            self.bytes_ingested += size_bytes
            if car_id in self._cars:
                car = self._cars[car_id]
                car.last_seen = now
                car.readings_sent += count
            else:
                self._cars[car_id] = CarActivity(last_seen=now, readings_sent=count)

    def record_rejected(self, count: int = 1) -> None:
        with self._lock:
            self.readings_rejected += count

    def record_deleted(self, count: int) -> None:
        with self._lock:
            self.records_deleted += count

    def record_decoded(self, decoded: int, skipped: int) -> None:
        with self._lock:
            self.records_decoded += decoded
            self.records_skipped += skipped

    def record_report(self) -> None:
        with self._lock:
            self.reports_generated += 1

    def record_route(self) -> None:
        with self._lock:
            self.routes_generated += 1

    def record_empty_dataset(self) -> None:
        with self._lock:
            self.empty_datasets += 1

    def record_fetch_timeout(self) -> None:
        with self._lock:
            self.fetch_timeouts += 1

    def _prune_stale_cars(self, now: float) -> None:
        """Remove cars not seen within the active window. Caller holds lock."""
        cutoff = now - self._active_window
        stale = [cid for cid, car in self._cars.items() if car.last_seen < cutoff]
        for cid in stale:
            del self._cars[cid]

    def snapshot(self) -> dict:
        """Return a JSON-serializable snapshot of all stats."""
        now_mono = time.monotonic()
        with self._lock:
            self._prune_stale_cars(now_mono)

            return {
                "uptime_seconds": round(time.time() - self._started_at, 1),
                "readings_ingested": self.readings_ingested,
                "bytes_ingested": self.bytes_ingested,
                "readings_rejected": self.readings_rejected,
                "records_deleted": self.records_deleted,
                "reports_generated": self.reports_generated,
                "routes_generated": self.routes_generated,
                "empty_datasets": self.empty_datasets,
                "records_decoded": self.records_decoded,
                "records_skipped": self.records_skipped,
                "fetch_timeouts": self.fetch_timeouts,
                "active_cars": {
                    "total": len(self._cars),
                    "window_seconds": self._active_window,
                    "readings_by_car": {
                        str(cid): car.readings_sent for cid, car in sorted(self._cars.items())
                    },
                },
            }
