"""Report service — fetches a telemetry window, decodes it, and runs the
analysis pipeline.

This is the core business logic. It depends on the TelemetryStore protocol,
not a concrete implementation. The only suspension point is the store fetch,
which is bounded by ``fetch_timeout``; everything after it is pure
computation on a per-request copy of the readings.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

import structlog

from drivescore.core.decoder import DecodeResult, PayloadError, decode_records, parse_reading
from drivescore.core.models import EmptyDataset
from drivescore.core.recommendations import DEFAULT_LOCALE, resolve_locale
from drivescore.core.report import build_report, build_route, insurance_summary, reseller_summary
from drivescore.core.thresholds import DEFAULT_THRESHOLDS

if TYPE_CHECKING:
    from drivescore.core.models import (
        DrivingReport,
        InsuranceSummary,
        ResellerSummary,
        RouteData,
    )
    from drivescore.core.stats import ServiceStats
    from drivescore.core.thresholds import AnalysisThresholds
    from drivescore.storage.base import TelemetryStore

log = structlog.get_logger()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class IngestResult:
    stored_ids: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class ReportService:
    """Generates driving reports and their derived views for one car."""

    def __init__(
        self,
        store: TelemetryStore,
        stats: ServiceStats,
        thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
        locale: str = DEFAULT_LOCALE,
        fetch_timeout: float | None = 10.0,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._stats = stats
        self._thresholds = thresholds
        self._locale = resolve_locale(locale)
        self._fetch_timeout = fetch_timeout
        self._clock = clock

    @property
    def thresholds(self) -> AnalysisThresholds:
        return self._thresholds

    @property
    def locale(self) -> str:
        return self._locale

    async def load_readings(self, car_id: int, start: datetime, end: datetime) -> DecodeResult:
        """Fetch and decode a window. Fetch errors and timeouts propagate."""
        try:
            records = await asyncio.wait_for(
                self._store.fetch(car_id, start, end), timeout=self._fetch_timeout,
            )
        except asyncio.TimeoutError:
            self._stats.record_fetch_timeout()
            log.error("telemetry_fetch_timeout", car_id=car_id,
                      timeout_seconds=self._fetch_timeout)
            raise

        result = decode_records(records)
        self._stats.record_decoded(len(result.readings), len(result.failures))
        return result

    def _empty(self, car_id: int, result: DecodeResult, reason: str | None = None) -> EmptyDataset:
        self._stats.record_empty_dataset()
        log.info("report_empty_dataset", car_id=car_id, skipped=len(result.failures))
        if reason:
            return EmptyDataset(car_id=car_id, reason=reason)
        return EmptyDataset(car_id=car_id)

    async def generate_report(self, car_id: int, start: datetime,
                              end: datetime) -> DrivingReport | EmptyDataset:
        result = await self.load_readings(car_id, start, end)
        if result.is_empty:
            return self._empty(car_id, result)

        report = build_report(
            car_id,
            result.readings,
            generated_at=self._clock(),
            thresholds=self._thresholds,
            locale=self._locale,
        )
        self._stats.record_report()
        log.info("report_generated", car_id=car_id,
                 readings=len(result.readings), skipped=len(result.failures),
                 score=report.overall_driving_score)
        return report

    async def generate_insurance_summary(self, car_id: int, start: datetime,
                                         end: datetime) -> InsuranceSummary | EmptyDataset:
        report = await self.generate_report(car_id, start, end)
        if isinstance(report, EmptyDataset):
            return report
        return insurance_summary(report)

    async def generate_reseller_summary(self, car_id: int, start: datetime,
                                        end: datetime) -> ResellerSummary | EmptyDataset:
        report = await self.generate_report(car_id, start, end)
        if isinstance(report, EmptyDataset):
            return report
        return reseller_summary(report)

    async def get_route(self, car_id: int, start: datetime,
                        end: datetime) -> RouteData | EmptyDataset:
        result = await self.load_readings(car_id, start, end)
        if result.is_empty:
            return self._empty(car_id, result, "no route data found for the specified period")
        self._stats.record_route()
        return build_route(car_id, result.readings)

    async def ingest(self, car_id: int, payloads: list[object], size_bytes: int = 0) -> IngestResult:
        """Validate and store raw readings. Invalid ones are rejected, not stored."""
        result = IngestResult()
        for index, payload in enumerate(payloads):
            try:
                parse_reading(payload)
            except PayloadError as exc:
                result.errors.append(f"reading {index}: {exc}")
                continue
            record = await self._store.append(car_id, json.dumps(payload, separators=(",", ":")))
            result.stored_ids.append(record.record_id)

        if result.errors:
            self._stats.record_rejected(len(result.errors))
        if result.stored_ids:
            self._stats.record_ingested(car_id, len(result.stored_ids), size_bytes)
            log.info("telemetry_ingested", car_id=car_id,
                     count=len(result.stored_ids), rejected=len(result.errors))
        return result

    async def delete(self, car_id: int, record_ids: set[int]) -> int:
        deleted = await self._store.soft_delete(car_id, record_ids)
        self._stats.record_deleted(deleted)
        return deleted
