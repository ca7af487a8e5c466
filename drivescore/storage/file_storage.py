"""File-based telemetry store.

One JSON Lines file per car: base_dir/car_<car_id>.jsonl. Each line is a
cached row:

    {"id": 7, "car_id": 3, "car_data": "<raw payload>",
     "insert_time": "2025-05-01T08:00:00+00:00", "delete_time": null}

Payloads are kept verbatim; decoding happens at report time. Soft deletes
set ``delete_time`` and rewrite the car's file.
"""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import structlog

from drivescore.core.models import RawTelemetryRecord, assume_utc

log = structlog.get_logger()


def _serialize_record(record: RawTelemetryRecord) -> str:
    entry = {
        "id": record.record_id,
        "car_id": record.car_id,
        "car_data": record.car_data,
        "insert_time": record.insert_time.isoformat(),
        "delete_time": record.delete_time.isoformat() if record.delete_time else None,
    }
    return json.dumps(entry, separators=(",", ":"))


def _deserialize_record(line: str) -> RawTelemetryRecord:
    entry = json.loads(line)
    delete_time = entry.get("delete_time")
    return RawTelemetryRecord(
        record_id=entry["id"],
        car_id=entry["car_id"],
        car_data=entry["car_data"],
        insert_time=assume_utc(datetime.fromisoformat(entry["insert_time"])),
        delete_time=assume_utc(datetime.fromisoformat(delete_time)) if delete_time else None,
    )


class FileTelemetryStore:
    """TelemetryStore backed by per-car JSON Lines files on disk."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._next_record_id = self._scan_max_record_id() + 1

    def _car_path(self, car_id: int) -> Path:
        return self._base_dir / f"car_{car_id}.jsonl"

    def _iter_records(self, path: Path) -> Iterator[RawTelemetryRecord]:
        if not path.exists():
            return
        with open(path, encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield _deserialize_record(line)
                except (json.JSONDecodeError, KeyError, TypeError, ValueError):
                    log.error("store_line_unreadable", path=str(path), line=line_no)

    def _scan_max_record_id(self) -> int:
        max_id = 0
        for path in self._base_dir.glob("car_*.jsonl"):
            for record in self._iter_records(path):
                max_id = max(max_id, record.record_id)
        return max_id

    async def fetch(self, car_id: int, start: datetime, end: datetime) -> list[RawTelemetryRecord]:
        """Live records for a car with start <= insert_time <= end."""
        start, end = assume_utc(start), assume_utc(end)
        records = [
            r for r in self._iter_records(self._car_path(car_id))
            if not r.is_deleted and start <= r.insert_time <= end
        ]
        records.sort(key=lambda r: (r.insert_time, r.record_id))
        log.debug("telemetry_fetched", car_id=car_id, count=len(records))
        return records

    async def append(self, car_id: int, car_data: str,
                     insert_time: datetime | None = None) -> RawTelemetryRecord:
        """Store one raw payload for a car."""
        record = RawTelemetryRecord(
            record_id=self._next_record_id,
            car_id=car_id,
            car_data=car_data,
            insert_time=assume_utc(insert_time) if insert_time else datetime.now(timezone.utc),
        )
        self._next_record_id += 1

        with open(self._car_path(car_id), "a", encoding="utf-8") as f:
            f.write(_serialize_record(record) + "\n")

        log.debug("telemetry_written", record_id=record.record_id, car_id=car_id)
        return record

    async def soft_delete(self, car_id: int, record_ids: set[int]) -> int:
        """Mark records as deleted. Returns how many were newly marked."""
        path = self._car_path(car_id)
        if not record_ids or not path.exists():
            return 0

        now = datetime.now(timezone.utc)
        deleted = 0
        kept: list[RawTelemetryRecord] = []
        for record in self._iter_records(path):
            if record.record_id in record_ids and not record.is_deleted:
                record = replace(record, delete_time=now)
                deleted += 1
            kept.append(record)

        if deleted:
            tmp_path = path.with_suffix(".jsonl.tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                for record in kept:
                    f.write(_serialize_record(record) + "\n")
            tmp_path.replace(path)
            log.info("telemetry_soft_deleted", car_id=car_id, count=deleted)

        return deleted
