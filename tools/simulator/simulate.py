#!/usr/bin/env python3
"""drivescore telemetry simulator.

Generates realistic per-second sensor readings for a fleet of cars and
uploads them to the service.

Usage:
    # 3 cars driving around Riga for 10 minutes of simulated time
    python -m tools.simulator.simulate --server http://localhost:8000 --cars 3 --duration 600

    # One aggressive driver (frequent harsh braking, speeding, high RPM)
    python -m tools.simulator.simulate --cars 1 --profile aggressive

    # Replay faster than real time, 60 readings per upload
    python -m tools.simulator.simulate --batch-size 60 --no-sleep
"""

from __future__ import annotations

import argparse
import asyncio
import json
import math
import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import httpx

# Probability per reading of each manoeuvre, by driver profile.
PROFILES = {
    "calm": {"brake": 0.005, "accel": 0.005, "corner": 0.005, "rev": 0.002, "cruise_kmh": 42.0},
    "normal": {"brake": 0.02, "accel": 0.02, "corner": 0.02, "rev": 0.01, "cruise_kmh": 48.0},
    "aggressive": {"brake": 0.08, "accel": 0.08, "corner": 0.06, "rev": 0.06, "cruise_kmh": 58.0},
}


@dataclass
class SimCar:
    car_id: int
    vehicle_id: str
    lat: float
    lon: float
    heading: float
    speed_kmh: float
    odometer_km: float
    fuel_level: float
    sent: int = 0
    errors: int = 0
    pending: list[dict] = field(default_factory=list)


def make_reading(car: SimCar, timestamp: datetime, profile: dict) -> dict:
    """Create one SensorReading payload and advance the car by one second."""
    accel_x = random.gauss(0, 0.05)
    accel_y = random.gauss(0, 0.05)
    rpm = int(1800 + car.speed_kmh * 28 + random.randint(-150, 150))
    throttle = max(0.0, min(100.0, 20 + car.speed_kmh * 0.4 + random.uniform(-5, 5)))
    brake = False

    roll = random.random()
    if roll < profile["brake"]:
        accel_y = -random.uniform(0.32, 0.75)
        brake = True
        car.speed_kmh = max(0.0, car.speed_kmh - 12)
    elif roll < profile["brake"] + profile["accel"]:
        accel_y = random.uniform(0.32, 0.7)
        throttle = random.uniform(70, 100)
        car.speed_kmh += 8
    if random.random() < profile["corner"]:
        accel_x = random.choice([-1, 1]) * random.uniform(0.27, 0.6)
        car.heading = (car.heading + random.uniform(30, 90)) % 360
    if random.random() < profile["rev"]:
        rpm = random.randint(5050, 6800)

    # Drift back toward cruising speed.
    car.speed_kmh += (profile["cruise_kmh"] - car.speed_kmh) * 0.1 + random.uniform(-2, 2)
    car.speed_kmh = max(0.0, car.speed_kmh)

    distance_km = car.speed_kmh / 3600
    heading_rad = math.radians(car.heading)
    car.lat += (distance_km * math.cos(heading_rad)) / 111.0
    car.lon += (distance_km * math.sin(heading_rad)) / (111.0 * math.cos(math.radians(car.lat)))
    car.odometer_km += distance_km
    car.fuel_level = max(0.0, car.fuel_level - distance_km * 0.08)

    return {
        "SensorDataId": str(uuid.uuid4()),
        "VehicleId": car.vehicle_id,
        "Timestamp": timestamp.isoformat(),
        "Latitude": round(car.lat, 6),
        "Longitude": round(car.lon, 6),
        "Altitude": round(random.uniform(5, 15), 1),
        "GpsAccuracy": round(random.uniform(2, 8), 1),
        "Heading": round(car.heading, 1),
        "AccelerationX": round(accel_x, 3),
        "AccelerationY": round(accel_y, 3),
        "AccelerationZ": round(1.0 + random.gauss(0, 0.02), 3),
        "SpeedKmh": round(car.speed_kmh, 1),
        "EngineRpm": rpm,
        "EngineTemperature": random.randint(85, 95),
        "FuelLevel": round(car.fuel_level, 2),
        "OdometerKm": round(car.odometer_km, 3),
        "ThrottlePosition": round(throttle, 1),
        "BrakePedal": brake,
    }


async def flush(client: httpx.AsyncClient, car: SimCar, server_url: str, user_id: int) -> None:
    if not car.pending:
        return
    try:
        resp = await client.post(
            f"{server_url}/api/v1/telemetry/{car.car_id}",
            content=json.dumps({"readings": car.pending}),
            headers={"content-type": "application/json", "x-user-id": str(user_id)},
        )
        if resp.status_code == 200:
            car.sent += resp.json().get("stored", 0)
        else:
            car.errors += len(car.pending)
    except httpx.RequestError:
        car.errors += len(car.pending)
    car.pending = []


async def run_car(
    client: httpx.AsyncClient,
    car: SimCar,
    args: argparse.Namespace,
) -> None:
    """Simulate one car reporting once per simulated second."""
    profile = PROFILES[args.profile]
    start = datetime.now(timezone.utc)

    for second in range(args.duration):
        timestamp = start + timedelta(seconds=second)
        car.pending.append(make_reading(car, timestamp, profile))
        if len(car.pending) >= args.batch_size:
            await flush(client, car, args.server, args.user_id)
        if not args.no_sleep:
            await asyncio.sleep(1.0)

    await flush(client, car, args.server, args.user_id)


async def run_simulation(args: argparse.Namespace) -> None:
    """Run the full simulation."""
    center_lat, center_lon = args.center
    cars = [
        SimCar(
            car_id=args.first_car_id + i,
            vehicle_id=f"SIM-{args.first_car_id + i:04d}",
            lat=center_lat + random.uniform(-0.02, 0.02),
            lon=center_lon + random.uniform(-0.02, 0.02),
            heading=random.uniform(0, 360),
            speed_kmh=random.uniform(20, 40),
            odometer_km=random.uniform(10_000, 90_000),
            fuel_level=random.uniform(40, 100),
        )
        for i in range(args.cars)
    ]

    print(f"Starting simulation: {args.cars} cars, profile={args.profile}")
    print(f"  Center: {center_lat:.4f}, {center_lon:.4f}")
    print(f"  Duration: {args.duration}s simulated")
    print(f"  Server: {args.server}")
    print()

    start = time.monotonic()

    async with httpx.AsyncClient(timeout=10.0) as client:
        await asyncio.gather(*(run_car(client, car, args) for car in cars))

    elapsed = time.monotonic() - start
    total_sent = sum(c.sent for c in cars)
    total_errors = sum(c.errors for c in cars)

    print(f"\nSimulation complete in {elapsed:.1f}s")
    print(f"  Readings stored: {total_sent}")
    print(f"  Errors: {total_errors}")
    for car in cars:
        print(f"  car {car.car_id}: {car.sent} readings, odometer {car.odometer_km:.1f} km")


def main():
    parser = argparse.ArgumentParser(description="drivescore telemetry simulator")
    parser.add_argument("--server", default="http://localhost:8000", help="Server URL")
    parser.add_argument("--cars", type=int, default=3, help="Number of simulated cars")
    parser.add_argument("--first-car-id", type=int, default=1, help="Car id of the first car")
    parser.add_argument("--user-id", type=int, default=1, help="User id sent as X-User-Id")
    parser.add_argument("--duration", type=int, default=300, help="Simulated seconds per car")
    parser.add_argument("--batch-size", type=int, default=10, help="Readings per upload")
    parser.add_argument("--profile", choices=sorted(PROFILES), default="normal",
                        help="Driver profile")
    parser.add_argument("--no-sleep", action="store_true",
                        help="Upload as fast as possible instead of in real time")
    parser.add_argument("--center", type=str, default="56.9496,24.1052",
                        help="Center lat,lon (default: Riga)")

    args = parser.parse_args()

    lat, lon = args.center.split(",")
    args.center = (float(lat), float(lon))

    asyncio.run(run_simulation(args))


if __name__ == "__main__":
    main()
