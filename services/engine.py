"""Physical model that advances a unit's telemetry by one tick."""

from __future__ import annotations

from datetime import datetime

from models.records import MonitoredUnit, MonitorSettings, SensorReading
from services.clock import NoiseSource

COOLING_RATE = 0.5
DRIFT_FACTOR = 0.1
TEMPERATURE_NOISE = 0.1
HUMIDITY_NOISE = 0.5
HUMIDITY_FLOOR = 20.0
HUMIDITY_CEILING = 90.0


class SimulationEngine:
    """Pure physical model that can be unit tested in isolation.

    Stands in for a real telemetry feed: each call derives the next reading
    from the unit's current one, its set-point and a single noise source.
    """

    def next_reading(
        self,
        unit: MonitoredUnit,
        settings: MonitorSettings,
        now: datetime,
        rng: NoiseSource,
    ) -> SensorReading:
        previous = unit.current_reading
        temperature = previous.temperature

        if unit.cooling_active:
            # Corrective cooling pulls down hard but stops one degree above the floor.
            temperature = max(settings.temp_min + 1, temperature - COOLING_RATE)
        else:
            drift = (unit.target_temperature - temperature) * DRIFT_FACTOR
            noise = rng.uniform(-TEMPERATURE_NOISE, TEMPERATURE_NOISE)
            temperature = temperature + drift + noise

        humidity = previous.humidity + rng.uniform(-HUMIDITY_NOISE, HUMIDITY_NOISE)
        humidity = max(HUMIDITY_FLOOR, min(HUMIDITY_CEILING, humidity))

        return SensorReading(
            timestamp=now,
            temperature=round(temperature, 2),
            humidity=round(humidity, 2),
            shock_detected=False,
        )
