"""Units registered when the monitor starts."""

from __future__ import annotations

from datetime import datetime
from typing import List

from models.records import MonitoredUnit, SensorReading

_FLEET = (
    # id, name, batch, drug, target temperature, humidity
    ("BX-1001", "Pfizer-BioNTech Alpha", "BATCH-8821", "Comirnaty Variant", 5.0, 45.0),
    ("BX-1002", "Moderna Spikevax Delta", "BATCH-9932", "Spikevax", 4.2, 50.0),
    ("BX-1003", "Insulin Glargine Transport", "BATCH-7711", "Lantus Solostar", 6.5, 40.0),
    ("BX-1004", "Flu Vaccine Quadrivalent", "BATCH-3321", "Fluarix", 3.0, 35.0),
)


def initial_fleet(now: datetime) -> List[MonitoredUnit]:
    units: List[MonitoredUnit] = []
    for unit_id, name, batch, drug, target, humidity in _FLEET:
        units.append(
            MonitoredUnit(
                id=unit_id,
                name=name,
                batch_number=batch,
                drug_name=drug,
                current_reading=SensorReading(
                    timestamp=now, temperature=target, humidity=humidity
                ),
                target_temperature=target,
            )
        )
    return units
