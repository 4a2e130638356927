"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class UnitStatus(str, Enum):
    """Condition of a monitored unit derived from its violation counter."""

    stable = "Stable"
    at_risk = "At Risk"
    critical = "Critical"


class AlertSeverity(str, Enum):
    warning = "Warning"
    critical = "Critical"


@dataclass(frozen=True, slots=True)
class SensorReading:
    """A single telemetry sample emitted by a unit."""

    timestamp: datetime
    temperature: float
    humidity: float
    shock_detected: bool = False


@dataclass(frozen=True, slots=True)
class MonitoredUnit:
    """A tracked shipment unit and its most recent telemetry."""

    id: str
    name: str
    batch_number: str
    drug_name: str
    current_reading: SensorReading
    target_temperature: float
    history: Tuple[SensorReading, ...] = ()
    status: UnitStatus = UnitStatus.stable
    cooling_active: bool = False


@dataclass(frozen=True, slots=True)
class Alert:
    id: str
    unit_id: str
    unit_name: str
    timestamp: datetime
    message: str
    severity: AlertSeverity
    active: bool = True
    resolved_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class MonitorSettings:
    """Thresholds read by the engine and the violation tracker."""

    temp_min: float = 2.0
    temp_max: float = 8.0
    humidity_max: float = 60.0
    consecutive_violations_trigger: int = 3


def append_history(
    history: Tuple[SensorReading, ...],
    reading: SensorReading,
    capacity: int,
) -> Tuple[SensorReading, ...]:
    """Append ``reading`` keeping only the newest ``capacity`` entries."""

    return (*history, reading)[-capacity:]
