"""Consecutive-violation counting and status derivation."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Tuple

from models.records import MonitorSettings, SensorReading, UnitStatus

logger = logging.getLogger(__name__)


def is_violation(reading: SensorReading, settings: MonitorSettings) -> bool:
    return (
        reading.temperature > settings.temp_max
        or reading.temperature < settings.temp_min
    )


def derive_status(counter: int, trigger: int) -> UnitStatus:
    if counter <= 0:
        return UnitStatus.stable
    if counter < trigger:
        return UnitStatus.at_risk
    return UnitStatus.critical


class ViolationTracker:
    """Owns the per-unit consecutive-violation counters."""

    def __init__(self, counters: Optional[Mapping[str, int]] = None) -> None:
        self._counters: Dict[str, int] = dict(counters or {})

    def copy(self) -> "ViolationTracker":
        return ViolationTracker(self._counters)

    def counter(self, unit_id: str) -> int:
        value = self._counters.get(unit_id, 0)
        if value < 0:
            logger.error(
                "Negative violation counter; clamping to zero.",
                extra={"unit_id": unit_id, "counter": value},
            )
            self._counters[unit_id] = 0
            return 0
        return value

    def snapshot(self) -> Dict[str, int]:
        return dict(self._counters)

    def observe(
        self,
        unit_id: str,
        reading: SensorReading,
        settings: MonitorSettings,
    ) -> Tuple[int, UnitStatus]:
        """Record ``reading`` and return the updated counter and status."""

        if is_violation(reading, settings):
            counter = self.counter(unit_id) + 1
        else:
            counter = 0
        self._counters[unit_id] = counter
        return counter, derive_status(counter, settings.consecutive_violations_trigger)

    def restore(self, unit_id: str, counter: int) -> None:
        """Put back a counter captured before a failed update."""

        self._counters[unit_id] = max(counter, 0)
