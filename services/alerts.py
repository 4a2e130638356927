"""Alert lifecycle: escalation, deduplication and resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union
from uuid import uuid4

from models.records import (
    Alert,
    AlertSeverity,
    MonitoredUnit,
    SensorReading,
    UnitStatus,
    append_history,
)

logger = logging.getLogger(__name__)

SHOCK_MESSAGE = "CRITICAL: Shock detected during temperature excursion!"


@dataclass(frozen=True)
class CreateAlert:
    alert: Alert


@dataclass(frozen=True)
class ResolveUnitAlerts:
    """Close every open alert that belongs to ``unit_id``."""

    unit_id: str
    resolved_at: datetime


AlertMutation = Union[CreateAlert, ResolveUnitAlerts]


def _default_alert_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12].upper()}"


def resolve(alert: Alert, now: datetime) -> Alert:
    if not alert.active:
        return alert
    return replace(alert, active=False, resolved_at=max(now, alert.timestamp))


def apply_mutations(
    alerts: Sequence[Alert], mutations: Sequence[AlertMutation]
) -> List[Alert]:
    """Return a new newest-first alert log with ``mutations`` applied in order."""

    log = list(alerts)
    for mutation in mutations:
        if isinstance(mutation, CreateAlert):
            log.insert(0, mutation.alert)
        elif isinstance(mutation, ResolveUnitAlerts):
            log = [
                resolve(alert, mutation.resolved_at)
                if alert.unit_id == mutation.unit_id
                else alert
                for alert in log
            ]
        else:
            raise TypeError(f"Unsupported alert mutation {mutation!r}.")
    return log


class AlertManager:
    """Decides which alerts a status transition or manual event produces."""

    def __init__(self, id_factory: Optional[Callable[[str], str]] = None) -> None:
        self._id_factory = id_factory or _default_alert_id

    def on_tick(
        self,
        unit: MonitoredUnit,
        previous_status: UnitStatus,
        new_status: UnitStatus,
        reading: SensorReading,
        counter: int,
    ) -> Tuple[bool, List[AlertMutation]]:
        """Return the unit's next cooling flag and the alert mutations of one tick."""

        mutations: List[AlertMutation] = []
        cooling_active = unit.cooling_active

        if new_status is UnitStatus.critical:
            cooling_active = True
            if previous_status is not UnitStatus.critical:
                alert = Alert(
                    id=self._id_factory("ALT"),
                    unit_id=unit.id,
                    unit_name=unit.name,
                    timestamp=reading.timestamp,
                    message=(
                        f"CRITICAL: Temp deviation ({reading.temperature}°C) "
                        f"sustained for {counter} consecutive readings."
                    ),
                    severity=AlertSeverity.critical,
                )
                mutations.append(CreateAlert(alert))
                logger.info(
                    "Unit escalated to critical.",
                    extra={"unit_id": unit.id, "alert_id": alert.id, "counter": counter},
                )

        if cooling_active and counter == 0:
            cooling_active = False
            mutations.append(ResolveUnitAlerts(unit.id, reading.timestamp))
            logger.info(
                "Unit back in range; cooling stopped and alerts resolved.",
                extra={"unit_id": unit.id, "status": new_status},
            )

        return cooling_active, mutations

    def on_shock(
        self,
        unit: MonitoredUnit,
        now: datetime,
        history_capacity: int,
    ) -> Tuple[MonitoredUnit, Optional[Alert]]:
        shock_reading = replace(unit.current_reading, shock_detected=True, timestamp=now)
        updated = replace(
            unit,
            current_reading=shock_reading,
            history=append_history(unit.history, shock_reading, history_capacity),
        )

        if unit.status is UnitStatus.stable:
            logger.info("Shock recorded on stable unit.", extra={"unit_id": unit.id})
            return updated, None

        alert = Alert(
            id=self._id_factory("ALT-SHOCK"),
            unit_id=unit.id,
            unit_name=unit.name,
            timestamp=now,
            message=SHOCK_MESSAGE,
            severity=AlertSeverity.critical,
        )
        logger.info(
            "Shock during excursion escalated unit.",
            extra={"unit_id": unit.id, "alert_id": alert.id, "status": unit.status},
        )
        return replace(updated, status=UnitStatus.critical, cooling_active=True), alert
