from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from threading import Lock
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from models.records import Alert, MonitoredUnit, MonitorSettings, UnitStatus
from services.alerts import AlertManager, apply_mutations, resolve
from services.clock import Clock, NoiseSource, SystemClock
from services.engine import SimulationEngine
from services.simulation import SimulationContext, TickOutcome, run_tick
from services.tracker import ViolationTracker
from services.validation import SettingsUpdate, merge_settings, parse_finite

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FleetSummary:
    total_units: int
    active_alerts: int
    status_counts: Dict[UnitStatus, int] = field(default_factory=dict)


class StateStore:
    """Single source of truth for units, alerts and monitor settings.

    Every read and write goes through one lock, so a tick is applied as one
    indivisible swap and commands never interleave with a tick in progress.
    Snapshots handed out are immutable dataclasses and need no copying.
    """

    def __init__(
        self,
        units: Iterable[MonitoredUnit],
        settings: MonitorSettings,
        history_capacity: int = 50,
        engine: Optional[SimulationEngine] = None,
        alert_manager: Optional[AlertManager] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._units: Dict[str, MonitoredUnit] = {unit.id: unit for unit in units}
        self._alerts: List[Alert] = []
        self._settings = settings
        self._tracker = ViolationTracker()
        self.history_capacity = history_capacity
        self.engine = engine or SimulationEngine()
        self.alert_manager = alert_manager or AlertManager()
        self.clock = clock or SystemClock()
        self.tick_count = 0
        self._lock = Lock()

    def list_units(self) -> list[MonitoredUnit]:
        with self._lock:
            return list(self._units.values())

    def get_unit(self, unit_id: str) -> Optional[MonitoredUnit]:
        with self._lock:
            return self._units.get(unit_id)

    def list_alerts(self, active: Optional[bool] = None) -> list[Alert]:
        """Return alerts newest first, optionally filtered on ``active``."""

        with self._lock:
            alerts = list(self._alerts)
        if active is None:
            return alerts
        return [alert for alert in alerts if alert.active is active]

    def get_settings(self) -> MonitorSettings:
        with self._lock:
            return self._settings

    def violation_counter(self, unit_id: str) -> int:
        with self._lock:
            return self._tracker.counter(unit_id)

    def summary(self) -> FleetSummary:
        with self._lock:
            units = list(self._units.values())
            active_alerts = sum(1 for alert in self._alerts if alert.active)
        counts = {status: 0 for status in UnitStatus}
        for unit in units:
            counts[unit.status] += 1
        return FleetSummary(
            total_units=len(units),
            active_alerts=active_alerts,
            status_counts=counts,
        )

    def tick(self, rng: NoiseSource) -> TickOutcome:
        with self._lock:
            now = self.clock.now()
            context = SimulationContext(
                units=tuple(self._units.values()),
                tracker=self._tracker,
                settings=self._settings,
                now=now,
                rng=rng,
                history_capacity=self.history_capacity,
            )
            outcome = run_tick(context, self.engine, self.alert_manager)
            self._units = {unit.id: unit for unit in outcome.units}
            self._tracker = outcome.tracker
            self._alerts = apply_mutations(self._alerts, outcome.mutations)
            self.tick_count += 1
        return outcome

    def set_target_temperature(self, unit_id: str, value: Any) -> MonitoredUnit:
        target = parse_finite(value)
        with self._lock:
            unit = self._require_unit(unit_id)
            updated = replace(unit, target_temperature=target)
            self._units[unit_id] = updated
        return updated

    def trigger_shock(self, unit_id: str) -> Tuple[MonitoredUnit, Optional[Alert]]:
        with self._lock:
            unit = self._require_unit(unit_id)
            now = self.clock.now()
            updated, alert = self.alert_manager.on_shock(unit, now, self.history_capacity)
            self._units[unit_id] = updated
            if alert is not None:
                self._alerts.insert(0, alert)
        return updated, alert

    def reset_alert(self, alert_id: str) -> Alert:
        with self._lock:
            now = self.clock.now()
            for index, alert in enumerate(self._alerts):
                if alert.id == alert_id:
                    resolved = resolve(alert, now)
                    self._alerts[index] = resolved
                    return resolved
        logger.warning("Alert not found.", extra={"alert_id": alert_id})
        raise KeyError(f"Alert {alert_id!r} not found.")

    def update_settings(self, partial: Mapping[str, Any]) -> SettingsUpdate:
        with self._lock:
            update = merge_settings(self._settings, partial)
            self._settings = update.settings
        return update

    def _require_unit(self, unit_id: str) -> MonitoredUnit:
        unit = self._units.get(unit_id)
        if unit is None:
            logger.warning("Unit not found.", extra={"unit_id": unit_id})
            raise KeyError(f"Unit {unit_id!r} not found.")
        return unit
