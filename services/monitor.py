"""Monitoring orchestration for the simulated fleet."""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Any, Mapping, Optional, Tuple

from datastore.state_store import FleetSummary, StateStore
from models.fleet import initial_fleet
from models.records import Alert, MonitoredUnit, MonitorSettings
from services.clock import NoiseSource, SystemClock, build_noise_source
from services.scheduler import TickScheduler
from services.simulation import TickOutcome
from services.validation import SettingsUpdate
from settings import get_settings

logger = logging.getLogger(__name__)


class MonitorService:
    """Coordinates the state store, the tick scheduler and injected sources."""

    def __init__(
        self,
        store: StateStore,
        rng: NoiseSource,
        tick_interval: float = 1.0,
    ) -> None:
        self.store = store
        self.rng = rng
        self.scheduler = TickScheduler(self.tick, interval=tick_interval)

    def start(self) -> None:
        self.scheduler.start()

    def shutdown(self) -> None:
        """Stop ticking during application shutdown."""
        self.scheduler.shutdown()

    def tick(self) -> TickOutcome:
        started = time.perf_counter()
        outcome = self.store.tick(self.rng)
        logger.debug(
            "Tick applied.",
            extra={
                "tick": self.store.tick_count,
                "duration_ms": int((time.perf_counter() - started) * 1000),
            },
        )
        return outcome

    def list_units(self) -> list[MonitoredUnit]:
        return self.store.list_units()

    def get_unit(self, unit_id: str) -> MonitoredUnit:
        unit = self.store.get_unit(unit_id)
        if unit is None:
            raise KeyError(f"Unit {unit_id!r} not found.")
        return unit

    def list_alerts(self, active: Optional[bool] = None) -> list[Alert]:
        return self.store.list_alerts(active=active)

    def get_settings(self) -> MonitorSettings:
        return self.store.get_settings()

    def summary(self) -> FleetSummary:
        return self.store.summary()

    def set_target_temperature(self, unit_id: str, value: Any) -> MonitoredUnit:
        return self.store.set_target_temperature(unit_id, value)

    def trigger_shock(self, unit_id: str) -> Tuple[MonitoredUnit, Optional[Alert]]:
        return self.store.trigger_shock(unit_id)

    def reset_alert(self, alert_id: str) -> Alert:
        return self.store.reset_alert(alert_id)

    def update_settings(self, partial: Mapping[str, Any]) -> SettingsUpdate:
        return self.store.update_settings(partial)


@lru_cache
def build_default_monitor(seed: Optional[int] = None) -> MonitorService:
    """Factory that wires the monitor with the default fleet and sources."""
    settings = get_settings()
    clock = SystemClock()
    thresholds = MonitorSettings(
        temp_min=settings.temp_min,
        temp_max=settings.temp_max,
        humidity_max=settings.humidity_max,
        consecutive_violations_trigger=settings.consecutive_violations_trigger,
    )
    store = StateStore(
        units=initial_fleet(clock.now()),
        settings=thresholds,
        history_capacity=settings.history_capacity,
        clock=clock,
    )
    rng = build_noise_source(seed if seed is not None else settings.random_seed)
    return MonitorService(
        store=store, rng=rng, tick_interval=settings.tick_interval
    )
