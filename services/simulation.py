"""Batch transform that advances the whole fleet by one tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Sequence, Tuple

from models.records import MonitoredUnit, MonitorSettings, append_history
from services.alerts import AlertManager, AlertMutation
from services.clock import NoiseSource
from services.engine import SimulationEngine
from services.tracker import ViolationTracker

logger = logging.getLogger(__name__)


@dataclass
class SimulationContext:
    """Everything one tick reads, passed explicitly instead of captured."""

    units: Sequence[MonitoredUnit]
    tracker: ViolationTracker
    settings: MonitorSettings
    now: datetime
    rng: NoiseSource
    history_capacity: int = 50


@dataclass
class TickOutcome:
    units: List[MonitoredUnit]
    tracker: ViolationTracker
    mutations: List[AlertMutation] = field(default_factory=list)
    failed_units: List[str] = field(default_factory=list)


def _advance_unit(
    unit: MonitoredUnit,
    context: SimulationContext,
    tracker: ViolationTracker,
    engine: SimulationEngine,
    alert_manager: AlertManager,
) -> Tuple[MonitoredUnit, List[AlertMutation]]:
    reading = engine.next_reading(unit, context.settings, context.now, context.rng)
    counter, status = tracker.observe(unit.id, reading, context.settings)
    cooling_active, mutations = alert_manager.on_tick(
        unit, unit.status, status, reading, counter
    )
    advanced = replace(
        unit,
        current_reading=reading,
        history=append_history(unit.history, reading, context.history_capacity),
        status=status,
        cooling_active=cooling_active,
    )
    return advanced, mutations


def run_tick(
    context: SimulationContext,
    engine: SimulationEngine,
    alert_manager: AlertManager,
) -> TickOutcome:
    """Compute the next fleet state without touching the inputs.

    The tracker in ``context`` is copied, so a caller that discards the
    outcome leaves every counter as it was. A unit whose update raises keeps
    its previous state and counter; the remaining units are still advanced.
    """

    tracker = context.tracker.copy()
    outcome = TickOutcome(units=[], tracker=tracker)

    for unit in context.units:
        previous_counter = tracker.counter(unit.id)
        try:
            advanced, mutations = _advance_unit(
                unit, context, tracker, engine, alert_manager
            )
        except Exception:
            logger.exception(
                "Unit update failed; keeping previous state.",
                extra={"unit_id": unit.id, "reason": "tick_failure"},
            )
            tracker.restore(unit.id, previous_counter)
            outcome.units.append(unit)
            outcome.failed_units.append(unit.id)
            continue
        outcome.units.append(advanced)
        outcome.mutations.extend(mutations)

    return outcome
