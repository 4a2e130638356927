"""Unit tests for alert creation, deduplication and resolution."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

from models.records import (
    Alert,
    AlertSeverity,
    MonitoredUnit,
    SensorReading,
    UnitStatus,
)
from services.alerts import (
    SHOCK_MESSAGE,
    AlertManager,
    CreateAlert,
    ResolveUnitAlerts,
    apply_mutations,
    resolve,
)

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _sequential_ids():
    counter = {"value": 0}

    def factory(prefix: str) -> str:
        counter["value"] += 1
        return f"{prefix}-{counter['value']}"

    return factory


def _reading(temperature: float, at: datetime = NOW) -> SensorReading:
    return SensorReading(timestamp=at, temperature=temperature, humidity=45.0)


def _unit(
    status: UnitStatus = UnitStatus.stable,
    cooling: bool = False,
    temperature: float = 5.0,
) -> MonitoredUnit:
    return MonitoredUnit(
        id="BX-1",
        name="Test unit",
        batch_number="BATCH-1",
        drug_name="Drug",
        current_reading=_reading(temperature),
        target_temperature=5.0,
        status=status,
        cooling_active=cooling,
    )


def _alert(alert_id: str, unit_id: str = "BX-1", at: datetime = NOW) -> Alert:
    return Alert(
        id=alert_id,
        unit_id=unit_id,
        unit_name="Test unit",
        timestamp=at,
        message="CRITICAL",
        severity=AlertSeverity.critical,
    )


def test_escalation_edge_creates_one_critical_alert() -> None:
    manager = AlertManager(id_factory=_sequential_ids())

    cooling, mutations = manager.on_tick(
        _unit(UnitStatus.at_risk), UnitStatus.at_risk, UnitStatus.critical, _reading(9.3), 3
    )

    assert cooling is True
    assert len(mutations) == 1
    created = mutations[0]
    assert isinstance(created, CreateAlert)
    assert created.alert.id == "ALT-1"
    assert created.alert.active is True
    assert created.alert.severity is AlertSeverity.critical
    assert "9.3" in created.alert.message
    assert "3 consecutive" in created.alert.message


def test_remaining_critical_creates_no_alert() -> None:
    manager = AlertManager()

    cooling, mutations = manager.on_tick(
        _unit(UnitStatus.critical, cooling=True),
        UnitStatus.critical,
        UnitStatus.critical,
        _reading(9.5),
        4,
    )

    assert cooling is True
    assert mutations == []


def test_at_risk_is_silent() -> None:
    manager = AlertManager()

    entering = manager.on_tick(_unit(), UnitStatus.stable, UnitStatus.at_risk, _reading(9.0), 1)
    staying = manager.on_tick(
        _unit(UnitStatus.at_risk), UnitStatus.at_risk, UnitStatus.at_risk, _reading(9.0), 2
    )

    assert entering == (False, [])
    assert staying == (False, [])


def test_de_escalation_clears_cooling_and_resolves_unit_alerts() -> None:
    manager = AlertManager()

    cooling, mutations = manager.on_tick(
        _unit(UnitStatus.critical, cooling=True),
        UnitStatus.critical,
        UnitStatus.stable,
        _reading(7.5),
        0,
    )

    assert cooling is False
    assert mutations == [ResolveUnitAlerts("BX-1", NOW)]


def test_stable_without_cooling_resolves_nothing() -> None:
    manager = AlertManager()

    assert manager.on_tick(
        _unit(UnitStatus.at_risk), UnitStatus.at_risk, UnitStatus.stable, _reading(5.0), 0
    ) == (False, [])


def test_apply_mutations_resolves_every_open_alert_of_the_unit_only() -> None:
    later = NOW + timedelta(seconds=10)
    log = [_alert("ALT-3"), _alert("ALT-2", unit_id="BX-2"), _alert("ALT-1")]

    updated = apply_mutations(log, [ResolveUnitAlerts("BX-1", later)])

    by_id = {alert.id: alert for alert in updated}
    assert by_id["ALT-1"].active is False
    assert by_id["ALT-3"].active is False
    assert by_id["ALT-1"].resolved_at == later
    assert by_id["ALT-2"].active is True
    assert [alert.id for alert in updated] == ["ALT-3", "ALT-2", "ALT-1"]
    assert log[0].active is True


def test_apply_mutations_prepends_new_alerts() -> None:
    updated = apply_mutations([_alert("ALT-1")], [CreateAlert(_alert("ALT-2"))])

    assert [alert.id for alert in updated] == ["ALT-2", "ALT-1"]


def test_resolve_keeps_first_resolution_and_never_precedes_creation() -> None:
    alert = _alert("ALT-1", at=NOW)

    resolved = resolve(alert, NOW - timedelta(seconds=5))
    again = resolve(resolved, NOW + timedelta(seconds=60))

    assert resolved.resolved_at == NOW
    assert again is resolved


def test_shock_on_stable_unit_only_records_reading() -> None:
    manager = AlertManager()
    unit = _unit()
    shock_time = NOW + timedelta(seconds=2)

    updated, alert = manager.on_shock(unit, shock_time, history_capacity=50)

    assert alert is None
    assert updated.status is UnitStatus.stable
    assert updated.cooling_active is False
    assert len(updated.history) == 1
    assert updated.current_reading == replace(
        unit.current_reading, shock_detected=True, timestamp=shock_time
    )
    assert updated.history[-1] is updated.current_reading


def test_shock_on_at_risk_unit_escalates() -> None:
    manager = AlertManager(id_factory=_sequential_ids())

    updated, alert = manager.on_shock(_unit(UnitStatus.at_risk), NOW, history_capacity=50)

    assert updated.status is UnitStatus.critical
    assert updated.cooling_active is True
    assert alert is not None
    assert alert.id == "ALT-SHOCK-1"
    assert alert.message == SHOCK_MESSAGE
    assert alert.active is True


def test_shock_respects_history_capacity() -> None:
    manager = AlertManager()
    unit = _unit()
    unit = replace(unit, history=tuple(_reading(5.0, NOW + timedelta(seconds=i)) for i in range(3)))

    updated, _ = manager.on_shock(unit, NOW + timedelta(seconds=10), history_capacity=3)

    assert len(updated.history) == 3
    assert updated.history[0] == unit.history[1]
    assert updated.history[-1].shock_detected is True
