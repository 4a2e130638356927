from __future__ import annotations

from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app
from cli.config import normalize_status


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.unit_payload: Dict[str, Any] = {
            "id": "BX-1001",
            "name": "Pfizer-BioNTech Alpha",
            "batch_number": "BATCH-8821",
            "drug_name": "Comirnaty Variant",
            "current_reading": {
                "timestamp": "2024-01-01T00:00:00Z",
                "temperature": 5.02,
                "humidity": 45.1,
                "shock_detected": False,
            },
            "history": [],
            "status": "Stable",
            "target_temperature": 5.0,
            "cooling_active": False,
        }
        self.alert_payload: Dict[str, Any] = {
            "id": "ALT-1",
            "unit_id": "BX-1001",
            "unit_name": "Pfizer-BioNTech Alpha",
            "timestamp": "2024-01-01T00:00:03Z",
            "message": "CRITICAL: Temp deviation (9.1°C) sustained for 3 consecutive readings.",
            "severity": "Critical",
            "active": True,
            "resolved_at": None,
        }
        self.settings_changes: List[Dict[str, Any]] = []
        self.alert_filters: List[Any] = []
        self.poll_calls: List[tuple[str, str, float, float]] = []
        self.closed = False

    def list_units(self) -> List[Dict[str, Any]]:
        return [self.unit_payload]

    def get_unit(self, unit_id: str) -> Dict[str, Any]:
        return {**self.unit_payload, "id": unit_id}

    def list_alerts(self, active=None) -> List[Dict[str, Any]]:
        self.alert_filters.append(active)
        return [self.alert_payload]

    def summary(self) -> Dict[str, Any]:
        return {
            "total_units": 4,
            "active_alerts": 1,
            "status_counts": {"Stable": 3, "At Risk": 0, "Critical": 1},
        }

    def trigger_shock(self, unit_id: str) -> Dict[str, Any]:
        return {"unit": {**self.unit_payload, "status": "Critical"}, "alert": self.alert_payload}

    def set_target_temperature(self, unit_id: str, value: float) -> Dict[str, Any]:
        return {**self.unit_payload, "target_temperature": value}

    def reset_alert(self, alert_id: str) -> Dict[str, Any]:
        return {**self.alert_payload, "active": False, "resolved_at": "2024-01-01T00:00:09Z"}

    def get_settings(self) -> Dict[str, Any]:
        return {
            "temp_min": 2.0,
            "temp_max": 8.0,
            "humidity_max": 60.0,
            "consecutive_violations_trigger": 3,
        }

    def update_settings(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        self.settings_changes.append(changes)
        return {"settings": {**self.get_settings(), **changes}, "rejected": {}}

    def poll_status(self, unit_id: str, target: str, interval: float, timeout: float) -> Dict[str, Any]:
        self.poll_calls.append((unit_id, target, interval, timeout))
        return {**self.unit_payload, "status": target}

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient(config=None)

    def factory(config):
        client.config = config
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return client


def test_units_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["units"])

    assert result.exit_code == 0
    assert "BX-1001" in result.stdout
    assert "Stable" in result.stdout
    assert stub.closed is True


def test_alerts_command_passes_filter(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["alerts", "--active"])

    assert result.exit_code == 0
    assert "ALT-1" in result.stdout
    assert stub.alert_filters == [True]


def test_shock_command_reports_alert(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["shock", "BX-1001"])

    assert result.exit_code == 0
    assert "status=Critical" in result.stdout
    assert "Alert raised" in result.stdout


def test_target_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["target", "BX-1001", "9.5"])

    assert result.exit_code == 0
    assert "9.5" in result.stdout


def test_reset_alert_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["reset-alert", "ALT-1"])

    assert result.exit_code == 0
    assert "Alert ALT-1 resolved" in result.stdout


def test_settings_without_options_shows_current(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["settings"])

    assert result.exit_code == 0
    assert "temp_max: 8.0" in result.stdout
    assert stub.settings_changes == []


def test_settings_with_options_updates(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["settings", "--temp-max", "9", "--trigger", "4"])

    assert result.exit_code == 0
    assert stub.settings_changes == [{"temp_max": 9.0, "consecutive_violations_trigger": 4}]


def test_summary_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["summary"])

    assert result.exit_code == 0
    assert "active_alerts: 1" in result.stdout


def test_watch_uses_overrides(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(
        app, ["watch", "BX-1001", "--until", "at-risk", "--poll-interval", "0.1", "--timeout", "5"]
    )

    assert result.exit_code == 0
    assert stub.poll_calls == [("BX-1001", "At Risk", 0.1, 5.0)]
    assert "status: At Risk" in result.stdout


def test_normalize_status_falls_back_to_default() -> None:
    assert normalize_status("CRITICAL") == "Critical"
    assert normalize_status("at_risk") == "At Risk"
    assert normalize_status("bogus", default="Stable") == "Stable"
    assert normalize_status(None) == "Critical"
