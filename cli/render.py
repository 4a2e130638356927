from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

_STATUS_COLORS = {
    "Stable": typer.colors.GREEN,
    "At Risk": typer.colors.YELLOW,
    "Critical": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_units(units: List[Dict[str, Any]]) -> None:
    echo_heading("Units")
    if not units:
        typer.echo("No units registered.")
        return
    for unit in units:
        reading = unit.get("current_reading") or {}
        status = unit.get("status")
        cooling = " cooling" if unit.get("cooling_active") else ""
        typer.echo(
            f"  - {unit.get('id')} {unit.get('name')}: "
            f"{reading.get('temperature')}°C {reading.get('humidity')}% "
            f"target={unit.get('target_temperature')}{cooling} ",
            nl=False,
        )
        typer.secho(str(status), fg=_STATUS_COLORS.get(status))


def render_unit(unit: Dict[str, Any]) -> None:
    echo_heading("Unit")
    reading = unit.get("current_reading") or {}
    echo_key_values(
        [
            ("id", unit.get("id")),
            ("name", unit.get("name")),
            ("batch_number", unit.get("batch_number")),
            ("drug_name", unit.get("drug_name")),
            ("status", unit.get("status")),
            ("temperature", reading.get("temperature")),
            ("humidity", reading.get("humidity")),
            ("shock_detected", reading.get("shock_detected")),
            ("target_temperature", unit.get("target_temperature")),
            ("cooling_active", unit.get("cooling_active")),
            ("history_length", len(unit.get("history") or [])),
        ]
    )


def render_alert(alert: Dict[str, Any]) -> None:
    state = "active" if alert.get("active") else f"resolved {alert.get('resolved_at')}"
    typer.echo(
        f"  - {alert.get('id')} [{alert.get('severity')}] {alert.get('unit_id')} "
        f"{alert.get('timestamp')}: {alert.get('message')} ({state})"
    )


def render_alerts(alerts: List[Dict[str, Any]]) -> None:
    echo_heading("Alerts")
    if not alerts:
        typer.echo("No alerts recorded.")
        return
    for alert in alerts:
        render_alert(alert)


def render_summary(payload: Dict[str, Any]) -> None:
    echo_heading("Fleet Summary")
    echo_key_values(
        [
            ("total_units", payload.get("total_units")),
            ("active_alerts", payload.get("active_alerts")),
        ]
    )
    counts = payload.get("status_counts") or {}
    if counts:
        typer.echo("status_counts:")
        for status, count in counts.items():
            typer.echo(f"  - {status}: {count}")


def render_settings(settings: Dict[str, Any], rejected: Dict[str, str] | None = None) -> None:
    echo_heading("Settings")
    echo_key_values(
        [
            ("temp_min", settings.get("temp_min")),
            ("temp_max", settings.get("temp_max")),
            ("humidity_max", settings.get("humidity_max")),
            ("consecutive_violations_trigger", settings.get("consecutive_violations_trigger")),
        ]
    )
    if rejected:
        typer.echo()
        echo_heading("Rejected")
        for field, reason in rejected.items():
            typer.secho(f"  - {field}: {reason}", fg=typer.colors.YELLOW)
