from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config, normalize_status
from cli.render import (
    render_alert,
    render_alerts,
    render_settings,
    render_summary,
    render_unit,
    render_units,
)


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the cold-chain monitor service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Monitor API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between status checks when watching a unit.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Maximum seconds to wait when watching a unit.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(
        base_url=base_url,
        poll_interval=poll_interval,
        poll_timeout=timeout,
    )
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("units")
def units_command(ctx: typer.Context) -> None:
    """List monitored units and their current readings."""
    state = _get_state(ctx)
    render_units(state.client.list_units())


@app.command("unit")
def unit_command(
    ctx: typer.Context,
    unit_id: str = typer.Argument(..., help="Unit identifier, e.g. BX-1001."),
) -> None:
    """Show a single unit."""
    state = _get_state(ctx)
    render_unit(state.client.get_unit(unit_id))


@app.command("alerts")
def alerts_command(
    ctx: typer.Context,
    active: Optional[bool] = typer.Option(
        None,
        "--active/--resolved",
        help="Only show open or only resolved alerts.",
    ),
) -> None:
    """List alerts, newest first."""
    state = _get_state(ctx)
    render_alerts(state.client.list_alerts(active=active))


@app.command("summary")
def summary_command(ctx: typer.Context) -> None:
    """Show unit counts per status and the number of open alerts."""
    state = _get_state(ctx)
    render_summary(state.client.summary())


@app.command("shock")
def shock_command(
    ctx: typer.Context,
    unit_id: str = typer.Argument(..., help="Unit to inject the shock into."),
) -> None:
    """Inject a shock event into a unit."""
    state = _get_state(ctx)
    payload = state.client.trigger_shock(unit_id)
    unit = payload.get("unit") or {}
    typer.secho(f"Shock recorded on {unit_id}. status={unit.get('status')}", fg=typer.colors.GREEN)
    alert = payload.get("alert")
    if alert:
        typer.secho("Alert raised:", fg=typer.colors.RED)
        render_alert(alert)


@app.command("target")
def target_command(
    ctx: typer.Context,
    unit_id: str = typer.Argument(..., help="Unit to adjust."),
    value: float = typer.Argument(..., help="New target temperature in °C."),
) -> None:
    """Change the temperature a unit drifts toward."""
    state = _get_state(ctx)
    unit = state.client.set_target_temperature(unit_id, value)
    typer.secho(
        f"Target temperature for {unit_id} set to {unit.get('target_temperature')}°C.",
        fg=typer.colors.GREEN,
    )


@app.command("reset-alert")
def reset_alert_command(
    ctx: typer.Context,
    alert_id: str = typer.Argument(..., help="Alert identifier to acknowledge."),
) -> None:
    """Acknowledge and resolve a single alert."""
    state = _get_state(ctx)
    alert = state.client.reset_alert(alert_id)
    typer.secho(f"Alert {alert_id} resolved at {alert.get('resolved_at')}.", fg=typer.colors.GREEN)


@app.command("settings")
def settings_command(
    ctx: typer.Context,
    temp_min: Optional[float] = typer.Option(None, "--temp-min", help="Lower temperature bound."),
    temp_max: Optional[float] = typer.Option(None, "--temp-max", help="Upper temperature bound."),
    humidity_max: Optional[float] = typer.Option(None, "--humidity-max", help="Humidity bound."),
    trigger: Optional[int] = typer.Option(
        None, "--trigger", help="Consecutive violations before a unit turns critical."
    ),
) -> None:
    """Show thresholds, or update the ones given as options."""
    state = _get_state(ctx)
    changes: Dict[str, Any] = {
        name: value
        for name, value in (
            ("temp_min", temp_min),
            ("temp_max", temp_max),
            ("humidity_max", humidity_max),
            ("consecutive_violations_trigger", trigger),
        )
        if value is not None
    }
    if not changes:
        render_settings(state.client.get_settings())
        return
    payload = state.client.update_settings(changes)
    render_settings(payload.get("settings") or {}, payload.get("rejected"))


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    unit_id: str = typer.Argument(..., help="Unit to watch."),
    until: Optional[str] = typer.Option(
        None,
        "--until",
        help="Status to wait for: stable, at-risk or critical.",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Override poll interval while watching.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Override timeout while watching.",
    ),
) -> None:
    """Poll a unit until it reaches a status."""
    state = _get_state(ctx)
    target = normalize_status(until, default=state.config.watch_status)
    interval = poll_interval if poll_interval is not None else state.config.poll_interval
    poll_timeout = timeout if timeout is not None else state.config.poll_timeout
    typer.echo(f"Watching {unit_id} for {target} (interval={interval}s, timeout={poll_timeout}s)...")
    unit = state.client.poll_status(unit_id, target, interval=interval, timeout=poll_timeout)
    typer.echo()
    render_unit(unit)
