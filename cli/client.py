from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the monitor service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=30.0)

    def close(self) -> None:
        self._client.close()

    def list_units(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/units")

    def get_unit(self, unit_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/units/{unit_id}", not_found=f"Unit {unit_id} was not found.")

    def list_alerts(self, active: Optional[bool] = None) -> List[Dict[str, Any]]:
        params = {} if active is None else {"active": str(active).lower()}
        return self._request("GET", "/alerts", params=params)

    def summary(self) -> Dict[str, Any]:
        return self._request("GET", "/summary")

    def trigger_shock(self, unit_id: str) -> Dict[str, Any]:
        return self._request(
            "POST", f"/units/{unit_id}/shock", not_found=f"Unit {unit_id} was not found."
        )

    def set_target_temperature(self, unit_id: str, value: float) -> Dict[str, Any]:
        return self._request(
            "PUT",
            f"/units/{unit_id}/target-temperature",
            json={"value": value},
            not_found=f"Unit {unit_id} was not found.",
        )

    def reset_alert(self, alert_id: str) -> Dict[str, Any]:
        return self._request(
            "POST", f"/alerts/{alert_id}/reset", not_found=f"Alert {alert_id} was not found."
        )

    def get_settings(self) -> Dict[str, Any]:
        return self._request("GET", "/settings")

    def update_settings(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", "/settings", json=changes)

    def poll_status(
        self, unit_id: str, target: str, interval: float, timeout: float
    ) -> Dict[str, Any]:
        deadline = time.monotonic() + timeout
        last_payload: Dict[str, Any] | None = None
        while time.monotonic() <= deadline:
            last_payload = self.get_unit(unit_id)
            if last_payload.get("status") == target:
                return last_payload
            time.sleep(interval)
        typer.secho(
            (
                f"Timed out waiting for {unit_id} to become {target}. "
                f"Last status: {last_payload.get('status') if last_payload else 'unknown'}"
            ),
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    def _request(
        self,
        method: str,
        path: str,
        not_found: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            if response.status_code == 404 and not_found:
                raise typer.BadParameter(not_found)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
