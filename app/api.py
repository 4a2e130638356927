"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from app.schemas import (
    AlertModel,
    FleetSummaryModel,
    MonitorSettingsModel,
    SettingsUpdateResponse,
    ShockResponse,
    TargetTemperatureRequest,
    UnitModel,
)
from services.monitor import MonitorService, build_default_monitor

router = APIRouter()


def get_monitor() -> MonitorService:
    return build_default_monitor()


def _not_found(exc: KeyError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.args[0])


@router.get(
    "/units",
    response_model=List[UnitModel],
    summary="List every monitored unit with its recent history.",
)
async def list_units(monitor: MonitorService = Depends(get_monitor)) -> List[UnitModel]:
    return [UnitModel.model_validate(unit) for unit in monitor.list_units()]


@router.get(
    "/units/{unit_id}",
    response_model=UnitModel,
    summary="Fetch a single monitored unit.",
)
async def get_unit(
    unit_id: str,
    monitor: MonitorService = Depends(get_monitor),
) -> UnitModel:
    try:
        unit = monitor.get_unit(unit_id)
    except KeyError as exc:
        raise _not_found(exc) from exc
    return UnitModel.model_validate(unit)


@router.put(
    "/units/{unit_id}/target-temperature",
    response_model=UnitModel,
    summary="Change the temperature a unit's environment drifts toward.",
)
async def set_target_temperature(
    unit_id: str,
    payload: TargetTemperatureRequest,
    monitor: MonitorService = Depends(get_monitor),
) -> UnitModel:
    try:
        unit = monitor.set_target_temperature(unit_id, payload.value)
    except KeyError as exc:
        raise _not_found(exc) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return UnitModel.model_validate(unit)


@router.post(
    "/units/{unit_id}/shock",
    response_model=ShockResponse,
    summary="Inject a shock event into a unit.",
)
async def trigger_shock(
    unit_id: str,
    monitor: MonitorService = Depends(get_monitor),
) -> ShockResponse:
    try:
        unit, alert = monitor.trigger_shock(unit_id)
    except KeyError as exc:
        raise _not_found(exc) from exc
    return ShockResponse(
        unit=UnitModel.model_validate(unit),
        alert=AlertModel.model_validate(alert) if alert is not None else None,
    )


@router.get(
    "/alerts",
    response_model=List[AlertModel],
    summary="List alerts, newest first.",
)
async def list_alerts(
    active: Optional[bool] = Query(None, description="Only open (true) or resolved (false) alerts."),
    monitor: MonitorService = Depends(get_monitor),
) -> List[AlertModel]:
    return [AlertModel.model_validate(alert) for alert in monitor.list_alerts(active=active)]


@router.post(
    "/alerts/{alert_id}/reset",
    response_model=AlertModel,
    summary="Acknowledge and resolve a single alert.",
)
async def reset_alert(
    alert_id: str,
    monitor: MonitorService = Depends(get_monitor),
) -> AlertModel:
    try:
        alert = monitor.reset_alert(alert_id)
    except KeyError as exc:
        raise _not_found(exc) from exc
    return AlertModel.model_validate(alert)


@router.get(
    "/settings",
    response_model=MonitorSettingsModel,
    summary="Current alerting thresholds.",
)
async def get_settings(monitor: MonitorService = Depends(get_monitor)) -> MonitorSettingsModel:
    return MonitorSettingsModel.model_validate(monitor.get_settings())


@router.patch(
    "/settings",
    response_model=SettingsUpdateResponse,
    summary="Merge a partial settings update; invalid fields are ignored.",
)
async def update_settings(
    payload: Dict[str, Any] = Body(..., description="Subset of threshold fields."),
    monitor: MonitorService = Depends(get_monitor),
) -> SettingsUpdateResponse:
    update = monitor.update_settings(payload)
    return SettingsUpdateResponse(
        settings=MonitorSettingsModel.model_validate(update.settings),
        rejected=update.rejected,
    )


@router.get(
    "/summary",
    response_model=FleetSummaryModel,
    summary="Unit counts per status and open alert count.",
)
async def summary(monitor: MonitorService = Depends(get_monitor)) -> FleetSummaryModel:
    return FleetSummaryModel.from_summary(monitor.summary())


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
