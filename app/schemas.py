"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from datastore.state_store import FleetSummary
from models.records import AlertSeverity, UnitStatus


class SensorReadingModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: datetime
    temperature: float
    humidity: float
    shock_detected: bool


class UnitModel(BaseModel):
    """Snapshot of a monitored unit including its bounded history."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    batch_number: str
    drug_name: str
    current_reading: SensorReadingModel
    history: List[SensorReadingModel] = Field(default_factory=list)
    status: UnitStatus
    target_temperature: float
    cooling_active: bool


class AlertModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    unit_id: str
    unit_name: str
    timestamp: datetime
    message: str
    severity: AlertSeverity
    active: bool
    resolved_at: Optional[datetime] = None


class MonitorSettingsModel(BaseModel):
    """Thresholds currently applied by the monitor."""

    model_config = ConfigDict(from_attributes=True)

    temp_min: float
    temp_max: float
    humidity_max: float = Field(..., description="Stored for future use; not evaluated.")
    consecutive_violations_trigger: int = Field(..., ge=1)


class SettingsUpdateResponse(BaseModel):
    settings: MonitorSettingsModel
    rejected: Dict[str, str] = Field(
        default_factory=dict, description="Fields left unchanged and why."
    )


class TargetTemperatureRequest(BaseModel):
    value: float = Field(..., allow_inf_nan=False, description="New set-point in °C.")


class ShockResponse(BaseModel):
    unit: UnitModel
    alert: Optional[AlertModel] = None


class FleetSummaryModel(BaseModel):
    total_units: int = Field(..., ge=0)
    active_alerts: int = Field(..., ge=0)
    status_counts: Dict[UnitStatus, int] = Field(default_factory=dict)

    @classmethod
    def from_summary(cls, summary: FleetSummary) -> "FleetSummaryModel":
        return cls(
            total_units=summary.total_units,
            active_alerts=summary.active_alerts,
            status_counts=dict(summary.status_counts),
        )
