"""Field-by-field validation of monitor settings updates."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping

from models.records import MonitorSettings

logger = logging.getLogger(__name__)

_FIELD_ALIASES = {
    "temp_min": "temp_min",
    "tempMin": "temp_min",
    "temp_max": "temp_max",
    "tempMax": "temp_max",
    "humidity_max": "humidity_max",
    "humidityMax": "humidity_max",
    "consecutive_violations_trigger": "consecutive_violations_trigger",
    "consecutiveViolationsTrigger": "consecutive_violations_trigger",
}


@dataclass(frozen=True)
class SettingsUpdate:
    settings: MonitorSettings
    applied: Dict[str, Any] = field(default_factory=dict)
    rejected: Dict[str, str] = field(default_factory=dict)


def parse_finite(value: Any) -> float:
    """Coerce ``value`` to a finite float or raise ``ValueError``."""

    if isinstance(value, bool) or value is None:
        raise ValueError("expected a number")
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            raise ValueError("expected a number")
        value = candidate
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError("expected a number") from exc
    if not math.isfinite(parsed):
        raise ValueError("expected a finite number")
    return parsed


def parse_trigger(value: Any) -> int:
    parsed = parse_finite(value)
    if not parsed.is_integer():
        raise ValueError("expected a whole number")
    if parsed < 1:
        raise ValueError("expected a positive integer")
    return int(parsed)


def merge_settings(current: MonitorSettings, partial: Mapping[str, Any]) -> SettingsUpdate:
    """Apply every valid field of ``partial`` to ``current``.

    Invalid or unknown fields are dropped and reported in ``rejected``; they
    never prevent the other fields of the same update from applying.
    """

    applied: Dict[str, Any] = {}
    rejected: Dict[str, str] = {}

    for raw_name, raw_value in partial.items():
        name = _FIELD_ALIASES.get(raw_name)
        if name is None:
            rejected[raw_name] = "unknown setting"
            logger.warning(
                "Ignoring unknown setting.",
                extra={"field": raw_name, "invalid_value": raw_value},
            )
            continue
        try:
            if name == "consecutive_violations_trigger":
                applied[name] = parse_trigger(raw_value)
            else:
                applied[name] = parse_finite(raw_value)
        except ValueError as exc:
            rejected[raw_name] = str(exc)
            logger.warning(
                "Ignoring invalid setting value.",
                extra={"field": raw_name, "invalid_value": raw_value, "reason": str(exc)},
            )

    return SettingsUpdate(
        settings=replace(current, **applied),
        applied=applied,
        rejected=rejected,
    )
