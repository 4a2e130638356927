from __future__ import annotations

import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_TICK_INTERVAL_ENV = "MONITOR_TICK_INTERVAL"
_HISTORY_CAPACITY_ENV = "MONITOR_HISTORY_CAPACITY"
_TEMP_MIN_ENV = "MONITOR_TEMP_MIN"
_TEMP_MAX_ENV = "MONITOR_TEMP_MAX"
_HUMIDITY_MAX_ENV = "MONITOR_HUMIDITY_MAX"
_TRIGGER_ENV = "MONITOR_VIOLATION_TRIGGER"
_RANDOM_SEED_ENV = "MONITOR_RANDOM_SEED"
_AUTOSTART_ENV = "MONITOR_AUTOSTART"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    tick_interval: float
    history_capacity: int
    temp_min: float
    temp_max: float
    humidity_max: float
    consecutive_violations_trigger: int
    random_seed: Optional[int]
    autostart: bool
    log_level: str


def _read_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_float_env(name: str, default: float, positive: bool = False) -> float:
    candidate = _read_env(name)
    if candidate is None:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    if not math.isfinite(parsed):
        return default
    if positive and parsed <= 0:
        return default
    return parsed


def _read_positive_int_env(name: str, default: int) -> int:
    candidate = _read_env(name)
    if candidate is None:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_seed(default: Optional[int]) -> Optional[int]:
    candidate = _read_env(_RANDOM_SEED_ENV)
    if candidate is None:
        return default
    try:
        return int(candidate)
    except ValueError:
        return default


def _read_bool_env(name: str, default: bool) -> bool:
    candidate = _read_env(name)
    if candidate is None:
        return default
    lowered = candidate.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return default


def _read_log_level(default: str) -> str:
    candidate = _read_env(_LOG_LEVEL_ENV)
    if candidate is None:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        tick_interval=_read_float_env(_TICK_INTERVAL_ENV, 1.0, positive=True),
        history_capacity=_read_positive_int_env(_HISTORY_CAPACITY_ENV, 50),
        temp_min=_read_float_env(_TEMP_MIN_ENV, 2.0),
        temp_max=_read_float_env(_TEMP_MAX_ENV, 8.0),
        humidity_max=_read_float_env(_HUMIDITY_MAX_ENV, 60.0),
        consecutive_violations_trigger=_read_positive_int_env(_TRIGGER_ENV, 3),
        random_seed=_read_seed(None),
        autostart=_read_bool_env(_AUTOSTART_ENV, True),
        log_level=_read_log_level("INFO"),
    )
