from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/dashboard.db'
    - STORAGE_KEY: key of the single document slot. Default 'night_shift_db'
    - STORAGE_QUOTA_BYTES: byte quota of the in-memory slot (0 disables). Default 5 MiB
    - EXPORT_DIR: directory for backup files written by the export endpoint. Default './exports'
    - DASHBOARD_TIMEZONE: IANA zone used for calendar-day buckets. Default 'UTC'
    - CAFFEINE_HALF_LIFE_MINUTES: elimination half-life. Default 300
    - CAFFEINE_PEAK_OFFSET_MINUTES: delay from intake to peak effect. Default 45
    - HEATMAP_DAYS: number of day buckets in the focus heatmap. Default 180
    - HEATMAP_BAND_LIMITS: comma-separated minute limits of the intensity bands. Default '25,60,120'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level. Default 'INFO'
    """

    persistence_backend: str
    sqlite_db_path: str
    storage_key: str
    storage_quota_bytes: int
    export_dir: str
    timezone: str
    caffeine_half_life_minutes: float
    caffeine_peak_offset_minutes: float
    heatmap_days: int
    heatmap_band_limits: Tuple[int, ...]
    cors_allow_origins: List[str]
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_band_limits(value: str, default: Tuple[int, ...]) -> Tuple[int, ...]:
    """
    Parse heatmap band limits. Limits must be positive and strictly increasing,
    otherwise the default limits are used.
    """
    try:
        limits = tuple(int(part.strip()) for part in value.split(",") if part.strip())
    except ValueError:
        return default
    if not limits or limits[0] <= 0:
        return default
    if any(b <= a for a, b in zip(limits, limits[1:])):
        return default
    return limits


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    heatmap_days = _parse_int(_get_env("HEATMAP_DAYS", "180"), 180)
    if heatmap_days <= 0:
        heatmap_days = 180

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/dashboard.db").strip(),
        storage_key=_get_env("STORAGE_KEY", "night_shift_db").strip(),
        storage_quota_bytes=max(_parse_int(_get_env("STORAGE_QUOTA_BYTES", "5242880"), 5242880), 0),
        export_dir=_get_env("EXPORT_DIR", "./exports").strip(),
        timezone=_get_env("DASHBOARD_TIMEZONE", "UTC").strip(),
        caffeine_half_life_minutes=_parse_float(_get_env("CAFFEINE_HALF_LIFE_MINUTES", "300"), 300.0),
        caffeine_peak_offset_minutes=_parse_float(_get_env("CAFFEINE_PEAK_OFFSET_MINUTES", "45"), 45.0),
        heatmap_days=heatmap_days,
        heatmap_band_limits=_parse_band_limits(_get_env("HEATMAP_BAND_LIMITS", "25,60,120"), (25, 60, 120)),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
