# booking_config.py
# Deployment settings for the booking form: Streamlit secrets first, env second.

import logging
from dataclasses import dataclass
from typing import Mapping

from dateutil import tz

from booking_logic import parse_time

ROOMS = [
    "Phòng Tin cậy (G)",
    "Phòng Sáng tạo (Pantry - Trong)",
    "Phòng Sáng tạo (Pantry - Ngoài)",
    "Phòng Trệt nhỏ (G)",
]

DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"
DEFAULT_TIME_FROM = "09:00"
DEFAULT_TIME_TO = "10:00"
DEFAULT_REQUEST_TIMEOUT = 10.0
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    webapp_url: str
    timezone: str = DEFAULT_TIMEZONE
    request_timeout: float | None = DEFAULT_REQUEST_TIMEOUT
    default_time_from: str = DEFAULT_TIME_FROM
    default_time_to: str = DEFAULT_TIME_TO
    business_hours: tuple[str, str] | None = None
    log_level: str = "INFO"

    @property
    def tzinfo(self):
        return tz.gettz(self.timezone)


def _lookup(key: str, secrets: Mapping, environ: Mapping) -> str:
    value = secrets.get(key) if secrets else None
    if value is None or str(value).strip() == "":
        value = environ.get(key, "")
    return str(value).strip()


def _parse_timeout(raw: str) -> float | None:
    if raw == "":
        return DEFAULT_REQUEST_TIMEOUT
    if raw.lower() in ("none", "off", "0"):
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"REQUEST_TIMEOUT must be a number of seconds, got {raw!r}")
    if timeout < 0:
        raise ConfigError("REQUEST_TIMEOUT must not be negative")
    return timeout


def _parse_business_hours(raw: str) -> tuple[str, str] | None:
    # "08:00-17:30"; empty disables the check
    if raw == "":
        return None
    parts = [p.strip() for p in raw.split("-")]
    if len(parts) != 2 or not all(parts):
        raise ConfigError(f"BUSINESS_HOURS must look like 08:00-17:30, got {raw!r}")
    try:
        start, end = parse_time(parts[0]), parse_time(parts[1])
    except ValueError as e:
        raise ConfigError(f"BUSINESS_HOURS: {e}")
    if start >= end:
        raise ConfigError("BUSINESS_HOURS end must be after start")
    return parts[0], parts[1]


def load_settings(secrets: Mapping | None = None, environ: Mapping | None = None) -> Settings:
    """
    Build Settings from the Streamlit secrets mapping and the process environment.
    Raises ConfigError when WEBAPP_URL is missing or a value cannot be parsed.
    """
    secrets = secrets or {}
    environ = environ or {}

    webapp_url = _lookup("WEBAPP_URL", secrets, environ)
    if not webapp_url:
        raise ConfigError("WEBAPP_URL is not configured (set it in .streamlit/secrets.toml or the environment).")
    if not webapp_url.startswith(("http://", "https://")):
        raise ConfigError(f"WEBAPP_URL must be an http(s) URL, got {webapp_url!r}")

    timezone = _lookup("BOOKING_TIMEZONE", secrets, environ) or DEFAULT_TIMEZONE
    if tz.gettz(timezone) is None:
        raise ConfigError(f"Unknown BOOKING_TIMEZONE {timezone!r}")

    log_level = (_lookup("LOG_LEVEL", secrets, environ) or "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown LOG_LEVEL {log_level!r}")

    return Settings(
        webapp_url=webapp_url,
        timezone=timezone,
        request_timeout=_parse_timeout(_lookup("REQUEST_TIMEOUT", secrets, environ)),
        business_hours=_parse_business_hours(_lookup("BUSINESS_HOURS", secrets, environ)),
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
