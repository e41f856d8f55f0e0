"""
Environment-backed settings.

Every value is read on call, so tests can monkeypatch the environment.
"""

from __future__ import annotations

import os

DEFAULT_TRIP_TIMEZONE = "America/New_York"
DEFAULT_MAX_PROXY_UPLOAD_BYTES = 200 * 1024 * 1024  # 200 MiB

# Pre-signed upload URLs are short-lived on purpose; not configurable.
SIGNED_URL_EXPIRES_S = 10 * 60


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def database_url() -> str:
    return _env_str("DATABASE_URL")


def db_pool_min_size() -> int:
    return max(_env_int("DB_POOL_MIN_SIZE", 1), 0)


def db_pool_max_size() -> int:
    return max(_env_int("DB_POOL_MAX_SIZE", 10), 1)


def db_command_timeout_s() -> int:
    return _env_int("DB_COMMAND_TIMEOUT_S", 30)


def default_trip_timezone() -> str:
    return _env_str("DEFAULT_TRIP_TIMEZONE", DEFAULT_TRIP_TIMEZONE)


def max_proxy_upload_bytes() -> int:
    value = _env_int("MAX_PROXY_UPLOAD_BYTES", DEFAULT_MAX_PROXY_UPLOAD_BYTES)
    if value <= 0:
        return DEFAULT_MAX_PROXY_UPLOAD_BYTES
    return value


def app_origin() -> str:
    return _env_str("APP_ORIGIN", "*")


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def s3_endpoint() -> str | None:
    return _env_str("B2_S3_ENDPOINT") or None


def s3_region() -> str:
    # B2 mostly ignores the region, but botocore wants one for signing.
    return _env_str("B2_REGION", "us-east-1")


def s3_key_id() -> str:
    return _env_str("B2_KEY_ID")


def s3_app_key() -> str:
    return _env_str("B2_APP_KEY")


def s3_bucket() -> str:
    return _env_str("B2_BUCKET")


def public_base_url() -> str:
    return _env_str("B2_PUBLIC_BASE_URL").rstrip("/")
