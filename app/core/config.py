from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


SUPPORTED_LOCALES = ("ar", "en")
RECORD_STORE_BACKENDS = ("memory", "sqlite")


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    trust_x_forwarded_for: bool
    default_locale: str
    record_store_backend: str
    record_store_db_path: str
    pdf_max_upload_bytes: int
    pdf_max_prompt_chars: int
    generation_timeout_s: float
    generation_retries: int
    generation_retry_backoff_s: float


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5000",
            "http://127.0.0.1:5000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    trust_x_forwarded_for=_get_env_bool("TRUST_X_FORWARDED_FOR", False),
    default_locale=(_get_env("DEFAULT_LOCALE", "ar") or "ar").strip().lower(),
    record_store_backend=(_get_env("RECORD_STORE_BACKEND", "memory") or "memory").strip().lower(),
    record_store_db_path=_get_env("RECORD_STORE_DB_PATH", "data/records.db") or "data/records.db",
    pdf_max_upload_bytes=_get_env_int("PDF_MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    pdf_max_prompt_chars=_get_env_int("PDF_MAX_PROMPT_CHARS", 20000),
    generation_timeout_s=_get_env_float("GENERATION_TIMEOUT_S", 90.0),
    generation_retries=_get_env_int("GENERATION_RETRIES", 0),
    generation_retry_backoff_s=_get_env_float("GENERATION_RETRY_BACKOFF_S", 0.5),
)

if settings.default_locale not in SUPPORTED_LOCALES:
    raise RuntimeError(f"DEFAULT_LOCALE must be one of: {', '.join(SUPPORTED_LOCALES)}.")

if settings.record_store_backend not in RECORD_STORE_BACKENDS:
    raise RuntimeError(f"RECORD_STORE_BACKEND must be one of: {', '.join(RECORD_STORE_BACKENDS)}.")

if settings.generation_retries < 0:
    raise RuntimeError("GENERATION_RETRIES must not be negative.")
