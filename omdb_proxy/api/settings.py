# lectura de env vars + defaults
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Las env vars ya definidas (docker, systemd, CI) tienen prioridad sobre .env
load_dotenv(override=False)

DEFAULT_OMDB_BASE_URL = "http://www.omdbapi.com/"
DEFAULT_USER_AGENT = "omdb-lookup-proxy/1.0"


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip()
    return val if val else default


def _env_opt_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    val = raw.strip().strip('"').strip("'").strip()
    return val or None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except Exception:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except Exception:
        return default


@dataclass(frozen=True)
class Settings:
    """
    Settings centralizados (env vars). Esto evita `os.getenv(...)` disperso.

    Notas importantes:
    - CORS: si CORS_ORIGINS="*" -> allow_credentials=False para compatibilidad browser.
    - OMDB_API_KEY: acepta el alias heredado `API` (nombre usado por .env antiguos).
    - OMDB_HTTP_RETRY_TOTAL: default 0, el proxy no reintenta salvo que se pida.
    """

    log_level: str
    log_file_path: str | None

    cors_origins_raw: str
    cors_allow_credentials: bool

    gzip_min_size: int

    omdb_api_key: str | None
    omdb_base_url: str
    omdb_timeout_s: float
    omdb_retry_total: int
    omdb_retry_backoff_factor: float
    omdb_user_agent: str

    def cors_allow_origins(self) -> list[str]:
        raw = self.cors_origins_raw.strip()
        if raw == "*":
            return ["*"]
        parts = [p.strip() for p in raw.split(",")]
        return [p for p in parts if p]

    @property
    def has_api_key(self) -> bool:
        return bool(self.omdb_api_key)

    @staticmethod
    def from_env() -> "Settings":
        cors_raw = _env_str("CORS_ORIGINS", "*")
        allow_origins = ["*"] if cors_raw.strip() == "*" else [p.strip() for p in cors_raw.split(",") if p.strip()]

        # Regla browser: "*" + credentials=True no es válido
        cors_allow_credentials = True
        if allow_origins == ["*"]:
            cors_allow_credentials = False

        return Settings(
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            log_file_path=_env_opt_str("LOGGER_FILE_PATH"),
            cors_origins_raw=cors_raw,
            cors_allow_credentials=cors_allow_credentials,
            gzip_min_size=_env_int("GZIP_MIN_SIZE", 800),
            omdb_api_key=_env_opt_str("OMDB_API_KEY") or _env_opt_str("API"),
            omdb_base_url=_env_str("OMDB_BASE_URL", DEFAULT_OMDB_BASE_URL),
            omdb_timeout_s=max(0.5, _env_float("OMDB_HTTP_TIMEOUT_SECONDS", 10.0)),
            omdb_retry_total=min(10, max(0, _env_int("OMDB_HTTP_RETRY_TOTAL", 0))),
            omdb_retry_backoff_factor=max(0.0, _env_float("OMDB_HTTP_RETRY_BACKOFF_FACTOR", 0.5)),
            omdb_user_agent=_env_str("OMDB_HTTP_USER_AGENT", DEFAULT_USER_AGENT),
        )
