from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_TEMPLATES_DIR = str(Path(__file__).resolve().parents[1] / "templates")


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


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    resumes_dir: str
    templates_dir: str
    resume_template: str
    pdf_browser_executable: str | None
    pdf_render_timeout_ms: int


settings = Settings(
    rate_limit=_get_env("RATE_LIMIT", "10/minute") or "10/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    resumes_dir=_get_env("RESUMES_DIR", "resumes") or "resumes",
    templates_dir=_get_env("TEMPLATES_DIR", _DEFAULT_TEMPLATES_DIR) or _DEFAULT_TEMPLATES_DIR,
    resume_template=_get_env("RESUME_TEMPLATE", "resume.html") or "resume.html",
    pdf_browser_executable=_get_env("PDF_BROWSER_EXECUTABLE"),
    pdf_render_timeout_ms=_get_env_int("PDF_RENDER_TIMEOUT_MS", 60000),
)

if settings.pdf_render_timeout_ms <= 0:
    raise RuntimeError("PDF_RENDER_TIMEOUT_MS must be a positive number of milliseconds.")
