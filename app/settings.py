"""Service settings resolved from config.json and the environment.

Environment variables win over ``data/config.json``, which wins over the
defaults below. Resolution happens once at app creation.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from app.services.llm.gemini_provider import DEFAULT_BASE_URL

DEFAULT_MODEL = "gemini-1.5-flash"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class ServiceSettings:
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL
    gemini_base_url: str = DEFAULT_BASE_URL
    gemini_timeout_seconds: float = 60.0
    session_ttl_seconds: float = 3600.0
    session_cleanup_interval_seconds: float = 3600.0
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    enable_test_harness: bool = True

    @property
    def gemini_key_set(self) -> bool:
        return bool(self.gemini_api_key)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _as_origins(value: Any) -> list[str]:
    if isinstance(value, str):
        return [origin.strip() for origin in value.split(",") if origin.strip()]
    return [str(origin) for origin in value]


def load_settings(
    config: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServiceSettings:
    config = config or {}
    environ = os.environ if environ is None else environ
    gemini_cfg = config.get("providers", {}).get("gemini", {})
    sessions_cfg = config.get("sessions", {})
    defaults = ServiceSettings()

    def pick(env_name: str, cfg_value: Any, default: Any) -> Any:
        env_value = environ.get(env_name)
        if env_value not in (None, ""):
            return env_value
        if cfg_value not in (None, ""):
            return cfg_value
        return default

    return ServiceSettings(
        gemini_api_key=str(pick("GEMINI_API_KEY", gemini_cfg.get("api_key"), defaults.gemini_api_key)),
        gemini_model=str(pick("GEMINI_MODEL", gemini_cfg.get("model"), defaults.gemini_model)),
        gemini_base_url=str(pick("GEMINI_BASE_URL", gemini_cfg.get("base_url"), defaults.gemini_base_url)),
        gemini_timeout_seconds=float(
            pick("GEMINI_TIMEOUT_SECONDS", gemini_cfg.get("timeout_seconds"), defaults.gemini_timeout_seconds)
        ),
        session_ttl_seconds=float(
            pick("SESSION_TTL_SECONDS", sessions_cfg.get("ttl_seconds"), defaults.session_ttl_seconds)
        ),
        session_cleanup_interval_seconds=float(
            pick(
                "SESSION_CLEANUP_INTERVAL_SECONDS",
                sessions_cfg.get("cleanup_interval_seconds"),
                defaults.session_cleanup_interval_seconds,
            )
        ),
        cors_origins=_as_origins(pick("CORS_ORIGINS", config.get("cors_origins"), defaults.cors_origins)),
        enable_test_harness=_as_bool(
            pick("ENABLE_TEST_HARNESS", config.get("enable_test_harness"), defaults.enable_test_harness)
        ),
    )
