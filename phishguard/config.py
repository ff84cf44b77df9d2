# phishguard/config.py

"""
Process-wide engine configuration.

Built once at startup (usually via EngineConfig.from_env()) and handed to
the orchestrator and dispatcher explicitly; nothing in the engine reads
the environment on its own after that.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ANALYZER_MODEL = "groq/compound"
DEFAULT_AUTOMATION_SOURCE = "Forensic-Engine-V3"


class EngineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    analyzer_api_key: Optional[str] = None
    analyzer_model: str = DEFAULT_ANALYZER_MODEL
    analyzer_timeout: float = Field(20.0, gt=0)

    automation_url: Optional[str] = None
    automation_source: str = DEFAULT_AUTOMATION_SOURCE
    automation_timeout: float = Field(5.0, gt=0)
    automation_threshold: int = Field(60, ge=0, le=100)
    critical_threshold: int = Field(80, ge=0, le=100)

    max_input_length: int = Field(2000, gt=0)
    sentry_dsn: Optional[str] = None

    @property
    def primary_analyzer_enabled(self) -> bool:
        return bool(self.analyzer_api_key)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Read configuration from the environment.

        Unset or blank variables keep their defaults; malformed numbers
        raise ValueError so a bad deployment fails at startup.
        """
        values = {
            "analyzer_api_key": _env_str("GROQ_API_KEY"),
            "analyzer_model": _env_str("PHISHGUARD_ANALYZER_MODEL"),
            "analyzer_timeout": _env_number("PHISHGUARD_ANALYZER_TIMEOUT", float),
            "automation_url": _env_str("AUTOMATION_WEBHOOK_URL"),
            "automation_source": _env_str("AUTOMATION_SOURCE"),
            "automation_timeout": _env_number("AUTOMATION_TIMEOUT", float),
            "automation_threshold": _env_number("AUTOMATION_THRESHOLD", int),
            "critical_threshold": _env_number("CRITICAL_THRESHOLD", int),
            "max_input_length": _env_number("MAX_INPUT_LENGTH", int),
            "sentry_dsn": _env_str("SENTRY_DSN"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})


def _env_str(name: str) -> Optional[str]:
    raw = (os.getenv(name) or "").strip()
    return raw or None


def _env_number(name: str, cast):
    raw = _env_str(name)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
