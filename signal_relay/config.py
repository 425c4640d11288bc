"""Runtime configuration and logging setup.

Settings are read from the environment once at startup. ``PORT`` keeps the
plain name so the relay drops into hosts that inject it; everything else is
prefixed with ``SIGNAL_RELAY_``.
"""
from __future__ import annotations

import logging
import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=0, le=65535)
    ws_path: str = "/"
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("ws_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        if not value.startswith("/"):
            value = "/" + value
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from *environ* (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    values = {}
    if "SIGNAL_RELAY_HOST" in env:
        values["host"] = env["SIGNAL_RELAY_HOST"]
    if "PORT" in env:
        values["port"] = env["PORT"]
    if "SIGNAL_RELAY_WS_PATH" in env:
        values["ws_path"] = env["SIGNAL_RELAY_WS_PATH"]
    if "SIGNAL_RELAY_LOG_LEVEL" in env:
        values["log_level"] = env["SIGNAL_RELAY_LOG_LEVEL"]
    if "SIGNAL_RELAY_CORS_ORIGINS" in env:
        values["cors_origins"] = [o.strip() for o in env["SIGNAL_RELAY_CORS_ORIGINS"].split(",") if o.strip()]
    return Settings(**values)


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the package logger."""
    logger = logging.getLogger("signal_relay")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


__all__ = ["LOG_FORMAT", "Settings", "load_settings", "configure_logging"]
