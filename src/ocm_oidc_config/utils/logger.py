# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

"""
Loguru setup shared by every module of the package.

Records emitted while an OIDC config is being reconciled carry its id in
`extra["oidc_config_id"]`, and the OpenTelemetry trace/span ids of the enclosing
`oidc_config.*` span when one is recording.
"""

import logging
import sys
from typing import Any

from loguru import logger
from opentelemetry import trace
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["logger", "configure_logging", "LogSettings"]

NO_OIDC_CONFIG = "-"

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>oidc_config={extra[oidc_config_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class LogSettings(BaseSettings):
    """
    Logging settings, read from RHCS_LOG_LEVEL and RHCS_LOG_JSON.

    An unknown level falls back to INFO rather than failing the provider at import time.
    """

    model_config = SettingsConfigDict(env_prefix="RHCS_", case_sensitive=False)

    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def known_level(cls, v: Any) -> str:
        level = str(v).strip().upper()
        try:
            logger.level(level)
        except ValueError:
            return "INFO"
        return level


class InterceptHandler(logging.Handler):
    """
    Redirects standard logging messages (httpx, httpcore, authlib) to Loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno  # type: ignore[assignment]

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename in (logging.__file__, __file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def trace_id_injector(record: dict[str, Any]) -> None:
    """
    Loguru patcher adding the current OpenTelemetry trace_id and span_id to the record.
    """
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        record["extra"]["trace_id"] = format(ctx.trace_id, "032x")
        record["extra"]["span_id"] = format(ctx.span_id, "016x")


def configure_logging(settings: LogSettings | None = None) -> None:
    """
    (Re)configures the global logger. Called on import; call again after changing the settings.

    JSON records go to stdout so that a declarative front end keeps stderr for its diagnostics.
    """
    settings = settings or LogSettings()

    logger.configure(
        handlers=[],
        extra={"oidc_config_id": NO_OIDC_CONFIG},
        patcher=trace_id_injector,  # type: ignore[arg-type]
    )
    if settings.log_json:
        logger.add(sys.stdout, level=settings.log_level, serialize=True)
    else:
        logger.add(sys.stderr, level=settings.log_level, format=TEXT_FORMAT)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger().setLevel(logger.level(settings.log_level).no)


configure_logging()
