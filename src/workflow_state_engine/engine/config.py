"""Engine configuration.

Loaded from environment variables and a local `.env` file (if present):

- LOG_LEVEL            (optional, default INFO)
- WORKFLOW_LOG_FORMAT  (optional, `json` or `text`, default json)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LogFormat, configure_logging


class EngineSettings(BaseSettings):
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: LogFormat = Field(
        default="json",
        validation_alias="WORKFLOW_LOG_FORMAT",
        description="Log output format: one JSON object per line, or plain text",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        configure_logging(self.log_level, self.log_format)
