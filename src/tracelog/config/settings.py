from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..core.logging.levels import LogLevel
from ..validators.config_validators import blank_to_none, to_lowercase, to_log_level


class LoggerConfig(BaseSettings):
    """
    Process-wide logger configuration loaded from the environment.

    The instance is frozen: it is built once at startup and then shared by
    every ContextLogger and AccessLogMiddleware without locking.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"
    SERVICE_NAME: str = "tracelog"

    # Correlation
    PROJECT_ID: str | None = None
    LOG_LEVEL: LogLevel = LogLevel.DEBUG
    DEVELOPMENT: bool = False

    # Well-known field names
    KEY_REQUEST_ID: str = "request_id"
    KEY_USER_ID: str = "user_id"
    KEY_ERROR: str = "err"
    KEY_SCOPE: str = "scope"
    KEY_REMOTE_IP: str = "remote_ip"
    KEY_ROUTE: str = "route"

    # Sink
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path | None = None
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5

    # Access log
    ACCESS_LOG_EXCLUDES: list[str] = []

    # --- Derived settings ---
    @property
    def LOG_FORMAT(self) -> Literal["json", "text"]:
        """
        Output format implied by the configuration.

        Without a project id records go to a plain-text console; with one they
        are written as Cloud Logging structured JSON.
        """
        return "json" if self.PROJECT_ID else "text"

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v):
        """
        Accept level names in any case ("debug", "Warning") as well as numbers.
        """
        return to_log_level(v)

    @field_validator("PROJECT_ID", mode="before")
    def normalize_project_id(cls, v: str | None) -> str | None:
        return blank_to_none(v)

    @field_validator("ENV", mode="before")
    def normalize_env(cls, v: str | None) -> str | None:
        return to_lowercase(v)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


# The configuration never changes after startup, so one cached instance is shared.
@lru_cache()
def get_config() -> LoggerConfig:
    return LoggerConfig()
