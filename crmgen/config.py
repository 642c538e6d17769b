#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """
    Log level settings for the application.

    :cvar debug: Debug-level logging, most verbose.
    :cvar info: Informational messages, default level.
    :cvar warning: Warning messages, potential issues.
    :cvar error: Error messages, serious problems.
    :cvar critical: Critical errors, application shutdown scenarios.
    """

    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class LoggingSettings(BaseModel):
    """
    Configuration for application logging.

    :param level: LogLevel enum specifying the logging threshold.
    :param access_log: Enable or disable access logs.
    :param colors: Enable or disable colored log output.
    """

    level: LogLevel = LogLevel.info
    access_log: bool = True
    colors: bool = False


class MappingSettings(BaseModel):
    """
    Configuration for field normalization and cache reconciliation.
    """

    max_workers: int = Field(
        8,
        ge=1,
        description="Max threads used to refresh existing field records in parallel",
    )
    use_title_case_logical_names: bool = Field(
        False,
        description="Derive property names from title-cased logical names instead of schema names",
    )
    duplicate_identity_policy: Literal["first", "last"] = Field(
        "first",
        description="Which descriptor wins when a fetched batch repeats a metadata id",
    )


class DatabaseSettings(BaseModel):
    """
    Configuration for the field cache database.

    :param url: Full database connection URL (used by SQLAlchemy)
    :param echo: Enable SQL query logging (for debugging)
    """

    url: Optional[str] = Field(
        default=None,
        description="Database URL",
    )
    path: str = "./mapping-cache.db"
    echo: bool = False
    busy_timeout: float = Field(
        30.0,
        gt=0,
        description="Seconds a SQLite connection waits on a locked cache file before failing",
    )

    @model_validator(mode="after")
    def assemble_db_url(self) -> "DatabaseSettings":
        """Construct the database URL from the file path if not provided or contains placeholders."""
        if not self.url or "${" in self.url:
            self.url = f"sqlite+aiosqlite:///{self.path}"
        return self


class AppSettings(BaseModel):
    """
    Core application settings for the API service.

    :param title: API title shown in docs.
    :param version: API version string.
    :param description: API description displayed in docs.
    :param api_base_url: Base path for all routes.
    :param host: Host address for Uvicorn server.
    :param port: Port number for Uvicorn server.
    """

    title: str = "CRM Code Generator Mapping Service"
    version: str = "0.1.0"
    description: str = "Normalizes CRM attribute metadata into field records for code generation"
    api_base_url: str = "/api"

    host: str = "0.0.0.0"
    port: int = 8090


class Settings(BaseSettings):
    """
    Application settings loaded from environment or defaults.

    Uses nested environment variables with '__' delimiter.

    Example: LOGGING__LEVEL=error
             MAPPING__MAX_WORKERS=4
             DATABASE__URL=sqlite+aiosqlite:///./cache.db
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app: AppSettings = AppSettings()
    logging: LoggingSettings = LoggingSettings()
    mapping: MappingSettings = MappingSettings()
    database: DatabaseSettings = DatabaseSettings()


config = Settings()
