"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from sqlalchemy.engine import URL, make_url


def _blank_to_none(value: Any) -> Any:
    """Treat empty strings rendered from ``${VAR:-}`` placeholders as unset."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(default=["*"])
    allow_credentials: bool = False
    allow_methods: list[str] = Field(default=["GET", "POST", "PUT", "DELETE"])
    allow_headers: list[str] = Field(default=["Content-Type", "Authorization"])

    @field_validator("origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            return [o.strip() for o in value if isinstance(o, str) and o.strip()] or ["*"]
        return value


class DatabaseConfig(BaseModel):
    """Database configuration model.

    Either ``url`` is given as a complete SQLAlchemy URL, or the connection is
    assembled from ``driver``, ``host``, ``port``, ``user`` and ``name``. There
    are no default credentials: anything required and missing is reported
    when the connection string is resolved.
    """

    url: str | None = Field(default=None, description="Full database connection URL")
    driver: str = Field(
        default="mysql+aiomysql", description="SQLAlchemy async dialect+driver"
    )
    host: str | None = Field(default=None, description="Database host")
    port: int | None = Field(default=3306, description="Database port")
    user: str | None = Field(default=None, description="Database username")
    name: str | None = Field(default=None, description="Database name")
    password_env_var: str | None = Field(
        default="DB_PASSWORD",
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=5, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    fail_fast: bool = Field(
        default=True,
        description="Abort startup when the initial connection check fails",
    )
    create_schema: bool = Field(
        default=False, description="Create the libros table at startup if missing"
    )

    @field_validator(
        "url", "host", "port", "user", "name", "password_env_var", "password_file",
        mode="before",
    )
    @classmethod
    def _blank_fields(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @property
    def password(self) -> str | None:
        """
        Get the database password from the appropriate source.
        1. Mounted secrets file named by `password_file`
        2. Environment variable named by `password_env_var`
        3. Nothing (passwordless connection, or the password is inside `url`)
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            return os.getenv(self.password_env_var) or None
        return None

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    @property
    def backend(self) -> str:
        """Backend name of the configured dialect, e.g. ``mysql`` or ``sqlite``."""
        dialect = make_url(self.url).drivername if self.url else self.driver
        return dialect.split("+", 1)[0]

    def connection_url(self) -> URL:
        """Construct the database URL, raising ``ValueError`` on missing settings."""
        if self.url:
            base_url = make_url(self.url)
            if base_url.password is None and self.password and base_url.username:
                base_url = base_url.set(password=self.password)
            return base_url

        missing = [
            env_name
            for env_name, value in (
                ("DB_HOST", self.host),
                ("DB_USER", self.user),
                ("DB_NAME", self.name),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                "Database is not configured; set DATABASE_URL or "
                + ", ".join(missing)
            )

        return URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
        )

    @property
    def safe_url(self) -> str:
        """Connection URL with the password masked, for logs."""
        try:
            return self.connection_url().render_as_string(hide_password=True)
        except ValueError:
            return "<unconfigured>"


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )

    @field_validator("file", mode="before")
    @classmethod
    def _blank_file(cls, value: Any) -> Any:
        return _blank_to_none(value)


class DocsConfig(BaseModel):
    """Generated API documentation settings."""

    title: str = Field(default="API Libros", description="Documentation title")
    version: str = Field(default="1.0.0", description="API version")
    readme_path: str = Field(
        default="README.md", description="Markdown file used as API description"
    )
    docs_url: str = Field(default="/api-docs", description="Swagger UI path")
    license_name: str = Field(default="MIT")
    license_url: str = Field(default="https://opensource.org/licenses/MIT")
    contact_name: str = Field(default="Soporte")
    contact_url: str = Field(default="https://soporte.ejemplo.com")


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application bind host")
    port: int = Field(default=8083, description="Application port")
    public_url: str | None = Field(
        default=None, description="Externally visible base URL (HOST_URL)"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @field_validator("public_url", mode="before")
    @classmethod
    def _blank_public_url(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @property
    def base_url(self) -> str:
        """Base URL advertised in the API documentation."""
        if self.public_url:
            return self.public_url.rstrip("/")
        return f"http://localhost:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    docs: DocsConfig = Field(
        default_factory=DocsConfig, description="API documentation configuration"
    )

