import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="allow",
    )

    app_environment: str = Field(default="development")
    app_config_file: str = Field(default="config.yaml")


def load_dotenv_variables() -> EnvironmentVariables:
    """Export ``.env`` entries into ``os.environ`` without clobbering real ones.

    The YAML template is rendered from ``os.environ``, so values that only live
    in ``.env`` have to be promoted first.
    """
    env = EnvironmentVariables()
    for key, value in (env.model_extra or {}).items():
        if value is not None:
            os.environ.setdefault(key.upper(), str(value))
    os.environ.setdefault("APP_ENVIRONMENT", env.app_environment)
    return env
