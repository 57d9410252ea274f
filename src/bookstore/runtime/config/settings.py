from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "test"]


class EnvironmentVariables(BaseSettings):
    """Where to find ``config.yaml`` and which environment it is for.

    Read from the process environment or a local ``.env`` before the YAML
    configuration itself is loaded.
    """

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    environment: Environment = Field("development", validation_alias="APP_ENVIRONMENT")
    config_file: str = Field("config.yaml", validation_alias="BOOKSTORE_CONFIG")
