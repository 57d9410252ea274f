"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic_core import ValidationError

from src.bookstore.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")

# Variables that must be provided explicitly outside development
PRODUCTION_REQUIRED_VARS = {
    "JWT_SECRET": "Secret used to sign access tokens",
    "DATABASE_URL": "Database connection URL",
}


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def replacer(match: re.Match) -> str:
        expression = match.group(1)

        if ":-" in expression:
            name, default = expression.split(":-", 1)
            return os.getenv(name, default)

        if ":?" in expression:
            name, message = expression.split(":?", 1)
            value = os.getenv(name)
            if value is None:
                raise ValueError(f"Required environment variable {name}: {message}")
            return value

        value = os.getenv(expression)
        if value is None:
            raise ValueError(f"Required environment variable {expression} not set")
        return value

    return _PLACEHOLDER.sub(replacer, text)


def apply_environment_overrides(env_mode: str) -> list[str]:
    """Copy ``<ENV>_NAME`` variables onto ``NAME`` for the active environment.

    Returns the names of the variables that were overridden.
    """
    prefix = f"{env_mode.upper()}_"
    applied = []
    for name, value in list(os.environ.items()):
        if name.startswith(prefix):
            target = name[len(prefix):]
            os.environ[target] = value
            applied.append(target)
            logger.debug("Set environment variable {} from {}", target, name)
    return applied


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed configuration with environment variables substituted

    Raises:
        ValueError: If required environment variables are missing or the
            result does not validate
        FileNotFoundError: If the YAML file doesn't exist
    """
    load_dotenv(override=False)
    content = file_path.read_text()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration for environment: {}", env_mode)
    overridden = apply_environment_overrides(env_mode)
    if overridden:
        logger.info("Applied environment-specific overrides: {}", sorted(overridden))

    try:
        loaded = yaml.safe_load(substitute_env_vars(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not loaded:
        raise ValueError("Failed to parse YAML")

    try:
        config = ConfigData(**loaded.get("config", {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    if config.app.environment == "production":
        missing = validate_config_env_vars()
        if missing:
            raise ValueError(f"Missing production settings: {', '.join(missing)}")

    return config


def validate_config_env_vars() -> dict[str, str]:
    """
    Validate that all variables required in production are set.

    Returns:
        Dictionary of missing variables and their descriptions
    """
    return {
        name: description
        for name, description in PRODUCTION_REQUIRED_VARS.items()
        if not os.getenv(name)
    }
