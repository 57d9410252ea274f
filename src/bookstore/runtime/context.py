"""Process-wide configuration with per-context overrides.

The YAML file named by ``BOOKSTORE_CONFIG`` is loaded once at import time.
``with_context`` layers a partial ``ConfigData`` on top of it for the
duration of a block, which is how tests tweak shop or limiter settings.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.config.config_template import load_templated_yaml
from src.bookstore.runtime.config.settings import EnvironmentVariables

_active_config: ContextVar[ConfigData] = ContextVar(
    "bookstore_config",
    default=load_templated_yaml(Path(EnvironmentVariables().config_file)),
)


def get_config() -> ConfigData:
    return _active_config.get()


def _set_values(model: BaseModel) -> dict[str, Any]:
    # explicitly assigned fields only, recursing into nested sections
    return {
        name: _set_values(value) if isinstance(value, BaseModel) else value
        for name, value in ((name, getattr(model, name)) for name in model.model_fields_set)
    }


def _overlay(base: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _overlay(result[key], value)
        else:
            result[key] = value
    return result


@contextmanager
def with_context(config_override: ConfigData | None = None) -> Iterator[ConfigData]:
    """Apply the explicitly set fields of ``config_override`` inside the block.

    Example:
        with with_context(ConfigData(shop=ShopConfig(shipping_fee=0))):
            assert get_config().shop.shipping_fee == 0
    """
    current = get_config()
    if config_override is None:
        yield current
        return
    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    merged = ConfigData.model_validate(
        _overlay(current.model_dump(), _set_values(config_override))
    )
    token = _active_config.set(merged)
    try:
        yield merged
    finally:
        _active_config.reset(token)
