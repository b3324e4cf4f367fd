"""Cache TTL configuration loading."""

from __future__ import annotations

import logging
import os
import pathlib
import threading

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = pathlib.Path(__file__).with_name("cache.yml")


class ConfigError(ValueError):
    """Raised when a configuration document cannot be used."""


class CacheConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Set to true if stock levels are updated multiple times a day.
    stock_levels_change_often: bool = False
    min_cache_time: float = Field(1.0, gt=0)
    max_cache_time: float = Field(24.0, gt=0)
    active_hours_in_day: float = Field(24.0, gt=0, le=24)
    day_modifier: float = Field(1.0, gt=0)
    week_modifier: float = Field(1.0, gt=0)
    month_modifier: float = Field(1.0, gt=0)
    promotion_influence: float = Field(1.0, gt=0, le=1)

    @model_validator(mode="after")
    def check_window(self) -> CacheConfig:
        if self.min_cache_time > self.max_cache_time:
            raise ValueError("min_cache_time must not exceed max_cache_time")
        return self

    @property
    def fallback_cache_time(self) -> float:
        """Hours to cache when no usable stock signal exists."""
        return self.min_cache_time if self.stock_levels_change_often else self.max_cache_time


def config_path() -> pathlib.Path:
    return pathlib.Path(os.environ.get("CACHE_CONFIG_PATH", DEFAULT_CONFIG_PATH))


def load_config(path: pathlib.Path | None = None) -> CacheConfig:
    path = path or config_path()
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise ConfigError(f"Cannot read cache config {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in cache config {path}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Cache config {path} must be a mapping")
    try:
        config = CacheConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid cache config {path}: {exc}") from exc
    logger.info(
        "Loaded cache config from %s (window %.2fh-%.2fh)",
        path,
        config.min_cache_time,
        config.max_cache_time,
    )
    return config


class ConfigStore:
    """Holds the active config; reloads replace the whole object."""

    def __init__(self, path: pathlib.Path | None = None, config: CacheConfig | None = None) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._config = config

    def get(self) -> CacheConfig:
        config = self._config
        if config is None:
            config = self.reload()
        return config

    def reload(self) -> CacheConfig:
        with self._lock:
            try:
                config = load_config(self.path)
            except ConfigError:
                if self._config is not None:
                    logger.warning("Rejected cache config reload; keeping previous config")
                raise
            self._config = config
        return config
