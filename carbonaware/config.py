"""Configuration management for carbonaware."""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yml"
CONFIG_ENV_VAR = "CARBONAWARE_CONFIG"


class ProviderConfig(BaseModel):
    """Configuration for an emissions data provider."""

    enabled: bool = False
    base_url: Optional[str] = None
    api_token: Optional[str] = None
    timeout: float = Field(default=30.0, gt=0)


class LocationConfig(BaseModel):
    """Coordinates for a named location such as a cloud region."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    cloud_provider: Optional[str] = None


class DataSourceConfig(BaseModel):
    """Which provider backs the data source and how it fans out."""

    provider: str = "watttime"
    concurrent: bool = False


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")


class Config(BaseModel):
    """Main configuration for carbonaware."""

    data_source: DataSourceConfig = Field(default_factory=DataSourceConfig)
    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)
    locations: Dict[str, LocationConfig] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file."""
    if config_path is None:
        config_path = Path(os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}. "
            f"Copy config.example.yml to config.yml and configure your API tokens."
        )

    logger.info("Loading configuration from %s", config_path)

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        return Config(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e
