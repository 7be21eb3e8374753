import logging
from typing import Optional

from carbonaware.config import Config
from carbonaware.datasource import CarbonIntensityDataSource
from carbonaware.locations import StaticLocationSource
from carbonaware.transport import RequestHook

from .base import EmissionsProviderClient
from .electricitymaps import ElectricityMapsClient
from .watttime import WattTimeClient


logger = logging.getLogger(__name__)

PROVIDERS = {
    "watttime": WattTimeClient,
    "electricitymaps": ElectricityMapsClient,
}


def get_provider_client(config: Config, request_hook: Optional[RequestHook] = None) -> EmissionsProviderClient:
    """Initialize the provider client selected in the configuration."""

    provider_name = config.data_source.provider.lower()

    if provider_name not in PROVIDERS:
        raise ValueError(f"Unknown provider '{provider_name}'. Known providers: {', '.join(PROVIDERS)}")

    provider_config = config.providers.get(provider_name)
    if provider_config is None or not provider_config.enabled:
        raise ValueError(f"Provider '{provider_name}' is not configured or enabled")

    client = PROVIDERS[provider_name](provider_config, request_hook=request_hook)
    logger.debug("%s provider client initialized", provider_name)

    return client


def create_data_source(config: Config, request_hook: Optional[RequestHook] = None) -> CarbonIntensityDataSource:
    """Build a data source from configuration."""

    return CarbonIntensityDataSource(
        get_provider_client(config, request_hook),
        StaticLocationSource(config.locations),
        concurrent=config.data_source.concurrent,
    )
