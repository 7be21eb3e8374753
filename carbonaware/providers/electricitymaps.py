"""ElectricityMaps provider client for carbon intensity data."""

import logging
from datetime import datetime
from typing import List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from carbonaware.config import ProviderConfig
from carbonaware.exceptions import ProviderDataError, ProviderHttpError, RegionNotFoundError
from carbonaware.models import Forecast, GridEmissionDataPoint
from carbonaware.transport import AuthRetryTransport, RequestHook, create_http_client

from .adapters import to_grid_emission_data_point
from .base import EmissionsProviderClient
from .records import ElectricityMapsForecast, ElectricityMapsHistory, ElectricityMapsZone


logger = logging.getLogger(__name__)

BASE_URL = "https://api.electricitymaps.com"
PROVIDER_NAME = "electricitymaps"
AUTH_HEADER = "auth-token"

PATHS = {
    "data": "/v3/carbon-intensity/past-range",
    "forecast": "/v3/carbon-intensity/forecast",
    "region": "/v3/carbon-intensity/latest",
}

QUERY_STRINGS = {
    "region": "zone",
    "start_time": "start",
    "end_time": "end",
    "latitude": "lat",
    "longitude": "lon",
}


def _parse(model: type[BaseModel], payload: str, what: str) -> BaseModel:
    try:
        return model.model_validate_json(payload)
    except ValidationError as exc:
        raise ProviderDataError(f"Error parsing ElectricityMaps {what}: {exc}") from exc


class ElectricityMapsClient(EmissionsProviderClient):
    """Client for the ElectricityMaps v3 API. Values are already in gCO2eq/kWh."""

    def __init__(
        self,
        config: ProviderConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        request_hook: Optional[RequestHook] = None,
    ):
        self.config = config
        client = http_client or create_http_client(config, BASE_URL)
        self.transport = AuthRetryTransport(client, PROVIDER_NAME, request_hook)
        if config.api_token:
            self.transport.set_header(AUTH_HEADER, config.api_token)

    async def get_data_points(self, region: str, start_time: datetime, end_time: datetime) -> List[GridEmissionDataPoint]:
        params = {
            QUERY_STRINGS["region"]: region,
            QUERY_STRINGS["start_time"]: start_time.isoformat(),
            QUERY_STRINGS["end_time"]: end_time.isoformat(),
        }
        result = await self.transport.fetch(PATHS["data"], params, tags={QUERY_STRINGS["region"]: region})

        history = _parse(ElectricityMapsHistory, result, "history")

        return [to_grid_emission_data_point(item, region=history.zone or region) for item in history.data]

    async def get_current_forecast(self, region: str) -> Forecast:
        logger.info("Requesting current forecast from zone %s", region)

        params = {QUERY_STRINGS["region"]: region}
        result = await self.transport.fetch(PATHS["forecast"], params, tags={QUERY_STRINGS["region"]: region})

        if not result.strip() or result.strip() == "null":
            raise ProviderDataError(f"Error getting forecast for {region}")

        forecast = _parse(ElectricityMapsForecast, result, "forecast")

        return Forecast(
            generated_at=forecast.updated_at,
            data_points=[to_grid_emission_data_point(item, region=forecast.zone) for item in forecast.forecast],
        )

    async def get_region_for_coordinates(self, latitude: float, longitude: float) -> str:
        params = {
            QUERY_STRINGS["latitude"]: str(latitude),
            QUERY_STRINGS["longitude"]: str(longitude),
        }

        try:
            result = await self.transport.fetch(PATHS["region"], params, tags=params)
        except ProviderHttpError as exc:
            if exc.response_status == httpx.codes.NOT_FOUND:
                raise RegionNotFoundError(f"No zone found for {latitude}, {longitude}") from exc
            raise

        try:
            return ElectricityMapsZone.model_validate_json(result).zone
        except ValidationError as exc:
            raise RegionNotFoundError(f"No zone found for {latitude}, {longitude}") from exc

    async def aclose(self) -> None:
        await self.transport.aclose()
