"""WattTime provider client for marginal emissions data."""

import logging
from datetime import datetime
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from carbonaware.config import ProviderConfig
from carbonaware.exceptions import ProviderDataError, ProviderHttpError, RegionNotFoundError
from carbonaware.models import Forecast, GridEmissionDataPoint
from carbonaware.transport import AuthRetryTransport, RequestHook, create_http_client

from .adapters import to_grid_emission_data_point
from .base import EmissionsProviderClient
from .records import WattTimeBalancingAuthority, WattTimeDataPoint, WattTimeForecast


logger = logging.getLogger(__name__)

BASE_URL = "https://api2.watttime.org"
PROVIDER_NAME = "watttime"

PATHS = {
    "data": "/v2/data",
    "forecast": "/v2/forecast",
    "region": "/v2/ba-from-loc",
}

QUERY_STRINGS = {
    "region": "ba",
    "start_time": "starttime",
    "end_time": "endtime",
    "latitude": "latitude",
    "longitude": "longitude",
}

_DATA_POINTS = TypeAdapter(List[WattTimeDataPoint])


class WattTimeClient(EmissionsProviderClient):
    """Client for the WattTime v2 API. Values are MOER in lbs/MWh."""

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
            self.transport.set_bearer_authentication_header(config.api_token)

    async def get_data_points(self, region: str, start_time: datetime, end_time: datetime) -> List[GridEmissionDataPoint]:
        logger.info("Requesting data for balancing authority %s from %s to %s", region, start_time, end_time)

        params = {
            QUERY_STRINGS["region"]: region,
            QUERY_STRINGS["start_time"]: start_time.isoformat(),
            QUERY_STRINGS["end_time"]: end_time.isoformat(),
        }
        result = await self.transport.fetch(PATHS["data"], params, tags={QUERY_STRINGS["region"]: region})

        try:
            records = _DATA_POINTS.validate_json(result or "[]")
        except ValidationError as exc:
            raise ProviderDataError(f"Error parsing data points for {region}: {exc}") from exc

        return [to_grid_emission_data_point(record) for record in records]

    async def get_current_forecast(self, region: str) -> Forecast:
        logger.info("Requesting current forecast for balancing authority %s", region)

        params = {QUERY_STRINGS["region"]: region}
        result = await self.transport.fetch(PATHS["forecast"], params, tags={QUERY_STRINGS["region"]: region})

        if not result.strip() or result.strip() == "null":
            raise ProviderDataError(f"Error getting forecast for {region}")

        try:
            forecast = WattTimeForecast.model_validate_json(result)
        except ValidationError as exc:
            raise ProviderDataError(f"Error getting forecast for {region}: {exc}") from exc

        return Forecast(
            generated_at=forecast.generated_at,
            data_points=[to_grid_emission_data_point(record) for record in forecast.forecast],
        )

    async def get_region_for_coordinates(self, latitude: float, longitude: float) -> str:
        logger.info("Requesting balancing authority for coordinates %s, %s", latitude, longitude)

        params = {
            QUERY_STRINGS["latitude"]: str(latitude),
            QUERY_STRINGS["longitude"]: str(longitude),
        }

        try:
            result = await self.transport.fetch(PATHS["region"], params, tags=params)
        except ProviderHttpError as exc:
            if exc.response_status == httpx.codes.NOT_FOUND:
                raise RegionNotFoundError(f"No balancing authority found for {latitude}, {longitude}") from exc
            raise

        try:
            balancing_authority = WattTimeBalancingAuthority.model_validate_json(result)
        except ValidationError as exc:
            raise RegionNotFoundError(f"No balancing authority found for {latitude}, {longitude}") from exc

        return balancing_authority.abbrev

    async def aclose(self) -> None:
        await self.transport.aclose()
