"""Carbon intensity data source backed by a single emissions provider."""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from carbonaware.exceptions import ForecastValidationError
from carbonaware.locations import LocationSource
from carbonaware.models import EmissionsData, EmissionsForecast, EmissionsUnit, GridEmissionDataPoint, Location
from carbonaware.providers.base import EmissionsProviderClient
from carbonaware.regions import RegionResolver


logger = logging.getLogger(__name__)

LBS_TO_GRAMS = 1 / 0.00220462262185
MWH_TO_KWH = 1000.0


def convert_moer_to_grams_per_kwh(value: float) -> float:
    """Convert a MOER value from lbs/MWh to gCO2eq/kWh."""
    return value * LBS_TO_GRAMS / MWH_TO_KWH


class CarbonIntensityDataSource:
    """Turns provider emissions data into records in gCO2eq/kWh for a set of locations."""

    def __init__(self, client: EmissionsProviderClient, location_source: LocationSource, concurrent: bool = False):
        self.client = client
        self.location_source = location_source
        self.region_resolver = RegionResolver(client)
        self.concurrent = concurrent

    @staticmethod
    def convert_to_canonical_units(value: float, unit: EmissionsUnit = EmissionsUnit.LBS_PER_MWH) -> float:
        if unit == EmissionsUnit.LBS_PER_MWH:
            return convert_moer_to_grams_per_kwh(value)
        return value

    def _to_emissions_data(self, point: GridEmissionDataPoint, duration: Optional[timedelta] = None) -> EmissionsData:
        return EmissionsData(
            location=point.region,
            rating=self.convert_to_canonical_units(point.value, point.unit),
            time=point.time,
            duration=duration,
        )

    async def _resolve_locations(self, locations: Sequence[Location]) -> List[Location]:
        # Every location is resolved before the first provider request.
        return [await self.location_source.to_geoposition_location(location) for location in locations]

    async def _get_location_emissions(self, location: Location, start_time: datetime, end_time: datetime) -> List[EmissionsData]:
        region = await self.region_resolver.get_region(location)
        data_points = await self.client.get_data_points(region, start_time, end_time)

        logger.debug("Found %s data points for region %s", len(data_points), region)

        return [self._to_emissions_data(point) for point in data_points]

    async def _gather_location_emissions(
        self, locations: Sequence[Location], start_time: datetime, end_time: datetime
    ) -> List[List[EmissionsData]]:
        tasks = [
            asyncio.ensure_future(self._get_location_emissions(location, start_time, end_time)) for location in locations
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # No fetch outlives the call that started it.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def get_carbon_intensity(self, locations: Sequence[Location], start_time: datetime, end_time: datetime) -> List[EmissionsData]:
        """
        Get carbon intensity records for each location within a time window.

        Args:
            locations: Locations to look up, in the order results should come back
            start_time: Start of the time window
            end_time: End of the time window

        Returns:
            One record per provider data point, grouped by location in input order.
            Locations without data contribute no records.

        Raises:
            LocationConversionError: If any location cannot be resolved. No provider
                data is fetched in that case.
        """
        logger.info("Getting carbon intensity for %s locations from %s to %s", len(locations), start_time, end_time)

        resolved = await self._resolve_locations(locations)

        if self.concurrent:
            per_location = await self._gather_location_emissions(resolved, start_time, end_time)
        else:
            per_location = [await self._get_location_emissions(location, start_time, end_time) for location in resolved]

        results = [record for records in per_location for record in records]

        logger.debug("Found %s total emissions data records for locations", len(results))

        return results

    async def get_current_carbon_intensity_forecast(self, location: Location) -> EmissionsForecast:
        """Get the current forecast for a location with a duration on every record.

        Each record lasts until the next one starts. The last record reuses the
        interval before it.
        """
        resolved = await self.location_source.to_geoposition_location(location)
        region = await self.region_resolver.get_region(resolved)
        forecast = await self.client.get_current_forecast(region)

        data_points = forecast.data_points
        if len(data_points) < 2:
            raise ForecastValidationError(
                f"Forecast for region {region} has {len(data_points)} data points, "
                "at least 2 are needed to infer the duration"
            )

        forecast_data: List[EmissionsData] = []
        duration = None
        for current, following in zip(data_points, data_points[1:]):
            duration = following.time - current.time
            forecast_data.append(self._to_emissions_data(current, duration))
        forecast_data.append(self._to_emissions_data(data_points[-1], duration))

        return EmissionsForecast(
            generated_at=forecast.generated_at,
            location=location,
            forecast_data=forecast_data,
        )
