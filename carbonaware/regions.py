"""Lookup of the provider region covering a location."""

import logging

from carbonaware.exceptions import LocationConversionError
from carbonaware.models import Location
from carbonaware.providers.base import EmissionsProviderClient


logger = logging.getLogger(__name__)


class RegionResolver:
    """Asks a provider client which region covers a resolved location."""

    def __init__(self, client: EmissionsProviderClient):
        self.client = client

    async def get_region(self, location: Location) -> str:
        if not location.has_coordinates:
            raise LocationConversionError(f"Location '{location.name}' has not been resolved to coordinates")

        region = await self.client.get_region_for_coordinates(location.latitude, location.longitude)

        logger.debug("Location %s maps to region %s", location.name, region)

        return region
