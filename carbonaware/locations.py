"""Resolution of locations into geopositions."""

import logging
from typing import Dict, Mapping, Protocol

from carbonaware.config import LocationConfig
from carbonaware.exceptions import LocationConversionError
from carbonaware.models import Location, LocationType


logger = logging.getLogger(__name__)


class LocationSource(Protocol):
    """Anything that can turn a location into one with coordinates."""

    async def to_geoposition_location(self, location: Location) -> Location:
        ...


class StaticLocationSource:
    """Resolves named locations from a fixed table of coordinates."""

    def __init__(self, known_locations: Mapping[str, LocationConfig]):
        self.known_locations: Dict[str, LocationConfig] = {
            name.lower(): coords for name, coords in known_locations.items()
        }

    async def to_geoposition_location(self, location: Location) -> Location:
        if location.location_type == LocationType.GEOPOSITION:
            if not location.has_coordinates:
                raise LocationConversionError(f"Geoposition location '{location.name}' is missing coordinates")
            return location

        if not location.name:
            raise LocationConversionError("Location has no name to resolve")

        known = self.known_locations.get(location.name.lower())
        if known is None:
            raise LocationConversionError(f"Unknown location '{location.name}'")

        logger.debug("Resolved location %s to %s, %s", location.name, known.latitude, known.longitude)

        return location.model_copy(
            update={
                "latitude": known.latitude,
                "longitude": known.longitude,
                "cloud_provider": location.cloud_provider or known.cloud_provider,
            }
        )
