"""Data models for carbonaware."""

from datetime import timedelta
from enum import Enum
from typing import List, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class LocationType(str, Enum):
    """How a location is identified."""

    GEOPOSITION = "geoposition"
    CLOUD_PROVIDER = "cloud_provider"


class EmissionsUnit(str, Enum):
    """Units an emissions intensity value can be reported in."""

    LBS_PER_MWH = "lbs/MWh"
    G_PER_KWH = "g/kWh"


class Location(BaseModel):
    """A place of interest, optionally resolved to coordinates."""

    name: Optional[str] = None
    location_type: LocationType = LocationType.CLOUD_PROVIDER
    cloud_provider: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class GridEmissionDataPoint(BaseModel):
    """One provider sample in the provider's native unit."""

    region: str
    time: AwareDatetime
    value: float
    unit: EmissionsUnit = EmissionsUnit.LBS_PER_MWH

    model_config = ConfigDict(frozen=True)


class Forecast(BaseModel):
    """A provider forecast. Data points keep the order the provider returned."""

    generated_at: AwareDatetime
    data_points: List[GridEmissionDataPoint] = Field(default_factory=list)


class EmissionsData(BaseModel):
    """Caller facing emissions record in gCO2eq/kWh.

    ``location`` carries the provider region the record was resolved to.
    ``duration`` is only set on forecast records.
    """

    location: str
    rating: float
    time: AwareDatetime
    duration: Optional[timedelta] = None


class EmissionsForecast(BaseModel):
    """Caller facing forecast for the location that was asked for."""

    generated_at: AwareDatetime
    location: Location
    forecast_data: List[EmissionsData] = Field(default_factory=list)
