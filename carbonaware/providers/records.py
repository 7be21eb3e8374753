"""Provider-native response records.

Each provider gets its own record types. They are converted into
:class:`carbonaware.models.GridEmissionDataPoint` by
:mod:`carbonaware.providers.adapters` and never handed to callers.
"""

from typing import List, Optional, Union

from pydantic import AliasChoices, AwareDatetime, BaseModel, ConfigDict, Field


class WattTimeDataPoint(BaseModel):
    """A MOER sample as returned by WattTime, in lbs/MWh."""

    ba: str = Field(validation_alias=AliasChoices("ba", "balancingAuthorityAbbreviation"))
    point_time: AwareDatetime = Field(validation_alias=AliasChoices("point_time", "pointTime"))
    value: float
    frequency: Optional[int] = None
    market: Optional[str] = None
    datatype: Optional[str] = None
    version: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class WattTimeForecast(BaseModel):
    """Response model for the WattTime forecast endpoint."""

    generated_at: AwareDatetime = Field(validation_alias=AliasChoices("generated_at", "generatedAt"))
    forecast: List[WattTimeDataPoint] = Field(default_factory=list)


class WattTimeBalancingAuthority(BaseModel):
    """Response model for the WattTime region lookup endpoint."""

    id: Optional[int] = None
    abbrev: str
    name: Optional[str] = None


class ElectricityMapsDataPoint(BaseModel):
    """A carbon intensity sample as returned by ElectricityMaps, in gCO2eq/kWh."""

    carbon_intensity: float = Field(validation_alias=AliasChoices("carbonIntensity", "carbon_intensity"))
    datetime: AwareDatetime
    zone: Optional[str] = None
    is_estimated: Optional[bool] = Field(default=None, validation_alias=AliasChoices("isEstimated", "is_estimated"))

    model_config = ConfigDict(frozen=True)


class ElectricityMapsHistory(BaseModel):
    """Response model for the ElectricityMaps past-range endpoint."""

    zone: Optional[str] = None
    data: List[ElectricityMapsDataPoint] = Field(default_factory=list)


class ElectricityMapsForecast(BaseModel):
    """Response model for the ElectricityMaps forecast endpoint."""

    zone: str
    forecast: List[ElectricityMapsDataPoint] = Field(default_factory=list)
    updated_at: AwareDatetime = Field(validation_alias=AliasChoices("updatedAt", "updated_at"))


class ElectricityMapsZone(BaseModel):
    """The part of a latest-intensity response that names the zone."""

    zone: str


ProviderRecord = Union[WattTimeDataPoint, ElectricityMapsDataPoint]
