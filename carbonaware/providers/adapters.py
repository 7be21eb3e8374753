"""Conversion of provider-native records into grid emission data points."""

from typing import Optional

from carbonaware.models import EmissionsUnit, GridEmissionDataPoint

from .records import ElectricityMapsDataPoint, ProviderRecord, WattTimeDataPoint


def to_grid_emission_data_point(record: ProviderRecord, region: Optional[str] = None) -> GridEmissionDataPoint:
    """Convert a provider record, keeping the provider's native unit.

    ``region`` is used when the record itself does not name its region, which
    is the case for most ElectricityMaps list entries.
    """
    if isinstance(record, WattTimeDataPoint):
        return GridEmissionDataPoint(
            region=record.ba,
            time=record.point_time,
            value=record.value,
            unit=EmissionsUnit.LBS_PER_MWH,
        )

    if isinstance(record, ElectricityMapsDataPoint):
        zone = record.zone or region
        if zone is None:
            raise ValueError("ElectricityMaps record has no zone and no region was given")
        return GridEmissionDataPoint(
            region=zone,
            time=record.datetime,
            value=record.carbon_intensity,
            unit=EmissionsUnit.G_PER_KWH,
        )

    raise TypeError(f"Unsupported provider record type: {type(record).__name__}")
