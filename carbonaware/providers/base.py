"""Base provider interface for emissions data."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from carbonaware.models import Forecast, GridEmissionDataPoint


class EmissionsProviderClient(ABC):
    """Abstract base class for emissions data provider clients."""

    @abstractmethod
    async def get_data_points(self, region: str, start_time: datetime, end_time: datetime) -> List[GridEmissionDataPoint]:
        """Get the emissions data points for a region within a time window."""

    @abstractmethod
    async def get_current_forecast(self, region: str) -> Forecast:
        """Get the provider's current forecast for a region."""

    @abstractmethod
    async def get_region_for_coordinates(self, latitude: float, longitude: float) -> str:
        """Get the provider region identifier covering a coordinate pair."""

    async def aclose(self) -> None:
        """Release network resources held by the client."""
