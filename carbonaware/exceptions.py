"""Error types raised by the emissions data sources."""

from typing import Optional


class CarbonAwareError(Exception):
    """Base class for all errors raised while fetching emissions data."""

    status_code: int = 500


class LocationConversionError(CarbonAwareError):
    """The location could not be converted into a geoposition."""

    status_code = 400


class RegionNotFoundError(CarbonAwareError):
    """The provider has no region covering the requested coordinates."""

    status_code = 404


class ProviderHttpError(CarbonAwareError):
    """The provider answered with a non-success status or could not be reached."""

    status_code = 502

    def __init__(self, message: str, response_status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.response_status = response_status
        self.body = body


class ProviderDataError(CarbonAwareError):
    """The provider payload was malformed or the provider reported no data."""

    status_code = 502


class ForecastValidationError(ProviderDataError):
    """A forecast did not contain enough data points to be usable."""
