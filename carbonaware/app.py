"""FastAPI application exposing the carbon intensity data source."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse

from carbonaware.config import Config, load_config
from carbonaware.datasource import CarbonIntensityDataSource
from carbonaware.exceptions import CarbonAwareError
from carbonaware.models import EmissionsData, EmissionsForecast, Location, LocationType
from carbonaware.providers.helpers import create_data_source


logger = logging.getLogger(__name__)

# Global configuration and data source
config: Optional[Config] = None
data_source: Optional[CarbonIntensityDataSource] = None


def _parse_time(name: str, value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {name}. Use ISO 8601 format (e.g., '2022-04-18T12:32:42Z'): {str(e)}",
        ) from e

    # Times without an offset are taken as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_location(name: str) -> Location:
    return Location(name=name, location_type=LocationType.CLOUD_PROVIDER)


def data_source_dependency() -> CarbonIntensityDataSource:
    """FastAPI dependency that returns the configured data source."""
    if data_source is None:
        raise HTTPException(status_code=500, detail="Data source not initialized")
    return data_source


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    global config, data_source  # pylint: disable=global-statement

    try:
        config = load_config()

        # Configure logging
        log_level = config.logging.level.upper()  # pylint: disable=no-member
        logging.basicConfig(level=getattr(logging, log_level))
        logger.info("Starting %s", fastapi_app.title)

        data_source = create_data_source(config)

        logger.info("Application startup complete")
        yield

    except Exception as e:
        logger.error("Failed to start application: %s", e)
        raise

    finally:
        if data_source is not None:
            await data_source.client.aclose()
        logger.info("Application shutdown complete")


app = FastAPI(
    title="Carbon Aware Emissions Service",
    description="Grid carbon intensity for locations, in gCO2eq/kWh",
    version="0.1",
    lifespan=lifespan,
)


@app.exception_handler(CarbonAwareError)
async def carbon_aware_error_handler(_: Any, exc: CarbonAwareError) -> JSONResponse:
    """Map data source errors onto HTTP responses."""
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc), "type": type(exc).__name__})


@app.get("/emissions/bylocations")
async def get_emissions_by_locations(
    location: List[str] = Query(..., description="Location names (e.g., 'eastus')"),
    time: str = Query(..., description="Start time in ISO 8601 format (e.g., '2022-04-18T12:00:00Z')"),
    toTime: str = Query(..., description="End time in ISO 8601 format (e.g., '2022-04-18T13:00:00Z')"),
    source: CarbonIntensityDataSource = Depends(data_source_dependency),
) -> List[EmissionsData]:
    """Get carbon intensity for the given locations and time range."""
    if not location:
        raise HTTPException(status_code=400, detail="location parameter is required")

    start_dt = _parse_time("time", time)
    end_dt = _parse_time("toTime", toTime)

    # Validate time range
    if start_dt > end_dt:
        raise HTTPException(status_code=400, detail="time must not be after toTime")

    return await source.get_carbon_intensity([_to_location(name) for name in location], start_dt, end_dt)


@app.get("/emissions/forecasts/current")
async def get_current_forecast(
    location: str = Query(..., description="Location name (e.g., 'eastus')"),
    source: CarbonIntensityDataSource = Depends(data_source_dependency),
) -> EmissionsForecast:
    """Get the current carbon intensity forecast for a location."""
    if not location:
        raise HTTPException(status_code=400, detail="location parameter is required")

    return await source.get_current_carbon_intensity_forecast(_to_location(location))


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    if not config:
        return {"status": "error", "details": "configuration not loaded"}

    return {
        "status": "healthy",
        "provider": config.data_source.provider,
        "locations": sorted(config.locations.keys()),
    }
