"""Tests for the WattTime provider client."""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import httpx
import pytest

from carbonaware.config import ProviderConfig
from carbonaware.datasource import CarbonIntensityDataSource
from carbonaware.exceptions import ProviderDataError, ProviderHttpError, RegionNotFoundError
from carbonaware.locations import StaticLocationSource
from carbonaware.models import EmissionsUnit, Location, LocationType
from carbonaware.providers.watttime import PATHS, WattTimeClient


def _data_point(point_time: str, value: float) -> Dict[str, Any]:
    return {
        "ba": "CAISO_NORTH",
        "datatype": "MOER",
        "frequency": 300,
        "market": "RTM",
        "point_time": point_time,
        "value": value,
        "version": "3.2",
    }


def _client(routes: Dict[str, httpx.Response], seen: List[httpx.Request]) -> WattTimeClient:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return routes[request.url.path]

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://api2.watttime.org")
    return WattTimeClient(ProviderConfig(enabled=True, api_token="test-token"), http_client=http_client)


@pytest.fixture(name="seen")
def fixture_seen() -> List[httpx.Request]:
    """Requests recorded by the mock transport."""
    return []


class TestWattTimeClient:
    """Tests for WattTime client requests and response shaping."""

    @pytest.mark.asyncio
    async def test_get_data_points(self, seen: List[httpx.Request]) -> None:
        body = [_data_point("2022-04-18T18:30:00Z", 950.0), _data_point("2022-04-18T18:35:00Z", 940.5)]
        client = _client({PATHS["data"]: httpx.Response(200, json=body)}, seen)

        start = datetime(2022, 4, 18, 12, 30, tzinfo=timezone(timedelta(hours=-6)))
        end = start + timedelta(minutes=10)
        result = await client.get_data_points("CAISO_NORTH", start, end)

        assert len(result) == 2
        assert result[0].region == "CAISO_NORTH"
        assert result[0].time == datetime(2022, 4, 18, 18, 30, tzinfo=timezone.utc)
        assert result[0].value == 950.0
        assert result[0].unit == EmissionsUnit.LBS_PER_MWH
        assert result[1].value == 940.5

        params = seen[0].url.params
        assert params["ba"] == "CAISO_NORTH"
        assert params["starttime"] == "2022-04-18T12:30:00-06:00"
        assert params["endtime"] == "2022-04-18T12:40:00-06:00"
        assert seen[0].headers["Authorization"] == "Bearer test-token"
        assert seen[0].headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_get_data_points_empty(self, seen: List[httpx.Request]) -> None:
        """No data in the window is an empty result, not an error."""
        client = _client({PATHS["data"]: httpx.Response(200, json=[])}, seen)

        now = datetime.now(tz=timezone.utc)
        assert await client.get_data_points("BA", now, now + timedelta(hours=1)) == []

    @pytest.mark.asyncio
    async def test_get_data_points_accepts_camel_case(self, seen: List[httpx.Request]) -> None:
        body = [{"balancingAuthorityAbbreviation": "BA", "pointTime": "2022-04-18T18:30:00+00:00", "value": 10}]
        client = _client({PATHS["data"]: httpx.Response(200, json=body)}, seen)

        now = datetime.now(tz=timezone.utc)
        result = await client.get_data_points("BA", now, now)

        assert result[0].region == "BA"
        assert result[0].value == 10.0

    @pytest.mark.asyncio
    async def test_get_data_points_malformed(self, seen: List[httpx.Request]) -> None:
        """Payloads that do not match the expected shape are data errors."""
        client = _client({PATHS["data"]: httpx.Response(200, text='{"unexpected": true}')}, seen)

        now = datetime.now(tz=timezone.utc)
        with pytest.raises(ProviderDataError):
            await client.get_data_points("BA", now, now)

    @pytest.mark.asyncio
    async def test_get_data_points_http_error(self, seen: List[httpx.Request]) -> None:
        client = _client({PATHS["data"]: httpx.Response(500, text="Internal server error")}, seen)

        now = datetime.now(tz=timezone.utc)
        with pytest.raises(ProviderHttpError) as exc_info:
            await client.get_data_points("BA", now, now)

        assert exc_info.value.response_status == 500

    @pytest.mark.asyncio
    async def test_get_current_forecast(self, seen: List[httpx.Request]) -> None:
        body = {
            "generated_at": "2022-04-18T18:30:00Z",
            "forecast": [_data_point("2022-04-18T18:35:00Z", 900.0), _data_point("2022-04-18T18:40:00Z", 910.0)],
        }
        client = _client({PATHS["forecast"]: httpx.Response(200, json=body)}, seen)

        forecast = await client.get_current_forecast("CAISO_NORTH")

        assert forecast.generated_at == datetime(2022, 4, 18, 18, 30, tzinfo=timezone.utc)
        assert [point.value for point in forecast.data_points] == [900.0, 910.0]
        assert seen[0].url.params["ba"] == "CAISO_NORTH"

    @pytest.mark.asyncio
    async def test_get_current_forecast_missing(self, seen: List[httpx.Request]) -> None:
        """A null forecast means the provider has no forecast for the region."""
        client = _client({PATHS["forecast"]: httpx.Response(200, text="null")}, seen)

        with pytest.raises(ProviderDataError):
            await client.get_current_forecast("BA")

    @pytest.mark.asyncio
    async def test_get_current_forecast_keeps_provider_order(self, seen: List[httpx.Request]) -> None:
        body = {
            "generated_at": "2022-04-18T18:30:00Z",
            "forecast": [_data_point("2022-04-18T18:40:00Z", 2.0), _data_point("2022-04-18T18:35:00Z", 1.0)],
        }
        client = _client({PATHS["forecast"]: httpx.Response(200, text=json.dumps(body))}, seen)

        forecast = await client.get_current_forecast("BA")

        assert [point.value for point in forecast.data_points] == [2.0, 1.0]

    @pytest.mark.asyncio
    async def test_get_region_for_coordinates(self, seen: List[httpx.Request]) -> None:
        body = {"id": 186, "abbrev": "CAISO_NORTH", "name": "California ISO Northern"}
        client = _client({PATHS["region"]: httpx.Response(200, json=body)}, seen)

        region = await client.get_region_for_coordinates(37.783, -122.417)

        assert region == "CAISO_NORTH"
        assert seen[0].url.params["latitude"] == "37.783"
        assert seen[0].url.params["longitude"] == "-122.417"

    @pytest.mark.asyncio
    async def test_get_region_for_coordinates_not_covered(self, seen: List[httpx.Request]) -> None:
        client = _client({PATHS["region"]: httpx.Response(404, json={"error": "Coordinates not found"})}, seen)

        with pytest.raises(RegionNotFoundError):
            await client.get_region_for_coordinates(0.0, 0.0)

    @pytest.mark.asyncio
    async def test_auth_failure_is_retried(self, seen: List[httpx.Request]) -> None:
        """The client rides out a single 401 from the provider."""
        responses = iter([httpx.Response(401), httpx.Response(200, json={"abbrev": "BA"})])

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return next(responses)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://api2.watttime.org")
        client = WattTimeClient(ProviderConfig(api_token="token"), http_client=http_client)

        assert await client.get_region_for_coordinates(1.0, 2.0) == "BA"
        assert len(seen) == 2

    @pytest.mark.asyncio
    async def test_get_current_forecast_rejects_times_without_offset(self, seen: List[httpx.Request]) -> None:
        """A point_time without an offset is a data error, not a crash while inferring durations."""
        body = {
            "generated_at": "2022-04-18T18:30:00Z",
            "forecast": [_data_point("2022-04-18T18:30:00Z", 900.0), _data_point("2022-04-18T18:35:00", 910.0)],
        }
        routes = {
            PATHS["region"]: httpx.Response(200, json={"abbrev": "CAISO_NORTH"}),
            PATHS["forecast"]: httpx.Response(200, json=body),
        }
        client = _client(routes, seen)
        location = Location(name="westus", location_type=LocationType.GEOPOSITION, latitude=37.783, longitude=-122.417)
        data_source = CarbonIntensityDataSource(client, StaticLocationSource({}))

        with pytest.raises(ProviderDataError):
            await data_source.get_current_carbon_intensity_forecast(location)
