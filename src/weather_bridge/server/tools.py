"""
Weather tools served over MCP.

Each handler is independent and stateless: it validates nothing itself
(argument schemas are enforced by FastMCP/pydantic), fetches from the NWS,
and always answers with exactly one text item, failures included.
"""

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent
from pydantic import Field

from weather_bridge.server import formatting
from weather_bridge.server.nws import NWSClient

logger = logging.getLogger(__name__)

DEFAULT_HOURS = 24
MAX_HOURS = 156
DEFAULT_RADIUS_MILES = 100
MAX_RADIUS_MILES = 500
MAX_RADAR_STATIONS = 10

mcp = FastMCP("weather")
nws = NWSClient()

Latitude = Annotated[float, Field(ge=-90, le=90, description="Latitude of the location")]
Longitude = Annotated[float, Field(ge=-180, le=180, description="Longitude of the location")]


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


@mcp.tool(name="get-alerts", description="Get weather alerts for a state", structured_output=False)
async def get_alerts(
    state: Annotated[
        str, Field(min_length=2, max_length=2, description="Two-letter state code (e.g. CA, NY)")
    ],
) -> list[TextContent]:
    state_code = state.upper()
    data = await nws.get_json(nws.url(f"alerts?area={state_code}"))
    if data is None:
        return _text("Failed to retrieve alerts data")

    features = data.get("features") or []
    if not features:
        return _text(f"No active alerts for {state_code}")
    return _text(formatting.format_alerts(f"Active alerts for {state_code}", features))


@mcp.tool(name="get-forecast", description="Get weather forecast for a location", structured_output=False)
async def get_forecast(latitude: Latitude, longitude: Longitude) -> list[TextContent]:
    points = await nws.get_json(nws.points_url(latitude, longitude))
    if points is None:
        return _text(
            f"Failed to retrieve grid point data for coordinates: {latitude}, {longitude}. "
            "This location may not be supported by the NWS API (only US locations are supported)."
        )

    forecast_url = (points.get("properties") or {}).get("forecast")
    if not forecast_url:
        return _text("Failed to get forecast URL from grid point data")

    forecast = await nws.get_json(forecast_url)
    if forecast is None:
        return _text("Failed to retrieve forecast data")

    periods = (forecast.get("properties") or {}).get("periods") or []
    if not periods:
        return _text("No forecast periods available")

    body = "\n".join(formatting.format_forecast_period(p) for p in periods)
    return _text(f"Forecast for {latitude}, {longitude}:\n\n{body}")


@mcp.tool(
    name="get-hourly-forecast",
    description="Get hourly weather forecast for a location",
    structured_output=False,
)
async def get_hourly_forecast(
    latitude: Latitude,
    longitude: Longitude,
    hours: Annotated[
        float,
        Field(
            description=f"Number of hours to forecast (max {MAX_HOURS})",
            json_schema_extra={"minimum": 1, "maximum": MAX_HOURS},
        ),
    ] = DEFAULT_HOURS,
) -> list[TextContent]:
    # Fractional hours truncate; out-of-range requests are clamped.
    hours = max(1, min(int(hours), MAX_HOURS))

    points = await nws.get_json(nws.points_url(latitude, longitude))
    if points is None:
        return _text(f"Failed to retrieve grid point data for coordinates: {latitude}, {longitude}")

    props = points.get("properties") or {}
    hourly_url = props.get("forecastHourly")
    if not hourly_url and props.get("forecast"):
        hourly_url = props["forecast"].replace("/forecast", "/forecast/hourly")
    if not hourly_url:
        return _text("Failed to get hourly forecast URL")

    forecast = await nws.get_json(hourly_url)
    if forecast is None:
        return _text("Failed to retrieve hourly forecast data")

    periods = ((forecast.get("properties") or {}).get("periods") or [])[:hours]
    if not periods:
        return _text("No hourly forecast periods available")

    body = "\n".join(formatting.format_hourly_period(p) for p in periods)
    return _text(f"{hours}-hour forecast for {latitude}, {longitude}:\n\n{body}")


@mcp.tool(
    name="get-current-conditions",
    description="Get current weather conditions from the nearest weather station",
    structured_output=False,
)
async def get_current_conditions(latitude: Latitude, longitude: Longitude) -> list[TextContent]:
    try:
        stations = await nws.get_json(nws.url(f"points/{latitude:.4f},{longitude:.4f}/stations"))
        features = (stations or {}).get("features") or []
        if not features:
            return _text("No weather stations found near this location")

        station = features[0].get("properties") or {}
        station_id = station.get("stationIdentifier")
        if not station_id:
            return _text("No valid station identifier found")

        observation = await nws.get_json(nws.url(f"stations/{station_id}/observations/latest"))
        if observation is None:
            return _text("Failed to retrieve current conditions")

        return _text(
            formatting.format_observation(
                latitude, longitude, station.get("name") or station_id, observation
            )
        )
    except Exception as exc:
        logger.exception("Unexpected observation payload for %s, %s", latitude, longitude)
        return _text(f"Error retrieving current conditions: {exc}")


@mcp.tool(name="get-radar-stations", description="Get nearby weather radar stations", structured_output=False)
async def get_radar_stations(
    latitude: Latitude,
    longitude: Longitude,
    distance: Annotated[
        float,
        Field(
            description="Search radius in miles",
            json_schema_extra={"minimum": 1, "maximum": MAX_RADIUS_MILES},
        ),
    ] = DEFAULT_RADIUS_MILES,
) -> list[TextContent]:
    distance = max(0, min(distance, MAX_RADIUS_MILES))

    data = await nws.get_json(nws.url("radar/stations"))
    if data is None or data.get("features") is None:
        return _text("Failed to retrieve radar stations")

    nearby: list[tuple[float, dict]] = []
    for station in data["features"]:
        coords = formatting.station_coordinates(station)
        if coords is None:
            continue
        degrees = formatting.degree_distance(latitude, longitude, *coords)
        if formatting.degrees_to_miles(degrees) <= distance:
            nearby.append((degrees, station))
    nearby.sort(key=lambda pair: pair[0])
    nearby = nearby[:MAX_RADAR_STATIONS]

    if not nearby:
        return _text(f"No radar stations found within {distance:g} miles of {latitude}, {longitude}")

    body = "\n".join(formatting.format_radar_station(station) for _, station in nearby)
    return _text(f"Radar stations within {distance:g} miles of {latitude}, {longitude}:\n\n{body}")


@mcp.tool(name="get-zone-info", description="Get weather zone information for a location", structured_output=False)
async def get_zone_info(latitude: Latitude, longitude: Longitude) -> list[TextContent]:
    points = await nws.get_json(nws.points_url(latitude, longitude))
    if points is None:
        return _text("Failed to retrieve zone information")
    return _text(formatting.format_zone_info(latitude, longitude, points))


@mcp.tool(name="get-zone-alerts", description="Get weather alerts for a specific zone", structured_output=False)
async def get_zone_alerts(
    zone_id: Annotated[str, Field(description="Zone ID (e.g., 'CAZ006', 'NYZ001')")],
) -> list[TextContent]:
    zone = zone_id.upper()
    data = await nws.get_json(nws.url(f"alerts?zone={zone}"))
    if data is None:
        return _text("Failed to retrieve zone alerts")

    features = data.get("features") or []
    if not features:
        return _text(f"No active alerts for zone {zone_id}")
    return _text(formatting.format_alerts(f"Active alerts for zone {zone_id}", features))
