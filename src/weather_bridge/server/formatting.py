"""Reduce NWS GeoJSON resources to fixed-format text."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

UNKNOWN = "Unknown"

MPS_TO_MPH = 2.237
PA_PER_MB = 100
METERS_PER_MILE = 1609
KM_PER_DEGREE = 111
MILES_PER_KM = 0.621371


def _or(value: Any, default: str = UNKNOWN) -> Any:
    return default if value is None or value == "" else value


def format_alert(feature: dict[str, Any]) -> str:
    props = feature.get("properties") or {}
    return "\n".join(
        [
            f"Event: {_or(props.get('event'))}",
            f"Area: {_or(props.get('areaDesc'))}",
            f"Severity: {_or(props.get('severity'))}",
            f"Status: {_or(props.get('status'))}",
            f"Headline: {_or(props.get('headline'), 'No headline')}",
            "---",
        ]
    )


def format_alerts(title: str, features: list[dict[str, Any]]) -> str:
    return f"{title}:\n\n" + "\n".join(format_alert(f) for f in features)


def format_forecast_period(period: dict[str, Any]) -> str:
    wind = f"{_or(period.get('windSpeed'))} {period.get('windDirection') or ''}"
    return "\n".join(
        [
            f"{_or(period.get('name'))}:",
            f"Temperature: {_or(period.get('temperature'))}°{period.get('temperatureUnit') or 'F'}",
            f"Wind: {wind}",
            f"{_or(period.get('shortForecast'), 'No forecast available')}",
            "---",
        ]
    )


def format_hourly_period(period: dict[str, Any]) -> str:
    return (
        f"{_or(period.get('name') or period.get('startTime'))}: "
        f"{_or(period.get('temperature'))}°{period.get('temperatureUnit') or 'F'}"
        f" - {_or(period.get('shortForecast'))}"
    )


# --- observations ------------------------------------------------------------


def _measure(props: dict[str, Any], key: str) -> Optional[float]:
    value = (props.get(key) or {}).get("value")
    return value if isinstance(value, (int, float)) else None


def _temperature_unit(unit_code: Optional[str]) -> str:
    code = (unit_code or "").lower()
    return "C" if "degc" in code or "celsius" in code else "F"


def _observed_at(timestamp: Optional[str]) -> str:
    if not timestamp:
        return UNKNOWN
    try:
        return datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M %Z").strip()
    except ValueError:
        return timestamp


def format_observation(
    latitude: float,
    longitude: float,
    station_name: str,
    observation: dict[str, Any],
) -> str:
    """Current-conditions text; every missing field reads ``Unknown``."""
    props = observation.get("properties") or {}

    temp = _measure(props, "temperature")
    temp_unit = _temperature_unit((props.get("temperature") or {}).get("unitCode"))
    humidity = _measure(props, "relativeHumidity")
    wind_speed = _measure(props, "windSpeed")
    wind_dir = _measure(props, "windDirection")
    pressure = _measure(props, "barometricPressure")
    visibility = _measure(props, "visibility")

    wind = f"{round(wind_speed * MPS_TO_MPH)} mph" if wind_speed is not None else f"{UNKNOWN} mph"
    if wind_dir is not None:
        wind += f" from {round(wind_dir)}°"

    return "\n".join(
        [
            f"Current conditions near {latitude}, {longitude}:",
            f"Station: {station_name}",
            f"Observed: {_observed_at(props.get('timestamp'))}",
            f"Temperature: {round(temp) if temp is not None else UNKNOWN}°{temp_unit}",
            f"Humidity: {round(humidity) if humidity is not None else UNKNOWN}%",
            f"Wind: {wind}",
            f"Pressure: {f'{pressure / PA_PER_MB:.2f}' if pressure is not None else UNKNOWN} mb",
            f"Visibility: {f'{visibility / METERS_PER_MILE:.1f}' if visibility is not None else UNKNOWN} miles",
            f"Description: {_or(props.get('textDescription'), 'Not available')}",
        ]
    )


# --- radar stations ----------------------------------------------------------


def station_coordinates(station: dict[str, Any]) -> Optional[tuple[float, float]]:
    """(lat, lon) of a radar station from its properties, else its point geometry."""
    props = station.get("properties") or {}
    lat, lon = props.get("latitude"), props.get("longitude")
    if lat is None or lon is None:
        coords = (station.get("geometry") or {}).get("coordinates") or []
        if len(coords) >= 2:
            lon, lat = coords[0], coords[1]
    if isinstance(lat, (int, float)) and isinstance(lon, (int, float)):
        return float(lat), float(lon)
    return None


def degree_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Planar distance in degrees; an approximation, not great-circle."""
    return math.hypot(lat1 - lat2, lon1 - lon2)


def degrees_to_miles(degrees: float) -> float:
    return degrees * KM_PER_DEGREE * MILES_PER_KM


def format_radar_station(station: dict[str, Any]) -> str:
    props = station.get("properties") or {}
    return f"{props.get('id')}: {props.get('name')} ({props.get('stationType')})"


def format_zone_info(latitude: float, longitude: float, points: dict[str, Any]) -> str:
    props = points.get("properties") or {}
    return "\n".join(
        [
            f"Zone information for {latitude}, {longitude}:",
            f"Forecast Zone: {_or(props.get('forecastZone'))}",
            f"County: {_or(props.get('county'))}",
            f"Fire Weather Zone: {_or(props.get('fireWeatherZone'))}",
            f"Grid ID: {_or(props.get('gridId'))}",
            f"Grid X,Y: {_or(props.get('gridX'))}, {_or(props.get('gridY'))}",
        ]
    )
