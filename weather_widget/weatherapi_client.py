"""WeatherAPI.com client for fetching city forecasts.

A single request covers everything the widget shows:

    GET /forecast.json?key=...&q={city}&days={horizon}

returns the resolved location, current conditions, one entry per forecast
day and, inside the first day, the 24 hourly entries for today.

The API key is never embedded here; it comes from config.get_weatherapi_key().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from weather_widget import config

logger = logging.getLogger(__name__)


class WeatherAPIError(Exception):
    """Raised when a forecast cannot be fetched or understood."""


class CityNotFoundError(WeatherAPIError):
    """Raised when WeatherAPI answers with a non-success status."""


CITY_NOT_FOUND_MESSAGE = "City not found"
_MALFORMED_MESSAGE = "Unexpected forecast response format from WeatherAPI."


@dataclass(frozen=True)
class CurrentConditions:
    """Current weather at the resolved location.

    Attributes:
        temp_c: Temperature in Celsius.
        condition_text: Condition label (e.g., "Partly cloudy").
    """

    temp_c: float
    condition_text: str


@dataclass(frozen=True)
class HourlyEntry:
    """One hour of today's forecast.

    Attributes:
        time: Local timestamp as sent by WeatherAPI ("2026-10-19 13:00").
        temp_c: Temperature in Celsius.
        condition_text: Condition label.
    """

    time: str
    temp_c: float
    condition_text: str


@dataclass(frozen=True)
class DailyEntry:
    """One day of the multi-day forecast.

    Attributes:
        date: Calendar date as sent by WeatherAPI ("2026-10-19").
        avgtemp_c: Average temperature in Celsius.
        condition_text: Condition label.
    """

    date: str
    avgtemp_c: float
    condition_text: str


@dataclass(frozen=True)
class Forecast:
    """Immutable snapshot of one successful forecast lookup.

    Attributes:
        location_name: City name as resolved by WeatherAPI.
        country: Country of the resolved city.
        current: Current conditions.
        hourly: Hourly entries for the first forecast day.
        daily: One entry per requested forecast day.
    """

    location_name: str
    country: str
    current: CurrentConditions
    hourly: tuple[HourlyEntry, ...] = field(default_factory=tuple)
    daily: tuple[DailyEntry, ...] = field(default_factory=tuple)


def _create_client() -> httpx.AsyncClient:
    """Create an httpx client configured for WeatherAPI."""
    return httpx.AsyncClient(
        base_url=config.WEATHERAPI_BASE_URL,
        headers={"Accept": "application/json"},
        timeout=config.WEATHERAPI_TIMEOUT,
    )


def _transport_message(exc: httpx.HTTPError) -> str:
    """Return the transport's own description of a failed request."""
    return str(exc) or exc.__class__.__name__


def _temperature(value) -> float:
    """Return a JSON number as float; anything else is malformed."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _text(value) -> str:
    """Return a JSON string; anything else is malformed."""
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def parse_forecast(data: dict) -> Forecast:
    """Parse a WeatherAPI forecast.json payload into a Forecast.

    Args:
        data: Decoded JSON body.

    Returns:
        Forecast with hourly entries from the first day.

    Raises:
        WeatherAPIError: If a required field is missing, has the wrong shape,
            or holds a value of the wrong type.
    """
    try:
        location = data["location"]
        current = data["current"]
        forecast_days = data["forecast"]["forecastday"]

        daily = tuple(
            DailyEntry(
                date=_text(d["date"]),
                avgtemp_c=_temperature(d["day"]["avgtemp_c"]),
                condition_text=_text(d["day"]["condition"]["text"]),
            )
            for d in forecast_days
        )
        hourly = ()
        if forecast_days:
            hourly = tuple(
                HourlyEntry(
                    time=_text(h["time"]),
                    temp_c=_temperature(h["temp_c"]),
                    condition_text=_text(h["condition"]["text"]),
                )
                for h in forecast_days[0]["hour"]
            )

        return Forecast(
            location_name=_text(location["name"]),
            country=_text(location["country"]),
            current=CurrentConditions(
                temp_c=_temperature(current["temp_c"]),
                condition_text=_text(current["condition"]["text"]),
            ),
            hourly=hourly,
            daily=daily,
        )
    except (KeyError, TypeError, IndexError, ValueError):
        raise WeatherAPIError(_MALFORMED_MESSAGE)


async def get_forecast(query: str, days: int) -> Forecast:
    """Fetch the forecast for a city.

    Args:
        query: Free-text city name, passed through as the `q` parameter.
        days: Number of forecast days to request.

    Returns:
        The parsed Forecast.

    Raises:
        CityNotFoundError: On any non-2xx response.
        WeatherAPIError: On transport errors, invalid JSON, a malformed
            payload, or a missing API key.
    """
    api_key = config.get_weatherapi_key()
    if not api_key:
        raise WeatherAPIError(
            "WEATHERAPI_KEY is not set. "
            "Please set it in your environment or Streamlit secrets."
        )

    params = {"key": api_key, "q": query, "days": days}
    async with _create_client() as client:
        try:
            response = await client.get("/forecast.json", params=params)
        except httpx.HTTPError as exc:
            raise WeatherAPIError(_transport_message(exc))

    if not response.is_success:
        logger.info("WeatherAPI returned HTTP %d for %r", response.status_code, query)
        raise CityNotFoundError(CITY_NOT_FOUND_MESSAGE)

    try:
        data = response.json()
    except ValueError:
        raise WeatherAPIError(_MALFORMED_MESSAGE)

    return parse_forecast(data)
