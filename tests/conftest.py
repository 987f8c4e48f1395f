"""Shared test fixtures for WeatherAPI forecast payloads."""

from datetime import date, timedelta

import pytest


def _condition(text):
    return {"text": text, "code": 1000}


def make_forecast_payload(days=7, city="Paris", country="France"):
    """Build a WeatherAPI forecast.json body with `days` forecast days."""
    start = date(2026, 10, 19)
    conditions = ["Sunny", "Moderate rain", "Light snow", "Partly cloudy"]

    forecastday = []
    for i in range(days):
        day = start + timedelta(days=i)
        forecastday.append(
            {
                "date": day.isoformat(),
                "day": {
                    "avgtemp_c": 10.0 + i,
                    "condition": _condition(conditions[i % len(conditions)]),
                },
                "hour": [
                    {
                        "time": f"{day.isoformat()} {h:02d}:00",
                        "temp_c": 8.0 + h / 2,
                        "condition": _condition("Clear" if h < 6 else "Partly cloudy"),
                    }
                    for h in range(24)
                ],
            }
        )

    return {
        "location": {"name": city, "country": country},
        "current": {"temp_c": 12.5, "condition": _condition("Partly cloudy")},
        "forecast": {"forecastday": forecastday},
    }


@pytest.fixture()
def forecast_payload():
    """Sample 7-day WeatherAPI response for Paris."""
    return make_forecast_payload()


@pytest.fixture()
def payload_factory():
    """Build payloads with a custom number of days or location."""
    return make_forecast_payload


@pytest.fixture()
def weatherapi_key(monkeypatch):
    """Provide an API key through the environment."""
    monkeypatch.setenv("WEATHERAPI_KEY", "test-key")
    return "test-key"
