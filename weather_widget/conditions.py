"""Condition text -> icon mapping for forecast cards."""

from __future__ import annotations

from enum import Enum


class WeatherIcon(str, Enum):
    """Icon shown for a weather condition."""

    SUN = "sun"
    RAIN = "rain"
    SNOW = "snow"
    NONE = "none"


_ICON_EMOJI: dict[WeatherIcon, str] = {
    WeatherIcon.SUN: "\u2600\ufe0f",
    WeatherIcon.RAIN: "\U0001f327\ufe0f",
    WeatherIcon.SNOW: "\u2744\ufe0f",
    WeatherIcon.NONE: "",
}


def icon_for_condition(condition_text: str) -> WeatherIcon:
    """Pick an icon for a WeatherAPI condition label.

    Matching is a case-sensitive substring test, so "Sunny" matches but
    "sunny" does not. WeatherAPI capitalizes the first word only, which
    means "Patchy rain nearby" maps to NONE.
    """
    if "Sunny" in condition_text or "Clear" in condition_text:
        return WeatherIcon.SUN
    if "Rain" in condition_text:
        return WeatherIcon.RAIN
    if "Snow" in condition_text:
        return WeatherIcon.SNOW
    return WeatherIcon.NONE


def icon_emoji(icon: WeatherIcon) -> str:
    """Glyph rendered for an icon; empty for NONE."""
    return _ICON_EMOJI[icon]
