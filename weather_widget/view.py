"""Pure derivation of everything the page displays.

derive_view() turns a controller snapshot plus the two carousel scroll
states into plain display values. It has no Streamlit dependency, so the
page's rendering decisions are testable without a browser.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from weather_widget.carousel import ScrollState
from weather_widget.conditions import WeatherIcon, icon_for_condition
from weather_widget.fetch_controller import HORIZON_CHOICES, ControllerState, RequestState
from weather_widget.weatherapi_client import DailyEntry, Forecast, HourlyEntry

HOURLY_TITLE = "Hourly Forecast (24 hrs)"
DAILY_TITLE = "Forecast"


@dataclass(frozen=True)
class CardView:
    """One card in a carousel."""

    key: str
    title: str
    icon: WeatherIcon
    temperature: str
    condition: str


@dataclass(frozen=True)
class CarouselView:
    title: str
    cards: tuple[CardView, ...]
    show_left_arrow: bool
    show_right_arrow: bool


@dataclass(frozen=True)
class CurrentView:
    location: str
    temperature: str
    condition: str
    icon: WeatherIcon


@dataclass(frozen=True)
class HorizonOption:
    days: int
    label: str
    selected: bool


@dataclass(frozen=True)
class WidgetView:
    """Everything the page renders for one script run.

    Attributes:
        search_label: Text on the search button.
        search_disabled: Whether the search button is disabled.
        horizons: Horizon selector buttons in display order.
        error: Failure message to show, or None.
        current: Current conditions panel, None without a forecast.
        hourly: Hourly carousel, None without a forecast.
        daily: Daily carousel, None without a forecast.
    """

    search_label: str
    search_disabled: bool
    horizons: tuple[HorizonOption, ...]
    error: str | None
    current: CurrentView | None
    hourly: CarouselView | None
    daily: CarouselView | None


def format_temperature(temp_c: float) -> str:
    """Format a Celsius value the way cards show it ("12.5 °C")."""
    return f"{temp_c:g} °C"


def format_hour(timestamp: str) -> str:
    """Extract a 'HH:MM' label from a WeatherAPI local timestamp."""
    try:
        return datetime.fromisoformat(timestamp).strftime("%H:%M")
    except (ValueError, TypeError):
        return timestamp


def _hourly_card(entry: HourlyEntry) -> CardView:
    return CardView(
        key=entry.time,
        title=format_hour(entry.time),
        icon=icon_for_condition(entry.condition_text),
        temperature=format_temperature(entry.temp_c),
        condition=entry.condition_text,
    )


def _daily_card(entry: DailyEntry) -> CardView:
    return CardView(
        key=entry.date,
        title=entry.date,
        icon=icon_for_condition(entry.condition_text),
        temperature=format_temperature(entry.avgtemp_c),
        condition=entry.condition_text,
    )


def _current(forecast: Forecast) -> CurrentView:
    return CurrentView(
        location=f"{forecast.location_name}, {forecast.country}",
        temperature=format_temperature(forecast.current.temp_c),
        condition=forecast.current.condition_text,
        icon=icon_for_condition(forecast.current.condition_text),
    )


def derive_view(
    state: ControllerState,
    hourly_scroll: ScrollState,
    daily_scroll: ScrollState,
) -> WidgetView:
    """Build everything the page renders from controller and scroll state.

    Args:
        state: Controller snapshot.
        hourly_scroll: Arrow state of the hourly strip.
        daily_scroll: Arrow state of the daily strip.

    Returns:
        WidgetView. Current conditions and carousels are None unless a
        forecast is on display; error is set only when the last request
        FAILED.
    """
    loading =state.status.state is RequestState.LOADING
    error = state.status.message if state.status.state is RequestState.FAILED else None

    horizons = tuple(
        HorizonOption(days=days, label=f"{days} Days", selected=days == state.horizon)
        for days in HORIZON_CHOICES
    )

    forecast = state.forecast
    current = hourly = daily = None
    if forecast is not None:
        current = _current(forecast)
        hourly = CarouselView(
            title=HOURLY_TITLE,
            cards=tuple(_hourly_card(h) for h in forecast.hourly),
            show_left_arrow=hourly_scroll.can_scroll_left,
            show_right_arrow=hourly_scroll.can_scroll_right,
        )
        daily = CarouselView(
            title=DAILY_TITLE,
            cards=tuple(_daily_card(d) for d in forecast.daily),
            show_left_arrow=daily_scroll.can_scroll_left,
            show_right_arrow=daily_scroll.can_scroll_right,
        )

    return WidgetView(
        search_label="Loading..." if loading else "Search",
        search_disabled=loading,
        horizons=horizons,
        error=error,
        current=current,
        hourly=hourly,
        daily=daily,
    )
