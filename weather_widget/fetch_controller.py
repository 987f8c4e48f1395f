"""Forecast fetch controller: query, horizon and request lifecycle.

Owns the state the search form edits and the outcome of the most recent
forecast request. Mutation happens only through set_query, set_horizon and
trigger_fetch; the page reads a ControllerState snapshot and derives its
view from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from weather_widget import config
from weather_widget.weatherapi_client import Forecast, WeatherAPIError, get_forecast

logger = logging.getLogger(__name__)

HORIZON_CHOICES: tuple[int, ...] = (7, 14)

Fetcher = Callable[[str, int], Awaitable[Forecast]]


class RequestState(str, Enum):
    """Lifecycle stage of a forecast request."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RequestStatus:
    """Outcome of the latest forecast request.

    Attributes:
        state: Lifecycle stage.
        forecast: The parsed forecast, only set when SUCCEEDED.
        message: Human-readable failure text, only set when FAILED.
    """

    state: RequestState
    forecast: Forecast | None = None
    message: str = ""

    @classmethod
    def idle(cls) -> RequestStatus:
        """No request issued yet."""
        return cls(RequestState.IDLE)

    @classmethod
    def loading(cls) -> RequestStatus:
        """A request is in flight."""
        return cls(RequestState.LOADING)

    @classmethod
    def succeeded(cls, forecast: Forecast) -> RequestStatus:
        """The latest request returned forecast."""
        return cls(RequestState.SUCCEEDED, forecast=forecast)

    @classmethod
    def failed(cls, message: str) -> RequestStatus:
        """The latest request failed with message."""
        return cls(RequestState.FAILED, message=message)


@dataclass(frozen=True)
class ControllerState:
    """Read-only snapshot handed to view derivation."""

    query: str
    horizon: int
    status: RequestStatus
    forecast: Forecast | None


class ForecastController:
    """Drives forecast lookups for the search form.

    Args:
        fetcher: Coroutine function returning a Forecast for (query, days).
        horizon: Initial horizon, one of HORIZON_CHOICES.
    """

    def __init__(
        self,
        fetcher: Fetcher = get_forecast,
        horizon: int = config.DEFAULT_HORIZON,
    ) -> None:
        _validate_horizon(horizon)
        self._fetcher = fetcher
        self._query = ""
        self._horizon = horizon
        self._status = RequestStatus.idle()
        self._forecast: Forecast | None = None
        self._latest_request = 0

    @property
    def query(self) -> str:
        return self._query

    @property
    def horizon(self) -> int:
        return self._horizon

    @property
    def status(self) -> RequestStatus:
        return self._status

    @property
    def forecast(self) -> Forecast | None:
        """The forecast currently on display (kept while a refresh loads)."""
        return self._forecast

    @property
    def is_loading(self) -> bool:
        return self._status.state is RequestState.LOADING

    def snapshot(self) -> ControllerState:
        return ControllerState(
            query=self._query,
            horizon=self._horizon,
            status=self._status,
            forecast=self._forecast,
        )

    def set_query(self, text: str) -> None:
        """Update the query text. Never fetches."""
        self._query = text

    async def set_horizon(self, value: int) -> None:
        """Select a horizon and re-fetch if a query is already set.

        Raises:
            ValueError: If value is not one of HORIZON_CHOICES.
        """
        _validate_horizon(value)
        self._horizon = value
        if self._query:
            await self.trigger_fetch()

    async def trigger_fetch(self) -> None:
        """Fetch the forecast for the current query and horizon.

        Does nothing when the query is empty. Errors end up in the status as
        FAILED and are never raised. When fetches overlap, only the one
        issued last may update the status.
        """
        if not self._query:
            return

        self._latest_request += 1
        request_id = self._latest_request
        query, days = self._query, self._horizon

        self._status = RequestStatus.loading()
        logger.info("Fetching %d-day forecast for %r", days, query)

        try:
            forecast = await self._fetcher(query, days)
        except WeatherAPIError as exc:
            self._finish(request_id, RequestStatus.failed(str(exc)))
        except Exception as exc:
            logger.exception("Forecast fetcher failed for %r", query)
            self._finish(request_id, RequestStatus.failed(str(exc) or exc.__class__.__name__))
        else:
            self._finish(request_id, RequestStatus.succeeded(forecast))

    def _finish(self, request_id: int, status: RequestStatus) -> None:
        if request_id != self._latest_request:
            logger.warning(
                "Dropping stale forecast response (request %d, latest %d)",
                request_id, self._latest_request,
            )
            return

        self._status = status
        if status.state is RequestState.SUCCEEDED:
            self._forecast = status.forecast
            logger.info(
                "Forecast loaded for %s, %s (%d days)",
                status.forecast.location_name, status.forecast.country,
                len(status.forecast.daily),
            )
        else:
            self._forecast = None
            logger.warning("Forecast request failed: %s", status.message)


def _validate_horizon(value: int) -> None:
    if value not in HORIZON_CHOICES:
        raise ValueError(
            f"Horizon must be one of {HORIZON_CHOICES}, got {value!r}."
        )
