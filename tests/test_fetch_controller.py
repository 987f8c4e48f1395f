"""Tests for the forecast fetch controller."""

import asyncio

import httpx
import pytest
import respx

from weather_widget.carousel import ScrollState
from weather_widget.fetch_controller import (
    HORIZON_CHOICES,
    ForecastController,
    RequestState,
    RequestStatus,
)
from weather_widget.view import derive_view
from weather_widget.weatherapi_client import (
    CityNotFoundError,
    WeatherAPIError,
    parse_forecast,
)


FORECAST_URL = "https://api.weatherapi.com/v1/forecast.json"


class RecordingFetcher:
    """Fake fetcher that records calls and answers from a payload factory."""

    def __init__(self, payload_factory, error=None):
        self.payload_factory = payload_factory
        self.error = error
        self.calls = []
        self.status_during_call = []
        self.controller = None

    async def __call__(self, query, days):
        self.calls.append((query, days))
        if self.controller is not None:
            self.status_during_call.append(self.controller.status)
        if self.error is not None:
            raise self.error
        return parse_forecast(self.payload_factory(days=days, city=query))


@pytest.fixture()
def fetcher(payload_factory):
    return RecordingFetcher(payload_factory)


@pytest.fixture()
def controller(fetcher):
    ctrl = ForecastController(fetcher=fetcher)
    fetcher.controller = ctrl
    return ctrl


class TestInitialState:
    """Test a freshly created controller."""

    def test_starts_idle_with_default_horizon(self, controller):
        assert controller.query == ""
        assert controller.horizon == 7
        assert controller.status == RequestStatus.idle()
        assert controller.forecast is None
        assert not controller.is_loading

    def test_rejects_unknown_initial_horizon(self, fetcher):
        with pytest.raises(ValueError):
            ForecastController(fetcher=fetcher, horizon=16)


class TestSetQuery:
    """Test query updates."""

    def test_updates_query_without_fetching(self, controller, fetcher):
        controller.set_query("Paris")

        assert controller.query == "Paris"
        assert fetcher.calls == []
        assert controller.status.state is RequestState.IDLE


class TestTriggerFetch:
    """Test the fetch lifecycle and its outcomes."""

    def test_empty_query_is_a_no_op(self, controller, fetcher):
        asyncio.run(controller.trigger_fetch())

        assert fetcher.calls == []
        assert controller.status == RequestStatus.idle()

    def test_empty_query_keeps_failed_status(self, controller, fetcher):
        fetcher.error = WeatherAPIError("boom")
        controller.set_query("Paris")
        asyncio.run(controller.trigger_fetch())
        controller.set_query("")

        asyncio.run(controller.trigger_fetch())

        assert controller.status == RequestStatus.failed("boom")
        assert len(fetcher.calls) == 1

    @pytest.mark.parametrize("horizon", HORIZON_CHOICES)
    def test_success_has_one_daily_entry_per_horizon_day(self, fetcher, horizon):
        controller = ForecastController(fetcher=fetcher, horizon=horizon)
        controller.set_query("Paris")

        asyncio.run(controller.trigger_fetch())

        assert controller.status.state is RequestState.SUCCEEDED
        assert len(controller.status.forecast.daily) == horizon
        assert controller.forecast is controller.status.forecast

    def test_status_is_loading_while_request_is_pending(self, controller, fetcher):
        controller.set_query("Paris")

        asyncio.run(controller.trigger_fetch())

        assert [s.state for s in fetcher.status_during_call] == [RequestState.LOADING]

    def test_loading_clears_prior_error(self, controller, fetcher):
        controller.set_query("Paris")
        fetcher.error = CityNotFoundError("City not found")
        asyncio.run(controller.trigger_fetch())
        fetcher.error = None

        asyncio.run(controller.trigger_fetch())

        assert fetcher.status_during_call[-1] == RequestStatus.loading()
        assert controller.status.state is RequestState.SUCCEEDED

    def test_uses_query_and_horizon(self, controller, fetcher):
        controller.set_query("Lisbon")

        asyncio.run(controller.trigger_fetch())

        assert fetcher.calls == [("Lisbon", 7)]

    def test_failure_discards_displayed_forecast(self, controller, fetcher):
        controller.set_query("Paris")
        asyncio.run(controller.trigger_fetch())
        assert controller.forecast is not None

        fetcher.error = CityNotFoundError("City not found")
        asyncio.run(controller.trigger_fetch())

        assert controller.status == RequestStatus.failed("City not found")
        assert controller.forecast is None

    def test_unexpected_fetcher_error_does_not_propagate(self, controller, fetcher):
        fetcher.error = RuntimeError("socket exploded")
        controller.set_query("Paris")

        asyncio.run(controller.trigger_fetch())

        assert controller.status == RequestStatus.failed("socket exploded")


class TestSetHorizon:
    """Test horizon selection and re-fetch."""

    def test_refetches_when_query_is_set(self, controller, fetcher):
        controller.set_query("Paris")

        asyncio.run(controller.set_horizon(14))

        assert controller.horizon == 14
        assert fetcher.calls == [("Paris", 14)]
        assert len(controller.forecast.daily) == 14

    def test_only_selects_when_query_is_empty(self, controller, fetcher):
        asyncio.run(controller.set_horizon(14))

        assert controller.horizon == 14
        assert fetcher.calls == []
        assert controller.status.state is RequestState.IDLE

    def test_rejects_unknown_horizon(self, controller, fetcher):
        controller.set_query("Paris")

        with pytest.raises(ValueError, match="Horizon must be one of"):
            asyncio.run(controller.set_horizon(16))

        assert controller.horizon == 7
        assert fetcher.calls == []


class TestOverlappingFetches:
    """The last-issued fetch decides the final status."""

    def test_stale_failure_does_not_replace_newer_success(self, payload_factory):
        first_may_finish = asyncio.Event()

        async def fetcher(query, days):
            if query == "Slow":
                await first_may_finish.wait()
                raise CityNotFoundError("City not found")
            first_may_finish.set()
            return parse_forecast(payload_factory(days=days, city=query))

        controller = ForecastController(fetcher=fetcher)

        async def scenario():
            controller.set_query("Slow")
            slow = asyncio.create_task(controller.trigger_fetch())
            await asyncio.sleep(0)
            controller.set_query("Paris")
            await controller.trigger_fetch()
            await slow

        asyncio.run(scenario())

        assert controller.status.state is RequestState.SUCCEEDED
        assert controller.forecast.location_name == "Paris"

    def test_stale_success_does_not_replace_newer_failure(self, payload_factory):
        second_done = asyncio.Event()

        async def fetcher(query, days):
            if query == "Paris":
                await second_done.wait()
                return parse_forecast(payload_factory(days=days, city=query))
            second_done.set()
            raise CityNotFoundError("City not found")

        controller = ForecastController(fetcher=fetcher)

        async def scenario():
            controller.set_query("Paris")
            slow = asyncio.create_task(controller.trigger_fetch())
            await asyncio.sleep(0)
            controller.set_query("Nowhere123")
            await controller.trigger_fetch()
            await slow

        asyncio.run(scenario())

        assert controller.status == RequestStatus.failed("City not found")
        assert controller.forecast is None


class TestEndToEnd:
    """Controller wired to the real client with a mocked transport."""

    @respx.mock
    def test_paris_seven_days(self, weatherapi_key, payload_factory):
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=payload_factory(days=7))
        )
        controller = ForecastController()
        controller.set_query("Paris")

        asyncio.run(controller.trigger_fetch())

        assert controller.status.state is RequestState.SUCCEEDED
        assert len(controller.forecast.daily) == 7
        assert len(controller.forecast.hourly) == 24

    @respx.mock
    def test_unknown_city_fails_with_city_not_found(self, weatherapi_key):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(404, json={}))
        controller = ForecastController()
        controller.set_query("Nowhere123")

        asyncio.run(controller.trigger_fetch())

        assert controller.status == RequestStatus.failed("City not found")
        assert controller.forecast is None

    @respx.mock
    def test_null_temperature_fails_and_renders(self, weatherapi_key, forecast_payload):
        forecast_payload["current"]["temp_c"] = None
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        controller = ForecastController()
        controller.set_query("Paris")

        asyncio.run(controller.trigger_fetch())

        assert controller.status.state is RequestState.FAILED
        assert "Unexpected forecast response" in controller.status.message
        assert controller.forecast is None
        view = derive_view(controller.snapshot(), ScrollState(), ScrollState())
        assert view.current is None
        assert view.error == controller.status.message
