"""City weather lookup widget built on Streamlit.

Run with: streamlit run weather_widget/app.py

Enter a city, pick a 7- or 14-day horizon, and the page shows current
conditions plus hourly and daily forecast strips with scroll arrows.
Set WEATHERAPI_KEY in the environment or in Streamlit secrets.
"""

from __future__ import annotations

import asyncio
import html
import logging
from dataclasses import dataclass, field

import streamlit as st
import streamlit.components.v1 as components

from weather_widget import config
from weather_widget.carousel import CarouselScrollCoordinator, DeferredCalls
from weather_widget.conditions import icon_emoji
from weather_widget.fetch_controller import ForecastController
from weather_widget.strip import CardStrip
from weather_widget.view import CarouselView, CurrentView, WidgetView, derive_view
from weather_widget.weatherapi_client import Forecast

logger = logging.getLogger(__name__)

_STRIP_HEIGHT = 190


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

@dataclass
class WidgetSession:
    """Per-browser-session state that survives Streamlit reruns."""

    controller: ForecastController
    deferred: DeferredCalls
    hourly: CarouselScrollCoordinator
    daily: CarouselScrollCoordinator
    strips: dict[str, CardStrip] = field(default_factory=dict)
    rendered_offsets: dict[str, float] = field(default_factory=dict)
    laid_out_for: Forecast | None = None


def _get_session() -> WidgetSession:
    """Create the session on first run, then return the stored one."""
    if "widget" not in st.session_state:
        deferred = DeferredCalls()
        st.session_state.widget = WidgetSession(
            controller=ForecastController(),
            deferred=deferred,
            hourly=CarouselScrollCoordinator("hourly", deferred),
            daily=CarouselScrollCoordinator("daily", deferred),
        )
    return st.session_state.widget


def _sync_strips(session: WidgetSession) -> None:
    """Lay out fresh strips whenever the displayed forecast changes."""
    forecast = session.controller.forecast
    if forecast is session.laid_out_for:
        return
    session.laid_out_for = forecast
    session.rendered_offsets.clear()

    if forecast is None:
        session.hourly.detach()
        session.daily.detach()
        session.strips.clear()
        return

    logger.debug(
        "Laying out %d hourly and %d daily cards",
        len(forecast.hourly), len(forecast.daily),
    )
    session.strips = {
        "hourly": CardStrip(len(forecast.hourly)),
        "daily": CardStrip(len(forecast.daily)),
    }
    session.hourly.reset(session.strips["hourly"])
    session.daily.reset(session.strips["daily"])


# ---------------------------------------------------------------------------
# Input callbacks
# ---------------------------------------------------------------------------

def _on_query_change() -> None:
    """Forward the text input to the controller as typed."""
    session = _get_session()
    session.controller.set_query(st.session_state.get("city_input", ""))


def _run_fetch(session: WidgetSession) -> None:
    """Run one forecast fetch behind a spinner."""
    with st.spinner("Loading..."):
        asyncio.run(session.controller.trigger_fetch())


def _select_horizon(session: WidgetSession, days: int) -> None:
    """Select a horizon, re-fetching behind a spinner when a query is set."""
    with st.spinner("Loading..."):
        asyncio.run(session.controller.set_horizon(days))


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _inject_css() -> None:
    """Inject the page-level CSS."""
    st.markdown("""
    <style>
    .block-container {
        max-width: 720px !important;
        padding-top: 1.5rem !important;
    }
    .wx-title {
        font-size: 1.6rem;
        font-weight: 600;
        text-align: center;
        color: #2563eb;
        margin-bottom: 1rem;
    }
    .wx-current { text-align: center; margin-top: 1.5rem; }
    .wx-icon { font-size: 2.5rem; }
    .wx-location { font-size: 1.25rem; font-weight: 600; margin-top: 0.75rem; }
    .wx-temp { font-size: 2.25rem; font-weight: 700; color: #2563eb; }
    .wx-condition { font-size: 1.1rem; color: #374151; }
    .section-label {
        font-size: 1.1rem;
        font-weight: 600;
        text-align: center;
        margin-top: 1.5rem;
    }
    </style>
    """, unsafe_allow_html=True)


def _strip_html(carousel: CarouselView, strip: CardStrip, start_offset: float) -> str:
    """Build the self-contained HTML for one scrolling strip.

    The strip opens at the previously rendered offset and animates to the
    current one, so arrow clicks read as a smooth scroll.

    The strip keeps the fixed viewport width of its CardStrip, so arrow
    visibility matches what is on screen; a narrower frame scrolls instead.
    """
    cards = "".join(
        f'<div class="card">'
        f'<div class="c-title">{html.escape(card.title)}</div>'
        f'<div class="c-icon">{icon_emoji(card.icon)}</div>'
        f'<div class="c-temp">{html.escape(card.temperature)}</div>'
        f'<div class="c-cond">{html.escape(card.condition)}</div>'
        f'</div>'
        for card in carousel.cards
    )
    return f"""
    <style>
    body {{ margin: 0; font-family: sans-serif; }}
    .strip {{
        display: flex;
        gap: {strip.gap}px;
        padding: {strip.padding}px;
        width: {strip.viewport_width}px;
        min-width: {strip.viewport_width}px;
        box-sizing: border-box;
        overflow-x: hidden;
    }}
    .card {{
        flex: 0 0 {strip.card_width}px;
        box-sizing: border-box;
        padding: 12px;
        background: #eff6ff;
        border-radius: 6px;
        box-shadow: 0 1px 2px rgba(0, 0, 0, 0.15);
        text-align: center;
    }}
    .c-title {{ font-weight: 600; font-size: 0.9rem; }}
    .c-icon {{ font-size: 1.8rem; min-height: 2.2rem; }}
    .c-temp {{ color: #2563eb; font-weight: 700; margin-top: 0.4rem; }}
    .c-cond {{ color: #4b5563; font-size: 0.8rem; }}
    </style>
    <div id="strip" class="strip">{cards}</div>
    <script>
    const strip = document.getElementById("strip");
    strip.scrollLeft = {start_offset:g};
    strip.scrollTo({{ left: {strip.offset:g}, behavior: "smooth" }});
    </script>
    """


def _render_current(current: CurrentView) -> None:
    """Render the current-conditions block."""
    st.markdown(
        f'<div class="wx-current">'
        f'<div class="wx-icon">{icon_emoji(current.icon)}</div>'
        f'<div class="wx-location">{html.escape(current.location)}</div>'
        f'<div class="wx-temp">{html.escape(current.temperature)}</div>'
        f'<div class="wx-condition">{html.escape(current.condition)}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def _render_carousel(
    session: WidgetSession,
    key: str,
    carousel: CarouselView,
    coordinator: CarouselScrollCoordinator,
) -> None:
    """Render one strip flanked by its left/right arrows."""
    strip = session.strips[key]
    st.markdown(
        f'<div class="section-label">{carousel.title}</div>',
        unsafe_allow_html=True,
    )

    left, middle, right = st.columns([1, 12, 1], vertical_alignment="center")
    with left:
        if carousel.show_left_arrow:
            st.button("\u2190", key=f"{key}_left", on_click=coordinator.scroll_left)
    with middle:
        start = session.rendered_offsets.get(key, strip.offset)
        components.html(
            _strip_html(carousel, strip, start),
            height=_STRIP_HEIGHT,
            scrolling=True,
        )
        session.rendered_offsets[key] = strip.offset
    with right:
        if carousel.show_right_arrow:
            st.button("\u2192", key=f"{key}_right", on_click=coordinator.scroll_right)


def _render_search(session: WidgetSession, view: WidgetView) -> None:
    """Render the city input, search button and horizon selector."""
    col_input, col_button = st.columns([4, 1], vertical_alignment="bottom")
    with col_input:
        st.text_input(
            "City",
            key="city_input",
            placeholder="Enter city name",
            on_change=_on_query_change,
        )
    with col_button:
        if st.button(
            view.search_label,
            key="search_btn",
            disabled=view.search_disabled,
            type="primary",
            use_container_width=True,
        ):
            _on_query_change()
            _run_fetch(session)
            st.rerun()

    cols = st.columns(len(view.horizons))
    for col, option in zip(cols, view.horizons):
        with col:
            if st.button(
                option.label,
                key=f"horizon_{option.days}",
                type="primary" if option.selected else "secondary",
                use_container_width=True,
            ):
                if not option.selected:
                    _select_horizon(session, option.days)
                    st.rerun()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    """Main Streamlit application entry point."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    st.set_page_config(
        page_title="Weather App",
        page_icon="\U0001f326\ufe0f",
        layout="centered",
    )
    _inject_css()

    session = _get_session()
    session.deferred.run_due()
    _sync_strips(session)

    view = derive_view(
        session.controller.snapshot(),
        session.hourly.state,
        session.daily.state,
    )

    st.markdown('<div class="wx-title">Weather App</div>', unsafe_allow_html=True)
    _render_search(session, view)

    if view.error:
        st.error(view.error)

    if view.current is not None:
        _render_current(view.current)
    if view.hourly is not None:
        _render_carousel(session, "hourly", view.hourly, session.hourly)
    if view.daily is not None:
        _render_carousel(session, "daily", view.daily, session.daily)


if __name__ == "__main__":
    main()
