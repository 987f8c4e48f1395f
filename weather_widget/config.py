"""Centralized configuration loaded from environment variables.

All settings are read from environment variables with sensible defaults.
The WeatherAPI key is also looked up in Streamlit secrets (st.secrets) so
the widget runs on Streamlit Cloud without a credential in the source tree.
"""

import os


def get_weatherapi_key() -> str:
    """Get the WeatherAPI.com key lazily so st.secrets is ready.

    Must be called at runtime (not import time) because Streamlit
    Cloud only makes st.secrets available after the app starts.
    """
    try:
        import streamlit as st
        if hasattr(st, "secrets") and "WEATHERAPI_KEY" in st.secrets:
            return str(st.secrets["WEATHERAPI_KEY"])
    except Exception:
        pass
    return os.environ.get("WEATHERAPI_KEY", "")


def _get_int(key: str, default: int) -> int:
    """Read an integer environment variable with a default."""
    return int(os.environ.get(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Read a float environment variable with a default."""
    return float(os.environ.get(key, str(default)))


# WeatherAPI.com
WEATHERAPI_BASE_URL: str = os.environ.get(
    "WEATHERAPI_BASE_URL", "https://api.weatherapi.com/v1"
)
WEATHERAPI_TIMEOUT: int = _get_int("WEATHERAPI_TIMEOUT", 10)

# Forecast horizon (days) selected when the page first loads
DEFAULT_HORIZON: int = _get_int("DEFAULT_HORIZON", 7)

# Carousel geometry, in CSS pixels
CAROUSEL_SCROLL_STEP: int = _get_int("CAROUSEL_SCROLL_STEP", 160)
CAROUSEL_SETTLE_SECONDS: float = _get_float("CAROUSEL_SETTLE_SECONDS", 0.3)
CAROUSEL_VIEWPORT_WIDTH: int = _get_int("CAROUSEL_VIEWPORT_WIDTH", 560)
CAROUSEL_CARD_WIDTH: int = _get_int("CAROUSEL_CARD_WIDTH", 160)
CAROUSEL_CARD_GAP: int = _get_int("CAROUSEL_CARD_GAP", 16)
CAROUSEL_PADDING: int = _get_int("CAROUSEL_PADDING", 8)

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
