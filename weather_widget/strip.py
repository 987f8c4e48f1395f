"""Measurable model of a horizontal strip of forecast cards.

The browser renders the strip, but the page keeps the authoritative scroll
offset here so the arrows can be decided server-side. Widths are CSS pixels
and follow the fixed card layout injected by the app.
"""

from __future__ import annotations

from typing import Callable

from weather_widget import config
from weather_widget.carousel import ScrollGeometry


class CardStrip:
    """A row of equally sized cards seen through a fixed-width viewport.

    Args:
        card_count: Number of cards laid out in the strip.
        viewport_width: Visible width; 0 means the strip is not mounted.
        card_width: Width of one card.
        gap: Space between adjacent cards.
        padding: Inner padding on each side of the row.
    """

    def __init__(
        self,
        card_count: int,
        viewport_width: float = config.CAROUSEL_VIEWPORT_WIDTH,
        card_width: float = config.CAROUSEL_CARD_WIDTH,
        gap: float = config.CAROUSEL_CARD_GAP,
        padding: float = config.CAROUSEL_PADDING,
    ) -> None:
        self.card_count = card_count
        self.viewport_width = viewport_width
        self.card_width = card_width
        self.gap = gap
        self.padding = padding
        self._offset = 0.0
        self._listeners: list[Callable[[], None]] = []

    def __repr__(self) -> str:
        return f"CardStrip(cards={self.card_count}, offset={self._offset:g})"

    @property
    def total_width(self) -> float:
        if self.card_count <= 0:
            return 2 * self.padding
        return (
            2 * self.padding
            + self.card_count * self.card_width
            + (self.card_count - 1) * self.gap
        )

    @property
    def max_offset(self) -> float:
        return max(0.0, self.total_width - self.viewport_width)

    @property
    def offset(self) -> float:
        return self._offset

    def measure(self) -> ScrollGeometry | None:
        if self.viewport_width <= 0:
            return None
        return ScrollGeometry(
            offset=self._offset,
            total_width=self.total_width,
            visible_width=self.viewport_width,
        )

    def set_offset(self, value: float) -> None:
        """Move to an absolute offset, as a user drag or wheel scroll would."""
        clamped = min(max(0.0, value), self.max_offset)
        if clamped == self._offset:
            return
        self._offset = clamped
        for listener in list(self._listeners):
            listener()

    def scroll_by(self, distance: float, on_settled: Callable[[], None]) -> bool:
        """Scroll relative to the current offset.

        The browser animates the move; the model position is final at once,
        so completion is reported immediately.
        """
        self.set_offset(self._offset + distance)
        on_settled()
        return True

    def add_scroll_listener(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
