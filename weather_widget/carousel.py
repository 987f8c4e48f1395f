"""Scroll-arrow state for the horizontally scrolling forecast strips.

Each strip (hourly, daily) gets its own CarouselScrollCoordinator. The
coordinator never stores a scroll position of its own: ScrollState is
re-derived from the container's geometry whenever new cards are laid out,
the user scrolls, or a programmatic smooth scroll settles.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from weather_widget import config

logger = logging.getLogger(__name__)

# Tolerance for sub-pixel scroll offsets at the right edge
SCROLL_EPSILON = 1.0


@dataclass(frozen=True)
class ScrollGeometry:
    """Measured geometry of a scroll container.

    Attributes:
        offset: Current horizontal scroll offset.
        total_width: Full width of the scrollable content.
        visible_width: Width of the visible viewport.
    """

    offset: float
    total_width: float
    visible_width: float


@dataclass(frozen=True)
class ScrollState:
    """Which scroll arrows should be shown."""

    can_scroll_left: bool = False
    can_scroll_right: bool = False


def derive_scroll_state(geometry: ScrollGeometry) -> ScrollState:
    """Derive arrow visibility from container geometry."""
    max_offset = geometry.total_width - geometry.visible_width - SCROLL_EPSILON
    return ScrollState(
        can_scroll_left=geometry.offset > 0,
        can_scroll_right=geometry.offset < max_offset,
    )


class ScrollContainer(Protocol):
    """What the coordinator needs from a horizontally scrolling element."""

    def measure(self) -> ScrollGeometry | None:
        """Current geometry, or None while the container is not mounted."""

    def scroll_by(self, distance: float, on_settled: Callable[[], None]) -> bool:
        """Start a smooth scroll by distance.

        Returns True if the container will call on_settled itself once the
        animation finishes, False if it cannot report completion.
        """

    def add_scroll_listener(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a native scroll callback; returns a function removing it."""


class Scheduler(Protocol):
    """Anything with asyncio-style call_later (an event loop qualifies)."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        ...


class DeferredCalls:
    """Timed continuations run explicitly by the owner of the event loop.

    Streamlit has no event loop to hand timers to, so the page drains due
    calls with run_due() at the start of each script run.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._calls: list[tuple[float, Callable[[], None]]] = []

    @property
    def pending(self) -> int:
        return len(self._calls)

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self._calls.append((self._clock() + delay, callback))

    def run_due(self, now: float | None = None) -> int:
        """Run every call whose delay has elapsed, in scheduling order.

        Returns:
            Number of callbacks run.
        """
        if now is None:
            now = self._clock()
        due = [c for c in self._calls if c[0] <= now]
        self._calls = [c for c in self._calls if c[0] > now]
        for _, callback in due:
            callback()
        return len(due)


class ScrollSubscription:
    """Handle for one native-scroll listener on one container.

    Closing is idempotent; the handle is also a context manager.
    """

    def __init__(self, container: ScrollContainer, remove: Callable[[], None]) -> None:
        self._container = container
        self._remove: Callable[[], None] | None = remove

    @property
    def container(self) -> ScrollContainer:
        return self._container

    @property
    def closed(self) -> bool:
        return self._remove is None

    def close(self) -> None:
        if self._remove is not None:
            remove, self._remove = self._remove, None
            remove()

    def __enter__(self) -> ScrollSubscription:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class CarouselScrollCoordinator:
    """Tracks arrow visibility for one scrollable strip.

    Args:
        name: Label used in log messages ("hourly", "daily").
        scheduler: Used to re-check state after a smooth scroll when the
            container cannot report completion.
        step: Distance moved by one arrow click.
        settle_delay: Seconds to wait for a smooth scroll to finish.
    """

    def __init__(
        self,
        name: str,
        scheduler: Scheduler,
        step: float = config.CAROUSEL_SCROLL_STEP,
        settle_delay: float = config.CAROUSEL_SETTLE_SECONDS,
    ) -> None:
        self.name = name
        self.step = step
        self.settle_delay = settle_delay
        self._scheduler = scheduler
        self._state = ScrollState()
        self._subscription: ScrollSubscription | None = None

    @property
    def state(self) -> ScrollState:
        return self._state

    @property
    def container(self) -> ScrollContainer | None:
        if self._subscription is None:
            return None
        return self._subscription.container

    def attach(self, container: ScrollContainer) -> None:
        """Listen to native scrolls on container.

        Re-attaching the container already attached is a no-op. Attaching a
        different one releases the previous subscription first.
        """
        if self._subscription is not None:
            if self._subscription.container is container:
                return
            self._subscription.close()

        remove = container.add_scroll_listener(self._on_native_scroll)
        self._subscription = ScrollSubscription(container, remove)
        logger.debug("%s carousel attached to %r", self.name, container)

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
            logger.debug("%s carousel detached", self.name)

    def reset(self, container: ScrollContainer) -> ScrollState:
        """Start over on freshly laid-out content.

        Call after the container holds its new cards, so the measured width
        reflects them.
        """
        self.attach(container)
        self._state = ScrollState()
        return self.recompute()

    def recompute(self) -> ScrollState:
        """Re-derive arrow visibility from the attached container.

        Leaves the current state untouched when there is nothing to measure.
        """
        container = self.container
        if container is None:
            return self._state
        geometry = container.measure()
        if geometry is None or geometry.visible_width <= 0:
            return self._state

        self._state = derive_scroll_state(geometry)
        logger.debug("%s carousel %s -> %s", self.name, geometry, self._state)
        return self._state

    def scroll_by(self, distance: float) -> None:
        """Smooth-scroll the attached container and re-check once it settles."""
        container = self.container
        if container is None:
            return

        def settled() -> None:
            # The strip may have been replaced while the animation ran
            if self.container is container:
                self.recompute()

        if not container.scroll_by(distance, settled):
            self._scheduler.call_later(self.settle_delay, settled)

    def scroll_left(self) -> None:
        self.scroll_by(-self.step)

    def scroll_right(self) -> None:
        self.scroll_by(self.step)

    def _on_native_scroll(self) -> None:
        self.recompute()

    def __enter__(self) -> CarouselScrollCoordinator:
        return self

    def __exit__(self, *exc_info) -> None:
        self.detach()
