"""The weather panel component: location input, current conditions and a local clock."""
import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from clock import ClockSimulator, format_local_time
from location import LocationError, LocationQuery, LocationResolver
from weather_data import WeatherResult
from weather_service import WeatherService

ENTER_KEY = "Enter"


@dataclass(frozen=True)
class PanelState:
    """Snapshot of everything the panel displays."""
    city_text: str = ""
    weather: Optional[WeatherResult] = None
    error: str = ""
    clock_text: str = ""


Listener = Callable[[PanelState], None]


class WeatherPanel:
    """
    Weather lookup component.

    Mounting asks the device position once; after that, lookups come from the
    city text box. A successful lookup restarts the local clock with the new
    UTC offset, a failed one shows its error and leaves the clock alone.

    Responses are applied in the order they complete. A slow response that
    lands after a newer one still overwrites it.
    """

    def __init__(
        self,
        service: WeatherService,
        resolver: LocationResolver,
        clock_factory: Callable[[Callable[[str], None]], ClockSimulator] = ClockSimulator,
    ):
        """
        Initialize the panel.

        Args:
            service: Weather service used for lookups
            resolver: Location resolver for the device position and city text
            clock_factory: Builds the clock from its tick callback
        """
        self.service = service
        self.resolver = resolver
        self.clock = clock_factory(self._on_clock_tick)
        self._lock = threading.Lock()
        self._state = PanelState()
        self._listeners: List[Listener] = []
        self._mounted = False
        self._disposed = False

    @property
    def state(self) -> PanelState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new state after every change.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def mount(self) -> None:
        """Run the automatic device-position lookup. Only the first call does anything."""
        if self._mounted:
            logging.warning("Panel already mounted, ignoring mount()")
            return
        self._mounted = True

        try:
            query = self.resolver.resolve_initial()
        except LocationError as e:
            self._update(error=e.user_message)
            return
        self.submit(query)

    def type_city(self, text: str) -> None:
        self._update(city_text=text)

    def press_key(self, key: str) -> None:
        """Keyboard handler of the city box: Enter submits, other keys do nothing."""
        if key == ENTER_KEY:
            self.submit_city(self._state.city_text)

    def click_search(self) -> None:
        self.submit_city(self._state.city_text)

    def submit_city(self, text: str) -> None:
        self.submit(self.resolver.city_query(text))

    def submit(self, query: LocationQuery) -> None:
        """
        Look up a query and apply the outcome.

        Args:
            query: City or coordinates to look up
        """
        if self._disposed:
            logging.warning(f"Panel disposed, ignoring lookup: {query}")
            return

        outcome = self.service.lookup(query)
        if self._disposed:
            logging.warning(f"Panel disposed during lookup, dropping outcome: {query}")
            return
        if not outcome.ok:
            self._update(weather=None, error=outcome.error)
            return

        offset = outcome.weather.utc_offset
        # Show the new place's time now rather than after the first tick.
        clock_text = format_local_time(offset, self.clock.now())
        self._update(weather=outcome.weather, error="", clock_text=clock_text)
        self.clock.start(offset)

    def dispose(self) -> None:
        """Tear the panel down; the clock never ticks again afterwards."""
        self._disposed = True
        self.clock.stop()
        logging.info("Panel disposed")

    def _on_clock_tick(self, text: str) -> None:
        self._update(clock_text=text)

    def _update(self, **changes) -> None:
        with self._lock:
            state = replace(self._state, **changes)
            self._state = state
        for listener in list(self._listeners):
            listener(state)

    def __enter__(self) -> "WeatherPanel":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
