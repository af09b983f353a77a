"""Local clock for a location, ticking once per second from a fixed UTC offset."""
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_local_time(utc_offset: int, now: datetime) -> str:
    """
    Format the wall-clock time at a location.

    Args:
        utc_offset: Seconds to add to UTC to get local time
        now: Current instant; naive values are taken as UTC

    Returns:
        Long-form string, e.g. "Monday, January 1, 2024, 12:00:00 PM"
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local = now.astimezone(timezone.utc) + timedelta(seconds=utc_offset)
    return f"{local:%A}, {local:%B} {local.day}, {local.year}, {local:%I:%M:%S} {'AM' if local.hour < 12 else 'PM'}"


class ClockSimulator:
    """
    Republishes the local time of a location once per interval.

    Holds at most one timer thread. ``start`` always stops and joins the
    previous thread before creating the next, and ``stop`` returns only once
    the thread can no longer publish.
    """

    def __init__(
        self,
        on_tick: Callable[[str], None],
        interval: float = 1.0,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the clock.

        Args:
            on_tick: Called with the formatted local time on every tick
            interval: Seconds between ticks
            now: Source of the current instant (defaults to the system UTC clock)
        """
        self.on_tick = on_tick
        self.interval = interval
        self.now = now or utc_now
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._utc_offset: Optional[int] = None
        self._retired: List[threading.Thread] = []

    @property
    def is_running(self) -> bool:
        return self._thread is not None

    @property
    def utc_offset(self) -> Optional[int]:
        return self._utc_offset

    def tick(self, utc_offset: int) -> str:
        """Compute and publish one clock value."""
        text = format_local_time(utc_offset, self.now())
        self.on_tick(text)
        return text

    def start(self, utc_offset: int) -> None:
        """Start ticking for a new offset, replacing any running timer."""
        while True:
            with self._lock:
                self._retire_locked()
                pending = self._pending_locked()
                if not pending:
                    stop_event = threading.Event()
                    thread = threading.Thread(
                        target=self._run,
                        args=(utc_offset, stop_event),
                        name="clock-simulator",
                        daemon=True,
                    )
                    self._stop_event = stop_event
                    self._thread = thread
                    self._utc_offset = utc_offset
                    thread.start()
                    break
            # Joined without the lock held; a tick in progress may need it.
            for previous in pending:
                previous.join()
        logging.info(f"Clock started (utc_offset={utc_offset}s, interval={self.interval}s)")

    def stop(self) -> None:
        """Stop ticking. Safe to call when idle."""
        with self._lock:
            was_running = self._retire_locked()
            pending = self._pending_locked()
        for previous in pending:
            previous.join()
        if was_running:
            logging.info("Clock stopped")

    def _retire_locked(self) -> bool:
        if self._thread is None:
            return False
        self._stop_event.set()
        self._retired.append(self._thread)
        self._thread = None
        self._stop_event = None
        self._utc_offset = None
        return True

    def _pending_locked(self) -> List[threading.Thread]:
        # A tick listener may call back into start()/stop() from the timer thread itself.
        current = threading.current_thread()
        self._retired = [t for t in self._retired if t.is_alive() and t is not current]
        return list(self._retired)

    def _run(self, utc_offset: int, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                self.tick(utc_offset)
            except Exception:
                logging.exception("Clock tick failed")

    def __enter__(self) -> "ClockSimulator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
