"""Terminal weather panel: current conditions and a live local clock."""
import argparse
import logging
import os
import signal
import sys
import threading
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from layout import render_panel
from location import LocationResolver, PositionProviderBase, StaticPositionProvider, UnsupportedPositionProvider
from openweather_provider import DEFAULT_BASE_URL, OpenWeatherProvider
from panel_canvas import ImageCanvas, PanelCanvas, TerminalCanvas
from weather_panel import PanelState, WeatherPanel
from weather_service import WeatherService

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LOG_FILE = os.path.join(BASE_DIR, "weather-panel.log")
QUIT_COMMAND = ":q"


@dataclass
class PanelConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    lat: Optional[float] = None
    lon: Optional[float] = None


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Weather lookup panel")
    parser.add_argument("--city", help="Look up this city instead of the device position")
    parser.add_argument("--watch", action="store_true", help="Redraw on every clock tick, no prompt")
    parser.add_argument("--snapshot", metavar="FILE", help="Render the panel to a PNG file and exit")
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def load_config() -> PanelConfig:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    base_url = os.getenv("WEATHER_BASE_URL", DEFAULT_BASE_URL)
    lat = os.getenv("WEATHER_LAT")
    lon = os.getenv("WEATHER_LON")

    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    config = PanelConfig(api_key=api_key, base_url=base_url)
    if lat and lon:
        try:
            config.lat = float(lat)
            config.lon = float(lon)
        except ValueError as exc:
            raise SystemExit(f"Invalid coordinates: {exc}") from exc

    logging.info("Configuration loaded: base_url=%s lat=%s lon=%s", config.base_url, config.lat, config.lon)
    return config


def build_position_provider(config: PanelConfig) -> PositionProviderBase:
    if config.lat is None or config.lon is None:
        logging.info("No device position configured")
        return UnsupportedPositionProvider()
    return StaticPositionProvider(config.lat, config.lon)


def build_panel(config: PanelConfig, args: argparse.Namespace) -> WeatherPanel:
    provider = OpenWeatherProvider(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=args.timeout,
    )
    panel = WeatherPanel(
        service=WeatherService(provider),
        resolver=LocationResolver(build_position_provider(config)),
    )
    logging.info("Weather panel ready (timeout=%ss)", args.timeout)
    return panel


def start_panel(panel: WeatherPanel, city: Optional[str]) -> None:
    if city is None:
        panel.mount()
    else:
        panel.type_city(city)
        panel.click_search()


def take_snapshot(panel: WeatherPanel, filename: str) -> None:
    canvas = ImageCanvas()
    render_panel(canvas, panel.state)
    canvas.save(filename)
    logging.info("Panel snapshot saved to %s", filename)


def watch_loop(panel: WeatherPanel, canvas: PanelCanvas, stop_event: threading.Event) -> None:
    def on_change(state: PanelState) -> None:
        render_panel(canvas, state)

    unsubscribe = panel.subscribe(on_change)
    try:
        render_panel(canvas, panel.state)
        stop_event.wait()
    finally:
        unsubscribe()


def interactive_loop(panel: WeatherPanel, canvas: PanelCanvas, prompt=input) -> None:
    render_panel(canvas, panel.state)
    while True:
        try:
            line = prompt("Enter city: ")
        except EOFError:
            break
        if line.strip() == QUIT_COMMAND:
            break
        panel.type_city(line)
        panel.press_key("Enter")
        render_panel(canvas, panel.state)


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = load_config()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    with build_panel(config, args) as panel:
        start_panel(panel, args.city)

        if args.snapshot:
            take_snapshot(panel, args.snapshot)
            return

        canvas = TerminalCanvas(color=not args.no_color, redraw=args.watch)
        try:
            if args.watch:
                watch_loop(panel, canvas, threading.Event())
            else:
                interactive_loop(panel, canvas)
        except KeyboardInterrupt:
            logging.info("Stopping panel")


if __name__ == "__main__":
    main()
