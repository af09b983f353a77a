"""Layout logic for the weather panel - pure functions for testability."""
import math
from dataclasses import dataclass
from typing import List, Tuple

from weather_panel import PanelState

WHITE = (255, 255, 255)
LIGHT_GRAY = (200, 200, 200)
ERROR_RED = (239, 68, 68)


@dataclass(frozen=True)
class PanelLine:
    """One line of panel output (for testing/layout calculation)."""
    role: str
    text: str
    color: Tuple[int, int, int] = WHITE


def round_half_up(value: float) -> int:
    """Round like a browser's Math.round: halves go towards +infinity."""
    return int(math.floor(value + 0.5))


def format_number(value: float) -> str:
    """Drop a trailing ".0" from whole numbers, e.g. 81.0 -> "81"."""
    return f"{value:g}" if float(value).is_integer() else str(value)


def get_temperature_color(temp_c: float) -> Tuple[int, int, int]:
    """
    Get RGB color for temperature using a simple gradient.

    Cold (< 0°C) = blue
    Cool (0-15°C) = cyan
    Mild (15-25°C) = green/yellow
    Warm (25-35°C) = yellow/orange
    Hot (> 35°C) = red

    Args:
        temp_c: Temperature in Celsius

    Returns:
        Tuple of (r, g, b) values (0-255)
    """
    if temp_c < 0:
        return (0, 0, 255)
    elif temp_c < 15:
        ratio = temp_c / 15.0
        return (0, int(255 * ratio), 255)
    elif temp_c < 25:
        ratio = (temp_c - 15) / 10.0
        return (int(255 * ratio), 255, int(255 * (1 - ratio)))
    elif temp_c < 35:
        ratio = (temp_c - 25) / 10.0
        return (255, int(255 * (1 - ratio * 0.5)), 0)
    else:
        ratio = min((temp_c - 35) / 10.0, 1.0)
        return (255, int(255 * (1 - ratio)), 0)


def calculate_layout(state: PanelState) -> List[PanelLine]:
    """
    Calculate the lines to draw for a panel state.

    This is a pure function, making it easy to test without a terminal.
    An error hides the results block; an empty state draws nothing.

    Args:
        state: Panel snapshot to display

    Returns:
        List of PanelLine objects, top to bottom
    """
    if state.error:
        return [PanelLine("error", state.error, ERROR_RED)]

    weather = state.weather
    if weather is None:
        return []

    return [
        PanelLine("place", weather.place, WHITE),
        PanelLine("clock", state.clock_text, LIGHT_GRAY),
        PanelLine("condition", weather.condition_main, WHITE),
        PanelLine("temp", f"{round_half_up(weather.temp)}°c", get_temperature_color(weather.temp)),
        PanelLine(
            "range",
            f"Low: {round_half_up(weather.temp_min)}°c / High: {round_half_up(weather.temp_max)}°c",
            LIGHT_GRAY,
        ),
        PanelLine(
            "details",
            f"Humidity: {format_number(weather.humidity)}%   Wind: {format_number(weather.wind_speed)} m/s",
            LIGHT_GRAY,
        ),
    ]


def render_panel(canvas, state: PanelState) -> List[PanelLine]:
    """
    Render a panel state onto a canvas.

    Args:
        canvas: PanelCanvas instance (terminal, image or fake)
        state: Panel snapshot to display

    Returns:
        The lines that were drawn
    """
    lines = calculate_layout(state)
    canvas.clear()
    for row, line in enumerate(lines):
        canvas.draw_line(row, line.text, line.color)
    canvas.flush()
    return lines
