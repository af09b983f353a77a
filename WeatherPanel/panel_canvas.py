"""Canvas abstraction for the weather panel - allows swapping the terminal with test backends."""
import sys
from abc import ABC, abstractmethod
from typing import List, Optional, TextIO, Tuple

from PIL import Image, ImageDraw, ImageFont

Color = Tuple[int, int, int]


class PanelCanvas(ABC):
    """Abstract line-oriented surface the panel is drawn onto."""

    @abstractmethod
    def clear(self) -> None:
        """Clear the whole surface."""
        pass

    @abstractmethod
    def draw_line(self, row: int, text: str, color: Color) -> None:
        """
        Draw one line of text.

        Args:
            row: Line index (0-based, top to bottom)
            text: Text to draw
            color: (r, g, b) components (0-255)
        """
        pass

    def flush(self) -> None:
        """Push the drawn frame out, for backends that buffer."""
        pass


class TerminalCanvas(PanelCanvas):
    """Canvas writing ANSI truecolor text to a terminal stream."""

    CLEAR_SCREEN = "\x1b[2J\x1b[H"
    RESET = "\x1b[0m"

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True, redraw: bool = False):
        """
        Initialize terminal canvas.

        Args:
            stream: Output stream (defaults to sys.stdout)
            color: Emit ANSI color escapes
            redraw: Clear the screen before each frame instead of appending
        """
        self.stream = stream or sys.stdout
        self.color = color
        self.redraw = redraw
        self._frame: List[str] = []

    def clear(self) -> None:
        self._frame = []

    def draw_line(self, row: int, text: str, color: Color) -> None:
        while len(self._frame) <= row:
            self._frame.append("")
        if self.color:
            r, g, b = color
            text = f"\x1b[38;2;{r};{g};{b}m{text}{self.RESET}"
        self._frame[row] = text

    def flush(self) -> None:
        if self.redraw:
            self.stream.write(self.CLEAR_SCREEN)
        self.stream.write("\n".join(self._frame) + "\n")
        self.stream.flush()


class FakePanelCanvas(PanelCanvas):
    """
    Fake canvas implementation for testing - stores lines in memory.

    Useful for unit tests and development without a terminal.
    """

    def __init__(self):
        self.lines: List[Tuple[str, Color]] = []
        self.frames = 0

    def clear(self) -> None:
        self.lines = []

    def draw_line(self, row: int, text: str, color: Color) -> None:
        while len(self.lines) <= row:
            self.lines.append(("", (0, 0, 0)))
        self.lines[row] = (text, color)

    def flush(self) -> None:
        self.frames += 1

    def text(self) -> str:
        """Get the drawn lines as plain text (for testing)."""
        return "\n".join(text for text, _ in self.lines)


class ImageCanvas(PanelCanvas):
    """
    Pillow-based canvas for rendering the panel to a PNG image.

    Useful for previews and snapshots without a terminal.
    """

    BACKGROUND = (17, 24, 39)

    def __init__(self, width: int = 480, line_height: int = 28, padding: int = 16, font_size: int = 18):
        """
        Initialize image canvas.

        Args:
            width: Image width in pixels
            line_height: Vertical distance between lines in pixels
            padding: Margin around the text in pixels
            font_size: Font size in pixels
        """
        self.width = width
        self.line_height = line_height
        self.padding = padding
        self.font_size = font_size
        self._lines: List[Tuple[str, Color]] = []
        self._image = self._blank(1)

    def _blank(self, rows: int) -> Image.Image:
        height = self.padding * 2 + max(rows, 1) * self.line_height
        return Image.new("RGB", (self.width, height), self.BACKGROUND)

    def _font(self):
        try:
            return ImageFont.truetype("DejaVuSans.ttf", self.font_size)
        except OSError:
            return ImageFont.load_default()

    def clear(self) -> None:
        self._lines = []

    def draw_line(self, row: int, text: str, color: Color) -> None:
        while len(self._lines) <= row:
            self._lines.append(("", (0, 0, 0)))
        self._lines[row] = (text, color)

    def flush(self) -> None:
        self._image = self._blank(len(self._lines))
        draw = ImageDraw.Draw(self._image)
        font = self._font()
        for row, (text, color) in enumerate(self._lines):
            y = self.padding + row * self.line_height
            draw.text((self.padding, y), text, fill=color, font=font)

    def get_image(self) -> Image.Image:
        """Get the PIL Image object of the last flushed frame."""
        return self._image

    def save(self, filename: str) -> None:
        """
        Save the last flushed frame to a PNG file.

        Args:
            filename: Output filename (e.g., "panel.png")
        """
        self._image.save(filename)
