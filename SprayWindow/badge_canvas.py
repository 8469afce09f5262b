"""Canvas abstraction for the spray badge - real PNG output or in-memory for tests."""
from abc import ABC, abstractmethod
from typing import List, Tuple

from PIL import Image, ImageDraw, ImageFont

from spray_data import SprayRecommendation
from spray_layout import calculate_layout


class BadgeCanvas(ABC):
    """Abstract canvas interface for drawing the spray badge."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Get canvas width in pixels."""
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        """Get canvas height in pixels."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear the entire canvas (set all pixels to black)."""
        pass

    @abstractmethod
    def fill(self, r: int, g: int, b: int) -> None:
        pass

    @abstractmethod
    def draw_text(self, x: int, y: int, text: str, r: int, g: int, b: int) -> None:
        pass


class FakeCanvas(BadgeCanvas):
    """
    Fake canvas implementation for testing - stores pixels in memory.

    Text is not rasterized; draw_text calls are recorded in `texts`.
    """

    def __init__(self, width: int = 128, height: int = 48):
        self._width = width
        self._height = height
        # pixels[y][x] = (r, g, b)
        self._pixels = [[(0, 0, 0) for _ in range(width)] for _ in range(height)]
        self.texts: List[Tuple[int, int, str, Tuple[int, int, int]]] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        self.fill(0, 0, 0)
        self.texts = []

    def fill(self, r: int, g: int, b: int) -> None:
        self._pixels = [[(r, g, b) for _ in range(self._width)]
                        for _ in range(self._height)]

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        if 0 <= x < self._width and 0 <= y < self._height:
            return self._pixels[y][x]
        return (0, 0, 0)

    def draw_text(self, x: int, y: int, text: str, r: int, g: int, b: int) -> None:
        self.texts.append((x, y, text, (r, g, b)))


class PILCanvas(BadgeCanvas):
    """
    PIL-based canvas for rendering the badge to PNG images.
    """

    def __init__(self, width: int = 128, height: int = 48, scale: int = 4):
        """
        Initialize PIL canvas.

        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
            scale: Scale factor for output image (makes it bigger for viewing)
        """
        self._width = width
        self._height = height
        self._scale = scale
        self._image = Image.new("RGB", (width, height), (0, 0, 0))
        self._draw = ImageDraw.Draw(self._image)
        self._font = ImageFont.load_default()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        self.fill(0, 0, 0)

    def fill(self, r: int, g: int, b: int) -> None:
        self._image = Image.new("RGB", (self._width, self._height), (r, g, b))
        self._draw = ImageDraw.Draw(self._image)

    def draw_text(self, x: int, y: int, text: str, r: int, g: int, b: int) -> None:
        self._draw.text((x, y), text, fill=(r, g, b), font=self._font)

    def save(self, filename: str) -> None:
        """
        Save canvas to PNG file (scaled up for visibility).

        Args:
            filename: Output filename (e.g., "badge.png")
        """
        if self._scale > 1:
            scaled = self._image.resize(
                (self._width * self._scale, self._height * self._scale),
                Image.Resampling.NEAREST
            )
            scaled.save(filename)
        else:
            self._image.save(filename)


def render_recommendation(canvas: BadgeCanvas, rec: SprayRecommendation) -> None:
    """
    Render a spray recommendation onto a canvas.

    Args:
        canvas: Any BadgeCanvas (PIL or fake)
        rec: Recommendation to display
    """
    canvas.clear()
    for op in calculate_layout(rec, canvas.width, canvas.height):
        if op.op_type == "fill":
            canvas.fill(op.kwargs["r"], op.kwargs["g"], op.kwargs["b"])
        elif op.op_type == "text":
            canvas.draw_text(
                op.kwargs["x"],
                op.kwargs["y"],
                op.kwargs["text"],
                op.kwargs["r"],
                op.kwargs["g"],
                op.kwargs["b"]
            )
