"""
Pytest configuration and global fixtures.
"""
import threading
import time

import pytest
from PIL import Image

from table_capture.errors import OcrEngineError
from table_capture.structures import NormalizedRect, TextFragment


def fragment(text, y, x=0.1, width=0.3, height=0.05):
    return TextFragment(text=text, box=NormalizedRect(x=x, y=y, width=width, height=height))


class ColorKeyedEngine:
    """Fake OCR engine: looks at the centre pixel of the crop and returns the
    fragments registered for that colour."""

    name = "fake"

    def __init__(self, responses, failing=(), delays=None):
        self.responses = dict(responses)
        self.failing = set(failing)
        self.delays = dict(delays or {})
        self.calls = []
        self._lock = threading.Lock()

    def recognize_text(self, image):
        color = image.convert("RGB").getpixel((image.width // 2, image.height // 2))
        with self._lock:
            self.calls.append((color, image.size))
        if color in self.delays:
            time.sleep(self.delays[color])
        if color in self.failing:
            raise OcrEngineError(f"boom on {color}")
        return list(self.responses.get(color, []))


RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
YELLOW = (255, 255, 0)


@pytest.fixture
def make_fragment():
    return fragment


@pytest.fixture
def quadrant_image():
    """200x100 image: top-left red, top-right green, bottom-left blue, bottom-right yellow."""
    img = Image.new("RGB", (200, 100), color=RED)
    img.paste(GREEN, (100, 0, 200, 50))
    img.paste(BLUE, (0, 50, 100, 100))
    img.paste(YELLOW, (100, 50, 200, 100))
    return img


@pytest.fixture
def quadrant_engine():
    return ColorKeyedEngine({
        RED: [fragment("Name", 0.5)],
        GREEN: [fragment("Qty", 0.5)],
        BLUE: [fragment("Apple", 0.6), fragment("pie", 0.2)],
        YELLOW: [fragment("3", 0.5)],
    })


@pytest.fixture
def engine_factory():
    return ColorKeyedEngine


@pytest.fixture
def sample_image_path(tmp_path, quadrant_image):
    img_path = tmp_path / "table.png"
    quadrant_image.save(img_path)
    return str(img_path)
