import io

import pytest
from PIL import Image

from adlocalizer.media import ImageData


def _make_image(width=64, height=48, color=(200, 40, 40), fmt="PNG"):
    img = Image.new("RGB", (width, height), color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return ImageData(data=buffer.getvalue(), mime_type=Image.MIME[fmt])


class FakeGenerator:
    """
    Stands in for an image backend. `fail` maps a prompt to an outcome:
    None (succeed), "none" (no image in the response) or an exception to raise.
    """

    def __init__(self, size=(1200, 900), fail=None):
        self.size = size
        self.fail = fail
        self.calls = []
        self.outputs = []

    def generate(self, image, prompt):
        self.calls.append((image, prompt))
        outcome = self.fail(prompt) if self.fail else None
        if isinstance(outcome, Exception):
            raise outcome
        if outcome == "none":
            return None
        n = len(self.outputs) + 1
        result = _make_image(*self.size, color=((n * 37) % 256, 90, 160))
        self.outputs.append(result)
        return result


@pytest.fixture
def make_image():
    return _make_image


@pytest.fixture
def fake_generator():
    return FakeGenerator


@pytest.fixture
def source_image():
    return _make_image(640, 480, color=(30, 120, 200))
