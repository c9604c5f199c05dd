import numpy as np
import pytest


class RecordingRenderer:
    """Render adapter that remembers every draw_circle call."""

    def __init__(self):
        self.calls = []

    def draw_circle(self, center, radius, fill_color, stroke_color, stroke_width):
        self.calls.append((tuple(center), radius, fill_color, stroke_color, stroke_width))


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def sim_config():
    return {
        'particle_count': 400,
        'radius': 4,
        'width': 500,
        'height': 400,
        'base_speed': 0.8,
        'explode_speed': 0.8,
    }
