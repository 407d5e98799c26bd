"""
Shared pytest fixtures: fake session, sink and frames.
"""
from types import SimpleNamespace

import numpy as np
import onnxruntime as ort
import pytest

from classifier.frame import Frame


class FakeSession:
    """Stands in for onnxruntime.InferenceSession."""

    def __init__(self, output=None, input_name="input", error=None):
        self.input_name = input_name
        self.output = output
        self.error = error
        self.feeds = []
        self.close_calls = 0

    def get_inputs(self):
        return [SimpleNamespace(name=self.input_name, shape=[1, 3, 224, 224])]

    def run_with_ort_values(self, output_names, feeds):
        value = feeds[self.input_name]
        self.feeds.append(value.shape())
        if self.error is not None:
            raise self.error
        if isinstance(self.output, np.ndarray):
            return [ort.OrtValue.ortvalue_from_numpy(self.output)]
        return [self.output]

    def close(self):
        self.close_calls += 1


class RecordingSink:
    def __init__(self):
        self.results = []

    def on_result(self, result):
        self.results.append(result)


class CountingFrame(Frame):
    def __init__(self, buffer, rotation_degrees=0):
        self.release_calls = 0
        super().__init__(buffer, rotation_degrees, on_release=self._count)

    def _count(self, frame):
        self.release_calls += 1


@pytest.fixture
def bgr_image() -> np.ndarray:
    """Random 480x640 BGR frame."""
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(480, 640, 3), dtype=np.uint8)


@pytest.fixture
def logits_output() -> np.ndarray:
    return np.array([[1.0, 2.0, 3.0, 0.0, 0.0]], dtype=np.float32)


@pytest.fixture
def fake_session(logits_output) -> FakeSession:
    return FakeSession(output=logits_output)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_frame():
    def _make(buffer, rotation_degrees=0):
        return CountingFrame(buffer, rotation_degrees)
    return _make
