import time

import numpy as np
import pytest

from config.sync_config import SyncConfig
from frame.frame import Frame
from frame.frame_source import FrameCaptureError


def solid_frame(color, width=100, height=100) -> Frame:
    return Frame(np.full((height, width, 3), color, dtype=np.uint8))


def wait_for(predicate, timeout=2.0):
    """Poll until predicate() is truthy or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class FakeFrameSource:
    """Returns queued colors as solid frames, repeating the last one."""

    def __init__(self, colors=((200, 40, 40),), displays=1, error=None):
        self.colors = list(colors)
        self.displays = displays
        self.error = error
        self.captures = 0

    def list_displays(self):
        return self.displays

    def capture(self, display_index, rect=None):
        if self.error:
            raise self.error
        color = self.colors[min(self.captures, len(self.colors) - 1)]
        self.captures += 1
        return solid_frame(color)


@pytest.fixture
def frame_source():
    return FakeFrameSource()


@pytest.fixture
def config(tmp_path):
    return SyncConfig(
        ha_url="http://ha.local:8123",
        ha_token="abcdefghijklmnop",
        led_entity="light.test",
        color_change_threshold=1024.0,
        update_interval_ms=60_000,
        color_log_file=str(tmp_path / "colorlog.json"),
        screenshot_file=str(tmp_path / "screenshot.png"),
    )


@pytest.fixture
def capture_error():
    return FrameCaptureError("display went away")
