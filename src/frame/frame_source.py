from typing import Dict, Optional

import cv2
import mss
import mss.exception
import numpy as np

from frame.frame import Frame


class FrameCaptureError(Exception):
    """Raised when the screen cannot be captured."""


class NoDisplayError(FrameCaptureError):
    """Raised when no active display is available."""


class FrameSource:
    """
    Captures frames from the attached displays using mss.
    A fresh mss handle is opened per call so capture works from any thread.
    """

    def list_displays(self) -> int:
        """Number of active displays."""
        try:
            with mss.mss() as sct:
                # monitors[0] is the union of all displays
                return max(len(sct.monitors) - 1, 0)
        except mss.exception.ScreenShotError as e:
            raise FrameCaptureError(f"Failed to enumerate displays: {e}") from e

    def capture(self, display_index: int, rect: Optional[Dict[str, int]] = None) -> Frame:
        """
        Capture one frame of a display.

        Args:
            display_index: Zero-based display index
            rect: Optional region {"left", "top", "width", "height"} in screen
                coordinates. Defaults to the full display bounds.

        Returns:
            Frame with RGB pixels

        Raises:
            NoDisplayError: If the display index does not exist
            FrameCaptureError: If the capture itself fails
        """
        try:
            with mss.mss() as sct:
                displays = sct.monitors[1:]
                if not displays:
                    raise NoDisplayError("No active display found")
                if not 0 <= display_index < len(displays):
                    raise NoDisplayError(
                        f"Display {display_index} not found ({len(displays)} active)"
                    )

                region = rect if rect is not None else displays[display_index]
                img = np.array(sct.grab(region))
        except mss.exception.ScreenShotError as e:
            raise FrameCaptureError(f"Failed to capture screenshot: {e}") from e

        # mss returns BGRA
        return Frame(cv2.cvtColor(img, cv2.COLOR_BGRA2RGB))
