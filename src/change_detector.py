import logging
from typing import Optional

from utils.app_types import Color
from utils.color.color_utils import color_distance
from utils.logger import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def should_emit(current: Color, previous: Optional[Color], threshold: float) -> bool:
    """
    True if there is no previous color or the squared distance to it
    reaches the threshold.
    """
    if previous is None:
        return True
    return color_distance(current, previous) >= threshold


class ChangeDetector:
    """
    Tracks the last color sent to the lights and decides whether a new
    dominant color differs enough to be sent.
    """

    def __init__(self, threshold: float):
        if threshold < 0:
            raise ValueError("Threshold cannot be negative")
        self.threshold = threshold
        self.previous: Optional[Color] = None

    def should_emit(self, current: Color) -> bool:
        emit = should_emit(current, self.previous, self.threshold)
        if not emit:
            logger.debug(
                f"Color change {current} vs {self.previous} below threshold {self.threshold:.1f}"
            )
        return emit

    def record(self, color: Color) -> None:
        """Remember color as the last one emitted."""
        self.previous = color

    def reset(self) -> None:
        """Forget the last emitted color so the next check always emits."""
        self.previous = None
