from typing import Dict, List, Tuple

import cv2
import numpy as np

from constants import (
    BLACK_THRESHOLD,
    DOWNSCALE_FACTOR,
    QUANT_STEP,
    TOP_COLORS_COUNT,
    WHITE_THRESHOLD,
)
from frame.frame import Frame
from utils.app_types import Color
from utils.color.color_utils import color_name


class FrameAnalysis:
    """
    Class for analyzing screen frames.
    Provides downscaling and histogram based dominant color extraction.
    """

    @staticmethod
    def downscale(frame: Frame, factor: int = DOWNSCALE_FACTOR) -> Frame:
        """
        Shrink a frame to 1/factor of its width and height with bilinear
        interpolation. Each dimension is at least 1 pixel.
        """
        width = max(1, frame.width // factor)
        height = max(1, frame.height // factor)
        small = cv2.resize(frame.image, (width, height), interpolation=cv2.INTER_LINEAR)
        return Frame(small.reshape(height, width, 3))

    @staticmethod
    def quantize_pixels(image: np.ndarray, step: int = QUANT_STEP) -> np.ndarray:
        """Flatten an RGB image to (n, 3) and floor every channel to a multiple of step."""
        pixels = image.reshape(-1, 3)
        return (pixels // step) * step

    @classmethod
    def color_histogram(
        cls, frame: Frame, exclude_black_white: bool = False
    ) -> Dict[Color, int]:
        """
        Count pixels per quantized color.

        Args:
            frame: Frame to analyze
            exclude_black_white: Skip buckets that are near-black or near-white
                on all three channels

        Returns:
            dict: {(r, g, b): pixel count}
        """
        pixels = cls.quantize_pixels(frame.image)

        if exclude_black_white:
            near_black = np.all(pixels <= BLACK_THRESHOLD, axis=1)
            near_white = np.all(pixels >= WHITE_THRESHOLD, axis=1)
            pixels = pixels[~(near_black | near_white)]

        if len(pixels) == 0:
            return {}

        colors, counts = np.unique(pixels, axis=0, return_counts=True)
        return {
            (int(c[0]), int(c[1]), int(c[2])): int(count)
            for c, count in zip(colors, counts)
        }

    @classmethod
    def dominant_color(cls, frame: Frame) -> Color:
        """
        Most frequent quantized color, ignoring near-black and near-white.
        Falls back to the unfiltered histogram when nothing else is left.
        """
        histogram = cls.color_histogram(frame, exclude_black_white=True)
        if not histogram:
            histogram = cls.color_histogram(frame)
        return max(histogram, key=histogram.get)

    @classmethod
    def top_colors(cls, frame: Frame, n: int = TOP_COLORS_COUNT) -> List[Tuple[Color, int]]:
        """
        Most frequent quantized colors, black and white included.

        Returns:
            list: At most n (color, count) pairs sorted by count, descending
        """
        if n <= 0:
            return []
        histogram = cls.color_histogram(frame)
        ranked = sorted(histogram.items(), key=lambda item: item[1], reverse=True)
        return ranked[:n]

    @classmethod
    def color_stats(cls, frame: Frame, n: int = TOP_COLORS_COUNT) -> List[dict]:
        """Top colors annotated with a name and their share of the frame in percent."""
        total = frame.pixel_count
        return [
            {
                "r": color[0],
                "g": color[1],
                "b": color[2],
                "name": color_name(color),
                "percent": count / total * 100,
            }
            for color, count in cls.top_colors(frame, n)
        ]
