from typing import Sequence, Tuple

import cv2
import numpy as np

from constants import BLACK_THRESHOLD, QUANT_STEP, WHITE_THRESHOLD
from utils.app_types import Color


def quantize(rgb: Sequence[int], step: int = QUANT_STEP) -> Color:
    """
    Floor each channel to a multiple of step.

    Args:
        rgb: (R, G, B) with 8-bit channels
        step: Bucket width per channel

    Returns:
        Quantized (R, G, B); every channel is a multiple of step and <= the input
    """
    r, g, b = rgb
    return (int(r) // step) * step, (int(g) // step) * step, (int(b) // step) * step


def is_black_or_white(rgb: Sequence[int]) -> bool:
    """True for near-black (all channels <= 16) or near-white (all >= 240)."""
    r, g, b = rgb
    near_black = r <= BLACK_THRESHOLD and g <= BLACK_THRESHOLD and b <= BLACK_THRESHOLD
    near_white = r >= WHITE_THRESHOLD and g >= WHITE_THRESHOLD and b >= WHITE_THRESHOLD
    return near_black or near_white


def color_distance(rgb1: Sequence[int], rgb2: Sequence[int]) -> int:
    """Squared Euclidean distance between two RGB colors (no square root)."""
    dr = int(rgb1[0]) - int(rgb2[0])
    dg = int(rgb1[1]) - int(rgb2[1])
    db = int(rgb1[2]) - int(rgb2[2])
    return dr * dr + dg * dg + db * db


def color_name(rgb: Sequence[int]) -> str:
    """Rough human-readable name for an RGB color. First matching rule wins."""
    r, g, b = rgb
    if r > 200 and g < 80 and b < 80:
        return "light red"
    if r > 150 and g < 80 and b < 80:
        return "red"
    if 100 < r < 180 and 60 < g < 120 and b < 80:
        return "brown"
    if g > 200 and r > 200 and b < 100:
        return "light yellow"
    if g > 200 and r < 100 and b < 100:
        return "light green"
    if g > 150 and r < 100 and b < 100:
        return "green"
    if g > 100 and b > 100 and r < 100:
        return "teal"
    if b > 200 and r < 100 and g < 100:
        return "light blue"
    if b > 100 and r < 80 and g < 80:
        return "dark blue"
    if b > 200 and r > 200 and g < 100:
        return "pink"
    if r > 200 and g > 200 and b > 200:
        return "white"
    if r < 60 and g < 60 and b < 60:
        return "black"
    if r > 180 and g > 100 and b < 100:
        return "orange"
    if r > 180 and g > 100 and b > 100:
        return "peach"
    if r > 150 and g < 100 and b > 100:
        return "violet"
    return "unknown color"


def rgb_to_hs_color(rgb: Sequence[int]) -> Tuple[int, int]:
    """
    Convert RGB to a Home Assistant hs_color pair.

    Returns:
        (hue 0-360, saturation 0-100), rounded half up
    """
    # float32 input keeps the full 0-360 hue range in OpenCV
    pixel = np.float32([[rgb]]) / 255.0
    h, s, _ = cv2.cvtColor(pixel, cv2.COLOR_RGB2HSV)[0][0]
    return int(float(h) + 0.5), int(float(s) * 100 + 0.5)


def hs_to_rgb(hue: float, saturation: float) -> Color:
    """Convert a Home Assistant hs_color (0-360, 0-100) to RGB at full value."""
    hsv = np.float32([[[hue, saturation / 100.0, 1.0]]])
    r, g, b = cv2.cvtColor(hsv, cv2.COLOR_HSV2RGB)[0][0]
    return int(float(r) * 255 + 0.5), int(float(g) * 255 + 0.5), int(float(b) * 255 + 0.5)
