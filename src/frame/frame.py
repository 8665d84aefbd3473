import numpy as np


class Frame:
    """
    Class representing a single RGB frame of the screen.

    Attributes:
        image: uint8 array of shape (height, width, 3), channels in R, G, B order
    """

    def __init__(self, image: np.ndarray):
        """
        Initialize a Frame object.

        Args:
            image: RGB pixel buffer of shape (height, width, 3)

        Raises:
            ValueError: If the buffer is not a non-empty 3-channel image
        """
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError("Frame must be an RGB image of shape (height, width, 3)")

        if image.shape[0] < 1 or image.shape[1] < 1:
            raise ValueError("Frame must be at least 1x1 pixels")

        self.image = np.ascontiguousarray(image, dtype=np.uint8)

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def screen_size(self) -> str:
        """Dimensions formatted as 'WxH'."""
        return f"{self.width}x{self.height}"

    def __repr__(self) -> str:
        """String representation of the Frame."""
        return f"Frame(size={self.screen_size})"
