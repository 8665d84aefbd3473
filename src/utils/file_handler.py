import cv2

from frame.frame import Frame


class FileHandler:
    """Utility class for writing frames to disk."""

    @staticmethod
    def save_screenshot(frame: Frame, path: str) -> None:
        """
        Save a frame as an image file; the format follows the extension.

        Raises:
            OSError: If OpenCV could not write the file
        """
        # OpenCV expects BGR
        bgr = cv2.cvtColor(frame.image, cv2.COLOR_RGB2BGR)
        try:
            written = cv2.imwrite(path, bgr)
        except cv2.error as e:
            raise OSError(f"Could not write screenshot to {path}: {e}") from e
        if not written:
            raise OSError(f"Could not write screenshot to {path}")
