import logging
import threading
import time
from typing import Callable, Optional

from change_detector import ChangeDetector
from config.sync_config import SyncConfig
from constants import TOP_COLORS_COUNT
from frame.frame import Frame
from frame.frame_analysis import FrameAnalysis
from frame.frame_source import FrameCaptureError, FrameSource, NoDisplayError
from home_assistant.home_assistant import HomeAssistant, LightingError
from utils.app_types import Color
from utils.color_log import ColorLog, build_log_entry
from utils.file_handler import FileHandler
from utils.logger import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class SyncLoop:
    """
    One run of the screen-to-light sync: capture, analyze, update lights,
    log, wait, repeat until stopped.

    A SyncLoop is used for a single start/stop run and then discarded.
    """

    def __init__(
        self,
        config: SyncConfig,
        frame_source: FrameSource,
        home_assistant: Optional[HomeAssistant],
        color_log: ColorLog,
        on_fatal: Optional[Callable[["SyncLoop", Exception], None]] = None,
    ):
        self.config = config
        self.frame_source = frame_source
        self.home_assistant = home_assistant
        self.color_log = color_log
        self.on_fatal = on_fatal
        self.change_detector = ChangeDetector(config.color_change_threshold)
        # State variables
        self.last_color: Optional[Color] = None
        self.cycle_count: int = 0
        self._stop_event = threading.Event()

    @property
    def previous_color(self) -> Optional[Color]:
        """Last color sent to the lights, None until the first update."""
        return self.change_detector.previous

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self):
        """
        Ask the loop to end at its next wait. A cycle already in progress
        runs to completion.
        """
        self._stop_event.set()
        self.change_detector.reset()

    def run(self):
        """Run cycles until stopped. Called in a dedicated thread."""
        logger.info("Sync loop started")
        try:
            while not self._stop_event.is_set():
                self.run_cycle()
                if self._stop_event.wait(self.config.update_interval_sec):
                    break
        except FrameCaptureError as e:
            logger.critical(f"Sync loop halted, screen capture failed: {e}")
            self._fail(e)
        except Exception as e:
            logger.exception(f"Sync loop halted by an unexpected error: {e}")
            self._fail(e)
        finally:
            logger.info("Sync loop stopped")

    def _fail(self, error: Exception):
        self._stop_event.set()
        if self.on_fatal:
            self.on_fatal(self, error)

    def capture_frame(self) -> Frame:
        if self.frame_source.list_displays() <= 0:
            raise NoDisplayError("No active display found")
        return self.frame_source.capture(self.config.display_index)

    def run_cycle(self) -> Color:
        """
        Capture and analyze one frame, update the lights if the color
        changed enough and append statistics when enabled.

        Returns:
            The dominant color of the frame

        Raises:
            FrameCaptureError: If no frame could be captured
        """
        iteration_start = time.perf_counter()
        self.cycle_count += 1

        frame = self.capture_frame()
        if self.config.export_screenshot:
            self._export_screenshot(frame)

        small = FrameAnalysis.downscale(frame)
        color = FrameAnalysis.dominant_color(small)
        self.last_color = color
        logger.debug(f"Most frequent color: R:{color[0]} G:{color[1]} B:{color[2]}")

        if self.change_detector.should_emit(color):
            self.update_lights(color)
        else:
            logger.debug(
                f"Skipped Home Assistant call (color change < threshold "
                f"{self.config.color_change_threshold:.1f})"
            )

        logger.debug(f"Iteration took {time.perf_counter() - iteration_start:.3f} seconds")

        if self.config.export_json:
            self._log_top_colors(small)

        return color

    def update_lights(self, color: Color):
        if not self.config.has_token or self.home_assistant is None:
            logger.debug("HA_TOKEN not set, skipping Home Assistant call.")
            return

        try:
            if self.config.use_hs_color:
                self.home_assistant.set_light_hs_color(color)
            else:
                self.home_assistant.set_light_color(color)
            logger.info(f"Lights set to {color}")
        except LightingError as e:
            logger.error(f"Failed to call Home Assistant: {e}")
        self.change_detector.record(color)

    def _export_screenshot(self, frame: Frame):
        try:
            FileHandler.save_screenshot(frame, self.config.screenshot_file)
        except OSError as e:
            logger.error(f"Failed to save screenshot: {e}")

    def _log_top_colors(self, small: Frame):
        stats = FrameAnalysis.color_stats(small, TOP_COLORS_COUNT)
        try:
            self.color_log.append(build_log_entry(small, stats))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to log JSON: {e}")
