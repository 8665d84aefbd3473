import logging
import queue
import threading
from typing import Callable, Optional

from config.sync_config import SyncConfig
from frame.frame_source import FrameSource
from home_assistant.home_assistant import HomeAssistant, LightingError, LightState
from sync_loop import SyncLoop
from utils.app_types import Command, RunState
from utils.color_log import ColorLog
from utils.logger import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# How long stop() waits for an in-flight cycle before restoring the light
RESTORE_JOIN_TIMEOUT_SEC = 5.0


class Controller:
    """
    Owns the Idle/Running state machine.

    Commands arrive through a queue and are applied one at a time by a
    dispatcher thread, so start/stop/quit never interleave. handle() is the
    transition function and can also be called directly.
    """

    def __init__(
        self,
        config: SyncConfig,
        frame_source: Optional[FrameSource] = None,
        home_assistant: Optional[HomeAssistant] = None,
        color_log: Optional[ColorLog] = None,
        on_quit: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            config: Loaded and validated configuration
            frame_source: Screen capture backend
            home_assistant: Lighting client, built from config when omitted
            color_log: Statistics log, built from config when omitted
            on_quit: Called after a quit command has stopped the loop
        """
        self.config = config
        self.frame_source = frame_source or FrameSource()
        self.home_assistant = home_assistant or HomeAssistant(
            config.ha_url, config.ha_token, config.led_entity
        )
        self.color_log = color_log or ColorLog(config.color_log_file)
        self.on_quit = on_quit

        self.state: RunState = RunState.IDLE
        self.sync_loop: SyncLoop | None = None
        self.last_loop: SyncLoop | None = None
        self.original_light_state: LightState | None = None
        self.last_error: str | None = None

        self._loop_thread: threading.Thread | None = None
        # Thread of the last stopped run, joined before the next start
        self._previous_thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._commands: "queue.Queue[Command]" = queue.Queue()
        self._dispatcher: threading.Thread | None = None

    # Command channel
    def start_dispatcher(self):
        """Start the thread that applies submitted commands."""
        if self._dispatcher and self._dispatcher.is_alive():
            return
        self._dispatcher = threading.Thread(
            target=self._dispatch_loop,
            name="CommandDispatcherThread",
            daemon=True,
        )
        self._dispatcher.start()

    def submit(self, command: Command):
        """Queue a command. Never blocks."""
        self._commands.put_nowait(command)

    def _dispatch_loop(self):
        while True:
            command = self._commands.get()
            try:
                self.handle(command)
            except Exception as e:
                logger.error(f"Error handling {command.value} command: {e}")
            if command is Command.QUIT:
                return

    def handle(self, command: Command) -> bool:
        """
        Apply one command.

        Returns:
            True if the command changed the state
        """
        if command is Command.START:
            return self.start()
        if command is Command.STOP:
            return self.stop()
        if command is Command.QUIT:
            self.quit()
            return True
        raise ValueError(f"Unknown command: {command}")

    # Transitions
    @property
    def is_running(self) -> bool:
        return self.state == RunState.RUNNING

    def start(self) -> bool:
        """
        Idle -> Running. No-op when already running.

        Waits for the previous run's cycle to reach its wait point first,
        so two cycles never run at the same time.
        """
        with self._lock:
            if self.state == RunState.RUNNING:
                logger.info("Sync is already running")
                return False
            previous_thread = self._previous_thread

        # Joined outside the lock, a failing loop calls back into _on_loop_failed
        if previous_thread:
            previous_thread.join()

        with self._lock:
            if self.state == RunState.RUNNING:
                return False

            self._previous_thread = None
            self.state = RunState.RUNNING
            self.last_error = None
            self._snapshot_light_state()

            self.sync_loop = SyncLoop(
                config=self.config,
                frame_source=self.frame_source,
                home_assistant=self.home_assistant,
                color_log=self.color_log,
                on_fatal=self._on_loop_failed,
            )
            self.last_loop = self.sync_loop
            self._loop_thread = threading.Thread(
                target=self.sync_loop.run,
                name="SyncLoopThread",
                daemon=True,
            )
            self._loop_thread.start()
            logger.info("Sync started")
            return True

    def stop(self) -> bool:
        """Running -> Idle. No-op when idle."""
        with self._lock:
            if self.state != RunState.RUNNING:
                return False

            self.state = RunState.IDLE
            sync_loop, thread = self.sync_loop, self._loop_thread
            self.sync_loop = None
            self._loop_thread = None
            self._previous_thread = thread

        # Signal the loop to exit at its next wait
        if sync_loop:
            sync_loop.stop()
        logger.info("Sync stopped")

        if self.config.restore_on_stop and self.original_light_state:
            if thread:
                thread.join(timeout=RESTORE_JOIN_TIMEOUT_SEC)
            self._restore_light_state()
        return True

    def quit(self):
        """Stop if running, then hand over to on_quit."""
        logger.info("Quitting")
        self.stop()
        if self.on_quit:
            self.on_quit()

    def _on_loop_failed(self, sync_loop: SyncLoop, error: Exception):
        """Called from the loop thread when a cycle cannot continue."""
        with self._lock:
            if self.sync_loop is not sync_loop:
                return
            self.state = RunState.IDLE
            self.last_error = str(error)
            self.sync_loop = None
            self._previous_thread = self._loop_thread
            self._loop_thread = None
        logger.critical(f"Sync stopped after a fatal error, start again to resume: {error}")

    # Lighting
    def _snapshot_light_state(self):
        if not self.config.has_token:
            return
        try:
            state = self.home_assistant.get_light_state()
        except LightingError as e:
            logger.warning(f"Failed to get current LED state: {e}")
            return
        self.original_light_state = state
        logger.info(
            f"Saved original LED state: state={state.state}, rgb_color={state.rgb_color}, "
            f"hs_color={state.hs_color}, brightness={state.brightness}"
        )

    def _restore_light_state(self):
        try:
            self.home_assistant.restore_light_state(self.original_light_state)
            logger.info("Restored original LED state")
        except LightingError as e:
            logger.error(f"Failed to restore LED state: {e}")

    def get_light_state(self) -> LightState:
        return self.home_assistant.get_light_state()

    def turn_on_light(self):
        self.home_assistant.turn_on_light()

    def turn_off_light(self):
        self.home_assistant.turn_off_light()

    def status(self) -> dict:
        last_color = self.last_loop.last_color if self.last_loop else None
        return {
            "state": self.state.value,
            "last_color": list(last_color) if last_color else None,
            "last_error": self.last_error,
            "original_light_state": (
                self.original_light_state.to_dict() if self.original_light_state else None
            ),
            "config": self.config.to_dict(),
        }
