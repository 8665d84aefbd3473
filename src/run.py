import _thread
import logging
import sys

from app import create_app
from config.sync_config import ConfigError, SyncConfig
from controller import Controller
from utils.logger import LOGGER_NAME, configure_logging

logger = logging.getLogger(LOGGER_NAME)


def main():
    try:
        config = SyncConfig.from_env()
    except ConfigError as e:
        configure_logging()
        logger.critical(f"Failed to load config: {e}")
        sys.exit(1)

    configure_logging(config.log_level)
    config.log_summary(logger)

    # Quit raises KeyboardInterrupt in the main thread, which ends app.run()
    controller = Controller(config, on_quit=_thread.interrupt_main)
    controller.start_dispatcher()

    app = create_app(controller)
    try:
        app.run(host="127.0.0.1", port=config.port)
    except KeyboardInterrupt:
        logger.info("Program interrupted by user")
    finally:
        controller.stop()


if __name__ == "__main__":
    main()
