import logging
import os
import multiprocessing
from datetime import datetime

LOGGER_NAME = "ledsync"


def configure_logging(level: str = "INFO"):
    """Configure the application logger once, at application startup"""
    logger = logging.getLogger(LOGGER_NAME)

    # Only configure if not already configured
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s - %(threadName)s - %(levelname)s - %(message)s"
        )

        # Only create a file handler in the main process
        if multiprocessing.current_process().name == "MainProcess":
            if not os.path.exists("logs"):
                os.makedirs("logs")

            # Format timestamp as readable datetime (e.g., 2023-05-25_14-30-45)
            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

            file_handler = logging.FileHandler(f"logs/{timestamp}.log")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        # Always add the stream handler for console output
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    return logger
