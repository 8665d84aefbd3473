from enum import Enum
from typing import Tuple

# 8-bit (R, G, B)
Color = Tuple[int, int, int]


class RunState(Enum):
    """Enum representing the possible states of the sync loop."""

    IDLE = "idle"
    RUNNING = "running"


class Command(Enum):
    """Commands accepted by the controller's command channel."""

    START = "start"
    STOP = "stop"
    QUIT = "quit"
