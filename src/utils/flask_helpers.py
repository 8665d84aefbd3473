from flask import current_app
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    # These imports are only used for type checking, not at runtime
    from controller import Controller


def get_controller() -> Optional["Controller"]:
    """Get the controller from the current app configuration."""
    return current_app.config.get("CONTROLLER", None)
