from functools import wraps
from flask import jsonify

from utils.flask_helpers import get_controller


def require_controller(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_controller() is None:
            return (
                jsonify({"status": "error", "message": "Service not initialized"}),
                400,
            )
        return f(*args, **kwargs)

    return decorated_function


def require_idle(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_controller().is_running:
            return (
                jsonify({"status": "error", "message": "Stop the sync first"}),
                400,
            )
        return f(*args, **kwargs)

    return decorated_function


def require_token(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_controller().config.has_token:
            return (
                jsonify({"status": "error", "message": "HA_TOKEN is not configured"}),
                400,
            )
        return f(*args, **kwargs)

    return decorated_function
