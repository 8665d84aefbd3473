from flask import Blueprint, jsonify

from home_assistant.home_assistant import LightingError
from middleware import require_controller, require_idle, require_token
from utils.flask_helpers import get_controller

lighting_bp = Blueprint("lighting", __name__, url_prefix="/api/lighting")


def _lighting_error(e: LightingError):
    return jsonify({"status": "error", "message": str(e)}), 502


@lighting_bp.route("/state", methods=["GET"])
@require_controller
@require_token
def get_light_state():
    try:
        light_state = get_controller().get_light_state()
    except LightingError as e:
        return _lighting_error(e)
    return jsonify({"status": "success", "data": light_state.to_dict()})


@lighting_bp.route("/on", methods=["POST"])
@require_controller
@require_token
@require_idle
def turn_on():
    try:
        get_controller().turn_on_light()
    except LightingError as e:
        return _lighting_error(e)
    return jsonify({"status": "success", "state": "on"})


@lighting_bp.route("/off", methods=["POST"])
@require_controller
@require_token
@require_idle
def turn_off():
    try:
        get_controller().turn_off_light()
    except LightingError as e:
        return _lighting_error(e)
    return jsonify({"status": "success", "state": "off"})
