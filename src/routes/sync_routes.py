from flask import Blueprint, jsonify

from middleware import require_controller
from utils.app_types import Command
from utils.flask_helpers import get_controller

sync_bp = Blueprint("sync", __name__, url_prefix="/api")


@sync_bp.route("/status", methods=["GET"])
@require_controller
def get_status():
    return jsonify(get_controller().status())


@sync_bp.route("/start", methods=["POST"])
@require_controller
def start_sync():
    controller = get_controller()
    if controller.is_running:
        return jsonify({"status": "already running"})

    controller.submit(Command.START)
    return jsonify({"status": "success", "command": Command.START.value})


@sync_bp.route("/stop", methods=["POST"])
@require_controller
def stop_sync():
    controller = get_controller()
    if not controller.is_running:
        return jsonify({"status": "success", "message": "Sync is already stopped"})

    controller.submit(Command.STOP)
    return jsonify({"status": "success", "command": Command.STOP.value})


@sync_bp.route("/quit", methods=["POST"])
@require_controller
def quit_app():
    get_controller().submit(Command.QUIT)
    return jsonify({"status": "success", "command": Command.QUIT.value})
