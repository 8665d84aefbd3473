from unittest.mock import MagicMock

import pytest

from app import create_app
from home_assistant.home_assistant import LightingError, LightState
from utils.app_types import Command


@pytest.fixture
def controller():
    controller = MagicMock()
    controller.is_running = False
    controller.config.has_token = True
    controller.status.return_value = {"state": "idle", "last_color": None}
    return controller


@pytest.fixture
def client(controller):
    app = create_app(controller, {"TESTING": True})
    return app.test_client()


def test_status(client, controller):
    response = client.get("/api/status")

    assert response.status_code == 200
    assert response.get_json() == {"state": "idle", "last_color": None}


def test_status_without_controller():
    client = create_app().test_client()

    response = client.get("/api/status")

    assert response.status_code == 400


def test_start_submits_command(client, controller):
    response = client.post("/api/start")

    assert response.get_json() == {"status": "success", "command": "start"}
    controller.submit.assert_called_once_with(Command.START)


def test_start_when_running(client, controller):
    controller.is_running = True

    response = client.post("/api/start")

    assert response.get_json() == {"status": "already running"}
    controller.submit.assert_not_called()


def test_stop_submits_command(client, controller):
    controller.is_running = True

    response = client.post("/api/stop")

    assert response.get_json()["command"] == "stop"
    controller.submit.assert_called_once_with(Command.STOP)


def test_stop_when_idle(client, controller):
    response = client.post("/api/stop")

    assert response.get_json()["message"] == "Sync is already stopped"
    controller.submit.assert_not_called()


def test_quit(client, controller):
    response = client.post("/api/quit")

    assert response.status_code == 200
    controller.submit.assert_called_once_with(Command.QUIT)


def test_light_state(client, controller):
    controller.get_light_state.return_value = LightState(state="on", brightness=255)

    response = client.get("/api/lighting/state")

    assert response.get_json()["data"]["state"] == "on"


def test_light_state_error(client, controller):
    controller.get_light_state.side_effect = LightingError("401 Unauthorized")

    response = client.get("/api/lighting/state")

    assert response.status_code == 502
    assert response.get_json()["status"] == "error"


def test_light_requires_token(client, controller):
    controller.config.has_token = False

    response = client.post("/api/lighting/on")

    assert response.status_code == 400
    controller.turn_on_light.assert_not_called()


def test_light_on_off_while_idle(client, controller):
    assert client.post("/api/lighting/on").get_json()["state"] == "on"
    assert client.post("/api/lighting/off").get_json()["state"] == "off"
    controller.turn_on_light.assert_called_once()
    controller.turn_off_light.assert_called_once()


def test_light_on_rejected_while_running(client, controller):
    controller.is_running = True

    response = client.post("/api/lighting/on")

    assert response.status_code == 400
    controller.turn_on_light.assert_not_called()


def test_unknown_route(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.get_json()["message"] == "Resource not found"
