from types import SimpleNamespace
from unittest.mock import patch

import pytest
import requests

from home_assistant.home_assistant import HomeAssistant, LightingError, LightState


@pytest.fixture
def client():
    with patch("home_assistant.home_assistant.Client") as client_cls:
        yield client_cls


@pytest.fixture
def home_assistant(client):
    return HomeAssistant("http://ha.local:8123/", "token", "light.strip")


def test_client_created_once_with_api_url(client, home_assistant):
    home_assistant.turn_on_light()
    home_assistant.turn_off_light()

    client.assert_called_once_with("http://ha.local:8123/api", "token", verify_ssl=False)


def test_set_light_color_payload(client, home_assistant):
    home_assistant.set_light_color((192, 32, 32))

    client.return_value.trigger_service.assert_called_once_with(
        "light",
        "turn_on",
        entity_id="light.strip",
        rgb_color=[192, 32, 32],
        brightness=255,
    )


def test_set_light_hs_color_payload(client, home_assistant):
    home_assistant.set_light_hs_color((0, 0, 255), brightness=100)

    client.return_value.trigger_service.assert_called_once_with(
        "light",
        "turn_on",
        entity_id="light.strip",
        hs_color=[240, 100],
        brightness=100,
    )


def test_plain_on_off(client, home_assistant):
    home_assistant.turn_on_light()
    home_assistant.turn_off_light("light.other")

    calls = client.return_value.trigger_service.call_args_list
    assert calls[0].args == ("light", "turn_on")
    assert calls[0].kwargs == {"entity_id": "light.strip"}
    assert calls[1].args == ("light", "turn_off")
    assert calls[1].kwargs == {"entity_id": "light.other"}


def test_request_errors_are_wrapped(client, home_assistant):
    client.return_value.trigger_service.side_effect = requests.ConnectionError("refused")

    with pytest.raises(LightingError):
        home_assistant.set_light_color((1, 2, 3))


def test_get_light_state(client, home_assistant):
    client.return_value.get_state.return_value = SimpleNamespace(
        state="on",
        attributes={"rgb_color": [255, 0, 0], "hs_color": [0.0, 100.0], "brightness": 200},
    )

    light_state = home_assistant.get_light_state()

    client.return_value.get_state.assert_called_once_with(entity_id="light.strip")
    assert light_state == LightState(
        state="on", rgb_color=[255, 0, 0], hs_color=[0.0, 100.0], brightness=200
    )


def test_light_state_to_rgb_prefers_rgb():
    state = LightState(state="on", rgb_color=[1, 2, 3], hs_color=[120.0, 100.0])
    assert state.to_rgb() == ((1, 2, 3), True)


def test_light_state_to_rgb_falls_back_to_hs():
    state = LightState(state="on", hs_color=[120.0, 100.0])
    assert state.to_rgb() == ((0, 255, 0), True)


def test_light_state_to_rgb_unknown():
    assert LightState(state="on").to_rgb() == ((255, 255, 255), False)


def test_restore_off_state(client, home_assistant):
    home_assistant.restore_light_state(LightState(state="off"))

    client.return_value.trigger_service.assert_called_once_with(
        "light", "turn_off", entity_id="light.strip"
    )


def test_restore_on_state(client, home_assistant):
    home_assistant.restore_light_state(
        LightState(state="on", rgb_color=[10, 20, 30], brightness=64)
    )

    client.return_value.trigger_service.assert_called_once_with(
        "light",
        "turn_on",
        entity_id="light.strip",
        rgb_color=[10, 20, 30],
        brightness=64,
    )


def test_restore_on_state_without_color(client, home_assistant):
    home_assistant.restore_light_state(LightState(state="on"))

    client.return_value.trigger_service.assert_called_once_with(
        "light", "turn_on", entity_id="light.strip"
    )
