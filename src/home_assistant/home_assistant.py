from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import requests
from homeassistant_api import Client
from homeassistant_api.errors import HomeassistantAPIError
from urllib3.exceptions import InsecureRequestWarning

from constants import LED_BRIGHTNESS
from utils.app_types import Color
from utils.color.color_utils import hs_to_rgb, rgb_to_hs_color


class LightingError(Exception):
    """Raised when a Home Assistant call fails."""


@dataclass
class LightState:
    """Snapshot of a light entity as reported by /api/states/<entity_id>."""

    state: str
    rgb_color: Optional[List[int]] = None
    hs_color: Optional[List[float]] = None
    brightness: Optional[int] = None

    @classmethod
    def from_api(cls, state: str, attributes: dict) -> "LightState":
        return cls(
            state=state,
            rgb_color=attributes.get("rgb_color"),
            hs_color=attributes.get("hs_color"),
            brightness=attributes.get("brightness"),
        )

    @property
    def is_on(self) -> bool:
        return self.state == "on"

    def to_rgb(self) -> Tuple[Color, bool]:
        """
        RGB color of the light, preferring rgb_color over hs_color.

        Returns:
            (color, known): white and False when neither attribute is set
        """
        if self.rgb_color and len(self.rgb_color) == 3:
            r, g, b = self.rgb_color
            return (int(r), int(g), int(b)), True
        if self.hs_color and len(self.hs_color) == 2:
            return hs_to_rgb(self.hs_color[0], self.hs_color[1]), True
        return (255, 255, 255), False

    def to_dict(self) -> dict:
        return {
            "state": self.state,
            "rgb_color": self.rgb_color,
            "hs_color": self.hs_color,
            "brightness": self.brightness,
        }


class HomeAssistant:
    """
    Class for controlling one light through Home Assistant
    """

    def __init__(self, url: str, access_token: str, entity_id: str):
        """
        Initialize the Home Assistant connection.

        Args:
            url: Home Assistant base URL, e.g. http://192.168.1.124:8123
            access_token: Long-lived access token for authentication
            entity_id: The light entity to control
        """
        # Suppress HTTPS "localhost is insecure" warnings
        requests.packages.urllib3.disable_warnings(category=InsecureRequestWarning)
        self.url = url.rstrip("/")
        self.access_token = access_token
        self.entity_id = entity_id
        self._client = None

    def _get_client(self) -> Client:
        """Get or create the Home Assistant API client."""
        if self._client is None:
            self._client = Client(f"{self.url}/api", self.access_token, verify_ssl=False)
        return self._client

    def _trigger(self, service: str, **service_data):
        try:
            return self._get_client().trigger_service("light", service, **service_data)
        except (HomeassistantAPIError, requests.RequestException) as e:
            raise LightingError(f"Home Assistant call light.{service} failed: {e}") from e

    def get_light_state(self, entity_id: Optional[str] = None) -> LightState:
        """Fetch the current state of a light."""
        entity_id = entity_id or self.entity_id
        try:
            state = self._get_client().get_state(entity_id=entity_id)
        except (HomeassistantAPIError, requests.RequestException) as e:
            raise LightingError(f"Failed to get state of {entity_id}: {e}") from e
        return LightState.from_api(state.state, dict(state.attributes or {}))

    def turn_on_light(self, entity_id: Optional[str] = None) -> None:
        """Turn on a light."""
        self._trigger("turn_on", entity_id=entity_id or self.entity_id)

    def turn_off_light(self, entity_id: Optional[str] = None) -> None:
        """Turn off a light."""
        self._trigger("turn_off", entity_id=entity_id or self.entity_id)

    def set_light_color(
        self,
        rgb_color: Sequence[int],
        brightness: int = LED_BRIGHTNESS,
        entity_id: Optional[str] = None,
    ) -> None:
        """
        Set the color of a light.

        Args:
            rgb_color: RGB color as 3 integers (0-255)
            brightness: Home Assistant brightness (0-255)
        """
        self._trigger(
            "turn_on",
            entity_id=entity_id or self.entity_id,
            rgb_color=[int(c) for c in rgb_color],
            brightness=brightness,
        )

    def set_light_hs_color(
        self,
        rgb_color: Sequence[int],
        brightness: int = LED_BRIGHTNESS,
        entity_id: Optional[str] = None,
    ) -> None:
        """Same as set_light_color but sends the color as hs_color."""
        hue, saturation = rgb_to_hs_color(rgb_color)
        self._trigger(
            "turn_on",
            entity_id=entity_id or self.entity_id,
            hs_color=[hue, saturation],
            brightness=brightness,
        )

    def restore_light_state(self, light_state: LightState) -> None:
        """Put a light back into a previously saved state."""
        if not light_state.is_on:
            self.turn_off_light()
            return

        rgb, known = light_state.to_rgb()
        if not known:
            self.turn_on_light()
            return
        brightness = light_state.brightness
        self.set_light_color(rgb, brightness=LED_BRIGHTNESS if brightness is None else brightness)
