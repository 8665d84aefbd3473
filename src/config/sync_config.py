import logging
import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from constants import (
    COLOR_LOG_FILE,
    DEFAULT_COLOR_CHANGE_THRESHOLD,
    DEFAULT_HA_URL,
    DEFAULT_LED_ENTITY,
    DEFAULT_UPDATE_INTERVAL_MS,
    SCREENSHOT_FILE,
)

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off", ""}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(ValueError):
    """Raised when a configuration value is missing or invalid."""


def _parse_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be true or false, got {value!r}")


def _parse_number(name: str, value, cast):
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def mask_token(token: str) -> str:
    """Hide all but the first and last four characters of a token."""
    if len(token) <= 8:
        return "********"
    return f"{token[:4]}...{token[-4:]}"


@dataclass(frozen=True)
class SyncConfig:
    ha_url: str = DEFAULT_HA_URL
    ha_token: str = ""
    led_entity: str = DEFAULT_LED_ENTITY
    export_json: bool = False
    export_screenshot: bool = False
    color_change_threshold: float = DEFAULT_COLOR_CHANGE_THRESHOLD
    update_interval_ms: int = DEFAULT_UPDATE_INTERVAL_MS
    display_index: int = 0
    use_hs_color: bool = False
    restore_on_stop: bool = False
    color_log_file: str = COLOR_LOG_FILE
    screenshot_file: str = SCREENSHOT_FILE
    log_level: str = "INFO"
    port: int = 8000

    def __post_init__(self):
        if not self.ha_url:
            raise ConfigError("HA_URL cannot be empty")
        if not self.led_entity.startswith("light."):
            raise ConfigError(f"LED_ENTITY must be a light entity, got {self.led_entity!r}")
        if self.color_change_threshold < 0:
            raise ConfigError("COLOR_CHANGE_THRESHOLD cannot be negative")
        if self.update_interval_ms <= 0:
            raise ConfigError("UPDATE_INTERVAL_MS must be positive")
        if self.display_index < 0:
            raise ConfigError("DISPLAY_INDEX cannot be negative")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}")

    @property
    def update_interval_sec(self) -> float:
        return self.update_interval_ms / 1000

    @property
    def has_token(self) -> bool:
        return bool(self.ha_token)

    @classmethod
    def from_dict(cls, data: Mapping) -> "SyncConfig":
        """
        Build a config from a mapping keyed by environment variable names.
        Missing keys keep their defaults.

        Raises:
            ConfigError: If a value cannot be parsed or fails validation
        """

        def get(key, default):
            value = data.get(key)
            return default if value is None else value

        return cls(
            ha_url=str(get("HA_URL", DEFAULT_HA_URL)).rstrip("/"),
            ha_token=str(get("HA_TOKEN", "")),
            led_entity=str(get("LED_ENTITY", DEFAULT_LED_ENTITY)),
            export_json=_parse_bool("EXPORT_JSON", get("EXPORT_JSON", False)),
            export_screenshot=_parse_bool(
                "EXPORT_SCREENSHOT", get("EXPORT_SCREENSHOT", False)
            ),
            color_change_threshold=_parse_number(
                "COLOR_CHANGE_THRESHOLD",
                get("COLOR_CHANGE_THRESHOLD", DEFAULT_COLOR_CHANGE_THRESHOLD),
                float,
            ),
            update_interval_ms=_parse_number(
                "UPDATE_INTERVAL_MS",
                get("UPDATE_INTERVAL_MS", DEFAULT_UPDATE_INTERVAL_MS),
                int,
            ),
            display_index=_parse_number("DISPLAY_INDEX", get("DISPLAY_INDEX", 0), int),
            use_hs_color=_parse_bool("USE_HS_COLOR", get("USE_HS_COLOR", False)),
            restore_on_stop=_parse_bool(
                "RESTORE_ON_STOP", get("RESTORE_ON_STOP", False)
            ),
            color_log_file=str(get("COLOR_LOG_FILE", COLOR_LOG_FILE)),
            screenshot_file=str(get("SCREENSHOT_FILE", SCREENSHOT_FILE)),
            log_level=str(get("LOG_LEVEL", "INFO")).upper(),
            port=_parse_number("FLASK_PORT", get("FLASK_PORT", 8000), int),
        )

    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Use this at startup. Reads a .env file from the working directory, then the environment."""
        load_dotenv(find_dotenv(usecwd=True))
        return cls.from_dict(os.environ)

    def to_dict(self) -> dict:
        return {
            "ha_url": self.ha_url,
            "ha_token": mask_token(self.ha_token) if self.ha_token else "",
            "led_entity": self.led_entity,
            "export_json": self.export_json,
            "export_screenshot": self.export_screenshot,
            "color_change_threshold": self.color_change_threshold,
            "update_interval_ms": self.update_interval_ms,
            "display_index": self.display_index,
            "use_hs_color": self.use_hs_color,
            "restore_on_stop": self.restore_on_stop,
            "color_log_file": self.color_log_file,
            "screenshot_file": self.screenshot_file,
            "log_level": self.log_level,
        }

    def log_summary(self, logger: logging.Logger) -> None:
        logger.info(
            f"Config loaded: HA_URL={self.ha_url}, LED_ENTITY={self.led_entity}, "
            f"EXPORT_JSON={self.export_json}, EXPORT_SCREENSHOT={self.export_screenshot}, "
            f"COLOR_CHANGE_THRESHOLD={self.color_change_threshold:.2f}, "
            f"UPDATE_INTERVAL_MS={self.update_interval_ms}, "
            f"HA_TOKEN={mask_token(self.ha_token)}"
        )
