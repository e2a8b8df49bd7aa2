"""
key=value settings file holding port, baud rate and game mode
"""
import logging
from pathlib import Path
from typing import Dict, Union

from pydantic import ValidationError

from game.errors import ConfigError
from models.settings_models import GameSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.ini"

# File key -> GameSettings field
SETTINGS_KEYS = {
    "port": "port",
    "baudRate": "baud_rate",
    "gameMode": "game_mode",
}


def parse_settings_lines(text: str) -> Dict[str, str]:
    """Collect recognized key=value pairs; blank lines, unknown keys and lines without '=' are skipped"""
    values = {}
    for line in text.splitlines():
        if not line.strip() or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key in SETTINGS_KEYS:
            values[key] = value.strip()
    return values


def build_settings(values: Dict[str, str]) -> GameSettings:
    """
    Build GameSettings from raw file values.

    Each value is validated on its own; an invalid one is logged and replaced
    by its default so the rest of the file still applies.
    """
    fields = {}
    for key, raw in values.items():
        field = SETTINGS_KEYS[key]
        try:
            GameSettings(**{field: raw})
        except ValidationError as e:
            logger.warning(f"Ignoring invalid setting {key}={raw!r}: {e.errors()[0]['msg']}")
            continue
        fields[field] = raw
    return GameSettings(**fields)


def read_settings(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> GameSettings:
    """Read settings, raising ConfigError if the file exists but cannot be read"""
    path = Path(path)
    if not path.exists():
        return GameSettings()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error loading configuration from {path}: {e}") from e
    return build_settings(parse_settings_lines(text))


def load_settings(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> GameSettings:
    """Read settings, falling back to defaults on any ConfigError"""
    try:
        return read_settings(path)
    except ConfigError as e:
        logger.warning(f"{e}; using default settings")
        return GameSettings()


def save_settings(settings: GameSettings, path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> bool:
    lines = [
        f"port={settings.port}",
        f"baudRate={settings.baud_rate}",
        f"gameMode={settings.game_mode.value}",
    ]
    try:
        Path(path).write_text("\n".join(lines) + "\n", encoding="utf-8")
        return True
    except OSError as e:
        logger.error(f"Error saving configuration to {path}: {e}")
        return False
