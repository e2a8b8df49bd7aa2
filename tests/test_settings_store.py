import pytest

from game.errors import ConfigError
from models.game_models import GameMode
from models.settings_models import GameSettings
from utils.settings_store import load_settings, parse_settings_lines, read_settings, save_settings


def test_missing_file_gives_defaults(tmp_path) -> None:
    settings = load_settings(tmp_path / "config.ini")
    assert settings == GameSettings()
    assert settings.baud_rate == 9600
    assert settings.game_mode is GameMode.PLAYER_VS_COMPUTER


def test_reads_known_keys_and_ignores_the_rest(tmp_path) -> None:
    path = tmp_path / "config.ini"
    path.write_text("port = arbiter:7000\n\nbaudRate=57600\ncolor=blue\nnot a setting\ngameMode=CvC\n")

    settings = load_settings(path)

    assert settings.port == "arbiter:7000"
    assert settings.baud_rate == 57600
    assert settings.game_mode is GameMode.COMPUTER_VS_COMPUTER


def test_invalid_values_fall_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "config.ini"
    path.write_text("port=arbiter:7000\nbaudRate=115200\ngameMode=Solo\n")

    settings = load_settings(path)

    assert settings.port == "arbiter:7000"
    assert settings.baud_rate == 9600
    assert settings.game_mode is GameMode.PLAYER_VS_COMPUTER


def test_unreadable_file_raises_config_error_but_load_recovers(tmp_path) -> None:
    path = tmp_path / "config.ini"
    path.mkdir()
    with pytest.raises(ConfigError):
        read_settings(path)
    assert load_settings(path) == GameSettings()


def test_save_then_load(tmp_path) -> None:
    path = tmp_path / "config.ini"
    settings = GameSettings(port="localhost:9000", baud_rate=19200, game_mode=GameMode.PLAYER_VS_PLAYER)

    assert save_settings(settings, path)
    assert path.read_text().splitlines() == ["port=localhost:9000", "baudRate=19200", "gameMode=PvP"]
    assert load_settings(path) == settings


def test_value_may_contain_equals_sign() -> None:
    assert parse_settings_lines("port=a=b") == {"port": "a=b"}
