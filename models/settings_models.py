"""
Data Models for persisted client settings
"""
from pydantic import BaseModel, field_validator

from models.game_models import GameMode


SUPPORTED_BAUD_RATES = (4800, 9600, 19200, 38400, 57600)


class GameSettings(BaseModel):
    """Settings kept in the key=value configuration file"""
    port: str = ""
    baud_rate: int = 9600
    game_mode: GameMode = GameMode.PLAYER_VS_COMPUTER

    @field_validator("baud_rate")
    @classmethod
    def check_baud_rate(cls, value: int) -> int:
        if value not in SUPPORTED_BAUD_RATES:
            raise ValueError(f"Unsupported baud rate: {value}")
        return value

    @field_validator("port")
    @classmethod
    def strip_port(cls, value: str) -> str:
        return value.strip()
