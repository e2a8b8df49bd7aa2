"""
Request bodies for the game client HTTP API
"""
from typing import Optional, Union
from pydantic import BaseModel

from models.game_models import GameMode, PlayerId


class StartGameRequest(BaseModel):
    """Missing fields are taken from the settings file"""
    port: Optional[str] = None
    game_mode: Optional[GameMode] = None


class ChoiceRequest(BaseModel):
    player: PlayerId
    move: Union[int, str]
