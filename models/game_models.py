"""
Data Models for the Rock-Paper-Scissors arbiter client
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class Move(int, Enum):
    """Move values, equal to their wire integers"""
    ROCK = 0
    PAPER = 1
    SCISSORS = 2


class PlayerId(str, Enum):
    ONE = "one"
    TWO = "two"

    @property
    def other(self) -> "PlayerId":
        return PlayerId.TWO if self is PlayerId.ONE else PlayerId.ONE


class GameMode(str, Enum):
    """Game modes, valued by their persisted codes"""
    PLAYER_VS_PLAYER = "PvP"
    PLAYER_VS_COMPUTER = "PvC"
    COMPUTER_VS_COMPUTER = "CvC"

    def is_computer(self, player: PlayerId) -> bool:
        """Whether moves for this seat are computer-sourced"""
        if self is GameMode.COMPUTER_VS_COMPUTER:
            return True
        if self is GameMode.PLAYER_VS_COMPUTER:
            return player is PlayerId.TWO
        return False


class SessionState(Enum):
    """Game session state machine"""
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"


class OutcomeKind(Enum):
    INVALID_MOVE = "INVALID_MOVE"
    PARSE_ERROR = "PARSE_ERROR"
    GAME_WON = "GAME_WON"
    DRAW = "DRAW"
    ROUND_WON = "ROUND_WON"
    UNRECOGNIZED = "UNRECOGNIZED"


class Outcome(BaseModel):
    """Classified arbiter reply"""
    kind: OutcomeKind
    player: Optional[PlayerId] = None
    raw: str = ""

    @property
    def is_semantic_error(self) -> bool:
        return self.kind in (OutcomeKind.INVALID_MOVE, OutcomeKind.PARSE_ERROR, OutcomeKind.UNRECOGNIZED)

    def describe(self) -> str:
        """Outcome label used in round history"""
        if self.kind == OutcomeKind.GAME_WON:
            return f"Player {_player_word(self.player)} wins the entire game!"
        if self.kind == OutcomeKind.ROUND_WON:
            return f"Player {_player_word(self.player)} won in round"
        if self.kind == OutcomeKind.DRAW:
            return "draw"
        if self.kind == OutcomeKind.INVALID_MOVE:
            return "Invalid move!"
        if self.kind == OutcomeKind.PARSE_ERROR:
            return "Arbiter could not parse the request."
        return f"Unexpected arbiter response: {self.raw}"


def _player_word(player: Optional[PlayerId]) -> str:
    return "One" if player is PlayerId.ONE else "Two"


class RoundRecord(BaseModel):
    """One completed round in the session history"""
    round_number: int
    player_one_move: str
    player_two_move: str
    round_result: str

    model_config = {"frozen": True}


class ErrorKind(str, Enum):
    CONFIG_ERROR = "CONFIG_ERROR"
    CHANNEL_UNAVAILABLE = "CHANNEL_UNAVAILABLE"
    HANDSHAKE_FAILURE = "HANDSHAKE_FAILURE"
    PROTOCOL_TIMEOUT = "PROTOCOL_TIMEOUT"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    SEMANTIC_PROTOCOL_ERROR = "SEMANTIC_PROTOCOL_ERROR"
    SESSION_INACTIVE = "SESSION_INACTIVE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    RATE_LIMITED = "RATE_LIMITED"
    INVALID_INPUT = "INVALID_INPUT"


class OperationResult(BaseModel):
    """Result value returned by every public session operation"""
    ok: bool
    error: Optional[ErrorKind] = None
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> "OperationResult":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "OperationResult":
        return cls(ok=False, error=error, message=message)


class EventKind(str, Enum):
    SESSION_ACTIVE = "session_active"
    SESSION_INACTIVE = "session_inactive"
    TURN_CHANGED = "turn_changed"
    ROUND_COMPLETED = "round_completed"
    GAME_OVER = "game_over"
    DIAGNOSTIC = "diagnostic"


class SessionEvent(BaseModel):
    """Notification delivered to session subscribers"""
    kind: EventKind
    message: str = ""
    timestamp: str
    record: Optional[RoundRecord] = None
    winner: Optional[PlayerId] = None
    error: Optional[ErrorKind] = None
    active_player: Optional[PlayerId] = None
