"""
Turn and pending-choice tracking for a single game
"""
from typing import Optional, Tuple

from models.game_models import Move, PlayerId


class RoundState:
    """Whose turn it is and which choices are waiting to be sent"""

    def __init__(self):
        self.active_player = PlayerId.ONE
        self.pending_one: Optional[Move] = None
        self.pending_two: Optional[Move] = None

    def submit(self, player: PlayerId, move: Move) -> bool:
        """Store a choice for player, hand the turn over, report whether both slots are filled"""
        if player is PlayerId.ONE:
            self.pending_one = move
        else:
            self.pending_two = move

        self.active_player = self.active_player.other
        return self.pending_one is not None and self.pending_two is not None

    def take_both_if_ready(self) -> Optional[Tuple[Move, Move]]:
        """Return and clear both choices once both are present"""
        if self.pending_one is None or self.pending_two is None:
            return None
        pair = (self.pending_one, self.pending_two)
        self.pending_one = None
        self.pending_two = None
        return pair

    def pending(self, player: PlayerId) -> Optional[Move]:
        return self.pending_one if player is PlayerId.ONE else self.pending_two

    @property
    def is_empty(self) -> bool:
        return self.pending_one is None and self.pending_two is None

    def reset(self):
        self.active_player = PlayerId.ONE
        self.pending_one = None
        self.pending_two = None
