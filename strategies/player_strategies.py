"""
Computer player strategy for Rock-Paper-Scissors
"""
import random
from typing import Optional

from models.game_models import Move


def choose_move_random(rng: Optional[random.Random] = None) -> Move:
    """Random strategy: uniform draw over rock, paper and scissors"""
    return (rng or random).choice(list(Move))
