"""
Conversion between moves, wire integers and display labels
"""
from typing import Optional, Union

from models.game_models import Move


MOVE_LABELS = {
    0: "Rock",
    1: "Paper",
    2: "Scissors",
}


def move_to_wire(move: Move) -> int:
    return int(move.value)


def wire_to_label(value: Optional[int]) -> str:
    """Label for a wire integer: "None" when absent, "Unknown" outside 0..2"""
    if value is None:
        return "None"
    return MOVE_LABELS.get(value, "Unknown")


def move_label(move: Optional[Move]) -> str:
    return wire_to_label(None if move is None else move_to_wire(move))


def parse_move(value: Union[str, int]) -> Move:
    """
    Parse a move given as a wire integer, a digit string or a name.

    Names are case-insensitive and may be abbreviated to their first letter
    ("r", "p", "s").

    Raises:
        ValueError: if the value does not name a move
    """
    if isinstance(value, Move):
        return value
    if isinstance(value, int):
        return Move(value)

    text = value.strip().lower()
    if text.isdigit():
        return Move(int(text))
    for wire, label in MOVE_LABELS.items():
        name = label.lower()
        if text == name or text == name[0]:
            return Move(wire)
    raise ValueError(f"Unknown move: {value!r}")
