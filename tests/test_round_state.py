from game.round_state import RoundState
from models.game_models import Move, PlayerId


def test_active_player_alternates_from_one() -> None:
    state = RoundState()
    seen = []
    for player, move in [(PlayerId.ONE, Move.ROCK), (PlayerId.TWO, Move.ROCK),
                         (PlayerId.ONE, Move.SCISSORS), (PlayerId.TWO, Move.PAPER),
                         (PlayerId.ONE, Move.PAPER)]:
        seen.append(state.active_player)
        state.submit(player, move)
        state.take_both_if_ready()
    assert seen == [PlayerId.ONE, PlayerId.TWO, PlayerId.ONE, PlayerId.TWO, PlayerId.ONE]
    assert state.active_player == PlayerId.TWO


def test_submit_reports_when_both_slots_filled() -> None:
    state = RoundState()
    assert state.submit(PlayerId.ONE, Move.ROCK) is False
    assert state.submit(PlayerId.TWO, Move.SCISSORS) is True


def test_take_both_only_when_ready_and_clears() -> None:
    state = RoundState()
    assert state.take_both_if_ready() is None

    state.submit(PlayerId.ONE, Move.PAPER)
    assert state.take_both_if_ready() is None
    assert state.pending(PlayerId.ONE) == Move.PAPER

    state.submit(PlayerId.TWO, Move.ROCK)
    assert state.take_both_if_ready() == (Move.PAPER, Move.ROCK)
    assert state.is_empty
    assert state.take_both_if_ready() is None


def test_resubmitting_same_seat_overwrites_pending_choice() -> None:
    state = RoundState()
    state.submit(PlayerId.ONE, Move.ROCK)
    state.submit(PlayerId.ONE, Move.SCISSORS)
    assert state.pending(PlayerId.ONE) == Move.SCISSORS
    assert state.pending(PlayerId.TWO) is None


def test_reset_restores_player_one_and_clears_slots() -> None:
    state = RoundState()
    state.submit(PlayerId.ONE, Move.ROCK)
    state.reset()
    assert state.active_player == PlayerId.ONE
    assert state.is_empty


def test_turn_alternates_even_when_same_seat_submits_twice() -> None:
    state = RoundState()
    seen = []
    for player in [PlayerId.ONE, PlayerId.ONE, PlayerId.TWO]:
        state.submit(player, Move.ROCK)
        seen.append(state.active_player)
    assert seen == [PlayerId.TWO, PlayerId.ONE, PlayerId.TWO]
