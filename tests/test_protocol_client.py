import asyncio
import json

import pytest

from fakes import HANG, ScriptedChannel
from game.errors import ProtocolTimeout, TransportError
from game.protocol_client import (
    ProtocolClient, build_choice_message, build_reset_message, classify, is_reset_acknowledged
)
from models.game_models import OutcomeKind, PlayerId
from utils.transcript import ExchangeTranscript


def test_message_layouts() -> None:
    assert build_reset_message() == "reset=1"
    assert build_choice_message(0, 2) == "choices=playerOne=0;playerTwo=2"


def test_reset_acknowledgement_token() -> None:
    assert is_reset_acknowledged("ok;game_reset;")
    assert not is_reset_acknowledged("ok;")
    assert not is_reset_acknowledged(None)


@pytest.mark.parametrize("reply, kind, player", [
    ("one_won_round;", OutcomeKind.ROUND_WON, PlayerId.ONE),
    ("two_won_round;", OutcomeKind.ROUND_WON, PlayerId.TWO),
    ("draw;", OutcomeKind.DRAW, None),
    ("one_won_game;", OutcomeKind.GAME_WON, PlayerId.ONE),
    ("two_won_game;", OutcomeKind.GAME_WON, PlayerId.TWO),
    ("invalid_move", OutcomeKind.INVALID_MOVE, None),
    ("error_parsing_xml", OutcomeKind.PARSE_ERROR, None),
])
def test_classify_tokens(reply, kind, player) -> None:
    outcome = classify(reply)
    assert outcome.kind == kind
    assert outcome.player == player


def test_game_won_takes_precedence_over_draw_and_round() -> None:
    assert classify("draw;one_won_game;").kind == OutcomeKind.GAME_WON
    outcome = classify("two_won_round;two_won_game;")
    assert outcome.kind == OutcomeKind.GAME_WON
    assert outcome.player == PlayerId.TWO


def test_draw_takes_precedence_over_round_won() -> None:
    assert classify("one_won_round;draw").kind == OutcomeKind.DRAW


def test_error_tokens_take_precedence_over_outcomes() -> None:
    assert classify("one_won_game;invalid_move").kind == OutcomeKind.INVALID_MOVE
    assert classify("draw;error_parsing_xml").kind == OutcomeKind.PARSE_ERROR


def test_unrecognized_reply_keeps_raw_text() -> None:
    outcome = classify("hello there")
    assert outcome.kind == OutcomeKind.UNRECOGNIZED
    assert outcome.raw == "hello there"
    assert outcome.is_semantic_error


def test_exchange_writes_then_reads_one_line(tmp_path) -> None:
    channel = ScriptedChannel(["ok;game_reset;"])
    transcript = ExchangeTranscript(tmp_path / "log.jsonl")
    client = ProtocolClient(channel, transcript)

    assert asyncio.run(client.reset(timeout=1.0)) is True
    assert channel.written == ["reset=1"]

    entries = [json.loads(line) for line in (tmp_path / "log.jsonl").read_text().splitlines()]
    assert [(e["direction"], e["message"]) for e in entries] == [
        ("outgoing", "reset=1"), ("incoming", "ok;game_reset;")
    ]


def test_send_choices_classifies_reply() -> None:
    channel = ScriptedChannel(["one_won_round;"])
    client = ProtocolClient(channel)
    outcome = asyncio.run(client.send_choices(0, 2, timeout=1.0))
    assert outcome.kind == OutcomeKind.ROUND_WON
    assert channel.written == ["choices=playerOne=0;playerTwo=2"]


def test_exchange_timeout_raises_protocol_timeout() -> None:
    channel = ScriptedChannel([HANG])
    client = ProtocolClient(channel)

    async def scenario():
        try:
            await client.exchange("reset=1", timeout=0.05)
        finally:
            channel.close()

    with pytest.raises(ProtocolTimeout):
        asyncio.run(scenario())


def test_channel_failure_raises_transport_error() -> None:
    channel = ScriptedChannel([OSError("device unplugged")])
    client = ProtocolClient(channel)
    with pytest.raises(TransportError):
        asyncio.run(client.exchange("reset=1", timeout=1.0))


def test_exchanges_are_serialized() -> None:
    channel = ScriptedChannel(["draw", "one_won_round"])
    client = ProtocolClient(channel)

    async def scenario():
        return await asyncio.gather(
            client.exchange("choices=playerOne=0;playerTwo=0", timeout=1.0),
            client.exchange("choices=playerOne=0;playerTwo=2", timeout=1.0),
        )

    assert asyncio.run(scenario()) == ["draw", "one_won_round"]
    assert channel.written == ["choices=playerOne=0;playerTwo=0", "choices=playerOne=0;playerTwo=2"]
