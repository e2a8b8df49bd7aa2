"""
Request/reply protocol spoken with the arbiter
"""
import asyncio
import logging
from typing import Optional

from game.errors import ExchangeError, ProtocolTimeout, TransportError
from models.game_models import Outcome, OutcomeKind, PlayerId
from utils.line_channel import LineChannel
from utils.transcript import ExchangeTranscript

logger = logging.getLogger(__name__)

RESET_MESSAGE = "reset=1"
RESET_ACK_TOKEN = "game_reset"

# Checked top to bottom; the first token found in the reply wins.
# Error tokens come first, game-level outcomes before draw before round-level ones.
REPLY_TOKENS = [
    ("invalid_move", OutcomeKind.INVALID_MOVE, None),
    ("error_parsing_xml", OutcomeKind.PARSE_ERROR, None),
    ("one_won_game", OutcomeKind.GAME_WON, PlayerId.ONE),
    ("two_won_game", OutcomeKind.GAME_WON, PlayerId.TWO),
    ("draw", OutcomeKind.DRAW, None),
    ("one_won_round", OutcomeKind.ROUND_WON, PlayerId.ONE),
    ("two_won_round", OutcomeKind.ROUND_WON, PlayerId.TWO),
]


def build_reset_message() -> str:
    return RESET_MESSAGE


def build_choice_message(choice_one: int, choice_two: int) -> str:
    """Encode one round as e.g. "choices=playerOne=0;playerTwo=2" """
    return f"choices=playerOne={choice_one};playerTwo={choice_two}"


def is_reset_acknowledged(reply: Optional[str]) -> bool:
    return reply is not None and RESET_ACK_TOKEN in reply


def classify(reply: str) -> Outcome:
    """Map an arbiter reply to an Outcome by ordered substring match"""
    for token, kind, player in REPLY_TOKENS:
        if token in reply:
            return Outcome(kind=kind, player=player, raw=reply)
    return Outcome(kind=OutcomeKind.UNRECOGNIZED, raw=reply)


class ProtocolClient:
    """Performs one write followed by one bounded read against a LineChannel"""

    def __init__(self, channel: LineChannel, transcript: Optional[ExchangeTranscript] = None):
        self.channel = channel
        self.transcript = transcript or ExchangeTranscript(None)
        self._lock = asyncio.Lock()

    async def exchange(self, message: str, timeout: float) -> str:
        """
        Send one request line and wait for its reply.

        Only one exchange runs at a time; concurrent callers queue on the lock.

        Args:
            message: Request line without terminator
            timeout: Seconds to wait for the reply line

        Returns:
            str: The reply line

        Raises:
            ProtocolTimeout: no reply within timeout
            TransportError: the channel failed
        """
        async with self._lock:
            self.transcript.log_message(message, "outgoing")
            logger.info(f"Sending '{message}'")
            try:
                await asyncio.to_thread(self.channel.write_line, message)
                reply = await asyncio.wait_for(
                    asyncio.to_thread(self.channel.read_line),
                    timeout=timeout
                )
            except asyncio.TimeoutError as e:
                logger.error(f"Timeout waiting {timeout}s for reply to '{message}'")
                raise ProtocolTimeout(f"Arbiter response timed out after {timeout}s") from e
            except ExchangeError:
                raise
            except Exception as e:
                logger.error(f"Error communicating with arbiter: {e}")
                raise TransportError(f"Error communicating with arbiter: {e}") from e

            self.transcript.log_message(reply, "incoming")
            logger.info(f"Received '{reply}'")
            return reply

    async def reset(self, timeout: float) -> bool:
        """Run the reset handshake, returning whether it was acknowledged"""
        reply = await self.exchange(build_reset_message(), timeout)
        return is_reset_acknowledged(reply)

    async def send_choices(self, choice_one: int, choice_two: int, timeout: float) -> Outcome:
        reply = await self.exchange(build_choice_message(choice_one, choice_two), timeout)
        return classify(reply)

    def close(self):
        self.channel.close()
