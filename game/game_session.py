"""
Game session orchestration: reset handshake, move submission and the
computer-vs-computer loop
"""
import asyncio
import logging
import random
import time
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, Dict, List, Optional, Any

from pydantic import BaseModel

from game.choice_codec import move_label, move_to_wire
from game.errors import ExchangeError, ProtocolTimeout
from game.protocol_client import ProtocolClient
from game.rate_limiter import RateLimiter
from game.round_state import RoundState
from models.game_models import (
    ErrorKind, EventKind, GameMode, Move, OperationResult, Outcome, OutcomeKind,
    PlayerId, RoundRecord, SessionEvent, SessionState
)
from strategies.player_strategies import choose_move_random
from utils.line_channel import LineChannel
from utils.transcript import ExchangeTranscript

logger = logging.getLogger(__name__)

HANDSHAKE_TIMEOUT = 2.0
MOVE_TIMEOUT = 2.0
COMPUTER_DELAY = 0.5
FIRST_MOVE_DELAY = 0.3
SECOND_MOVE_DELAY = 0.5


class SessionTiming(BaseModel):
    """Deadlines and pacing delays, in seconds"""
    handshake_timeout: float = HANDSHAKE_TIMEOUT
    move_timeout: float = MOVE_TIMEOUT
    computer_delay: float = COMPUTER_DELAY
    first_move_delay: float = FIRST_MOVE_DELAY
    second_move_delay: float = SECOND_MOVE_DELAY


SessionListener = Callable[[SessionEvent], None]


class GameSession:
    """Owns the round state and the arbiter channel for one client"""

    def __init__(self, timing: Optional[SessionTiming] = None,
                 rate_limiter: Optional[RateLimiter] = None,
                 transcript: Optional[ExchangeTranscript] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.timing = timing or SessionTiming()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.transcript = transcript or ExchangeTranscript(None)
        self.rng = rng or random.Random()
        self.clock = clock

        self.state = SessionState.IDLE
        self.mode = GameMode.PLAYER_VS_COMPUTER
        self.round_state = RoundState()
        self.protocol: Optional[ProtocolClient] = None
        self.round_history: List[RoundRecord] = []

        self.listeners: List[SessionListener] = []
        self.recent_events: Deque[SessionEvent] = deque(maxlen=100)

        self._loop_task: Optional[asyncio.Task] = None
        self._cancel_event: Optional[asyncio.Event] = None
        # Held from a submission until its round is resolved
        self._submit_lock = asyncio.Lock()
        self._channel_failed = False

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    # Notifications

    def subscribe(self, listener: SessionListener):
        self.listeners.append(listener)

    def _emit(self, kind: EventKind, message: str = "", **fields):
        event = SessionEvent(
            kind=kind,
            message=message,
            timestamp=datetime.now(timezone.utc).isoformat(),
            **fields
        )
        self.recent_events.append(event)
        for listener in list(self.listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Session listener failed on {kind.value}: {e}", exc_info=True)

    def _diagnostic(self, error: ErrorKind, message: str) -> OperationResult:
        logger.warning(f"{error.value}: {message}")
        self._emit(EventKind.DIAGNOSTIC, message, error=error)
        return OperationResult.failure(error, message)

    def _set_idle(self, message: str):
        if self.state is SessionState.ACTIVE:
            self.state = SessionState.IDLE
            self._request_loop_stop()
            self._emit(EventKind.SESSION_INACTIVE, message)

    # Collaborator API

    async def start_game(self, channel: Optional[LineChannel], mode: GameMode) -> OperationResult:
        """
        Take ownership of an open channel and run the reset handshake.

        On acknowledgement the session becomes active with empty history and a
        fresh round; for computer-vs-computer the autonomous loop is started.
        On any failure the session is idle and history is left untouched.
        A channel whose earlier exchange failed is closed and refused.

        Args:
            channel: Open LineChannel to the arbiter
            mode: Game mode for this session

        Returns:
            OperationResult describing success or the failure kind
        """
        if channel is None:
            return self._diagnostic(ErrorKind.CHANNEL_UNAVAILABLE, "Please select a channel to the arbiter.")

        await self.cancel_autonomous_play()
        async with self._submit_lock:
            return await self._start_locked(channel, mode)

    async def _start_locked(self, channel: LineChannel, mode: GameMode) -> OperationResult:
        if self._channel_failed and self.protocol is not None and self.protocol.channel is channel:
            # A reply may still arrive late on this channel; it cannot be resynchronized
            self._release_channel()
            return self._diagnostic(ErrorKind.CHANNEL_UNAVAILABLE,
                                    "Channel failed during an earlier exchange; open a new one.")

        self._release_channel(keep=channel)
        if self.protocol is None:
            self.protocol = ProtocolClient(channel, self.transcript)
            self._channel_failed = False

        try:
            acknowledged = await self.protocol.reset(self.timing.handshake_timeout)
        except ExchangeError as e:
            self._channel_failed = True
            self._set_idle("Game halted: arbiter exchange failed")
            return self._diagnostic(self._error_kind(e), str(e))

        if not acknowledged:
            self._set_idle("Game halted: reset not acknowledged")
            return self._diagnostic(ErrorKind.HANDSHAKE_FAILURE, "Failed to reset the game.")

        self.mode = mode
        self.round_history.clear()
        self.round_state.reset()
        self.rate_limiter.reset()
        self.state = SessionState.ACTIVE
        logger.info(f"Game started in {mode.value} mode")
        self._emit(EventKind.SESSION_ACTIVE, f"Game started ({mode.value})",
                   active_player=self.round_state.active_player)

        if mode is GameMode.COMPUTER_VS_COMPUTER:
            self._cancel_event = asyncio.Event()
            self._loop_task = asyncio.create_task(self._play_computer_game(self._cancel_event))

        return OperationResult.success(f"Game started ({mode.value})")

    async def submit_human_choice(self, player: PlayerId, move: Move,
                                  now: Optional[float] = None) -> OperationResult:
        """Accept a move from a human seat, then let the computer answer in PvC"""
        async with self._submit_lock:
            if not self.is_active:
                return OperationResult.failure(ErrorKind.SESSION_INACTIVE, "No game in progress.")
            if self.mode.is_computer(player):
                return OperationResult.failure(ErrorKind.NOT_YOUR_TURN,
                                               f"Player {player.value} is computer-controlled.")
            if player is not self.round_state.active_player:
                return OperationResult.failure(ErrorKind.NOT_YOUR_TURN,
                                               f"It is player {self.round_state.active_player.value}'s turn.")

            now = self.clock() if now is None else now
            if not self.rate_limiter.allow(now):
                return OperationResult.failure(ErrorKind.RATE_LIMITED, "Moves are coming in too fast.")

            result = await self._submit_locked(player, move)
            if not result.ok:
                return result

        next_player = self.round_state.active_player
        if self.is_active and self.mode is GameMode.PLAYER_VS_COMPUTER and self.mode.is_computer(next_player):
            return await self._make_computer_move(next_player)
        return result

    async def submit_choice(self, player: PlayerId, move: Move) -> OperationResult:
        """
        Record a choice and, once both players have chosen, resolve the round with the arbiter.

        Submissions are handled one at a time: a choice arriving while a round
        is being resolved waits for that round's outcome, and is refused if
        that outcome ended the session.
        """
        async with self._submit_lock:
            return await self._submit_locked(player, move)

    async def _submit_locked(self, player: PlayerId, move: Move) -> OperationResult:
        if not self.is_active:
            return OperationResult.failure(ErrorKind.SESSION_INACTIVE, "No game in progress.")

        self.round_state.submit(player, move)
        logger.info(f"Player {player.value} chose {move_label(move)}")
        self._emit(EventKind.TURN_CHANGED, f"Current player: {self.round_state.active_player.value}",
                   active_player=self.round_state.active_player)

        pair = self.round_state.take_both_if_ready()
        if pair is None:
            return OperationResult.success("Choice recorded")
        return await self._resolve_round(*pair)

    async def cancel_autonomous_play(self) -> OperationResult:
        task = self._loop_task
        self._request_loop_stop()
        if task is not None and task is not asyncio.current_task():
            await task
        self._loop_task = None
        return OperationResult.success("Autonomous play stopped")

    async def stop_game(self) -> OperationResult:
        await self.cancel_autonomous_play()
        async with self._submit_lock:
            self._set_idle("Game stopped")
            self._release_channel()
        return OperationResult.success("Game stopped")

    def get_round_history_snapshot(self) -> List[RoundRecord]:
        return list(self.round_history)

    def status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "game_mode": self.mode.value,
            "active_player": self.round_state.active_player.value,
            "rounds_played": len(self.round_history),
            "autonomous_play": self._loop_task is not None and not self._loop_task.done()
        }

    # Round resolution

    async def _resolve_round(self, choice_one: Move, choice_two: Move) -> OperationResult:
        try:
            outcome = await self.protocol.send_choices(
                move_to_wire(choice_one), move_to_wire(choice_two), self.timing.move_timeout
            )
        except ExchangeError as e:
            self._channel_failed = True
            self._set_idle("Game halted: arbiter exchange failed")
            return self._diagnostic(self._error_kind(e), str(e))

        if outcome.is_semantic_error:
            return self._diagnostic(ErrorKind.SEMANTIC_PROTOCOL_ERROR, outcome.describe())

        record = self._record_round(choice_one, choice_two, outcome)
        if outcome.kind == OutcomeKind.GAME_WON:
            self._game_over(outcome, record)
        else:
            self._emit(EventKind.ROUND_COMPLETED, self._round_summary(record), record=record)
        return OperationResult.success(record.round_result)

    def _record_round(self, choice_one: Move, choice_two: Move, outcome: Outcome) -> RoundRecord:
        record = RoundRecord(
            round_number=len(self.round_history) + 1,
            player_one_move=move_label(choice_one),
            player_two_move=move_label(choice_two),
            round_result=outcome.describe()
        )
        self.round_history.append(record)
        logger.info(f"Round #{record.round_number}: {record.player_one_move} vs "
                    f"{record.player_two_move} => {record.round_result}")
        return record

    def _game_over(self, outcome: Outcome, record: RoundRecord):
        self.state = SessionState.IDLE
        self._request_loop_stop()
        self._emit(EventKind.ROUND_COMPLETED, self._round_summary(record), record=record)
        self._emit(EventKind.GAME_OVER, record.round_result, record=record, winner=outcome.player)
        self._emit(EventKind.SESSION_INACTIVE, "Game over")

    @staticmethod
    def _round_summary(record: RoundRecord) -> str:
        return (f"[ ROUND #{record.round_number} COMPLETED ] "
                f"PLAYER ONE => {record.player_one_move}; "
                f"PLAYER TWO => {record.player_two_move}; "
                f"OUTCOME => {record.round_result}")

    @staticmethod
    def _error_kind(error: ExchangeError) -> ErrorKind:
        if isinstance(error, ProtocolTimeout):
            return ErrorKind.PROTOCOL_TIMEOUT
        return ErrorKind.TRANSPORT_ERROR

    # Computer players

    async def _make_computer_move(self, player: PlayerId) -> OperationResult:
        await asyncio.sleep(self.timing.computer_delay)
        async with self._submit_lock:
            if not self.is_active:
                return OperationResult.failure(ErrorKind.SESSION_INACTIVE, "No game in progress.")
            if player is not self.round_state.active_player:
                return OperationResult.failure(ErrorKind.NOT_YOUR_TURN,
                                               f"It is player {self.round_state.active_player.value}'s turn.")
            return await self._submit_locked(player, choose_move_random(self.rng))

    async def _play_computer_game(self, cancel: asyncio.Event):
        """Both seats pick at random, paced by short delays, until the game ends or is cancelled"""
        logger.info("Computer game loop started")
        try:
            while self.is_active and not cancel.is_set():
                if await self._pause(cancel, self.timing.first_move_delay) or not self.is_active:
                    break
                await self.submit_choice(PlayerId.ONE, choose_move_random(self.rng))

                # A cancellation here abandons the half-submitted round
                if await self._pause(cancel, self.timing.second_move_delay) or not self.is_active:
                    break
                await self.submit_choice(PlayerId.TWO, choose_move_random(self.rng))
        finally:
            logger.info("Computer game loop stopped")

    @staticmethod
    async def _pause(cancel: asyncio.Event, delay: float) -> bool:
        """Sleep for delay; True if cancellation was requested meanwhile"""
        try:
            await asyncio.wait_for(cancel.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    def _request_loop_stop(self):
        if self._cancel_event is not None:
            self._cancel_event.set()

    def _release_channel(self, keep: Optional[LineChannel] = None):
        """Close the owned channel unless it is `keep`"""
        if self.protocol is None or self.protocol.channel is keep:
            return
        self._set_idle("Channel released")
        try:
            self.protocol.close()
        except Exception as e:
            logger.error(f"Error closing channel: {e}")
        self.protocol = None
