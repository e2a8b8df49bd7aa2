"""
GameClient class implementation
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from game.choice_codec import parse_move
from game.errors import ChannelUnavailable
from game.game_session import GameSession, SessionTiming
from models.api_models import ChoiceRequest, StartGameRequest
from models.game_models import ErrorKind, OperationResult, SessionEvent
from utils.line_channel import LineChannel, open_channel
from utils.settings_store import DEFAULT_CONFIG_PATH, load_settings, save_settings
from utils.transcript import ExchangeTranscript


class GameClient:
    """Connects the HTTP surface, the settings file and the game session"""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH,
                 transcript_path: Optional[str] = "jsonl/exchanges.jsonl",
                 channel_factory: Callable[[str], LineChannel] = open_channel,
                 timing: Optional[SessionTiming] = None):
        self.config_path = config_path
        self.channel_factory = channel_factory
        self.session = GameSession(timing=timing, transcript=ExchangeTranscript(transcript_path))
        self.setup_logging()
        self.session.subscribe(self.log_event)

    def setup_logging(self):
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        self.logger = logging.getLogger("GameClient")

    def log_event(self, event: SessionEvent):
        self.logger.info(f"[{event.kind.value}] {event.message}")

    async def start(self, request: StartGameRequest) -> OperationResult:
        """Open the channel named in the request or settings file and start a game"""
        settings = load_settings(self.config_path)
        port = request.port or settings.port
        mode = request.game_mode or settings.game_mode

        if not port:
            return await self.session.start_game(None, mode)

        try:
            channel = await asyncio.to_thread(self.channel_factory, port)
        except ChannelUnavailable as e:
            self.logger.error(str(e))
            return OperationResult.failure(ErrorKind.CHANNEL_UNAVAILABLE, str(e))

        result = await self.session.start_game(channel, mode)
        if result.ok:
            save_settings(settings.model_copy(update={"port": port, "game_mode": mode}), self.config_path)
        return result

    async def choose(self, request: ChoiceRequest) -> OperationResult:
        try:
            move = parse_move(request.move)
        except ValueError as e:
            return OperationResult.failure(ErrorKind.INVALID_INPUT, str(e))
        return await self.session.submit_human_choice(request.player, move)

    async def cancel(self) -> OperationResult:
        return await self.session.cancel_autonomous_play()

    async def stop(self) -> OperationResult:
        return await self.session.stop_game()

    def history(self) -> List[Dict[str, Any]]:
        return [record.model_dump() for record in self.session.get_round_history_snapshot()]

    def events(self, limit: int = 20) -> List[Dict[str, Any]]:
        recent = list(self.session.recent_events)[-limit:] if limit > 0 else []
        return [event.model_dump(mode="json") for event in recent]
