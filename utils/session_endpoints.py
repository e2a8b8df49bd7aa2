"""
FastAPI endpoint handlers for the game client
"""
import logging

from fastapi import HTTPException

from models.api_models import ChoiceRequest, StartGameRequest

logger = logging.getLogger(__name__)


async def start_game(request: StartGameRequest, game_client):
    """Start a game; failures are reported in the result body"""
    try:
        result = await game_client.start(request)
        return result.model_dump(mode="json")
    except Exception as e:
        logger.error(f"Error starting game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


async def submit_choice(request: ChoiceRequest, game_client):
    try:
        result = await game_client.choose(request)
        return result.model_dump(mode="json")
    except Exception as e:
        logger.error(f"Error submitting choice: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


async def cancel_autonomous_play(game_client):
    try:
        result = await game_client.cancel()
        return result.model_dump(mode="json")
    except Exception as e:
        logger.error(f"Error cancelling autonomous play: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


async def stop_game(game_client):
    try:
        result = await game_client.stop()
        return result.model_dump(mode="json")
    except Exception as e:
        logger.error(f"Error stopping game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


def get_status(game_client):
    status = game_client.session.status()
    status["history"] = game_client.history()
    return status
