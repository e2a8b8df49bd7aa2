#!/usr/bin/env python3
"""
Game Client HTTP Server for Rock-Paper-Scissors
Relays player moves to the arbiter over a line channel and reports round and game results
"""
import argparse
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from game.game_session import SessionTiming
from models.api_models import ChoiceRequest, StartGameRequest
from utils import session_endpoints
from utils.game_client_class import GameClient
from utils.settings_store import DEFAULT_CONFIG_PATH


# Global game client instance
game_client: Optional[GameClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown"""
    if game_client:
        game_client.logger.info("Game client ready")
    yield
    if game_client:
        game_client.logger.info("Shutting down game client...")
        await game_client.stop()


app = FastAPI(title="RPS Game Client", version="1.0.0", lifespan=lifespan)


NOT_INITIALIZED = {"error": "Game client not initialized"}


@app.post("/game/start")
async def start_game(request: StartGameRequest):
    """Open the arbiter channel and run the reset handshake"""
    if game_client is None:
        return NOT_INITIALIZED
    return await session_endpoints.start_game(request, game_client)


@app.post("/game/choice")
async def submit_choice(request: ChoiceRequest):
    """Submit a human player's move"""
    if game_client is None:
        return NOT_INITIALIZED
    return await session_endpoints.submit_choice(request, game_client)


@app.post("/game/cancel")
async def cancel_autonomous_play():
    """Stop the computer-vs-computer loop"""
    if game_client is None:
        return NOT_INITIALIZED
    return await session_endpoints.cancel_autonomous_play(game_client)


@app.post("/game/stop")
async def stop_game():
    """End the game and release the channel"""
    if game_client is None:
        return NOT_INITIALIZED
    return await session_endpoints.stop_game(game_client)


@app.get("/game/status")
async def get_status():
    if game_client is None:
        return NOT_INITIALIZED
    return session_endpoints.get_status(game_client)


@app.get("/game/history")
async def get_history():
    if game_client is None:
        return NOT_INITIALIZED
    return {"rounds": game_client.history()}


@app.get("/game/events")
async def get_events(limit: int = 20):
    if game_client is None:
        return NOT_INITIALIZED
    return {"events": game_client.events(limit)}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "session_state": game_client.session.state.value if game_client else None
    }


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Rock-Paper-Scissors game client")
    parser.add_argument("--host", type=str, default="localhost", help="HTTP server host (default: localhost)")
    parser.add_argument("--port", type=int, default=8200, help="HTTP server port (default: 8200)")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG_PATH,
                        help=f"Settings file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--transcript", type=str, default="jsonl/exchanges.jsonl",
                        help="JSON Lines exchange log (default: jsonl/exchanges.jsonl)")
    parser.add_argument("--move-timeout", type=float, default=2.0,
                        help="Seconds to wait for an arbiter reply (default: 2.0)")

    args = parser.parse_args()

    global game_client
    timing = SessionTiming(handshake_timeout=args.move_timeout, move_timeout=args.move_timeout)
    game_client = GameClient(args.config, args.transcript, timing=timing)

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
