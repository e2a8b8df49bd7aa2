#!/usr/bin/env python3
"""
Console front end for the Rock-Paper-Scissors game client
Starts a game over HTTP and reads moves from the keyboard
"""
import argparse
import logging
import sys
import time
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger("RPSConsole")

MOVE_KEYS = {"r": "rock", "p": "paper", "s": "scissors"}


class ConsoleClient:
    """Talks to the game client HTTP API"""

    def __init__(self, server_url: str):
        self.server_url = server_url.rstrip("/")

    def send(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        try:
            response = requests.request(method, self.server_url + path, json=payload, timeout=10)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"Error calling {path}: {e}")
            return None

    def start(self, port: Optional[str], mode: Optional[str]) -> Optional[Dict[str, Any]]:
        payload = {}
        if port:
            payload["port"] = port
        if mode:
            payload["game_mode"] = mode
        return self.send("POST", "/game/start", payload)

    def choose(self, player: str, move: str) -> Optional[Dict[str, Any]]:
        return self.send("POST", "/game/choice", {"player": player, "move": move})

    def status(self) -> Optional[Dict[str, Any]]:
        return self.send("GET", "/game/status")

    def stop(self) -> Optional[Dict[str, Any]]:
        return self.send("POST", "/game/stop")


def print_history(history):
    for record in history:
        print(f"  #{record['round_number']}: {record['player_one_move']} vs "
              f"{record['player_two_move']} => {record['round_result']}")


def watch_computer_game(client: ConsoleClient, poll_interval: float = 1.0):
    """Print rounds as the computer-vs-computer loop plays them"""
    shown = 0
    while True:
        status = client.status()
        if status is None:
            return
        history = status.get("history", [])
        print_history(history[shown:])
        shown = len(history)
        if status["state"] != "ACTIVE":
            return
        time.sleep(poll_interval)


def play_interactive(client: ConsoleClient):
    while True:
        status = client.status()
        if status is None or status["state"] != "ACTIVE":
            print("Game over.")
            return
        player = status["active_player"]
        key = input(f"Player {player} - [r]ock, [p]aper, [s]cissors or [q]uit: ").strip().lower()
        if key == "q":
            client.stop()
            return
        if key not in MOVE_KEYS:
            print("Unknown move.")
            continue
        result = client.choose(player, MOVE_KEYS[key])
        if result is None:
            return
        if result.get("message"):
            print(result["message"])


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Play Rock-Paper-Scissors through the game client")
    parser.add_argument("--server", type=str, default="http://localhost:8200",
                        help="Game client URL (default: http://localhost:8200)")
    parser.add_argument("--port", type=str, default=None, help="Arbiter channel as host:port (default: from settings)")
    parser.add_argument("--mode", type=str, choices=["PvP", "PvC", "CvC"], default=None,
                        help="Game mode (default: from settings)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    client = ConsoleClient(args.server)
    result = client.start(args.port, args.mode)
    if result is None or not result.get("ok"):
        print(f"Could not start game: {result.get('message') if result else 'no response'}")
        sys.exit(1)
    print(result["message"])

    status = client.status() or {}
    if status.get("game_mode") == "CvC":
        watch_computer_game(client)
    else:
        play_interactive(client)

    final = client.status()
    if final:
        print("Rounds:")
        print_history(final.get("history", []))


if __name__ == "__main__":
    main()
