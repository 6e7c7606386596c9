"""Multiplayer variant: server-fed piece sequence and channel scoreboard."""

from .game import MultiplayerGame
from .protocol import Channel, parse_message
from .standings import PlayerStanding, Standings

__all__ = [
    "MultiplayerGame",
    "Channel",
    "parse_message",
    "PlayerStanding",
    "Standings",
]
