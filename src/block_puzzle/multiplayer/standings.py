from __future__ import annotations

from typing import Iterable, Iterator, List, NamedTuple

from block_puzzle.game.errors import ProtocolError


class PlayerStanding(NamedTuple):
    name: str
    score: int
    status: str  # remaining lives, or a server status such as "DEAD"

    @classmethod
    def parse(cls, record: str) -> "PlayerStanding":
        parts = record.strip().split(":")
        if len(parts) != 3:
            raise ProtocolError(f"malformed standing record {record!r}")
        name, score, status = parts
        try:
            return cls(name, int(score), status)
        except ValueError:
            raise ProtocolError(f"malformed standing record {record!r}") from None


class Standings:
    """Scoreboard of every player in the channel, highest score first."""

    def __init__(self) -> None:
        self._players: List[PlayerStanding] = []

    def replace(self, players: Iterable[PlayerStanding]) -> None:
        self._players = sorted(players, key=lambda p: p.score, reverse=True)

    def find(self, name: str) -> PlayerStanding | None:
        for player in self._players:
            if player.name == name:
                return player
        return None

    def leader(self) -> PlayerStanding | None:
        return self._players[0] if self._players else None

    def as_list(self) -> List[PlayerStanding]:
        return list(self._players)

    def __iter__(self) -> Iterator[PlayerStanding]:
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)
