from __future__ import annotations

import itertools
from typing import Iterable

from block_puzzle.game import Game, GamePiece
from block_puzzle.game.events import EventBus


class ScriptedGame(Game):
    """Game that draws pieces from a fixed sequence instead of the rng."""

    def __init__(self, pieces: Iterable[int], **kwargs):
        super().__init__(**kwargs)
        self._script = iter(pieces)

    def spawn_piece(self) -> GamePiece:
        return GamePiece.create(next(self._script))


def dots():
    return itertools.repeat(3)


class Recorder:
    def __init__(self, bus: EventBus, *names: str) -> None:
        self.calls: list[tuple[str, dict]] = []
        for name in names:
            bus.subscribe(name, self._handler(name))

    def _handler(self, name: str):
        def handle(sender, **payload):
            self.calls.append((name, payload))
        return handle

    def named(self, name: str) -> list[dict]:
        return [payload for n, payload in self.calls if n == name]

    def names(self) -> list[str]:
        return [n for n, _ in self.calls]


class FakeChannel:
    def __init__(self) -> None:
        self.sent: list[str] = []

    def send(self, message: str) -> None:
        self.sent.append(message)

    def count(self, message: str) -> int:
        return sum(1 for m in self.sent if m == message)
