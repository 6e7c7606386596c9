from __future__ import annotations

from typing import Callable, Dict

from blinker import Signal


class EventBus:
    """Simple event bus leveraging blinker Signal objects.

    Handlers are called as ``fn(sender, **payload)`` in subscription order.
    """

    def __init__(self) -> None:
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Callable) -> Callable:
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so lambdas and bound methods of short-lived objects keep receiving events
        sig.connect(fn, weak=False)
        return fn

    def unsubscribe(self, name: str, fn: Callable) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, sender=None, **payload) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.send(sender, **payload)


# ============================================================================
# PIECES
# ============================================================================
EVENT_PIECES_CHANGED = "pieces_changed"        # payload: current=GamePiece, following=GamePiece
EVENT_PIECE_ROTATED = "piece_rotated"          # payload: piece=GamePiece
EVENT_PIECE_PLACED = "piece_placed"            # payload: x, y, piece=GamePiece
EVENT_PLACEMENT_FAILED = "placement_failed"    # payload: x, y


# ============================================================================
# SCORING & PROGRESSION
# ============================================================================
EVENT_LINES_CLEARED = "lines_cleared"          # payload: lines=int, cells=frozenset[(x,y)]
EVENT_LEVEL_UP = "level_up"                    # payload: level=int
EVENT_LIFE_LOST = "life_lost"                  # payload: lives=int
EVENT_GAME_LOST = "game_lost"                  # payload: score=int


# ============================================================================
# TIMING
# ============================================================================
EVENT_TIMER_STARTED = "timer_started"          # payload: delay=int (milliseconds)


# ============================================================================
# MULTIPLAYER
# ============================================================================
EVENT_STANDINGS_CHANGED = "standings_changed"  # payload: standings=list[PlayerStanding]
EVENT_HISCORES_RECEIVED = "hiscores_received"  # payload: scores=HighScoreTable
