from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .events import (
    EVENT_GAME_LOST,
    EVENT_LEVEL_UP,
    EVENT_LIFE_LOST,
    EVENT_LINES_CLEARED,
    EVENT_PIECE_PLACED,
    EVENT_PIECE_ROTATED,
    EVENT_PIECES_CHANGED,
    EVENT_PLACEMENT_FAILED,
    EVENT_TIMER_STARTED,
    EventBus,
)
from .errors import PieceBufferError
from .grid import GameGrid, LineClear
from .pieces import PIECE_COUNT, GamePiece
from .rules import ScoringRules
from .scheduler import ManualScheduler, Scheduler, TimerHandle


logger = logging.getLogger(__name__)


class GameState(Enum):
    CREATED = "created"
    RUNNING = "running"
    GAME_OVER = "game_over"
    CANCELLED = "cancelled"


@dataclass
class GameConfig:
    cols: int = 5
    rows: int = 5
    starting_lives: int = 3
    random_seed: Optional[int] = None


class Game:
    """Single-player game engine.

    Owns the grid, the current and following pieces, the score/level/lives/
    multiplier counters and the per-turn countdown. Collaborators observe it
    through ``events`` and drive it with ``submit_placement``,
    ``rotate_current_piece``, ``swap_pieces`` and ``cancel``.

    Every public method must be called from the thread that owns the game;
    see ``Mailbox`` for funnelling timer and network callbacks there.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[Scheduler] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.scheduler: Scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.events = events or EventBus()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.cols, self.config.rows)

        self.state = GameState.CREATED
        self.score = 0
        self.level = 0
        self.lives = self.config.starting_lives
        self.multiplier = 1
        self.current_piece: Optional[GamePiece] = None
        self.following_piece: Optional[GamePiece] = None
        self.pieces_placed = 0
        self.lines_cleared_total = 0
        self._countdown: Optional[TimerHandle] = None

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def running(self) -> bool:
        return self.state is GameState.RUNNING

    @property
    def game_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        logger.info("Starting game")
        self.initialise()

    def initialise(self) -> None:
        logger.info("Initialising game")
        self.score = 0
        self.level = 0
        self.lives = self.config.starting_lives
        self.multiplier = 1
        self.pieces_placed = 0
        self.lines_cleared_total = 0
        self.state = GameState.RUNNING

        self.following_piece = self._draw_piece()
        self.advance_piece()

    def reset(self) -> None:
        self._stop_countdown()
        self.grid.reset()
        self.current_piece = None
        self.following_piece = None
        self.state = GameState.CREATED

    def cancel(self) -> None:
        """Stop the countdown for good; no further game events fire."""
        logger.info("Cancelling game")
        self._stop_countdown()
        if self.state is not GameState.GAME_OVER:
            self.state = GameState.CANCELLED

    # ------------------------------------------------------------------
    # Pieces
    # ------------------------------------------------------------------
    def spawn_piece(self) -> GamePiece:
        piece_id = self.rng.randrange(PIECE_COUNT)
        logger.debug("Spawning new piece: %d", piece_id)
        return GamePiece.create(piece_id)

    def _draw_piece(self) -> GamePiece:
        try:
            return self.spawn_piece()
        except PieceBufferError:
            # the piece pipeline is out of step; this session cannot continue
            logger.error("Piece supply failed, cancelling game")
            self.cancel()
            raise

    def advance_piece(self) -> None:
        logger.debug("Switching pieces")
        following = self._draw_piece()
        self.current_piece, self.following_piece = self.following_piece, following
        self.events.emit(
            EVENT_PIECES_CHANGED, self, current=self.current_piece, following=self.following_piece
        )
        self._restart_countdown()

    def rotate_current_piece(self, times: int = 1) -> None:
        if self.current_piece is None:
            return
        logger.debug("Rotating current piece %d times", times)
        self.current_piece.rotate(times)
        self.events.emit(EVENT_PIECE_ROTATED, self, piece=self.current_piece)

    def swap_pieces(self) -> None:
        if self.current_piece is None or self.following_piece is None:
            return
        logger.debug("Swapping current and following piece")
        self.current_piece, self.following_piece = self.following_piece, self.current_piece
        self.events.emit(
            EVENT_PIECES_CHANGED, self, current=self.current_piece, following=self.following_piece
        )

    # ------------------------------------------------------------------
    # Placement and scoring
    # ------------------------------------------------------------------
    def can_place(self, x: int, y: int) -> bool:
        return self.current_piece is not None and self.grid.can_place(self.current_piece, x, y)

    def submit_placement(self, x: int, y: int) -> bool:
        """Place the current piece centred at (x, y).

        Returns ``False`` and emits ``placement_failed`` without changing any
        state when the piece does not fit.
        """
        if not self.running or not self.can_place(x, y):
            logger.debug("Placement at (%d, %d) rejected", x, y)
            self.events.emit(EVENT_PLACEMENT_FAILED, self, x=x, y=y)
            return False
        piece = self.current_piece
        self.grid.place(piece, x, y)
        self.pieces_placed += 1
        self._stop_countdown()
        self.events.emit(EVENT_PIECE_PLACED, self, x=x, y=y, piece=piece)
        self.after_piece()
        return True

    def after_piece(self) -> None:
        cleared = self.grid.detect_full_lines()
        if cleared:
            self.grid.clear(cleared.cells)
        self.apply_score(cleared)
        logger.debug("%d line(s) cleared, %d blocks cleared", cleared.lines, cleared.blocks)
        self.advance_piece()

    def apply_score(self, cleared: LineClear) -> int:
        gained = self.rules.score_for_clear(cleared.lines, cleared.blocks, self.multiplier)
        self.score += gained
        if cleared.lines >= 1:
            self.multiplier += 1
            self.lines_cleared_total += cleared.lines
            self.events.emit(EVENT_LINES_CLEARED, self, lines=cleared.lines, cells=cleared.cells)
        else:
            self.multiplier = 1
        new_level = self.rules.level_for(self.score)
        if new_level > self.level:
            self.level = new_level
            logger.info("Level up: %d", new_level)
            self.events.emit(EVENT_LEVEL_UP, self, level=new_level)
        if gained:
            logger.info("Player gained %d points", gained)
        return gained

    # ------------------------------------------------------------------
    # Countdown
    # ------------------------------------------------------------------
    def timer_delay(self) -> int:
        return self.rules.timer_delay(self.level)

    def _stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _restart_countdown(self) -> None:
        self._stop_countdown()
        delay = self.timer_delay()
        self._countdown = self.scheduler.call_later(delay, self.on_countdown_expiry)
        logger.debug("Countdown started: %dms", delay)
        self.events.emit(EVENT_TIMER_STARTED, self, delay=delay)

    def on_countdown_expiry(self) -> None:
        if not self.running:
            return
        self._countdown = None
        if self.lives > 0:
            self.lives -= 1
            self.multiplier = 1
            logger.info("Player lost a life, %d remaining", self.lives)
            self.events.emit(EVENT_LIFE_LOST, self, lives=self.lives)
        if self.lives == 0:
            self.state = GameState.GAME_OVER
            logger.info("Player lost the game with %d points", self.score)
            self.events.emit(EVENT_GAME_LOST, self, score=self.score)
            return
        self.advance_piece()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.clone_state(),
            "current_piece": self.current_piece.piece_id if self.current_piece else None,
            "following_piece": self.following_piece.piece_id if self.following_piece else None,
            "score": self.score,
            "level": self.level,
            "lives": self.lives,
            "multiplier": self.multiplier,
            "state": self.state.value,
        }

    def get_game_stats(self) -> Dict[str, Any]:
        return {
            "final_score": self.score,
            "level": self.level,
            "pieces_placed": self.pieces_placed,
            "lines_cleared": self.lines_cleared_total,
            "final_fill_ratio": self.grid.get_filled_ratio(),
            "avg_score_per_piece": self.score / max(1, self.pieces_placed),
        }
