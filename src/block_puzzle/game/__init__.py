"""Game module for the block puzzle engine.

Exports the core game engine and supporting classes:
- GamePiece, shape_of, rotate, all_piece_ids: the 15-piece catalogue
- PieceBuffer: bounded FIFO of upcoming piece ids
- GameGrid: board placement and row/column clearing
- ScoringRules: scoring, leveling and countdown formulas
- Game: single-player engine and its lifecycle
- EventBus, ManualScheduler, ThreadingScheduler, Mailbox: collaborator seams
"""

from .buffer import PieceBuffer
from .core import Game, GameConfig, GameState
from .errors import (
    BlockPuzzleError,
    BufferEmptyError,
    BufferFullError,
    IllegalPlacementError,
    InvalidPieceIdError,
    PieceBufferError,
    ProtocolError,
)
from .events import EventBus
from .grid import OUT_OF_RANGE, GameGrid, LineClear
from .mailbox import Mailbox
from .pieces import PIECE_COUNT, GamePiece, PieceType, all_piece_ids, rotate, shape_of
from .rules import ScoringRules
from .scheduler import ManualScheduler, ThreadingScheduler, TimerHandle

__all__ = [
    "PieceBuffer",
    "Game",
    "GameConfig",
    "GameState",
    "BlockPuzzleError",
    "BufferEmptyError",
    "BufferFullError",
    "IllegalPlacementError",
    "InvalidPieceIdError",
    "PieceBufferError",
    "ProtocolError",
    "EventBus",
    "OUT_OF_RANGE",
    "GameGrid",
    "LineClear",
    "Mailbox",
    "PIECE_COUNT",
    "GamePiece",
    "PieceType",
    "all_piece_ids",
    "rotate",
    "shape_of",
    "ScoringRules",
    "ManualScheduler",
    "ThreadingScheduler",
    "TimerHandle",
]
