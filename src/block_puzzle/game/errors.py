from __future__ import annotations


class BlockPuzzleError(Exception):
    """Base class for all engine errors."""


class InvalidPieceIdError(BlockPuzzleError, ValueError):
    """Piece id outside the catalogue; a corrupt message or a programming error."""

    def __init__(self, piece_id: int) -> None:
        super().__init__(f"no piece with id {piece_id!r}")
        self.piece_id = piece_id


class IllegalPlacementError(BlockPuzzleError):
    """Placement overlaps an occupied or out-of-range cell."""

    def __init__(self, x: int, y: int) -> None:
        super().__init__(f"piece cannot be placed centred at ({x}, {y})")
        self.x = x
        self.y = y


class PieceBufferError(BlockPuzzleError):
    pass


class BufferFullError(PieceBufferError):
    pass


class BufferEmptyError(PieceBufferError):
    pass


class ProtocolError(BlockPuzzleError, ValueError):
    """Malformed message on the multiplayer channel."""
