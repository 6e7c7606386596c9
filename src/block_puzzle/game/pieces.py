from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from .errors import InvalidPieceIdError


class PieceType(IntEnum):
    LINE = 0
    C = 1
    PLUS = 2
    DOT = 3
    SQUARE = 4
    L = 5
    J = 6
    S = 7
    Z = 8
    T = 9
    X = 10
    CORNER = 11
    INVERSE_CORNER = 12
    DIAGONAL = 13
    DOUBLE = 14


PIECE_COUNT = len(PieceType)

Shape = np.ndarray


# Occupancy only; rows top to bottom, centre cell at [1, 1]
BASE_SHAPES = {
    PieceType.LINE: [[0, 0, 0], [1, 1, 1], [0, 0, 0]],
    PieceType.C: [[0, 0, 0], [1, 1, 1], [1, 0, 1]],
    PieceType.PLUS: [[0, 1, 0], [1, 1, 1], [0, 1, 0]],
    PieceType.DOT: [[0, 0, 0], [0, 1, 0], [0, 0, 0]],
    PieceType.SQUARE: [[1, 1, 0], [1, 1, 0], [0, 0, 0]],
    PieceType.L: [[0, 0, 0], [1, 1, 1], [0, 0, 1]],
    PieceType.J: [[0, 0, 1], [1, 1, 1], [0, 0, 0]],
    PieceType.S: [[0, 0, 0], [0, 1, 1], [1, 1, 0]],
    PieceType.Z: [[1, 1, 0], [0, 1, 1], [0, 0, 0]],
    PieceType.T: [[1, 0, 0], [1, 1, 0], [1, 0, 0]],
    PieceType.X: [[1, 0, 1], [0, 1, 0], [1, 0, 1]],
    PieceType.CORNER: [[0, 0, 0], [1, 1, 0], [1, 0, 0]],
    PieceType.INVERSE_CORNER: [[1, 0, 0], [1, 1, 0], [0, 0, 0]],
    PieceType.DIAGONAL: [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
    PieceType.DOUBLE: [[0, 1, 0], [0, 1, 0], [0, 0, 0]],
}


def shape_of(piece_id: int) -> Shape:
    """Canonical 3x3 matrix for ``piece_id``; occupied cells hold ``piece_id + 1``."""
    try:
        kind = PieceType(piece_id)
    except ValueError:
        raise InvalidPieceIdError(piece_id) from None
    return np.array(BASE_SHAPES[kind], dtype=np.int8) * (int(kind) + 1)


def rotate(shape: Shape, times: int = 1) -> Shape:
    k = times % 4
    if k == 0:
        return np.array(shape, copy=True)
    return np.rot90(shape, k, axes=(1, 0)).copy()  # clockwise when k>0


def all_piece_ids() -> range:
    return range(PIECE_COUNT)


@dataclass
class GamePiece:
    """A catalogue piece together with its current orientation."""

    kind: PieceType
    rotation: int = 0  # 0..3
    blocks: Shape = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.rotation %= 4
        self.blocks = rotate(shape_of(int(self.kind)), self.rotation)

    @classmethod
    def create(cls, piece_id: int) -> "GamePiece":
        if not isinstance(piece_id, (int, np.integer)) or not 0 <= piece_id < PIECE_COUNT:
            raise InvalidPieceIdError(piece_id)
        return cls(PieceType(int(piece_id)))

    @property
    def piece_id(self) -> int:
        return int(self.kind)

    @property
    def value(self) -> int:
        return int(self.kind) + 1

    @property
    def name(self) -> str:
        return self.kind.name.replace("_", " ").lower()

    def rotate(self, times: int = 1) -> None:
        self.rotation = (self.rotation + times) % 4
        self.blocks = rotate(self.blocks, times)

    def rotated(self, times: int = 1) -> "GamePiece":
        return GamePiece(self.kind, self.rotation + times)

    def cell_count(self) -> int:
        return int(np.count_nonzero(self.blocks))

    def offsets(self) -> list[tuple[int, int, int]]:
        """(dx, dy, value) for each occupied cell, relative to the centre."""
        cells: list[tuple[int, int, int]] = []
        for row in range(3):
            for col in range(3):
                v = int(self.blocks[row, col])
                if v:
                    cells.append((col - 1, row - 1, v))
        return cells

    def __str__(self) -> str:
        return f"{self.name} piece ({self.piece_id})"
