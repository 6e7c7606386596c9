from __future__ import annotations

import numpy as np

from .errors import BufferEmptyError, BufferFullError


class PieceBuffer:
    """Fixed-capacity circular FIFO of piece ids.

    Head and tail index the oldest and newest items. They are equal both when
    the buffer is empty and when it holds exactly one item, so emptiness is
    tracked with an explicit flag rather than derived from positions.
    """

    def __init__(self, capacity: int = 3) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._items = np.zeros(capacity, dtype=np.int64)
        self._head = 0
        self._tail = 0
        self._empty = True

    @property
    def capacity(self) -> int:
        return int(self._items.shape[0])

    @property
    def size(self) -> int:
        if self._empty:
            return 0
        return (self._tail - self._head) % self.capacity + 1

    def __len__(self) -> int:
        return self.size

    def is_empty(self) -> bool:
        return self._empty

    def is_full(self) -> bool:
        return self.size == self.capacity

    def enqueue(self, piece_id: int) -> None:
        if self.is_full():
            raise BufferFullError(f"piece buffer full ({self.capacity} items)")
        if self._empty:
            self._empty = False
        else:
            self._tail = (self._tail + 1) % self.capacity
        self._items[self._tail] = piece_id

    def dequeue(self) -> int:
        if self._empty:
            raise BufferEmptyError("piece buffer empty")
        value = int(self._items[self._head])
        if self._head == self._tail:
            self._empty = True
        else:
            self._head = (self._head + 1) % self.capacity
        return value

    def peek(self) -> int:
        if self._empty:
            raise BufferEmptyError("piece buffer empty")
        return int(self._items[self._head])

    def __repr__(self) -> str:
        return f"PieceBuffer(capacity={self.capacity}, size={self.size})"
