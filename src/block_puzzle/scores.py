"""High-score tables.

Local tables live in a text file with one ``name:score`` line per entry,
best first, at most ``MAX_ENTRIES`` lines. The online table arrives in the
same record format inside a ``HISCORES`` message.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, NamedTuple, Optional, Union

from block_puzzle.game.errors import ProtocolError


logger = logging.getLogger(__name__)

MAX_ENTRIES = 10
DEFAULT_NAME = "Username"


class ScoreEntry(NamedTuple):
    name: str
    score: int

    @classmethod
    def parse(cls, record: str) -> "ScoreEntry":
        name, sep, score = record.strip().rpartition(":")
        if not sep or not name:
            raise ProtocolError(f"malformed score record {record!r}")
        try:
            return cls(name, int(score))
        except ValueError:
            raise ProtocolError(f"malformed score record {record!r}") from None

    def format(self) -> str:
        return f"{self.name}:{self.score}"


class HighScoreTable:
    def __init__(self, entries: Iterable[ScoreEntry] = (), max_entries: int = MAX_ENTRIES) -> None:
        self.max_entries = max_entries
        self.entries: List[ScoreEntry] = []
        for entry in entries:
            self._insert_sorted(entry)
        del self.entries[max_entries:]

    @classmethod
    def default(cls) -> "HighScoreTable":
        return cls([ScoreEntry(DEFAULT_NAME, 0)] * MAX_ENTRIES)

    @classmethod
    def parse(cls, lines: Iterable[str]) -> "HighScoreTable":
        return cls(ScoreEntry.parse(line) for line in lines if line.strip())

    @classmethod
    def load(cls, path: Union[str, Path]) -> "HighScoreTable":
        """Read a local table, falling back to the placeholder table when the file is missing."""
        path = Path(path)
        if not path.exists():
            logger.info("No high-score file at %s, using defaults", path)
            return cls.default()
        return cls.parse(path.read_text(encoding="utf-8").splitlines())

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_text("".join(line + "\n" for line in self.to_lines()), encoding="utf-8")

    def to_lines(self) -> List[str]:
        return [entry.format() for entry in self.entries]

    def _insert_sorted(self, entry: ScoreEntry) -> int:
        # Ties keep earlier entries ahead
        for i, existing in enumerate(self.entries):
            if existing.score < entry.score:
                self.entries.insert(i, entry)
                return i
        self.entries.append(entry)
        return len(self.entries) - 1

    def position_for(self, score: int) -> Optional[int]:
        """Index the score would take in the table, or ``None`` if it does not make the cut."""
        for i, entry in enumerate(self.entries[: self.max_entries]):
            if entry.score < score:
                return i
        if len(self.entries) < self.max_entries:
            return len(self.entries)
        return None

    def insert(self, name: str, score: int) -> Optional[int]:
        position = self.position_for(score)
        if position is None:
            return None
        self.entries.insert(position, ScoreEntry(name, score))
        del self.entries[self.max_entries:]
        return position

    @property
    def best(self) -> Optional[ScoreEntry]:
        return self.entries[0] if self.entries else None

    def __iter__(self) -> Iterator[ScoreEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"HighScoreTable({self.entries!r})"
