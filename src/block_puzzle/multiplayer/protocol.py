"""Line-based multiplayer protocol.

Every message is one line of text: an upper-case command optionally followed
by a space and a body. Broadcast bodies (``SCORES``, ``HISCORES``) carry one
record per line, so a single inbound message may span several lines.

Client -> server:
- ``PIECE``                      request one more piece
- ``SCORE <n>`` / ``LIVES <n>``  report progress
- ``BOARD <v v v ...>``          board cells, column-major
- ``SCORES`` / ``HISCORES``      ask for the channel scoreboard / online table
- ``HISCORE <name>:<score>``     submit an online high score
- ``DIE``                        leave the running game

Server -> client:
- ``PIECE <id>``                              next piece in the shared sequence
- ``SCORES <name>:<score>:<lives>[\\n...]``   channel scoreboard
- ``SCORE <n>``                               a peer's score changed
- ``HISCORES <name>:<score>[\\n...]``         online high-score table
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Protocol, Union

from block_puzzle.game.errors import InvalidPieceIdError, ProtocolError
from block_puzzle.game.pieces import PIECE_COUNT
from block_puzzle.scores import HighScoreTable, ScoreEntry

from .standings import PlayerStanding


PIECE = "PIECE"
SCORE = "SCORE"
SCORES = "SCORES"
LIVES = "LIVES"
BOARD = "BOARD"
HISCORE = "HISCORE"
HISCORES = "HISCORES"
DIE = "DIE"


class Channel(Protocol):
    """Outbound half of an established, ordered message transport."""

    def send(self, message: str) -> None: ...


@dataclass(frozen=True)
class PieceAnnounced:
    piece_id: int


@dataclass(frozen=True)
class ScoresBroadcast:
    standings: List[PlayerStanding] = field(default_factory=list)


@dataclass(frozen=True)
class PeerScore:
    score: int


@dataclass(frozen=True)
class HiScores:
    table: HighScoreTable


@dataclass(frozen=True)
class UnknownMessage:
    command: str
    body: str = ""


InboundMessage = Union[PieceAnnounced, ScoresBroadcast, PeerScore, HiScores, UnknownMessage]


def _records(body: str) -> List[str]:
    return [line for line in body.splitlines() if line.strip()]


def _int(value: str, message: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ProtocolError(f"expected an integer in {message!r}") from None


def parse_message(message: str) -> InboundMessage:
    parts = message.strip().split(None, 1)
    if not parts:
        return UnknownMessage("")
    command = parts[0]
    body = parts[1] if len(parts) > 1 else ""

    if command == PIECE:
        piece_id = _int(body.strip(), message)
        if not 0 <= piece_id < PIECE_COUNT:
            raise InvalidPieceIdError(piece_id)
        return PieceAnnounced(piece_id)
    if command == SCORES:
        return ScoresBroadcast([PlayerStanding.parse(r) for r in _records(body)])
    if command == SCORE:
        return PeerScore(_int(body.strip(), message))
    if command == HISCORES:
        return HiScores(HighScoreTable.parse(_records(body)))
    return UnknownMessage(command, body)


def request_piece() -> str:
    return PIECE


def report_score(score: int) -> str:
    return f"{SCORE} {score}"


def report_lives(lives: int) -> str:
    return f"{LIVES} {lives}"


def report_board(values: Iterable[int]) -> str:
    return f"{BOARD} " + " ".join(str(int(v)) for v in values)


def request_scores() -> str:
    return SCORES


def request_hiscores() -> str:
    return HISCORES


def submit_hiscore(name: str, score: int) -> str:
    return f"{HISCORE} {ScoreEntry(name, score).format()}"


def die() -> str:
    return DIE
