from __future__ import annotations

import logging
from typing import Optional

from block_puzzle.game.buffer import PieceBuffer
from block_puzzle.game.core import Game, GameConfig, GameState
from block_puzzle.game.errors import PieceBufferError
from block_puzzle.game.events import (
    EVENT_GAME_LOST,
    EVENT_HISCORES_RECEIVED,
    EVENT_STANDINGS_CHANGED,
    EVENT_TIMER_STARTED,
    EventBus,
)
from block_puzzle.game.pieces import GamePiece
from block_puzzle.game.rules import ScoringRules
from block_puzzle.game.scheduler import Scheduler
from block_puzzle.scores import HighScoreTable

from . import protocol
from .protocol import Channel, HiScores, PeerScore, PieceAnnounced, ScoresBroadcast, UnknownMessage
from .standings import Standings


logger = logging.getLogger(__name__)


class MultiplayerGame(Game):
    """Game whose piece sequence is supplied by the server.

    Pieces announced by the server queue up in a bounded buffer; the game
    only initialises once more than one has arrived, and every piece it
    consumes is replaced by a fresh ``PIECE`` request so requests and
    consumption stay one-to-one. Progress is reported back to the server
    each time the countdown restarts.

    ``handle_message`` must run on the thread that owns the game, like every
    other public method; transports should post into a ``Mailbox``.
    """

    def __init__(
        self,
        channel: Channel,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[Scheduler] = None,
        events: Optional[EventBus] = None,
        buffer_capacity: int = 3,
    ) -> None:
        super().__init__(config, rules, scheduler, events)
        self.channel = channel
        self.piece_buffer = PieceBuffer(buffer_capacity)
        self.pieces_received = 0
        self.standings = Standings()
        self.online_scores = HighScoreTable()
        self._left = False
        self.events.subscribe(EVENT_TIMER_STARTED, self._report_progress)
        self.events.subscribe(EVENT_GAME_LOST, self._on_game_lost)

    def _send(self, message: str) -> None:
        logger.debug("-> %s", message)
        self.channel.send(message)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Prime the piece pipeline; the game itself initialises once pieces arrive."""
        logger.info("Starting multiplayer game, requesting %d pieces", self.piece_buffer.capacity)
        for _ in range(self.piece_buffer.capacity):
            self._send(protocol.request_piece())

    def reset(self) -> None:
        """Return to the pre-start state so ``start`` can prime a fresh session."""
        super().reset()
        self.piece_buffer = PieceBuffer(self.piece_buffer.capacity)
        self.pieces_received = 0
        self._left = False

    def cancel(self) -> None:
        super().cancel()
        self.leave()

    def leave(self) -> None:
        if not self._left:
            self._left = True
            self._send(protocol.die())

    def _on_game_lost(self, sender, **payload) -> None:
        if sender is self:
            self.leave()

    # ------------------------------------------------------------------
    # Pieces
    # ------------------------------------------------------------------
    def spawn_piece(self) -> GamePiece:
        piece_id = self.piece_buffer.dequeue()
        logger.debug("Spawning new piece: %d", piece_id)
        self._send(protocol.request_piece())
        return GamePiece.create(piece_id)

    def receive_piece(self, piece_id: int) -> None:
        try:
            self.piece_buffer.enqueue(piece_id)
        except PieceBufferError:
            logger.error("Server announced more pieces than requested, cancelling game")
            self.cancel()
            raise
        self.pieces_received += 1
        if self.state is GameState.CREATED and self.pieces_received > 1:
            self.initialise()

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------
    def handle_message(self, message: str) -> None:
        logger.debug("<- %s", message)
        if self.state is GameState.CANCELLED:
            return
        parsed = protocol.parse_message(message)
        if isinstance(parsed, PieceAnnounced):
            self.receive_piece(parsed.piece_id)
        elif isinstance(parsed, ScoresBroadcast):
            self.standings.replace(parsed.standings)
            self.events.emit(EVENT_STANDINGS_CHANGED, self, standings=self.standings.as_list())
        elif isinstance(parsed, PeerScore):
            self._send(protocol.request_scores())
        elif isinstance(parsed, HiScores):
            self.online_scores = parsed.table
            self.events.emit(EVENT_HISCORES_RECEIVED, self, scores=self.online_scores)
        elif isinstance(parsed, UnknownMessage):
            logger.debug("Ignoring message %r", parsed.command)

    def request_hiscores(self) -> None:
        self._send(protocol.request_hiscores())

    def submit_hiscore(self, name: str, score: int) -> None:
        self._send(protocol.submit_hiscore(name, score))

    def _report_progress(self, sender, **payload) -> None:
        if sender is not self:
            return
        self._send(protocol.report_score(self.score))
        self._send(protocol.report_lives(self.lives))
        self._send(protocol.report_board(self.grid.values()))
