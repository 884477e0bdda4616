"""Game state machine: the only place a live board is mutated."""

import logging
from enum import Enum
from typing import List, Optional

from migration.core.board import Board, Cell, Move, Player
from migration.core.movegen import has_any_legal_move, is_legal, legal_moves
from migration.errors import GameOver, IllegalMove

logger = logging.getLogger(__name__)


class Status(Enum):
    IN_PROGRESS = "in_progress"
    TERMINAL = "terminal"


class GameState:
    """Board plus side to move plus terminal flag.

    A side with no legal move on its turn has lost; the winner is the other
    side. Not thread-safe: at most one apply_move may be in flight, and
    searches must work on copy() snapshots.
    """

    def __init__(self, board: Board, current_player: Player = Player.PLAYER1):
        self._board = board
        self._current = Player(current_player)
        self._winner: Optional[Player] = None
        self._refresh_status()

    @classmethod
    def new(cls, n: int) -> "GameState":
        """Fresh game on the starting layout, Player1 to move."""
        return cls(Board.starting(n), Player.PLAYER1)

    @property
    def board(self) -> Board:
        return self._board

    @property
    def size(self) -> int:
        return self._board.size()

    @property
    def current_player(self) -> Player:
        return self._current

    @property
    def status(self) -> Status:
        return Status.IN_PROGRESS if self._winner is None else Status.TERMINAL

    @property
    def winner(self) -> Optional[Player]:
        return self._winner

    def is_over(self) -> bool:
        return self._winner is not None

    def cell_at(self, x: int, y: int) -> Cell:
        return self._board.get(x, y)

    def legal_moves(self) -> List[Move]:
        return legal_moves(self._board, self._current)

    def apply_move(self, move: Move) -> None:
        """Play `move` for the side to move and pass the turn.

        Raises GameOver on a finished game and IllegalMove when the move is
        not legal; in both cases nothing changes.
        """
        if self.is_over():
            raise GameOver(f"Game is over; {self._winner.name} won")
        if not is_legal(self._board, self._current, move):
            raise IllegalMove(f"{move} is not legal for {self._current.name}")

        self._board._move_piece(move.src, move.dst)
        mover = self._current
        self._current = mover.opponent
        self._refresh_status()
        logger.debug("%s played %s", mover.name, move)
        if self._winner is not None:
            logger.info("Game over: %s wins", self._winner.name)

    def copy(self) -> "GameState":
        return GameState(self._board.copy(), self._current)

    def _refresh_status(self) -> None:
        if has_any_legal_move(self._board, self._current):
            self._winner = None
        else:
            self._winner = self._current.opponent

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return self._board == other._board and self._current == other._current

    def __repr__(self) -> str:
        return (
            f"GameState(size={self.size}, current={self._current.name}, "
            f"status={self.status.value}, rows={self._board.rows()!r})"
        )
