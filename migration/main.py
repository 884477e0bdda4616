"""Engine facade: the operations a front end drives a Migration game through."""

import logging
import threading
from typing import Callable, List, Optional

from migration.config import CONFIG
from migration.core import persistence
from migration.core.board import Board, Cell, Move, Player
from migration.core.search import SearchEngine, SearchResult, validate_depth
from migration.core.state import GameState

logger = logging.getLogger(__name__)


class Engine:
    """One game against the bot.

    Holds its own GameState and SearchEngine; nothing is shared between
    instances. Callers must not run apply_move while a bot search started
    with start_bot_move is still in flight.
    """

    def __init__(self, size: Optional[int] = None, depth: Optional[int] = None,
                 state: Optional[GameState] = None):
        depth = CONFIG.search.depth if depth is None else depth
        self.search = SearchEngine(depth=validate_depth(depth))
        if state is None:
            state = GameState.new(CONFIG.game.board_size if size is None else size)
        self.state = state
        logger.info("New %dx%d game, depth %d", self.size, self.size, self.depth)

    @classmethod
    def load(cls, path: str, depth: Optional[int] = None) -> "Engine":
        """Restore a saved game as a new Engine; `depth` is not part of the save."""
        return cls(depth=depth, state=persistence.load(path))

    @classmethod
    def loads(cls, text: str, depth: Optional[int] = None) -> "Engine":
        return cls(depth=depth, state=persistence.loads(text))

    @property
    def size(self) -> int:
        return self.state.size

    @property
    def depth(self) -> int:
        return self.search.max_depth

    @property
    def board(self) -> Board:
        return self.state.board

    def new_game(self, size: Optional[int] = None) -> None:
        logger.info("Discarded %dx%d game", self.size, self.size)
        self.state = GameState.new(self.size if size is None else size)
        if self.search.tt is not None:
            self.search.tt.clear()
        logger.info("New %dx%d game, depth %d", self.size, self.size, self.depth)

    def cell_at(self, x: int, y: int) -> Cell:
        return self.state.cell_at(x, y)

    def current_player(self) -> Player:
        return self.state.current_player

    def legal_moves(self) -> List[Move]:
        return self.state.legal_moves()

    def apply_move(self, x1: int, y1: int, x2: int, y2: int) -> Move:
        move = Move.from_coords(x1, y1, x2, y2)
        self.state.apply_move(move)
        return move

    def bot_move(self) -> Optional[Move]:
        """Best move for the side to move, without playing it."""
        return self.search.best_move(self.state)

    def play_bot_move(self) -> Optional[Move]:
        """Search and apply the side to move's best move; None if it has none."""
        move = self.bot_move()
        if move is not None:
            self.state.apply_move(move)
        return move

    def start_bot_move(self, callback: Callable[[Optional[Move]], None]) -> threading.Thread:
        """Compute the bot move on a worker thread and hand it to `callback` once.

        The move is not applied; the caller applies it through apply_move
        after the worker finishes.
        """
        def deliver(result: SearchResult):
            callback(result.best_move)

        return self.search.start_search(self.state, deliver)

    def is_over(self) -> bool:
        return self.state.is_over()

    def winner(self) -> Optional[Player]:
        return self.state.winner

    def save(self, path: Optional[str] = None) -> str:
        path = path or CONFIG.ui.save_path
        persistence.save(self.state, path)
        return path

    def dumps(self) -> str:
        return persistence.dumps(self.state)
