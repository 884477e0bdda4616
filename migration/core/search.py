import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from migration.config import CONFIG
from migration.core.board import Board, Move, Player
from migration.core.evaluator import Evaluator
from migration.core.movegen import legal_moves
from migration.core.state import GameState
from migration.core.transposition import TT_ALPHA, TT_BETA, TT_EXACT, TranspositionTable
from migration.core.utils import format_info
from migration.errors import InvalidDepth

logger = logging.getLogger(__name__)

INF = 1000000
WIN_SCORE = 900000


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: int
    nodes: int
    elapsed: float = 0.0
    error: Optional[Exception] = None


def validate_depth(depth) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
        raise InvalidDepth(f"Search depth must be an integer >= 1, got {depth!r}")
    return depth


class SearchEngine:
    """Depth-limited negamax with alpha-beta pruning.

    The depth is fixed per instance. Moves are tried in generator order and
    the first move reaching the best score wins ties, so the same position
    always yields the same move whether or not pruning is enabled.
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        depth: Optional[int] = None,
        alpha_beta: Optional[bool] = None,
        use_transposition: Optional[bool] = None,
    ):
        cfg = CONFIG.search
        self.evaluator = evaluator or Evaluator()
        self.max_depth = validate_depth(cfg.depth if depth is None else depth)
        self.alpha_beta = cfg.alpha_beta if alpha_beta is None else alpha_beta
        if use_transposition is None:
            use_transposition = cfg.use_transposition
        # plain minimax stays a pure reference: no pruning, no caching
        self.tt = TranspositionTable(cfg.hash_size_mb) if (use_transposition and self.alpha_beta) else None

        self._thread: Optional[threading.Thread] = None
        self.nodes = 0

    def best_move(self, state: GameState) -> Optional[Move]:
        """Best move for the side to move, or None when it has no legal move."""
        return self.search(state).best_move

    def search(self, state: GameState) -> SearchResult:
        board = state.board.copy()
        player = state.current_player
        self.nodes = 0
        start_time = time.time()

        moves = legal_moves(board, player)
        if not moves:
            return SearchResult(None, -WIN_SCORE, 0, 0.0)

        best_move = None
        best_score = -INF
        alpha = -INF

        for move in moves:
            board._move_piece(move.src, move.dst)
            if self.alpha_beta:
                score = -self._negamax(board, player.opponent, self.max_depth - 1, -INF, -alpha)
            else:
                score = -self._negamax(board, player.opponent, self.max_depth - 1, -INF, INF)
            board._move_piece(move.dst, move.src)

            if score > best_score:
                best_score = score
                best_move = move
                alpha = max(alpha, score)

        elapsed = time.time() - start_time
        logger.debug(format_info(self.max_depth, best_score, self.nodes, elapsed, best_move, WIN_SCORE))
        return SearchResult(best_move, best_score, self.nodes, elapsed)

    def start_search(self, state: GameState, callback: Callable[[SearchResult], None]) -> threading.Thread:
        """Search a snapshot of `state` on a worker thread.

        `callback` receives the final SearchResult exactly once. There is no
        cancellation and no interim result. If the search raises, the error
        is logged and delivered in `SearchResult.error` with no move.
        """
        if self._thread and self._thread.is_alive():
            raise RuntimeError("A search is already running on this engine")
        snapshot = state.copy()

        def worker():
            try:
                result = self.search(snapshot)
            except Exception as e:
                logger.exception("Search failed")
                result = SearchResult(None, 0, self.nodes, 0.0, error=e)
            callback(result)

        self._thread = threading.Thread(target=worker, name="migration-search", daemon=True)
        self._thread.start()
        return self._thread

    def _negamax(self, board: Board, player: Player, depth: int, alpha: int, beta: int) -> int:
        self.nodes += 1

        moves = legal_moves(board, player)
        if not moves:
            return -WIN_SCORE
        if depth <= 0:
            return self.evaluator.evaluate(board, player)

        alpha_orig = alpha

        # TT Lookup
        if self.tt is not None:
            tt_entry = self.tt.get(board, player, depth)
            if tt_entry:
                if tt_entry.flag == TT_EXACT: return tt_entry.value
                elif tt_entry.flag == TT_ALPHA: beta = min(beta, tt_entry.value)
                elif tt_entry.flag == TT_BETA: alpha = max(alpha, tt_entry.value)
                if alpha >= beta: return tt_entry.value

        best_score = -INF
        for move in moves:
            board._move_piece(move.src, move.dst)
            score = -self._negamax(board, player.opponent, depth - 1, -beta, -alpha)
            board._move_piece(move.dst, move.src)

            if score > best_score:
                best_score = score
            if self.alpha_beta:
                alpha = max(alpha, score)
                if alpha >= beta:
                    break

        if self.tt is not None:
            if best_score <= alpha_orig:
                flag = TT_ALPHA
            elif best_score >= beta:
                flag = TT_BETA
            else:
                flag = TT_EXACT
            self.tt.store(board, player, depth, best_score, flag)
        return best_score
