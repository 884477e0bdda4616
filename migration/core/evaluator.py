from migration.config import CONFIG
from migration.core.board import Board, Cell, Player
from migration.core.movegen import count_moves

# Static scores stay inside +/-EVAL_LIMIT so decisive search scores
# (see search.WIN_SCORE) are always larger in magnitude.
EVAL_LIMIT = 450000


class Evaluator:
    def __init__(self, cfg=None):
        self.cfg = cfg or CONFIG.eval

    def evaluate(self, board: Board, perspective: Player) -> int:
        """
        Material + progress + mobility, Player1 minus Player2, then flipped
        for Player2. evaluate(b, P1) == -evaluate(b, P2) for every board.
        """
        n = board.size()
        material = board.count(Cell.PLAYER1) - board.count(Cell.PLAYER2)

        # Progress: rows climbed by Player1, columns crossed by Player2
        progress = 0
        for _x, y in board.squares(Cell.PLAYER1):
            progress += n - 1 - y
        for x, _y in board.squares(Cell.PLAYER2):
            progress -= x

        mobility = count_moves(board, Player.PLAYER1) - count_moves(board, Player.PLAYER2)

        score = (
            self.cfg.material_weight * material
            + self.cfg.progress_weight * progress
            + self.cfg.mobility_weight * mobility
        )
        score = max(-EVAL_LIMIT, min(EVAL_LIMIT, score))

        if perspective == Player.PLAYER2:
            return -score
        return score
