"""Move generation.

A piece steps one cell in its owner's direction into an empty cell.
Player1 walks toward row 0, Player2 toward the last column; the two
directions are mirror images under Board.mirrored(), so one generator
serves both sides. Moves are enumerated column by column, then row by
row, and every caller relies on that order for tie-breaks.
"""

from typing import Iterator, List

from migration.core.board import Board, Cell, Move, Player

DIRECTIONS = {
    Player.PLAYER1: (0, -1),
    Player.PLAYER2: (1, 0),
}


def iter_legal_moves(board: Board, player: Player) -> Iterator[Move]:
    dx, dy = DIRECTIONS[player]
    for x, y in board.squares(player.cell):
        nx, ny = x + dx, y + dy
        if board.in_bounds(nx, ny) and board.get(nx, ny) == Cell.EMPTY:
            yield Move((x, y), (nx, ny))


def legal_moves(board: Board, player: Player) -> List[Move]:
    """All legal moves for `player`, in enumeration order."""
    return list(iter_legal_moves(board, player))


def has_any_legal_move(board: Board, player: Player) -> bool:
    """Stops at the first legal move found."""
    return next(iter_legal_moves(board, player), None) is not None


def count_moves(board: Board, player: Player) -> int:
    return sum(1 for _ in iter_legal_moves(board, player))


def is_legal(board: Board, player: Player, move: Move) -> bool:
    (x1, y1), (x2, y2) = move.src, move.dst
    if not (board.in_bounds(x1, y1) and board.in_bounds(x2, y2)):
        return False
    if board.get(x1, y1) != player.cell or board.get(x2, y2) != Cell.EMPTY:
        return False
    dx, dy = DIRECTIONS[player]
    return (x2 - x1, y2 - y1) == (dx, dy)


def mirror_move(move: Move, n: int) -> Move:
    """Image of `move` under the same reflection as Board.mirrored()."""
    (x1, y1), (x2, y2) = move.src, move.dst
    return Move((n - 1 - y1, n - 1 - x1), (n - 1 - y2, n - 1 - x2))
