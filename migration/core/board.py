"""Board value type for Migration: cells, players, moves and the grid itself."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, List, Tuple

from migration.errors import InvalidSize, OutOfBounds

Square = Tuple[int, int]


class Cell(IntEnum):
    EMPTY = 0
    PLAYER1 = 1
    PLAYER2 = 2

    @property
    def symbol(self) -> str:
        return _CELL_SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> "Cell":
        for cell, sym in _CELL_SYMBOLS.items():
            if sym == symbol:
                return cell
        raise ValueError(f"Unknown cell symbol {symbol!r}")


_CELL_SYMBOLS = {Cell.EMPTY: ".", Cell.PLAYER1: "1", Cell.PLAYER2: "2"}


class Player(IntEnum):
    PLAYER1 = 1
    PLAYER2 = 2

    @property
    def opponent(self) -> "Player":
        return Player.PLAYER2 if self is Player.PLAYER1 else Player.PLAYER1

    @property
    def cell(self) -> Cell:
        return Cell(self.value)

    @property
    def symbol(self) -> str:
        return self.cell.symbol

    @classmethod
    def from_symbol(cls, symbol: str) -> "Player":
        cell = Cell.from_symbol(symbol)
        if cell is Cell.EMPTY:
            raise ValueError(f"{symbol!r} is not a player symbol")
        return cls(cell.value)


@dataclass(frozen=True)
class Move:
    src: Square
    dst: Square

    @classmethod
    def from_coords(cls, x1: int, y1: int, x2: int, y2: int) -> "Move":
        return cls((x1, y1), (x2, y2))

    def coords(self) -> Tuple[int, int, int, int]:
        return (*self.src, *self.dst)

    def __str__(self) -> str:
        return f"{self.src[0]},{self.src[1]}->{self.dst[0]},{self.dst[1]}"


class Board:
    """Square n x n grid of cells, addressed as (x, y) with row 0 at the top.

    The size is fixed at construction. Outside code reads through get();
    writes go through the underscored mutators, which only GameState and
    the search's private copies call.
    """

    __slots__ = ("_n", "_cells")

    def __init__(self, n: int):
        if isinstance(n, bool) or not isinstance(n, int) or n < 2:
            raise InvalidSize(f"Board size must be an integer >= 2, got {n!r}")
        self._n = n
        # stored row-major: _cells[y][x]
        self._cells: List[List[Cell]] = [[Cell.EMPTY] * n for _ in range(n)]

    @classmethod
    def starting(cls, n: int) -> "Board":
        """Stepped triangles: Player1 on the bottom edge, Player2 on the left edge."""
        board = cls(n)
        k = math.ceil(n / 2 - 1)
        for j in range(k):
            for i in range(j + 1, n - j - 1):
                board._cells[n - 1 - j][i] = Cell.PLAYER1
                board._cells[i][j] = Cell.PLAYER2
        return board

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Board":
        """Build a board from row strings like ``[".2.", "...", ".1."]``."""
        rows = list(rows)
        board = cls(len(rows))
        for y, row in enumerate(rows):
            if len(row) != board._n:
                raise ValueError(f"Row {y} has {len(row)} cells, expected {board._n}")
            board._cells[y] = [Cell.from_symbol(sym) for sym in row]
        return board

    def size(self) -> int:
        return self._n

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._n and 0 <= y < self._n

    def get(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise OutOfBounds(f"({x}, {y}) is outside a {self._n}x{self._n} board")
        return self._cells[y][x]

    def squares(self, cell: Cell) -> Iterator[Square]:
        """Yield squares holding `cell`, column by column."""
        for x in range(self._n):
            for y in range(self._n):
                if self._cells[y][x] == cell:
                    yield (x, y)

    def count(self, cell: Cell) -> int:
        return sum(row.count(cell) for row in self._cells)

    def rows(self) -> List[str]:
        return ["".join(c.symbol for c in row) for row in self._cells]

    def signature(self) -> str:
        return "/".join(self.rows())

    def copy(self) -> "Board":
        other = Board.__new__(Board)
        other._n = self._n
        other._cells = [row[:] for row in self._cells]
        return other

    def mirrored(self) -> "Board":
        """Reflect through the anti-diagonal and swap owners.

        Maps (x, y) -> (n-1-y, n-1-x). Player1's upward step becomes
        Player2's rightward step, so legal play is invariant under it.
        """
        n = self._n
        swap = {Cell.EMPTY: Cell.EMPTY, Cell.PLAYER1: Cell.PLAYER2, Cell.PLAYER2: Cell.PLAYER1}
        other = Board(n)
        for y in range(n):
            for x in range(n):
                other._cells[n - 1 - x][n - 1 - y] = swap[self._cells[y][x]]
        return other

    # -- mutators: GameState and search copies only --

    def _set(self, x: int, y: int, cell: Cell) -> None:
        self._cells[y][x] = cell

    def _move_piece(self, src: Square, dst: Square) -> None:
        sx, sy = src
        piece = self._cells[sy][sx]
        self._set(sx, sy, Cell.EMPTY)
        self._set(dst[0], dst[1], piece)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._n == other._n and self._cells == other._cells

    def __str__(self) -> str:
        return "\n".join(self.rows())

    def __repr__(self) -> str:
        return f"Board.from_rows({self.rows()!r})"
