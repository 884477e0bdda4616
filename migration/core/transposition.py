"""Zobrist hashing and a bounded, thread-safe transposition table.

This module provides two main classes:

- Zobrist: random keys per (cell owner, square) plus a side-to-move key,
  built lazily for each board size. Keys are computed from scratch for a
  board; the search copies boards anyway, so incremental upkeep buys little.

- TranspositionTable: a dict keyed by (zobrist key, remaining depth).
  Each entry stores the board signature for collision detection, the
  search value and its bound flag. Entries are only ever reused at the
  same remaining depth, so a hit returns exactly what a fresh depth-limited
  search would have computed.

Usage (example):

    from migration.core.transposition import TranspositionTable, TT_EXACT

    tt = TranspositionTable()
    tt.store(board, Player.PLAYER1, depth=3, value=120, flag=TT_EXACT)
    entry = tt.get(board, Player.PLAYER1, depth=3)
    if entry is not None:
        print(entry.depth, entry.value, entry.flag)
"""
from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from migration.core.board import Board, Cell, Player

TT_EXACT = 0
TT_ALPHA = 1  # upper bound: true value <= stored value
TT_BETA = 2   # lower bound: true value >= stored value

# rough per-entry footprint used to turn megabytes into an entry budget
ENTRY_BYTES = 256


@dataclass
class TTEntry:
    signature: str
    player: Player
    depth: int
    value: int
    flag: int


class Zobrist:
    """Zobrist hash utilities, seeded so keys are reproducible across runs."""

    def __init__(self, seed: int = 0):
        self._rng = random.Random(seed)
        self._tables: Dict[int, Dict[Cell, List[int]]] = {}
        self.side = self._rng.getrandbits(64)

    def _table(self, n: int) -> Dict[Cell, List[int]]:
        table = self._tables.get(n)
        if table is None:
            table = {
                cell: [self._rng.getrandbits(64) for _ in range(n * n)]
                for cell in (Cell.PLAYER1, Cell.PLAYER2)
            }
            self._tables[n] = table
        return table

    def hash(self, board: Board, player: Player) -> int:
        n = board.size()
        t = self._table(n)
        h = 0
        for cell in (Cell.PLAYER1, Cell.PLAYER2):
            keys = t[cell]
            for x, y in board.squares(cell):
                h ^= keys[y * n + x]
        # side: xor when Player2 is to move (convention)
        if player == Player.PLAYER2:
            h ^= self.side
        return h


class TranspositionTable:
    """Thread-safe transposition table bounded by `size_mb`.

    When full, the oldest entry is evicted. Methods:
      - get(board, player, depth) -> Optional[TTEntry]
      - store(board, player, depth, value, flag)
      - clear()
      - key(board, player) -> int  (zobrist key)
    """

    def __init__(self, size_mb: int = 16, seed: int = 0):
        self.z = Zobrist(seed)
        self.max_entries = max(1, (size_mb * 1024 * 1024) // ENTRY_BYTES)
        self._table: Dict[Tuple[int, int], TTEntry] = {}
        self._lock = threading.Lock()

    def key(self, board: Board, player: Player) -> int:
        return self.z.hash(board, player)

    def get(self, board: Board, player: Player, depth: int) -> Optional[TTEntry]:
        k = (self.key(board, player), depth)
        with self._lock:
            entry = self._table.get(k)
        if entry is None:
            return None
        # verify signature to avoid rare collisions
        if entry.player != player or entry.signature != board.signature():
            return None
        return entry

    def store(self, board: Board, player: Player, depth: int, value: int, flag: int) -> None:
        k = (self.key(board, player), depth)
        entry = TTEntry(board.signature(), player, depth, value, flag)
        with self._lock:
            if k not in self._table and len(self._table) >= self.max_entries:
                self._table.pop(next(iter(self._table)))
            self._table[k] = entry

    def clear(self) -> None:
        with self._lock:
            self._table.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)
