"""Plain-text save format.

    3        <- board size n
    ...      <- n rows, top to bottom, one symbol per cell (. 1 2)
    2..
    .1.
    1        <- side to move

Search depth is not stored; it is supplied again when a game is loaded.
"""

import logging
import os
from typing import List

from migration.core.board import Board, Cell, Player
from migration.core.state import GameState
from migration.errors import CorruptSave, SerializationError

logger = logging.getLogger(__name__)


def dumps(state: GameState) -> str:
    if not isinstance(state, GameState):
        raise SerializationError(f"Cannot serialize {type(state).__name__}; expected GameState")
    lines = [str(state.size), *state.board.rows(), state.current_player.symbol]
    return "\n".join(lines) + "\n"


def loads(text: str) -> GameState:
    """Decode a save. Raises CorruptSave on any malformed input."""
    lines = [line.rstrip() for line in text.splitlines()]
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        raise CorruptSave("Save is empty")

    try:
        n = int(lines[0])
    except ValueError:
        raise CorruptSave(f"Board size {lines[0]!r} is not an integer") from None
    if n < 2:
        raise CorruptSave(f"Board size {n} is below the minimum of 2")

    rows = lines[1:-1]
    if len(lines) < 2 or len(rows) != n:
        raise CorruptSave(f"Declared size {n} but found {max(len(lines) - 2, 0)} rows")

    cells: List[str] = []
    for y, row in enumerate(rows):
        tokens = row.split() if " " in row.strip() else list(row.strip())
        if len(tokens) != n:
            raise CorruptSave(f"Row {y} has {len(tokens)} cells, expected {n}")
        for token in tokens:
            try:
                Cell.from_symbol(token)
            except ValueError:
                raise CorruptSave(f"Row {y} has invalid cell token {token!r}") from None
        cells.append("".join(tokens))

    try:
        player = Player.from_symbol(lines[-1].strip())
    except ValueError:
        raise CorruptSave(f"Invalid side-to-move symbol {lines[-1]!r}") from None

    return GameState(Board.from_rows(cells), player)


def save(state: GameState, path: str) -> None:
    """Write `state` to `path`; the file is replaced whole or not at all."""
    data = dumps(state)
    tmp_path = f"{path}.tmp"
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.info("Saved %dx%d game to %s", state.size, state.size, path)


def load(path: str) -> GameState:
    with open(path, "r", encoding="utf-8") as f:
        try:
            text = f.read()
        except UnicodeDecodeError as e:
            raise CorruptSave(f"Save is not valid UTF-8: {e}") from None
    state = loads(text)
    logger.info("Loaded %dx%d game from %s", state.size, state.size, path)
    return state
