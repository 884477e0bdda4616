"""Console front end: the human plays Player1, the engine plays Player2."""

import argparse
import logging
import sys
from typing import Callable, List, Optional

from migration.config import CONFIG, DIFFICULTY_PRESETS, depth_for
from migration.core.board import Player
from migration.errors import CorruptSave, IllegalMove, MigrationError
from migration.main import Engine

logger = logging.getLogger(__name__)

HUMAN = Player.PLAYER1
HELP = "Commands: 'x1 y1 x2 y2' to move, 'moves', 'save', 'quit'"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def render(engine: Engine) -> str:
    n = engine.size
    header = "   " + " ".join(str(x % 10) for x in range(n))
    lines = [header]
    for y, row in enumerate(engine.board.rows()):
        lines.append(f"{y:>2} " + " ".join(row))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Migration against the engine.")
    parser.add_argument("--size", type=int, default=CONFIG.game.board_size, help="Board size (n >= 2)")
    parser.add_argument("--difficulty", choices=sorted(DIFFICULTY_PRESETS), default=CONFIG.game.difficulty)
    parser.add_argument("--depth", type=int, default=None, help="Search depth; overrides --difficulty")
    parser.add_argument("--load", metavar="PATH", default=None, help="Resume a saved game")
    parser.add_argument("--save-path", default=CONFIG.ui.save_path)
    parser.add_argument("--log-level", type=str.upper, default=CONFIG.log_level.upper(),
                        choices=LOG_LEVELS)
    return parser


def bot_turn(engine: Engine, output: Callable[[str], None]) -> bool:
    """Play the engine's move. Returns False when the search produced none."""
    result = []
    worker = engine.start_bot_move(result.append)
    worker.join()
    move = result[0] if result else None
    if move is None:
        output("Engine search failed; ending the game.")
        return False
    x1, y1, x2, y2 = move.coords()
    engine.apply_move(x1, y1, x2, y2)
    output(f"Engine plays {move}")
    return True


def human_turn(engine: Engine, command: str, save_path: str,
               output: Callable[[str], None]) -> bool:
    """Handle one line of input. Returns False when the player quits."""
    command = command.strip().lower()
    if command in ("quit", "exit", "q"):
        return False
    if command == "moves":
        output(" ".join(str(m) for m in engine.legal_moves()) or "(none)")
        return True
    if command == "save":
        try:
            path = engine.save(save_path)
        except OSError as e:
            output(f"Save failed: {e}")
        else:
            output(f"Saved to {path}")
        return True

    try:
        x1, y1, x2, y2 = (int(tok) for tok in command.replace(",", " ").split())
    except ValueError:
        output(HELP)
        return True
    try:
        engine.apply_move(x1, y1, x2, y2)
    except IllegalMove:
        output("Blocked!")
    return True


def play(engine: Engine, save_path: str, input_fn: Callable[[str], str] = input,
         output: Callable[[str], None] = print) -> Optional[Player]:
    """Run the game loop until it ends or the player quits. Returns the winner."""
    output(HELP)
    while not engine.is_over():
        output(render(engine))
        output("----------------------------")
        if engine.current_player() == HUMAN:
            try:
                command = input_fn(f"{HUMAN.name} move: ")
            except EOFError:
                return None
            if not human_turn(engine, command, save_path, output):
                return None
        elif not bot_turn(engine, output):
            return None

    output(render(engine))
    winner = engine.winner()
    output("Game Over")
    output("You win!" if winner == HUMAN else "Engine wins!")
    return winner


def main(argv: Optional[List[str]] = None, input_fn: Callable[[str], str] = input,
         output: Callable[[str], None] = print) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        depth = args.depth if args.depth is not None else depth_for(args.difficulty)
        if args.load:
            engine = Engine.load(args.load, depth=depth)
        else:
            engine = Engine(size=args.size, depth=depth)
    except (OSError, CorruptSave) as e:
        output(f"Could not load {args.load}: {e}")
        return 1
    except MigrationError as e:
        output(str(e))
        return 2

    play(engine, args.save_path, input_fn=input_fn, output=output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
