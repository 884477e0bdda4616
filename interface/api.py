"""FastAPI REST interface for the engine.

Each game is its own Engine, keyed by a uuid. A per-game lock keeps to one
mutating call at a time; the bot search runs while holding it.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, field_validator

from migration.config import CONFIG, depth_for
from migration.core.board import Move
from migration.errors import (
    CorruptSave,
    GameOver,
    IllegalMove,
    InvalidDepth,
    InvalidSize,
    OutOfBounds,
)
from migration.main import Engine

logging.basicConfig(level=CONFIG.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")


@dataclass
class _Session:
    engine: Engine
    lock: threading.Lock = field(default_factory=threading.Lock)


games: Dict[str, _Session] = {}
_games_lock = threading.Lock()


class NewGameRequest(BaseModel):
    size: int = CONFIG.game.board_size
    depth: Optional[int] = None
    difficulty: Optional[str] = None


class LoadRequest(BaseModel):
    data: str
    depth: Optional[int] = None
    difficulty: Optional[str] = None


class MoveRequest(BaseModel):
    x1: int
    y1: int
    x2: int
    y2: int


class GameView(BaseModel):
    game_id: str
    size: int
    board: List[str]
    current_player: int
    is_over: bool
    winner: Optional[int] = None
    legal_moves: List[List[int]]
    bot_move: Optional[List[int]] = None
    message: Optional[str] = None

    @field_validator("board")
    @classmethod
    def rows_are_square(cls, v: List[str]) -> List[str]:
        if any(len(row) != len(v) for row in v):
            raise ValueError("board rows must form a square")
        return v


def _resolve_depth(depth: Optional[int], difficulty: Optional[str]) -> Optional[int]:
    if depth is not None:
        return depth
    if difficulty is not None:
        return depth_for(difficulty)
    return None


def _view(game_id: str, engine: Engine, bot_move: Optional[Move] = None,
          message: Optional[str] = None) -> GameView:
    winner = engine.winner()
    return GameView(
        game_id=game_id,
        size=engine.size,
        board=engine.board.rows(),
        current_player=int(engine.current_player()),
        is_over=engine.is_over(),
        winner=int(winner) if winner is not None else None,
        legal_moves=[list(m.coords()) for m in engine.legal_moves()],
        bot_move=list(bot_move.coords()) if bot_move else None,
        message=message,
    )


def _check_size(size: int) -> None:
    if size > CONFIG.ui.max_board_size:
        raise HTTPException(
            status_code=400,
            detail=f"Board size {size} exceeds the limit of {CONFIG.ui.max_board_size}",
        )


def _register(engine: Engine) -> str:
    game_id = str(uuid.uuid4())
    with _games_lock:
        if len(games) >= CONFIG.ui.max_games:
            raise HTTPException(status_code=429, detail="Too many open games; delete one first")
        games[game_id] = _Session(engine)
    return game_id


def _session(game_id: str) -> _Session:
    with _games_lock:
        session = games.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return session


@app.post("/games", response_model=GameView)
def create_game(req: NewGameRequest = NewGameRequest()):
    _check_size(req.size)
    try:
        engine = Engine(size=req.size, depth=_resolve_depth(req.depth, req.difficulty))
    except (InvalidSize, InvalidDepth) as e:
        raise HTTPException(status_code=400, detail=str(e))
    game_id = _register(engine)
    return _view(game_id, engine, message="Game created")


@app.post("/games/load", response_model=GameView)
def load_game(req: LoadRequest):
    try:
        engine = Engine.loads(req.data, depth=_resolve_depth(req.depth, req.difficulty))
    except (CorruptSave, InvalidDepth) as e:
        raise HTTPException(status_code=400, detail=str(e))
    _check_size(engine.size)
    game_id = _register(engine)
    return _view(game_id, engine, message="Game loaded")


@app.get("/games/{game_id}", response_model=GameView)
def get_game(game_id: str):
    session = _session(game_id)
    with session.lock:
        return _view(game_id, session.engine)


@app.get("/games/{game_id}/cell/{x}/{y}")
def get_cell(game_id: str, x: int, y: int):
    session = _session(game_id)
    with session.lock:
        try:
            cell = session.engine.cell_at(x, y)
        except OutOfBounds as e:
            raise HTTPException(status_code=400, detail=str(e))
    return {"x": x, "y": y, "cell": cell.symbol}


@app.post("/games/{game_id}/move", response_model=GameView)
def make_move(game_id: str, req: MoveRequest):
    session = _session(game_id)
    with session.lock:
        try:
            move = session.engine.apply_move(req.x1, req.y1, req.x2, req.y2)
        except GameOver as e:
            raise HTTPException(status_code=409, detail=str(e))
        except IllegalMove as e:
            raise HTTPException(status_code=400, detail=f"Blocked! {e}")
        return _view(game_id, session.engine, message=f"Played {move}")


@app.post("/games/{game_id}/bot-move", response_model=GameView)
def bot_move(game_id: str):
    session = _session(game_id)
    with session.lock:
        engine = session.engine
        if engine.is_over():
            raise HTTPException(status_code=409, detail="Game is already over")
        move = engine.play_bot_move()
        msg = f"Bot played {move}" if move else "Bot has no moves"
        return _view(game_id, engine, bot_move=move, message=msg)


@app.get("/games/{game_id}/save", response_class=PlainTextResponse)
def save_game(game_id: str):
    session = _session(game_id)
    with session.lock:
        return session.engine.dumps()


@app.delete("/games/{game_id}")
def delete_game(game_id: str):
    with _games_lock:
        if games.pop(game_id, None) is None:
            raise HTTPException(status_code=404, detail="Game not found")
    return {"deleted": game_id}
