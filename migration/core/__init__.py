"""Core engine components: board, move generation, game state, evaluator, search, transposition table and persistence."""

from .board import Board, Cell, Move, Player
from .state import GameState, Status
from .evaluator import Evaluator
from .search import SearchEngine, SearchResult
from .transposition import TranspositionTable
