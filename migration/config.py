# migration/config.py
from dataclasses import dataclass, field, fields
from typing import Dict
import logging
import os
import tomllib  # python >=3.11

from migration.errors import InvalidDepth

logger = logging.getLogger(__name__)

# Observed difficulty presets (plies)
DIFFICULTY_PRESETS: Dict[str, int] = {
    "easy": 1,
    "medium": 3,
    "hard": 5,
}

@dataclass
class GameConfig:
    board_size: int = 8
    difficulty: str = "medium"

@dataclass
class SearchConfig:
    depth: int = 3
    alpha_beta: bool = True
    use_transposition: bool = True
    hash_size_mb: int = 16

@dataclass
class EvalConfig:
    # material_weight must stay above mobility_weight: one extra piece can
    # cost its owner at most one move of mobility.
    material_weight: int = 100
    progress_weight: int = 10
    mobility_weight: int = 5

@dataclass
class UIConfig:
    engine_name: str = "Migration"
    save_path: str = "savegame.txt"
    # HTTP front end only: live game cap and largest board it will create
    max_games: int = 1000
    max_board_size: int = 64

@dataclass
class Config:
    game: GameConfig = field(default_factory=GameConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in fields(cfg):
            table = raw.get(section.name)
            if not isinstance(table, dict):
                continue
            target = getattr(cfg, section.name)
            for k, v in table.items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.warning("Unknown config key [%s].%s ignored", section.name, k)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg


def depth_for(difficulty: str) -> int:
    """Resolve a difficulty preset name to a search depth."""
    try:
        return DIFFICULTY_PRESETS[difficulty.lower()]
    except KeyError:
        raise InvalidDepth(
            f"Unknown difficulty {difficulty!r}; expected one of {sorted(DIFFICULTY_PRESETS)}"
        ) from None


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("MIGRATION_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("MIGRATION_SEARCH_DEPTH")
if override_depth:
    try:
        CONFIG.search.depth = int(override_depth)
    except ValueError:
        logger.warning("Ignoring MIGRATION_SEARCH_DEPTH=%r: not an integer", override_depth)
