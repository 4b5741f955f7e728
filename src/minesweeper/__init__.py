"""
Minesweeper game module.

Provides the game engine (board, cells, configuration) and a
Gymnasium environment that plays through it.
"""
from .cell import Cell, CellState, CellView
from .board import (
    Board,
    BoardConfig,
    Difficulty,
    GameState,
    GameStats,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    CUSTOM,
    DIFFICULTY_SETTINGS,
)
from .environment import ActionType, MinesweeperEnv, make_vec_env

__all__ = [
    "Cell",
    "CellState",
    "CellView",
    "Board",
    "BoardConfig",
    "Difficulty",
    "GameState",
    "GameStats",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "CUSTOM",
    "DIFFICULTY_SETTINGS",
    "ActionType",
    "MinesweeperEnv",
    "make_vec_env",
]
