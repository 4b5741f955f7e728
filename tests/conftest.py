"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Iterable, Optional, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import Board, BoardConfig, Cell, MinesweeperEnv


# ============================================================================
# Helpers
# ============================================================================

class FakeClock:
    """Manually advanced clock for timing tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def rig_board(
    width: int,
    height: int,
    mines: Iterable[Tuple[int, int]],
    clock: Optional[FakeClock] = None,
) -> Board:
    """Create a board with mines at fixed (x, y) positions."""
    mines = list(mines)
    board = Board(
        BoardConfig(width, height, len(mines)),
        clock=clock or FakeClock(),
    )
    board._lay_mines(mines)
    return board


def count_mines(board: Board) -> int:
    """Count mine cells in a board snapshot."""
    return sum(1 for row in board.snapshot() for cell in row if cell.is_mine)


def revealed_positions(board: Board) -> set:
    """Get the (x, y) positions of revealed cells."""
    return {
        (cell.x, cell.y)
        for row in board.snapshot()
        for cell in row
        if cell.is_revealed
    }


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board(seed=1234)


@pytest.fixture
def beginner_board() -> Board:
    """Create a beginner difficulty board."""
    return Board(BoardConfig(9, 9, 10), seed=7)


@pytest.fixture
def wall_board(clock: FakeClock) -> Board:
    """
    5x5 board with a column of mines at x=2.

    Column 0 is all zeros, column 1 is numbered, columns 3-4 are
    cut off from the left side.
    """
    return rig_board(5, 5, [(2, y) for y in range(5)], clock)


@pytest.fixture
def corner_mine_board(clock: FakeClock) -> Board:
    """5x5 board with a single mine in the top-left corner."""
    return rig_board(5, 5, [(0, 0)], clock)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


@pytest.fixture
def numbered_cell() -> Cell:
    """Create a revealed cell with neighboring mines."""
    cell = Cell(neighbor_mines=3)
    cell.reveal()
    return cell


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)


@pytest.fixture
def intermediate_config() -> BoardConfig:
    """Intermediate difficulty configuration."""
    return BoardConfig(16, 16, 40)


@pytest.fixture
def expert_config() -> BoardConfig:
    """Expert difficulty configuration."""
    return BoardConfig(30, 16, 99)


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture
def env() -> MinesweeperEnv:
    """Create a seeded beginner environment."""
    environment = MinesweeperEnv(render_mode="ansi")
    environment.reset(seed=0)
    return environment
