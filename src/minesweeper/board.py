"""
Board module for Minesweeper game.

Implements the game engine: board setup, deferred mine placement,
flood-fill reveal, flag cycling, chording, and win/lose detection.
"""
import logging
import math
import time
from dataclasses import InitVar, dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

import numpy as np

from .cell import Cell, CellState, CellView

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# Bounds applied by BoardConfig.clamped for user-entered dimensions
MIN_DIMENSION = 5
MAX_DIMENSION = 50

# Cells reserved around the first click (full 3x3, even when clipped)
SAFE_ZONE_SIZE = 9

Position = Tuple[int, int]


class GameState(Enum):
    """Possible states of the game."""

    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class Difficulty(Enum):
    """Named difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"
    CUSTOM = "custom"


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines requested.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        if self.num_mines < 1:
            raise ValueError("Board needs at least one mine")
        max_mines = self.width * self.height - 1
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @classmethod
    def clamped(
        cls, width: float, height: float, num_mines: float
    ) -> "BoardConfig":
        """
        Build a configuration from raw user input, forcing it into range.

        Dimensions are floored and kept within MIN_DIMENSION..MAX_DIMENSION,
        then the mine count is kept within 1..(cells - 1) of the clamped
        board.
        """
        width = max(MIN_DIMENSION, min(MAX_DIMENSION, math.floor(width)))
        height = max(MIN_DIMENSION, min(MAX_DIMENSION, math.floor(height)))
        max_mines = max(1, width * height - 1)
        num_mines = max(1, min(max_mines, math.floor(num_mines)))
        return cls(width, height, num_mines)

    @classmethod
    def for_difficulty(
        cls, level: Union[Difficulty, str]
    ) -> "BoardConfig":
        """Return the preset configuration for a difficulty level."""
        return DIFFICULTY_SETTINGS[Difficulty(level)]

    @property
    def total_cells(self) -> int:
        return self.width * self.height

    @property
    def effective_mines(self) -> int:
        """Mines actually placed once the first-click zone is reserved."""
        return max(0, min(self.num_mines, self.total_cells - SAFE_ZONE_SIZE))


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)
CUSTOM = BoardConfig(16, 16, 40)

DIFFICULTY_SETTINGS: Dict[Difficulty, BoardConfig] = {
    Difficulty.BEGINNER: BEGINNER,
    Difficulty.INTERMEDIATE: INTERMEDIATE,
    Difficulty.EXPERT: EXPERT,
    Difficulty.CUSTOM: CUSTOM,
}


@dataclass(frozen=True)
class GameStats:
    """
    Summary statistics for display.

    Attributes:
        elapsed_seconds: Whole seconds since the first reveal.
        flags_placed: Cells currently flagged.
        mines_total: Mines in this game.
        game_state: Current game state.
    """

    elapsed_seconds: int
    flags_placed: int
    mines_total: int
    game_state: GameState

    @property
    def mines_remaining(self) -> int:
        """Mine counter shown to the player (negative when over-flagged)."""
        return self.mines_total - self.flags_placed


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Manages the grid of cells, mine placement, revealing logic,
    and win/lose conditions. Coordinates are ``(x, y)`` with ``x`` the
    column and ``y`` the row. All mutation goes through ``reveal``,
    ``flag``, ``chord`` and ``reset``; queries return copies.

    Args:
        config: Board configuration.
        seed: Seed for the default random source.
        rng: Random source used for mine placement (overrides ``seed``).
        clock: Wall-clock source in seconds.
    """

    config: BoardConfig = field(default_factory=BoardConfig)
    seed: InitVar[Optional[int]] = None
    rng: Optional[np.random.Generator] = field(default=None, repr=False)
    clock: Callable[[], float] = field(default=time.time, repr=False)
    _grid: List[List[Cell]] = field(init=False, default_factory=list, repr=False)
    _game_state: GameState = field(init=False, default=GameState.PLAYING)
    _first_click: bool = field(init=False, default=True)
    _mines_placed: bool = field(init=False, default=False)
    _mine_count: int = field(init=False, default=0)
    _start_time: Optional[float] = field(init=False, default=None)
    _end_time: Optional[float] = field(init=False, default=None)

    def __post_init__(self, seed: Optional[int]) -> None:
        """Initialize the grid after dataclass creation."""
        if self.rng is None:
            self.rng = np.random.default_rng(seed)
        self._init_grid()

    @classmethod
    def create(cls, config: BoardConfig, **kwargs) -> "Board":
        """Create a new game with a hidden, placement-deferred board."""
        return cls(config, **kwargs)

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of hidden cells."""
        self._grid = [
            [Cell(x, y) for x in range(self.config.width)]
            for y in range(self.config.height)
        ]

    def _place_mines(self, click_x: int, click_y: int) -> None:
        """
        Place mines randomly, keeping the 3x3 around the click mine-free.

        Args:
            click_x: Column of the first click.
            click_y: Row of the first click.
        """
        safe_zone = self._get_safe_zone(click_x, click_y)
        candidates = [
            (x, y)
            for y in range(self.config.height)
            for x in range(self.config.width)
            if (x, y) not in safe_zone
        ]
        count = self.config.effective_mines
        chosen = []
        if count:
            chosen = self.rng.choice(len(candidates), size=count, replace=False)
        self._lay_mines(candidates[int(i)] for i in chosen)
        logger.debug(
            "Placed %d mines on %dx%d board, first click at (%d, %d)",
            self._mine_count, self.config.width, self.config.height,
            click_x, click_y,
        )

    def _get_safe_zone(self, x: int, y: int) -> Set[Position]:
        """Get the in-bounds 3x3 block centred on a position."""
        zone = {(x, y)}
        zone.update(self._get_neighbors(x, y))
        return zone

    def _lay_mines(self, positions: Iterable[Position]) -> None:
        """Mark the given positions as mines and compute neighbor counts."""
        for x, y in positions:
            self._grid[y][x].is_mine = True
        self._mines_placed = True
        self._mine_count = sum(
            1 for row in self._grid for cell in row if cell.is_mine
        )
        self._calculate_neighbor_mines()

    def _calculate_neighbor_mines(self) -> None:
        """Calculate neighboring mine counts for all safe cells."""
        for row in self._grid:
            for cell in row:
                if not cell.is_mine:
                    cell.neighbor_mines = self._count_neighbor_mines(
                        cell.x, cell.y
                    )

    def _count_neighbor_mines(self, x: int, y: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_x, neighbor_y in self._get_neighbors(x, y):
            if self._grid[neighbor_y][neighbor_x].is_mine:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, x: int, y: int) -> List[Position]:
        """
        Get valid neighboring cell positions.

        Args:
            x: Column index of center cell.
            y: Row index of center cell.

        Returns:
            List of (x, y) tuples for in-bounds neighbors.
        """
        neighbors = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self._is_valid_position(new_x, new_y):
                    neighbors.append((new_x, new_y))
        return neighbors

    def _is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.config.width and 0 <= y < self.config.height

    def _cell_at(self, x: int, y: int) -> Cell:
        """Get the cell at a position, rejecting out-of-bounds access."""
        if not self._is_valid_position(x, y):
            raise IndexError(
                f"Position ({x}, {y}) is outside the "
                f"{self.config.width}x{self.config.height} board"
            )
        return self._grid[y][x]

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, x: int, y: int) -> bool:
        """
        Reveal a cell at the given position (primary action).

        On first click, places mines around this cell and starts the clock.
        If cell is empty (0 neighboring mines), reveals the connected region.
        If cell is a mine, game is lost.

        Args:
            x: Column index to reveal.
            y: Row index to reveal.

        Returns:
            True if any cell was revealed, False otherwise.

        Raises:
            IndexError: If the position is outside the board.
        """
        cell = self._cell_at(x, y)
        if self._game_state != GameState.PLAYING:
            return False
        if cell.is_flagged or cell.is_questioned:
            return False

        if self._first_click:
            self._handle_first_click(x, y)

        return self._reveal_area(x, y)

    def _handle_first_click(self, x: int, y: int) -> None:
        """Handle first click: place mines and start timing."""
        self._first_click = False
        if not self._mines_placed:
            self._place_mines(x, y)
        self._start_time = self.clock()

    def _reveal_area(self, x: int, y: int) -> bool:
        """Reveal a cell and flood outward through zero-count cells."""
        if not self._grid[y][x].is_hidden:
            return False

        pending = [(x, y)]
        while pending:
            cell_x, cell_y = pending.pop()
            cell = self._grid[cell_y][cell_x]
            if not cell.reveal():
                continue

            if cell.is_mine:
                self._lose()
                return True

            if cell.neighbor_mines == 0:
                for neighbor_x, neighbor_y in self._get_neighbors(cell_x, cell_y):
                    if self._grid[neighbor_y][neighbor_x].is_hidden:
                        pending.append((neighbor_x, neighbor_y))

        self._check_win_condition()
        return True

    def _lose(self) -> None:
        """End the game as lost and expose every mine."""
        self._game_state = GameState.LOST
        self._end_time = self.clock()
        for row in self._grid:
            for cell in row:
                if cell.is_mine:
                    cell.state = CellState.REVEALED
        logger.info("Game lost after %d seconds", self.elapsed_seconds)

    def _check_win_condition(self) -> None:
        """Check if all non-mine cells are revealed."""
        unrevealed = sum(
            1 for row in self._grid for cell in row if not cell.is_revealed
        )
        if unrevealed != self._mine_count:
            return

        self._game_state = GameState.WON
        self._end_time = self.clock()
        for row in self._grid:
            for cell in row:
                if cell.is_mine and not cell.is_revealed:
                    cell.state = CellState.FLAGGED
        logger.info("Game won in %d seconds", self.elapsed_seconds)

    def flag(self, x: int, y: int) -> bool:
        """
        Cycle the mark on a cell (secondary action).

        hidden -> flagged -> questioned -> hidden

        Args:
            x: Column index.
            y: Row index.

        Returns:
            True if the mark changed, False otherwise.

        Raises:
            IndexError: If the position is outside the board.
        """
        cell = self._cell_at(x, y)
        if self._game_state != GameState.PLAYING:
            return False
        return cell.cycle_mark()

    def chord(self, x: int, y: int) -> bool:
        """
        Chord action: reveal hidden neighbors if flag count matches.

        Questioned neighbors are left alone.

        Args:
            x: Column index.
            y: Row index.

        Returns:
            True if any neighbor was revealed, False otherwise.

        Raises:
            IndexError: If the position is outside the board.
        """
        cell = self._cell_at(x, y)
        if not self._can_chord(cell):
            return False

        revealed_any = False
        for neighbor_x, neighbor_y in self._get_neighbors(x, y):
            if self._game_state != GameState.PLAYING:
                break
            if self._grid[neighbor_y][neighbor_x].is_hidden:
                revealed_any |= self._reveal_area(neighbor_x, neighbor_y)

        return revealed_any

    def _can_chord(self, cell: Cell) -> bool:
        """Check if chord action is valid."""
        if self._game_state != GameState.PLAYING:
            return False
        if not cell.is_revealed or cell.neighbor_mines == 0:
            return False
        flag_count = self._count_neighbor_flags(cell.x, cell.y)
        return flag_count == cell.neighbor_mines

    def _count_neighbor_flags(self, x: int, y: int) -> int:
        """Count flagged cells adjacent to position."""
        count = 0
        for neighbor_x, neighbor_y in self._get_neighbors(x, y):
            if self._grid[neighbor_y][neighbor_x].is_flagged:
                count += 1
        return count

    def reset(self, config: Optional[BoardConfig] = None) -> None:
        """
        Reset board to initial state for new game.

        Args:
            config: Replacement configuration; keeps the current one if None.
        """
        if config is not None:
            self.config = config
        self._init_grid()
        self._game_state = GameState.PLAYING
        self._first_click = True
        self._mines_placed = False
        self._mine_count = 0
        self._start_time = None
        self._end_time = None

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._game_state == GameState.LOST

    @property
    def mines_placed(self) -> bool:
        """Check if the mine layout has been generated."""
        return self._mines_placed

    @property
    def mines_total(self) -> int:
        """Mines in this game (known before placement)."""
        if self._mines_placed:
            return self._mine_count
        return self.config.effective_mines

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds since the first reveal, frozen once the game ends."""
        if self._start_time is None:
            return 0
        end = self._end_time if self._end_time is not None else self.clock()
        return max(0, math.floor(end - self._start_time))

    def get_cell(self, x: int, y: int) -> CellView:
        """
        Get a read-only view of the cell at a position.

        Raises:
            IndexError: If the position is outside the board.
        """
        return self._cell_at(x, y).to_view()

    def snapshot(self) -> Tuple[Tuple[CellView, ...], ...]:
        """
        Get a read-only copy of the whole board for rendering.

        Returns:
            Rows of cell views, indexed ``[y][x]``.
        """
        return tuple(
            tuple(cell.to_view() for cell in row) for row in self._grid
        )

    def stats(self) -> GameStats:
        """Get summary statistics for the current game."""
        flags_placed = sum(
            1 for row in self._grid for cell in row if cell.is_flagged
        )
        return GameStats(
            elapsed_seconds=self.elapsed_seconds,
            flags_placed=flags_placed,
            mines_total=self.mines_total,
            game_state=self._game_state,
        )

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D numpy array indexed ``[y, x]`` where:
                -1 = hidden
                -2 = flagged
                -3 = questioned
                0-8 = revealed with neighboring count
                9 = revealed mine
        """
        obs = np.zeros((self.config.height, self.config.width), dtype=np.int8)
        for row in self._grid:
            for cell in row:
                obs[cell.y, cell.x] = cell.to_observation()
        return obs

    def get_valid_actions(self) -> List[Position]:
        """
        Get list of cells that can be revealed.

        Returns:
            List of (x, y) positions that are still hidden.
        """
        return [
            (cell.x, cell.y)
            for row in self._grid
            for cell in row
            if cell.is_hidden
        ]
