"""
Cell module for Minesweeper game.

Represents individual cells on the game board with their state
(hidden/revealed/flagged/questioned) and content (mine/number).
"""
from enum import Enum
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = "hidden"
    REVEALED = "revealed"
    FLAGGED = "flagged"
    QUESTIONED = "questioned"


# Right-click ring: hidden -> flagged -> questioned -> hidden
_MARK_CYCLE = {
    CellState.HIDDEN: CellState.FLAGGED,
    CellState.FLAGGED: CellState.QUESTIONED,
    CellState.QUESTIONED: CellState.HIDDEN,
}


# ============================================================================
# Cell Data Classes
# ============================================================================

@dataclass(frozen=True)
class CellView:
    """
    Read-only copy of a cell, handed out by board queries.

    Attributes:
        x: Column index.
        y: Row index.
        is_mine: Whether this cell contains a mine.
        state: Visual state at the time the view was taken.
        neighbor_mines: Count of mines in neighboring cells (0-8).
    """

    x: int
    y: int
    is_mine: bool
    state: CellState
    neighbor_mines: int

    @property
    def is_hidden(self) -> bool:
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        return self.state == CellState.FLAGGED

    @property
    def is_questioned(self) -> bool:
        return self.state == CellState.QUESTIONED


@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Cells are owned by the board; consumers only ever see ``CellView``
    copies produced by ``to_view``.

    Attributes:
        x: Column index (fixed at creation).
        y: Row index (fixed at creation).
        is_mine: Whether this cell contains a mine.
        neighbor_mines: Count of mines in neighboring cells (0-8).
        state: Current visual state.
    """

    x: int = 0
    y: int = 0
    is_mine: bool = False
    neighbor_mines: int = 0
    state: CellState = CellState.HIDDEN

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was revealed, False if it was not hidden
            (already revealed, flagged or questioned).
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def cycle_mark(self) -> bool:
        """
        Advance the cell one step along the flag ring.

        Returns:
            True if the mark changed, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        self.state = _MARK_CYCLE[self.state]
        return True

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_questioned(self) -> bool:
        """Check if cell carries a question mark."""
        return self.state == CellState.QUESTIONED

    def to_view(self) -> CellView:
        """Return an immutable copy of this cell."""
        return CellView(
            x=self.x,
            y=self.y,
            is_mine=self.is_mine,
            state=self.state,
            neighbor_mines=self.neighbor_mines,
        )

    def to_observation(self) -> int:
        """
        Convert cell to an integer observation value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            -3: Questioned cell
            0-8: Revealed cell with neighboring mine count
            9: Revealed mine (game over state)
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.state == CellState.QUESTIONED:
            return -3
        if self.is_mine:
            return 9
        return self.neighbor_mines
