"""
Gymnasium environment wrapper for Minesweeper.

Drives the game engine through its public commands so agents and
scripts can play it like any other consumer.
"""
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig


class ActionType(IntEnum):
    """Commands an action can issue."""

    REVEAL = 0
    FLAG = 1
    CHORD = 2


# Rewards
REWARD_SAFE = 1.0
REWARD_WIN = 10.0
REWARD_MINE = -10.0
REWARD_NOOP = -0.1
REWARD_FLAG = 0.0

_SYMBOLS = {-1: ".", -2: "F", -3: "?", 9: "*", 0: " "}


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array indexed [y, x] where:
        - -1 = hidden cell
        - -2 = flagged cell
        - -3 = questioned cell
        - 0-8 = revealed cell with neighboring mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size 3 * width * height.
        ``action // (width * height)`` is the ActionType and the
        remainder ``i`` is the cell (x = i % width, y = i // width).

    Rewards:
        - +1 for a reveal or chord that opens safe cells
        - +10 for winning the game
        - -10 for hitting a mine
        - 0 for cycling a mark
        - -0.1 for an action that changes nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.board = Board(self.config)
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-3,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )

        self._num_cells = self.config.width * self.config.height
        self.action_space = spaces.Discrete(len(ActionType) * self._num_cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.board.rng = self.np_random
        self.board.reset()
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Encoded (action type, cell) index.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        action_type, x, y = self.decode_action(action)
        self._steps += 1

        reward = self._apply(action_type, x, y)

        observation = self.board.get_observation()
        terminated = not self.board.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def decode_action(self, action: int) -> Tuple[ActionType, int, int]:
        """Convert flat action index to (action type, x, y)."""
        action_type, index = divmod(int(action), self._num_cells)
        y, x = divmod(index, self.config.width)
        return ActionType(action_type), x, y

    def encode_action(self, action_type: ActionType, x: int, y: int) -> int:
        """Convert (action type, x, y) to a flat action index."""
        return int(action_type) * self._num_cells + y * self.config.width + x

    def _apply(self, action_type: ActionType, x: int, y: int) -> float:
        """Run the command on the board and score the result."""
        if action_type == ActionType.FLAG:
            return REWARD_FLAG if self.board.flag(x, y) else REWARD_NOOP

        if action_type == ActionType.REVEAL:
            changed = self.board.reveal(x, y)
        else:
            changed = self.board.chord(x, y)

        if not changed:
            return REWARD_NOOP
        if self.board.is_won:
            return REWARD_WIN
        if self.board.is_lost:
            return REWARD_MINE
        return REWARD_SAFE

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        stats = self.board.stats()
        revealed = int(np.count_nonzero(self.board.get_observation() >= 0))

        return {
            "steps": self._steps,
            "revealed": revealed,
            "total_safe": self._num_cells - stats.mines_total,
            "flags_placed": stats.flags_placed,
            "elapsed_seconds": stats.elapsed_seconds,
            "game_state": stats.game_state.value,
            "valid_actions": len(self.board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        obs = self.board.get_observation()
        lines = []
        for row in obs:
            lines.append(
                "".join(_SYMBOLS.get(int(val), str(val)) + " " for val in row)
            )
        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions worth attempting.

        Reveals are valid on hidden cells, flag cycling on any
        unrevealed cell, chords on revealed numbered cells (whether
        the flags around them match is left to the board).

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if not self.board.is_playing:
            return mask

        obs = self.board.get_observation().ravel()
        cells = self._num_cells
        mask[:cells] = obs == -1
        mask[cells:2 * cells] = obs < 0
        mask[2 * cells:] = (obs > 0) & (obs < 9)
        return mask


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    config: Optional[BoardConfig] = None,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel rollouts.

    Args:
        n_envs: Number of parallel environments.
        config: Board configuration.

    Returns:
        Vectorized environment.
    """
    def make_env() -> MinesweeperEnv:
        return MinesweeperEnv(config=config)

    return gym.vector.AsyncVectorEnv([make_env for _ in range(n_envs)])
