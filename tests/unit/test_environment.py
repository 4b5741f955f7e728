"""
Unit tests for the Gymnasium environment.

Tests spaces, action encoding, rewards, masks and seeding.
"""
import numpy as np
import pytest
from minesweeper import ActionType, BoardConfig, MinesweeperEnv
from minesweeper.environment import (
    REWARD_FLAG,
    REWARD_MINE,
    REWARD_NOOP,
    REWARD_SAFE,
    REWARD_WIN,
)

from conftest import rig_board


def rigged_env(width, height, mines) -> MinesweeperEnv:
    """Environment wrapping a board with fixed mine positions."""
    environment = MinesweeperEnv(BoardConfig(width, height, len(mines)))
    environment.board = rig_board(width, height, mines)
    return environment


# ============================================================================
# Space Tests
# ============================================================================

class TestSpaces:
    """Test observation and action spaces."""

    def test_observation_space_matches_board(self) -> None:
        environment = MinesweeperEnv(BoardConfig(7, 4, 3))
        assert environment.observation_space.shape == (4, 7)
        assert environment.observation_space.dtype == np.int8

    def test_action_space_covers_every_command(self) -> None:
        environment = MinesweeperEnv(BoardConfig(7, 4, 3))
        assert environment.action_space.n == 3 * 28

    def test_reset_observation_all_hidden(self, env: MinesweeperEnv) -> None:
        obs, info = env.reset(seed=1)
        assert env.observation_space.contains(obs)
        assert np.all(obs == -1)
        assert info["game_state"] == "playing"
        assert info["valid_actions"] == 81


# ============================================================================
# Action Encoding Tests
# ============================================================================

class TestActionEncoding:
    """Test flat action index conversion."""

    @pytest.mark.parametrize(
        "action_type, x, y",
        [
            (ActionType.REVEAL, 0, 0),
            (ActionType.FLAG, 8, 0),
            (ActionType.CHORD, 3, 7),
        ],
    )
    def test_encode_decode_agree(
        self, env: MinesweeperEnv, action_type, x, y
    ) -> None:
        action = env.encode_action(action_type, x, y)
        assert env.decode_action(action) == (action_type, x, y)

    def test_layout_is_row_major(self, env: MinesweeperEnv) -> None:
        assert env.decode_action(10) == (ActionType.REVEAL, 1, 1)
        assert env.decode_action(81) == (ActionType.FLAG, 0, 0)


# ============================================================================
# Step Tests
# ============================================================================

class TestStep:
    """Test rewards and termination."""

    def test_first_reveal_is_safe(self, env: MinesweeperEnv) -> None:
        action = env.encode_action(ActionType.REVEAL, 4, 4)
        obs, reward, terminated, truncated, info = env.step(action)
        assert reward in (REWARD_SAFE, REWARD_WIN)
        assert obs[4, 4] == 0
        assert truncated is False
        assert info["steps"] == 1
        assert info["revealed"] >= 9

    def test_flag_cycle_rewards(self, env: MinesweeperEnv) -> None:
        action = env.encode_action(ActionType.FLAG, 0, 0)
        _, reward, _, _, info = env.step(action)
        assert reward == REWARD_FLAG
        assert info["flags_placed"] == 1

    def test_noop_is_penalised(self, env: MinesweeperEnv) -> None:
        env.step(env.encode_action(ActionType.REVEAL, 4, 4))
        _, reward, _, _, _ = env.step(env.encode_action(ActionType.REVEAL, 4, 4))
        assert reward == REWARD_NOOP

    def test_hitting_mine_terminates(self) -> None:
        environment = rigged_env(5, 5, [(0, 0)])
        environment.step(environment.encode_action(ActionType.REVEAL, 1, 1))
        _, reward, terminated, _, info = environment.step(
            environment.encode_action(ActionType.REVEAL, 0, 0)
        )
        assert reward == REWARD_MINE
        assert terminated is True
        assert info["game_state"] == "lost"

    def test_chord_can_win(self) -> None:
        environment = rigged_env(5, 5, [(0, 0)])
        environment.step(environment.encode_action(ActionType.REVEAL, 1, 1))
        environment.step(environment.encode_action(ActionType.FLAG, 0, 0))
        _, reward, terminated, _, info = environment.step(
            environment.encode_action(ActionType.CHORD, 1, 1)
        )
        assert reward == REWARD_WIN
        assert terminated is True
        assert info["game_state"] == "won"
        assert info["total_safe"] == 24

    def test_same_seed_reproduces_episode(self) -> None:
        first = MinesweeperEnv()
        second = MinesweeperEnv()
        first.reset(seed=42)
        second.reset(seed=42)
        action = first.encode_action(ActionType.REVEAL, 2, 6)
        obs_first = first.step(action)[0]
        obs_second = second.step(action)[0]
        assert np.array_equal(obs_first, obs_second)


# ============================================================================
# Mask and Render Tests
# ============================================================================

class TestMaskAndRender:
    """Test action masks and text rendering."""

    def test_fresh_mask_allows_reveal_and_flag(
        self, env: MinesweeperEnv
    ) -> None:
        mask = env.get_action_mask()
        assert mask[:81].all()
        assert mask[81:162].all()
        assert not mask[162:].any()

    def test_mask_follows_board(self) -> None:
        environment = rigged_env(5, 5, [(0, 0)])
        environment.step(environment.encode_action(ActionType.REVEAL, 1, 1))
        mask = environment.get_action_mask()
        assert not mask[environment.encode_action(ActionType.REVEAL, 1, 1)]
        assert not mask[environment.encode_action(ActionType.FLAG, 1, 1)]
        assert mask[environment.encode_action(ActionType.CHORD, 1, 1)]

    def test_mask_empty_after_game_over(self) -> None:
        environment = rigged_env(5, 5, [(0, 0)])
        environment.step(environment.encode_action(ActionType.REVEAL, 0, 0))
        assert not environment.get_action_mask().any()

    def test_render_ansi(self, env: MinesweeperEnv) -> None:
        env.step(env.encode_action(ActionType.FLAG, 0, 0))
        env.step(env.encode_action(ActionType.FLAG, 1, 0))
        env.step(env.encode_action(ActionType.FLAG, 1, 0))
        text = env.render()
        lines = text.split("\n")
        assert len(lines) == 9
        assert lines[0].startswith("F ? . ")
