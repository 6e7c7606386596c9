from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_puzzle.game import Game, GameConfig, GamePiece, ManualScheduler, PIECE_COUNT


_PALETTE = np.array(
    [
        (20, 20, 26),
        (0, 240, 240),
        (240, 240, 0),
        (160, 0, 240),
        (0, 240, 0),
        (240, 0, 0),
        (0, 0, 240),
        (240, 160, 0),
        (240, 120, 200),
        (120, 200, 70),
        (70, 120, 240),
        (200, 200, 200),
        (240, 80, 80),
        (90, 230, 190),
        (180, 140, 90),
        (250, 250, 250),
    ],
    dtype=np.uint8,
)


def compute_action_mask(game: Game) -> np.ndarray:
    """Boolean mask over (x, y, rotation) of placements that fit the current piece."""
    mask = np.zeros((game.cols, game.rows, 4), dtype=np.bool_)
    if game.current_piece is None:
        return mask
    for r in range(4):
        piece = GamePiece(game.current_piece.kind, r)
        for x in range(game.cols):
            for y in range(game.rows):
                mask[x, y, r] = game.grid.can_place(piece, x, y)
    return mask


class PlacementEnv(gym.Env):
    """Single-player game exposed as a Gymnasium environment.

    Each step places the current piece at ``(x, y)`` with absolute rotation
    ``r``. The reward is the score gained. A placement that does not fit
    forfeits the turn: the countdown is run to expiry, which costs a life.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 4}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 invalid_action_penalty: float = -1.0,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 1000) -> None:
        super().__init__()
        self.scheduler = ManualScheduler()
        self.game = Game(config, scheduler=self.scheduler)
        self.render_mode = render_mode

        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        cols, rows = self.game.cols, self.game.rows
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=15, shape=(rows, cols), dtype=np.int8),
                "current": spaces.Discrete(PIECE_COUNT),
                "following": spaces.Discrete(PIECE_COUNT),
                "lives": spaces.Discrete(self.game.config.starting_lives + 1),
                "multiplier": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
            }
        )

        # Action: (x, y, rotation)
        self.action_space = spaces.MultiDiscrete((cols, rows, 4))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.grid.clone_state().astype(np.int8),
            "current": self.game.current_piece.piece_id if self.game.current_piece else 0,
            "following": self.game.following_piece.piece_id if self.game.following_piece else 0,
            "lives": self.game.lives,
            "multiplier": np.array([self.game.multiplier], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": compute_action_mask(self.game),
            "score": self.game.score,
            "level": self.game.level,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.reset()
        self.game.start()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        x, y, r = map(int, action)
        score_before = self.game.score
        lives_before = self.game.lives

        piece = self.game.current_piece
        if piece is not None and (r - piece.rotation) % 4:
            self.game.rotate_current_piece((r - piece.rotation) % 4)
        placed = self.game.submit_placement(x, y)
        if not placed and self.game.running:
            self.scheduler.advance(self.game.timer_delay())

        reward_components: Dict[str, float] = {"score": float(self.game.score - score_before)}
        if not placed:
            reward_components["invalid"] = self.invalid_action_penalty

        terminated = bool(self.game.game_over)
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps and not terminated
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        info = self._get_info()
        info["placed"] = placed
        info["lives_lost"] = lives_before - self.game.lives
        info["reward_components"] = reward_components
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            cell = 12
            grid = self.game.grid.clone_state()
            img = _PALETTE[np.clip(grid, 0, 15)]
            return np.repeat(np.repeat(img, cell, axis=0), cell, axis=1)
        return None

    def close(self) -> None:
        self.game.cancel()
