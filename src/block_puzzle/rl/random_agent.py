from __future__ import annotations

from typing import Optional

import numpy as np
import gymnasium as gym

import block_puzzle.env  # noqa: F401  ensure registration


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    env = gym.make("BlockPuzzle-5x5-v0")
    rng = np.random.default_rng(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    for _ in range(steps):
        # Prefer valid placements if available
        valid = np.argwhere(info["action_mask"])
        if len(valid):
            action = valid[rng.integers(len(valid))]
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    print(f"Random agent total reward: {run_random():.2f}")
