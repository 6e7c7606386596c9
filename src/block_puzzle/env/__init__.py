"""Gymnasium environments for the block puzzle engine."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .placement_env import PlacementEnv, compute_action_mask

# Register the default 5x5 placement environment
register(
    id="BlockPuzzle-5x5-v0",
    entry_point="block_puzzle.env.placement_env:PlacementEnv",
)

__all__ = ["PlacementEnv", "compute_action_mask"]
