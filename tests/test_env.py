import gymnasium as gym
import numpy as np

import block_puzzle.env  # noqa: F401
from block_puzzle.env import PlacementEnv, compute_action_mask
from block_puzzle.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper
from block_puzzle.game import GamePiece, PieceType


def test_reset_observation_matches_space():
    env = PlacementEnv()
    obs, info = env.reset(seed=3)
    assert env.observation_space.contains(obs)
    assert info["action_mask"].shape == (5, 5, 4)
    assert info["score"] == 0
    env.close()


def test_valid_and_invalid_steps():
    env = PlacementEnv()
    env.reset(seed=0)
    env.game.current_piece = GamePiece.create(PieceType.LINE)

    obs, reward, terminated, truncated, info = env.step((0, 0, 0))
    assert info["placed"] is False
    assert info["lives_lost"] == 1
    assert reward == -1.0
    assert obs["lives"] == 2

    env.game.current_piece = GamePiece.create(PieceType.LINE)
    obs, reward, terminated, truncated, info = env.step((2, 2, 1))
    assert info["placed"] is True
    assert reward == 0.0
    assert obs["grid"][1:4, 2].tolist() == [1, 1, 1]
    env.close()


def test_invalid_actions_end_the_episode():
    env = PlacementEnv()
    env.reset(seed=1)
    terminated = False
    steps = 0
    while not terminated:
        env.game.current_piece = GamePiece.create(PieceType.PLUS)
        _, _, terminated, _, _ = env.step((0, 0, 0))
        steps += 1
    assert steps == 3
    assert env.game.game_over
    env.close()


def test_action_mask_marks_fitting_placements():
    env = PlacementEnv()
    env.reset(seed=0)
    env.game.current_piece = GamePiece.create(PieceType.LINE)
    mask = compute_action_mask(env.game)
    assert not mask[0, 2, 0]
    assert mask[1, 2, 0]
    assert mask[0, 2, 1]
    assert mask[2, 0, 0]
    assert not mask[2, 0, 1]


def test_registered_env_with_flatten_wrapper():
    env = ResampleInvalidActionWrapper(FlattenDiscreteActionWrapper(gym.make("BlockPuzzle-5x5-v0")))
    obs, info = env.reset(seed=4)
    mask = env.get_action_mask()
    assert mask.shape == (100,)
    assert np.array_equal(mask, info["action_mask"].reshape(-1))
    valid = int(np.flatnonzero(mask)[0])
    _, _, _, _, info = env.step(valid)
    assert info["placed"] is True
    env.close()


def test_rgb_render():
    env = PlacementEnv(render_mode="rgb_array")
    env.reset(seed=0)
    frame = env.render()
    assert frame.shape == (60, 60, 3)
    assert frame.dtype == np.uint8
