from block_puzzle.rl.random_agent import run_random


def test_random_agent_runs_through_resets():
    total = run_random(steps=40, seed=0)
    assert isinstance(total, float)
