import pytest

from block_puzzle.game import ScoringRules


@pytest.mark.parametrize(
    "level,delay",
    [(0, 12000), (1, 11500), (5, 9500), (19, 2500), (20, 2500), (100, 2500)],
)
def test_timer_delay(level, delay):
    assert ScoringRules().timer_delay(level) == delay


def test_score_for_clear():
    rules = ScoringRules()
    assert rules.score_for_clear(2, 9, 3) == 540
    assert rules.score_for_clear(1, 5, 1) == 50
    assert rules.score_for_clear(0, 0, 4) == 0


def test_level_for_score():
    rules = ScoringRules()
    assert rules.level_for(0) == 0
    assert rules.level_for(999) == 0
    assert rules.level_for(1000) == 1
    assert rules.level_for(4321) == 4
