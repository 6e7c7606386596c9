from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_block: int = 10
    level_threshold: int = 1000
    base_delay_ms: int = 12000
    delay_step_ms: int = 500
    min_delay_ms: int = 2500

    def score_for_clear(self, lines: int, blocks: int, multiplier: int) -> int:
        if lines <= 0:
            return 0
        return lines * blocks * self.points_per_block * multiplier

    def level_for(self, score: int) -> int:
        return score // self.level_threshold

    def timer_delay(self, level: int) -> int:
        return max(self.min_delay_ms, self.base_delay_ms - level * self.delay_step_ms)
