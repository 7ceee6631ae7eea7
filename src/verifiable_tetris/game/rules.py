from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int, int] = (0, 100, 300, 500, 800)
    hard_drop_bonus: int = 1
    lines_per_level: int = 10
    base_gravity_ms: int = 1000
    gravity_step_ms: int = 50
    min_gravity_ms: int = 50

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        if lines < len(self.line_clear_scores):
            return self.line_clear_scores[lines] * level
        # Unreachable with four-cell pieces; fall back to the single-line bonus
        return self.line_clear_scores[1] * level

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def gravity_interval(self, level: int) -> int:
        return max(self.min_gravity_ms, self.base_gravity_ms - (level - 1) * self.gravity_step_ms)
