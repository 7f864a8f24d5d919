"""
Search configuration and score sentinels.
"""

import os
from dataclasses import dataclass

# Decisive outcomes. Ordinary heuristic scores are clamped to at least
# MIN_ORDINARY_SCORE, so they always rank above LOSS and DRAW.
WIN = 2147483647
LOSS = -2147483648
DRAW = LOSS + 1
MIN_ORDINARY_SCORE = -(2 ** 30)

TRAP_PENALTY = 9999999
EDGE_PENALTY = 25000


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class SearchConfig:
    """Tunable constants for one search invocation."""
    max_depth: int = 6
    hunger_health: int = 40
    low_food: int = 8
    head_on_neck_detection: bool = False

    @classmethod
    def from_env(cls) -> 'SearchConfig':
        """Build a config from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            max_depth=int(os.environ.get('MAX_RECURSION_DEPTH', defaults.max_depth)),
            hunger_health=int(os.environ.get('HUNGER_HEALTH', defaults.hunger_health)),
            low_food=int(os.environ.get('LOW_FOOD', defaults.low_food)),
            head_on_neck_detection=_env_bool(
                os.environ.get('HEAD_ON_NECK_DETECTION', str(defaults.head_on_neck_detection))
            ),
        )
