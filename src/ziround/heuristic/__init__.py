"""ZI-Round rounding engine."""

from .policy import Direction, preferred_direction
from .zi_round import ZiRound, zi_round

__all__ = ["Direction", "preferred_direction", "ZiRound", "zi_round"]
