from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from ..schemas import Sense


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


# (sense, sign of objective coefficient) -> direction that does not worsen the objective.
# Anything missing from the table, zero coefficients included, moves up.
TIE_BREAK: Dict[Tuple[Sense, int], Direction] = {
    ("min", 1): Direction.DOWN,
    ("min", -1): Direction.UP,
    ("max", 1): Direction.UP,
    ("max", -1): Direction.DOWN,
}


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def preferred_direction(sense: Optional[Sense], coefficient: float) -> Direction:
    """Direction to take when both moves reach the same fractionality."""
    if sense is None:
        return Direction.UP
    return TIE_BREAK.get((sense, _sign(coefficient)), Direction.UP)
