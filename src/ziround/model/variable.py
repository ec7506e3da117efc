from __future__ import annotations

import math
from enum import Enum

from ..errors import DomainViolation, RangeViolation


class VarKind(str, Enum):
    INTEGRAL = "integral"
    CONTINUOUS = "continuous"


def fractionality(value: float) -> float:
    """Distance from ``value`` to its nearest integer, in [0, 0.5]."""
    return min(value - math.floor(value), math.ceil(value) - value)


def is_integer(value: float) -> bool:
    if not math.isfinite(value):
        return False
    return fractionality(value) == 0


class BoundedVariable:
    """
    Scalar decision variable with a kind tag and closed bounds.

    The value always lies in [low_bound, high_bound] and is integral whenever
    the kind is INTEGRAL. Mutators raise instead of breaking either rule.
    """

    __slots__ = ("_kind", "_value", "_low_bound", "_high_bound")

    def __init__(
        self,
        kind: VarKind,
        value: float,
        low_bound: float = -math.inf,
        high_bound: float = math.inf,
    ) -> None:
        kind = VarKind(kind)
        value = float(value)
        low_bound = float(low_bound)
        high_bound = float(high_bound)
        if low_bound > high_bound:
            raise RangeViolation(f"Inconsistent bounds (low {low_bound} > high {high_bound}).")
        if kind is VarKind.INTEGRAL and not is_integer(value):
            raise DomainViolation(f"Variable is integral but its value {value} is not.")
        if not math.isfinite(value) or value < low_bound or value > high_bound:
            raise RangeViolation(f"Value {value} outside bounds [{low_bound}, {high_bound}].")
        self._kind = kind
        self._value = value
        self._low_bound = low_bound
        self._high_bound = high_bound

    @property
    def kind(self) -> VarKind:
        return self._kind

    @property
    def value(self) -> float:
        return self._value

    @property
    def low_bound(self) -> float:
        return self._low_bound

    @property
    def high_bound(self) -> float:
        return self._high_bound

    @property
    def fractionality(self) -> float:
        return fractionality(self._value)

    def is_integral(self) -> bool:
        return is_integer(self._value)

    def set_kind(self, kind: VarKind) -> None:
        kind = VarKind(kind)
        if kind is VarKind.INTEGRAL and not is_integer(self._value):
            raise DomainViolation(f"Cannot make variable integral: value {self._value} is not.")
        self._kind = kind

    def set_value(self, value: float) -> None:
        value = float(value)
        if self._kind is VarKind.INTEGRAL and not is_integer(value):
            raise DomainViolation(f"Variable is integral but the new value {value} is not.")
        if not math.isfinite(value) or value < self._low_bound or value > self._high_bound:
            raise RangeViolation(
                f"Value {value} outside bounds [{self._low_bound}, {self._high_bound}]."
            )
        self._value = value

    def __repr__(self) -> str:
        return (
            f"BoundedVariable(kind={self._kind.value}, value={self._value}, "
            f"low_bound={self._low_bound}, high_bound={self._high_bound})"
        )
