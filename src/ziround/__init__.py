"""ZI-Round: rounding heuristic for solved MILP relaxations."""

from .errors import DomainViolation, RangeViolation, RoundingConsistencyError
from .heuristic import ZiRound, zi_round
from .model import BoundedVariable, LinearModel, Relation, ValidationResult, VarKind, build_linear_model
from .schemas import RoundingOptions, RoundingReport

__all__ = [
    "BoundedVariable",
    "DomainViolation",
    "LinearModel",
    "RangeViolation",
    "Relation",
    "RoundingConsistencyError",
    "RoundingOptions",
    "RoundingReport",
    "ValidationResult",
    "VarKind",
    "ZiRound",
    "build_linear_model",
    "zi_round",
]
