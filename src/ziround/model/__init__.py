"""Bounded variables and the linear model they live in."""

from .variable import BoundedVariable, VarKind, fractionality, is_integer
from .linear import LinearModel, Relation, ValidationResult
from .builder import build_linear_model

__all__ = [
    "BoundedVariable",
    "VarKind",
    "fractionality",
    "is_integer",
    "LinearModel",
    "Relation",
    "ValidationResult",
    "build_linear_model",
]
