from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from ..schemas import Sense
from .variable import BoundedVariable, VarKind

logger = logging.getLogger(__name__)


class Relation(str, Enum):
    LT = "<"
    LE = "<="
    EQ = "=="
    GE = ">="
    GT = ">"

    @property
    def is_less(self) -> bool:
        return self in (Relation.LT, Relation.LE)

    @property
    def is_greater(self) -> bool:
        return self in (Relation.GT, Relation.GE)

    @property
    def is_strict(self) -> bool:
        return self in (Relation.LT, Relation.GT)

    def flipped(self) -> "Relation":
        return _FLIPPED[self]


_FLIPPED = {
    Relation.LT: Relation.GT,
    Relation.LE: Relation.GE,
    Relation.EQ: Relation.EQ,
    Relation.GE: Relation.LE,
    Relation.GT: Relation.LT,
}


@dataclass(frozen=True)
class ValidationResult:
    """Accept/reject outcome of a model setter; truthy when accepted."""

    accepted: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.accepted


_ACCEPTED = ValidationResult(True)


def _reject(reason: str) -> ValidationResult:
    logger.debug("Rejected model update: %s", reason)
    return ValidationResult(False, reason)


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class LinearModel:
    """
    Variables, a linear constraint system A x (rel) b and a linear objective.

    A, b and c are copied into buffers owned by the model, so ``flip_to`` never
    touches arrays held by the caller.
    """

    def __init__(self) -> None:
        self._variables: Optional[List[BoundedVariable]] = None
        self._matrix: Optional[np.ndarray] = None
        self._rhs: Optional[np.ndarray] = None
        self._relations: Optional[List[Relation]] = None
        self._objective: Optional[np.ndarray] = None
        self._sense: Optional[Sense] = None

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------
    def set_variables(self, variables: Sequence[BoundedVariable]) -> ValidationResult:
        variables = list(variables)
        if self._variables is None:
            if self._objective is not None and len(self._objective) != len(variables):
                return _reject(
                    f"Objective has {len(self._objective)} coefficients but {len(variables)} variables were given."
                )
        elif len(variables) != len(self._variables):
            return _reject(
                f"Model has {len(self._variables)} variables; replacement has {len(variables)}."
            )
        self._variables = variables
        return _ACCEPTED

    def set_constraints(
        self,
        matrix: Sequence[Sequence[float]],
        rhs: Sequence[float],
        relations: Sequence[Relation | str],
    ) -> ValidationResult:
        if self._variables is None:
            return _reject("Variables must be set before constraints.")
        n = len(self._variables)
        rows = [list(row) for row in matrix]
        m = len(rows)
        if m == 0:
            return _reject("Constraint matrix has no rows.")
        for i, row in enumerate(rows):
            if len(row) != n:
                return _reject(f"Row {i} has {len(row)} entries; expected {n}.")
        if len(rhs) != m:
            return _reject(f"Right-hand side has {len(rhs)} entries; expected {m}.")
        if len(relations) != m:
            return _reject(f"Got {len(relations)} relation tags; expected {m}.")
        try:
            tags = [Relation(rel) for rel in relations]
        except ValueError as exc:
            return _reject(str(exc))

        self._matrix = np.array(rows, dtype=float)
        self._rhs = np.array(rhs, dtype=float)
        self._relations = tags
        return _ACCEPTED

    def set_objective(self, sense: Sense, coefficients: Sequence[float]) -> ValidationResult:
        if sense not in ("min", "max"):
            return _reject(f"Unknown objective sense '{sense}'.")
        if self._variables is not None and len(coefficients) != len(self._variables):
            return _reject(
                f"Objective has {len(coefficients)} coefficients; model has {len(self._variables)} variables."
            )
        self._objective = np.array(coefficients, dtype=float)
        self._sense = sense
        return _ACCEPTED

    # ------------------------------------------------------------------
    # Structural transforms
    # ------------------------------------------------------------------
    def relax_all(self) -> None:
        for var in self._require_variables():
            var.set_kind(VarKind.CONTINUOUS)

    def impose_integral(self, indices: Sequence[int]) -> ValidationResult:
        """
        Mark the listed variables integral, stopping at the first fractional one.

        Variables converted before the failing index stay integral.
        """
        variables = self._require_variables()
        for j in indices:
            var = variables[j]
            if not var.is_integral():
                return _reject(f"Variable {j} has non-integral value {var.value}.")
            var.set_kind(VarKind.INTEGRAL)
        return _ACCEPTED

    def flip_to(self, target: Relation | str) -> List[int]:
        """
        Rewrite every inequality of the opposite polarity to ``target``'s.

        The affected rows of A and entries of b are negated in place; ``==``
        rows and rows already matching are left alone. Returns the flipped
        row indices.
        """
        target = Relation(target)
        if target is Relation.EQ:
            raise ValueError("Cannot flip constraints to '==' polarity.")
        matrix, rhs, relations = self._require_constraints()

        flipped: List[int] = []
        for i, rel in enumerate(relations):
            if rel is Relation.EQ or rel.is_less == target.is_less:
                continue
            matrix[i] = -matrix[i]
            rhs[i] = -rhs[i]
            relations[i] = rel.flipped()
            flipped.append(i)
        if flipped:
            logger.debug("Flipped %d row(s) to %s polarity: %s", len(flipped), target.value, flipped)
        return flipped

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def slack(self, i: int) -> float:
        matrix, rhs, relations = self._require_constraints()
        rel = relations[i]
        if rel is Relation.EQ:
            return 0.0
        left = float(matrix[i] @ self.values())
        if rel.is_less:
            return float(rhs[i]) - left
        return left - float(rhs[i])

    def slacks(self) -> np.ndarray:
        return np.array([self.slack(i) for i in range(self.num_constraints)], dtype=float)

    def objective_value(self) -> float:
        if self._objective is None:
            raise ValueError("Model has no objective.")
        return float(self._objective @ self.values())

    def violated_constraints(self, tol: float = 1e-9) -> List[int]:
        matrix, rhs, relations = self._require_constraints()
        x = self.values()
        violated: List[int] = []
        for i, rel in enumerate(relations):
            if rel is Relation.EQ:
                if abs(float(matrix[i] @ x) - float(rhs[i])) > tol:
                    violated.append(i)
                continue
            slack = self.slack(i)
            if (rel.is_strict and slack <= 0) or slack < -tol:
                violated.append(i)
        return violated

    def is_feasible(self, tol: float = 1e-9) -> bool:
        return not self.violated_constraints(tol)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def num_variables(self) -> int:
        return len(self._require_variables())

    @property
    def num_constraints(self) -> int:
        return 0 if self._relations is None else len(self._relations)

    @property
    def variables(self) -> List[BoundedVariable]:
        return self._require_variables()

    def variable(self, j: int) -> BoundedVariable:
        return self._require_variables()[j]

    def value(self, j: int) -> float:
        return self._require_variables()[j].value

    def values(self) -> np.ndarray:
        return np.array([var.value for var in self._require_variables()], dtype=float)

    @property
    def matrix(self) -> np.ndarray:
        return _read_only(self._require_constraints()[0])

    def multiplier(self, i: int, j: int) -> float:
        return float(self._require_constraints()[0][i, j])

    @property
    def rhs_vector(self) -> np.ndarray:
        return _read_only(self._require_constraints()[1])

    def rhs(self, i: int) -> float:
        return float(self._require_constraints()[1][i])

    @property
    def relations(self) -> List[Relation]:
        return list(self._require_constraints()[2])

    def relation(self, i: int) -> Relation:
        return self._require_constraints()[2][i]

    @property
    def sense(self) -> Optional[Sense]:
        return self._sense

    @property
    def objective(self) -> Optional[np.ndarray]:
        return None if self._objective is None else _read_only(self._objective)

    def objective_coefficient(self, j: int) -> float:
        if self._objective is None:
            return 0.0
        return float(self._objective[j])

    def _require_variables(self) -> List[BoundedVariable]:
        if self._variables is None:
            raise ValueError("Model has no variables.")
        return self._variables

    def _require_constraints(self):
        if self._matrix is None or self._rhs is None or self._relations is None:
            raise ValueError("Model has no constraints.")
        return self._matrix, self._rhs, self._relations
