import math
from typing import Dict, List, Tuple

from ..schemas import LPModel
from .linear import LinearModel
from .variable import BoundedVariable, VarKind


def build_linear_model(model: LPModel, solution: Dict[str, float]) -> Tuple[LinearModel, List[int]]:
    """
    Turn an LPModel plus a solved relaxation into a LinearModel.

    Every variable starts CONTINUOUS at its relaxation value. Returns the model
    and the indices of the variables flagged ``is_integer``, in model order.
    """

    index: Dict[str, int] = {}
    variables: List[BoundedVariable] = []
    integral: List[int] = []
    for idx, var in enumerate(model.variables):
        if var.name in index:
            raise ValueError(f"Duplicate variable name '{var.name}'.")
        if var.name not in solution:
            raise ValueError(f"Relaxation solution has no value for variable '{var.name}'.")
        lb = -math.inf if var.lb is None else var.lb
        ub = math.inf if var.ub is None else var.ub
        if lb > ub:
            raise ValueError(f"Variable {var.name} has inconsistent bounds (lb {lb} > ub {ub}).")
        value = float(solution[var.name])
        if value < lb or value > ub:
            raise ValueError(f"Relaxation value {value} of '{var.name}' lies outside [{lb}, {ub}].")
        index[var.name] = idx
        variables.append(BoundedVariable(VarKind.CONTINUOUS, value, lb, ub))
        if var.is_integer:
            integral.append(idx)

    n = len(variables)
    objective = [0.0] * n
    for term in model.objective.terms:
        if term.var not in index:
            raise ValueError(f"Objective references unknown variable '{term.var}'.")
        objective[index[term.var]] += term.coef

    rows: List[List[float]] = []
    rhs: List[float] = []
    relations: List[str] = []
    for cons in model.constraints:
        row = [0.0] * n
        for term in cons.lhs.terms:
            if term.var not in index:
                raise ValueError(f"Constraint '{cons.name}' references unknown variable '{term.var}'.")
            row[index[term.var]] += term.coef
        rows.append(row)
        rhs.append(cons.rhs - cons.lhs.constant)
        relations.append(cons.cmp)

    linear = LinearModel()
    for result in (
        linear.set_variables(variables),
        linear.set_objective(model.sense, objective),
        linear.set_constraints(rows, rhs, relations),
    ):
        if not result:
            raise ValueError(f"Model '{model.name}' rejected: {result.reason}")
    return linear, integral
