from pydantic import BaseModel, Field
from typing import Literal, List, Dict, Optional

Sense = Literal["min", "max"]
Cmp = Literal["<", "<=", "==", ">=", ">"]
RoundingStatus = Literal["converged", "stalled", "sweep_limit"]


class Variable(BaseModel):
    name: str
    lb: float | None = None
    ub: float | None = None
    is_integer: bool = False


class LinearTerm(BaseModel):
    var: str
    coef: float


class LinearExpr(BaseModel):
    terms: List[LinearTerm] = Field(default_factory=list)
    constant: float = 0.0


class Constraint(BaseModel):
    name: str
    lhs: LinearExpr
    cmp: Cmp
    rhs: float


class LPModel(BaseModel):
    name: str = "problem"
    sense: Sense
    objective: LinearExpr
    variables: List[Variable]
    constraints: List[Constraint]


class RoundingOptions(BaseModel):
    max_sweeps: int = Field(default=10_000, ge=1)
    normalize: bool = True
    stop_on_stall: bool = True
    impose_integral: bool = False
    tol: float = 1e-9


class RoundingReport(BaseModel):
    status: RoundingStatus
    sweeps: int
    moves: int
    sweep_moves: List[int] = Field(default_factory=list)
    rounded: List[int]
    fractional: List[int]
    x: Dict[int, float]
    objective_value: Optional[float]
    feasible: bool
    message: str = ""
