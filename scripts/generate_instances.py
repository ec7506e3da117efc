#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ziround.schemas import LPModel, Variable, Constraint, LinearExpr, LinearTerm


def generate_random_relaxation(
    num_vars: int, num_constraints: int, seed: Optional[int] = None
) -> Tuple[LPModel, Dict[str, float]]:
    """Random MILP with a fractional point that satisfies every constraint."""
    rng = random.Random(seed)
    point = {f"x{i}": rng.uniform(0.0, 10.0) for i in range(num_vars)}
    variables = [Variable(name=f"x{i}", lb=0.0, ub=10.0, is_integer=True) for i in range(num_vars)]
    constraints: List[Constraint] = []
    for j in range(num_constraints):
        terms = [
            LinearTerm(var=f"x{i}", coef=rng.uniform(-5.0, 5.0))
            for i in range(num_vars)
        ]
        lhs_value = sum(term.coef * point[term.var] for term in terms)
        if rng.random() < 0.5:
            cmp, rhs = "<=", lhs_value + rng.uniform(0.0, 3.0)
        else:
            cmp, rhs = ">=", lhs_value - rng.uniform(0.0, 3.0)
        constraints.append(
            Constraint(
                name=f"c{j}",
                lhs=LinearExpr(terms=terms, constant=0.0),
                cmp=cmp,
                rhs=rhs,
            )
        )
    objective = LinearExpr(
        terms=[LinearTerm(var=f"x{i}", coef=rng.uniform(-4.0, 4.0)) for i in range(num_vars)],
        constant=0.0,
    )
    model = LPModel(
        name="random-milp",
        sense=rng.choice(["min", "max"]),
        objective=objective,
        variables=variables,
        constraints=constraints,
    )
    return model, point


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random MILP relaxations with a feasible fractional point.")
    parser.add_argument("--vars", type=int, default=3, help="Number of variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of constraints")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    payload = []
    for idx in range(args.count):
        model, point = generate_random_relaxation(args.vars, args.constraints, (args.seed or 0) + idx)
        payload.append({"model": model.model_dump(), "solution": point})

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
