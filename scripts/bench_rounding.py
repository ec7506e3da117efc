#!/usr/bin/env python3
import json
import logging
import time
from pathlib import Path

from ziround.heuristic.zi_round import zi_round
from ziround.logger_config import setup_logger
from ziround.model.builder import build_linear_model
from ziround.schemas import LPModel, RoundingOptions
from scripts.generate_instances import generate_random_relaxation


def load_example(name: str) -> LPModel:
    path = Path(__file__).resolve().parent.parent / "examples" / name
    return LPModel.model_validate(json.loads(path.read_text()))


def main() -> None:
    setup_logger(logging.WARNING)
    opts = RoundingOptions()
    cases = [("examples/small_milp.json", load_example("small_milp.json"), {"x1": 1.5, "x2": 8.3})]
    for seed in range(3):
        model, point = generate_random_relaxation(8, 6, seed)
        cases.append((f"random-{seed}", model, point))

    print("name,status,sweeps,moves,rounded,fractional,feasible,time_ms")
    for name, lp, point in cases:
        model, integral = build_linear_model(lp, point)
        start = time.perf_counter()
        report = zi_round(model, integral, opts)
        elapsed_ms = (time.perf_counter() - start) * 1000
        print(
            f"{name},{report.status},{report.sweeps},{report.moves},"
            f"{len(report.rounded)},{len(report.fractional)},{report.feasible},{elapsed_ms:.2f}"
        )


if __name__ == "__main__":
    main()
