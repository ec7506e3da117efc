import logging
import sys
from typing import Dict

from mcp.server.fastmcp import FastMCP

from .heuristic.zi_round import zi_round as run_zi_round
from .logger_config import setup_logger
from .model.builder import build_linear_model
from .schemas import LPModel, RoundingOptions

logger = logging.getLogger(__name__)

mcp = FastMCP("ZI-Round")


@mcp.tool()
def zi_round(model: LPModel, solution: Dict[str, float], options: RoundingOptions | None = None) -> dict:
    "Round the integer variables of a solved LP relaxation with ZI-Round and return the report."
    opts = options or RoundingOptions()
    try:
        linear, integral = build_linear_model(model, solution)
        report = run_zi_round(linear, integral, opts)
    except ValueError as exc:
        logger.debug("zi_round rejected model '%s': %s", model.name, exc)
        return {"status": "error", "message": str(exc)}

    names = [var.name for var in model.variables]
    payload = report.model_dump()
    payload["x"] = {names[j]: value for j, value in report.x.items()}
    payload["rounded"] = [names[j] for j in report.rounded]
    payload["fractional"] = [names[j] for j in report.fractional]
    return payload


@mcp.tool()
def constraint_slacks(model: LPModel, solution: Dict[str, float]) -> dict:
    "Return the slack of every constraint at the given point; negative means violated."
    try:
        linear, _ = build_linear_model(model, solution)
    except ValueError as exc:
        return {"status": "error", "message": str(exc)}

    slacks = linear.slacks()
    return {
        "status": "ok",
        "slacks": {cons.name: float(slacks[i]) for i, cons in enumerate(model.constraints)},
        "violated": [model.constraints[i].name for i in linear.violated_constraints()],
    }


def main() -> None:
    setup_logger(stream=sys.stderr)
    mcp.run()


if __name__ == "__main__":
    main()
