from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import DomainViolation, RangeViolation, RoundingConsistencyError
from ..model.linear import LinearModel, Relation
from ..model.variable import fractionality
from ..schemas import RoundingOptions, RoundingReport
from .policy import Direction, preferred_direction

logger = logging.getLogger(__name__)

SolutionListener = Callable[[RoundingReport], None]


class ZiRound:
    """
    ZI-Round primal heuristic over a solved relaxation.

    Each sweep moves every still-fractional target variable toward the integer
    that lowers its fractionality the most, never further than the variable
    bounds or the slack of any row it appears in. Variables of the model are
    mutated in place.
    """

    def __init__(self, model: LinearModel, options: Optional[RoundingOptions] = None) -> None:
        self.model = model
        self.options = options or RoundingOptions()
        self._indices: Optional[List[int]] = None
        self._listener: Optional[SolutionListener] = None
        self._running = False

    def set_integer_indices(self, indices: Sequence[int]) -> None:
        self._indices = list(dict.fromkeys(int(j) for j in indices))

    def set_solution_listener(self, listener: Optional[SolutionListener]) -> None:
        self._listener = listener

    # ------------------------------------------------------------------
    # Per-variable quantities
    # ------------------------------------------------------------------
    def slack_limit_up(self, j: int) -> float:
        """min slack(i)/a_ij over rows with a_ij > 0; 0 if there is none."""
        column = self.model.matrix[:, j]
        mask = column > 0
        if not mask.any():
            return 0.0
        return float(np.min(self.model.slacks()[mask] / column[mask]))

    def slack_limit_down(self, j: int) -> float:
        """min -slack(i)/a_ij over rows with a_ij < 0; 0 if there is none."""
        column = self.model.matrix[:, j]
        mask = column < 0
        if not mask.any():
            return 0.0
        return float(np.min(-self.model.slacks()[mask] / column[mask]))

    def step_up(self, j: int) -> float:
        var = self.model.variable(j)
        v = var.value
        return max(0.0, min(var.high_bound - v, self.slack_limit_up(j), math.ceil(v) - v))

    def step_down(self, j: int) -> float:
        var = self.model.variable(j)
        v = var.value
        return max(0.0, min(v - var.low_bound, self.slack_limit_down(j), v - math.floor(v)))

    def _target(self, j: int, step: float, direction: Direction) -> float:
        var = self.model.variable(j)
        v = var.value
        if direction is Direction.UP:
            if step == math.ceil(v) - v and math.ceil(v) <= var.high_bound:
                return float(math.ceil(v))
            return min(v + step, var.high_bound)
        if step == v - math.floor(v) and math.floor(v) >= var.low_bound:
            return float(math.floor(v))
        return max(v - step, var.low_bound)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def apply(self) -> RoundingReport:
        if self._running:
            raise RuntimeError("ZiRound.apply() is not re-entrant.")
        self._running = True
        try:
            report = self._run()
        finally:
            self._running = False
        if self._listener is not None:
            self._listener(report)
        return report

    def _run(self) -> RoundingReport:
        indices = self._check_preconditions()
        model = self.model
        opts = self.options

        rounded = [False] * len(indices)
        sweeps = 0
        moves = 0
        sweep_history: List[int] = []
        status = "sweep_limit"
        while sweeps < opts.max_sweeps:
            sweeps += 1
            sweep_moves = 0
            for k, j in enumerate(indices):
                if rounded[k]:
                    continue
                if self._round_variable(j):
                    sweep_moves += 1
                if model.variable(j).is_integral():
                    rounded[k] = True
            moves += sweep_moves
            sweep_history.append(sweep_moves)

            pending = [j for k, j in enumerate(indices) if not rounded[k]]
            up_total, down_total = self._slack_totals(pending)
            logger.debug(
                "Sweep %d: %d move(s), %d pending, slack up %.6g, slack down %.6g",
                sweeps,
                sweep_moves,
                len(pending),
                up_total,
                down_total,
            )
            # A pending variable counts as converged only once a full sweep leaves it in place.
            if up_total == 0 and down_total == 0 and (sweep_moves == 0 or not pending):
                status = "converged"
                break
            if sweep_moves == 0 and opts.stop_on_stall:
                status = "stalled"
                break

        rounded_idx = [j for k, j in enumerate(indices) if rounded[k]]
        fractional_idx = [j for k, j in enumerate(indices) if not rounded[k]]
        if opts.impose_integral and rounded_idx:
            model.impose_integral(rounded_idx)

        message = {
            "converged": "No slack left to move any pending variable.",
            "stalled": "Last sweep made no moves.",
            "sweep_limit": f"Stopped after {sweeps} sweeps.",
        }[status]
        logger.info(
            "ZI-Round %s after %d sweep(s): %d/%d variable(s) integral",
            status,
            sweeps,
            len(rounded_idx),
            len(indices),
        )
        return RoundingReport(
            status=status,
            sweeps=sweeps,
            moves=moves,
            sweep_moves=sweep_history,
            rounded=rounded_idx,
            fractional=fractional_idx,
            x={j: var.value for j, var in enumerate(model.variables)},
            objective_value=model.objective_value() if model.objective is not None else None,
            feasible=model.is_feasible(opts.tol),
            message=message,
        )

    def _round_variable(self, j: int) -> bool:
        var = self.model.variable(j)
        zi0 = fractionality(var.value)
        up_target = self._target(j, self.step_up(j), Direction.UP)
        down_target = self._target(j, self.step_down(j), Direction.DOWN)
        zi_up = fractionality(up_target)
        zi_down = fractionality(down_target)

        if zi_up == zi_down and zi_up < zi0:
            direction = preferred_direction(self.model.sense, self.model.objective_coefficient(j))
        elif zi_up < zi_down and zi_up < zi0:
            direction = Direction.UP
        elif zi_down < zi_up and zi_down < zi0:
            direction = Direction.DOWN
        else:
            return False

        target = up_target if direction is Direction.UP else down_target
        try:
            var.set_value(target)
        except (DomainViolation, RangeViolation) as exc:
            raise RoundingConsistencyError(
                f"Rounding step for variable {j} to {target} broke its invariants."
            ) from exc
        return True

    def _slack_totals(self, pending: Sequence[int]) -> Tuple[float, float]:
        up_total = sum(max(0.0, self.slack_limit_up(j)) for j in pending)
        down_total = sum(max(0.0, self.slack_limit_down(j)) for j in pending)
        return up_total, down_total

    def _check_preconditions(self) -> List[int]:
        if self._indices is None:
            raise ValueError("Call set_integer_indices() before apply().")
        n = self.model.num_variables
        for j in self._indices:
            if not 0 <= j < n:
                raise IndexError(f"Variable index {j} out of range for {n} variables.")
        if self.options.normalize:
            self.model.flip_to(Relation.LE)
        elif any(rel.is_greater for rel in self.model.relations):
            raise ValueError("Constraints must be in '<', '<=' or '==' form; enable normalize or call flip_to().")
        return self._indices


def zi_round(
    model: LinearModel,
    indices: Sequence[int],
    options: Optional[RoundingOptions] = None,
    listener: Optional[SolutionListener] = None,
) -> RoundingReport:
    """Run ZI-Round once on ``model`` for the given variable indices."""
    engine = ZiRound(model, options)
    engine.set_integer_indices(indices)
    engine.set_solution_listener(listener)
    return engine.apply()
