import pytest

from ziround.errors import RoundingConsistencyError
from ziround.heuristic.policy import Direction, preferred_direction
from ziround.heuristic.zi_round import ZiRound, zi_round
from ziround.model.linear import LinearModel, Relation
from ziround.model.variable import BoundedVariable, VarKind, fractionality
from ziround.schemas import RoundingOptions


def make_relaxed_model(sense: str = "min", x1: float = 1.5, x2: float = 8.3) -> LinearModel:
    model = LinearModel()
    model.set_variables(
        [
            BoundedVariable(VarKind.CONTINUOUS, x1, 0.0, 100.0),
            BoundedVariable(VarKind.CONTINUOUS, x2, 0.0, 100.0),
        ]
    )
    model.set_constraints(
        [[1.0, 2.0], [2.0, -1.0], [-3.0, 2.0]],
        [7.0, -6.0, 8.0],
        [">=", ">=", ">="],
    )
    model.set_objective(sense, [2.0, -1.0])
    return model


def make_single_variable_model(value: float, matrix, rhs, relations) -> LinearModel:
    model = LinearModel()
    model.set_variables([BoundedVariable(VarKind.CONTINUOUS, value, 0.0, 10.0)])
    model.set_constraints(matrix, rhs, relations)
    return model


def test_policy_table():
    assert preferred_direction("min", 2.0) is Direction.DOWN
    assert preferred_direction("min", -1.0) is Direction.UP
    assert preferred_direction("max", 3.0) is Direction.UP
    assert preferred_direction("max", -0.5) is Direction.DOWN
    assert preferred_direction("min", 0.0) is Direction.UP
    assert preferred_direction(None, 5.0) is Direction.UP


def test_slack_limits_and_steps():
    model = make_relaxed_model()
    engine = ZiRound(model)
    model.flip_to(Relation.LE)

    # Only row 3 has a positive coefficient on x1 after the flip: 3 x1 - 2 x2 <= -8.
    assert engine.slack_limit_up(0) == pytest.approx(4.1 / 3.0)
    assert engine.slack_limit_down(0) == pytest.approx(0.35)
    assert engine.step_up(0) == pytest.approx(0.5)
    assert engine.step_down(0) == pytest.approx(0.35)


def test_slack_limit_without_applicable_row_is_zero():
    model = make_single_variable_model(0.5, [[1.0]], [0.75], ["<="])
    engine = ZiRound(model)
    assert engine.slack_limit_down(0) == 0.0
    assert engine.step_down(0) == 0.0
    assert engine.step_up(0) == 0.25


def test_rounds_example_to_feasible_integer_point():
    model = make_relaxed_model("min")
    report = zi_round(model, [0, 1])

    assert model.value(0) == 2.0
    assert model.value(1) == 9.0
    assert report.status == "converged"
    assert report.sweeps == 1
    assert report.moves == 2
    assert report.sweep_moves == [2]
    assert report.rounded == [0, 1]
    assert report.fractional == []
    assert report.feasible
    assert report.objective_value == pytest.approx(-5.0)
    assert report.x == {0: 2.0, 1: 9.0}
    assert model.relations == [Relation.LE] * 3


def test_tie_break_follows_objective_sense():
    model = make_relaxed_model("max")
    report = zi_round(model, [0, 1])

    # x2 can reach 8 or 9 with the same fractionality; maximising -x2 picks 8.
    assert model.value(0) == 2.0
    assert model.value(1) == 8.0
    assert report.feasible


def test_only_listed_variables_move():
    model = make_relaxed_model("min")
    report = zi_round(model, [1])

    assert model.value(0) == 1.5
    assert fractionality(model.value(1)) == 0.0
    assert report.rounded == [1]


def test_integral_start_is_left_alone():
    model = make_relaxed_model("min", x1=2.0, x2=9.0)
    report = zi_round(model, [0, 1])

    assert report.status == "converged"
    assert report.moves == 0
    assert report.x == {0: 2.0, 1: 9.0}


def test_converges_with_fractional_value_when_slack_runs_out():
    model = make_single_variable_model(0.5, [[1.0]], [0.75], ["<="])
    report = zi_round(model, [0])

    assert model.value(0) == 0.75
    assert report.status == "converged"
    assert report.fractional == [0]
    assert report.moves == 1
    # The move that used up the slack is followed by one sweep that leaves the value in place.
    assert report.sweeps == 2
    assert report.sweep_moves == [1, 0]
    assert report.objective_value is None


def test_stalls_when_no_move_improves_fractionality():
    model = make_single_variable_model(0.5, [[1.0], [-1.0]], [0.75, -0.25], ["<=", "<="])
    report = zi_round(model, [0])

    assert model.value(0) == 0.75
    assert report.status == "stalled"
    assert report.sweeps == 2
    assert report.moves == 1
    assert report.sweep_moves == [1, 0]
    assert report.fractional == [0]


def test_sweep_cap_without_stall_escape():
    model = make_single_variable_model(0.5, [[1.0], [-1.0]], [0.75, -0.25], ["<=", "<="])
    options = RoundingOptions(max_sweeps=5, stop_on_stall=False)
    report = zi_round(model, [0], options)

    assert report.status == "sweep_limit"
    assert report.sweeps == 5
    assert report.moves == 1


def test_equality_rows_block_movement():
    model = LinearModel()
    model.set_variables(
        [
            BoundedVariable(VarKind.CONTINUOUS, 1.5, 0.0, 10.0),
            BoundedVariable(VarKind.CONTINUOUS, 2.5, 0.0, 10.0),
        ]
    )
    model.set_constraints([[1.0, 1.0]], [4.0], ["=="])
    report = zi_round(model, [0, 1])

    assert model.value(0) == 1.5
    assert model.value(1) == 2.5
    assert report.status == "converged"
    assert report.moves == 0


def test_variable_bounds_cap_steps():
    model = LinearModel()
    model.set_variables([BoundedVariable(VarKind.CONTINUOUS, 0.5, 0.25, 0.75)])
    model.set_constraints([[1.0], [-1.0]], [5.0, 5.0], ["<=", "<="])
    report = zi_round(model, [0])

    assert 0.25 <= model.value(0) <= 0.75
    assert report.fractional == [0]


def test_impose_integral_option_marks_rounded_variables():
    model = make_relaxed_model("min")
    zi_round(model, [0, 1], RoundingOptions(impose_integral=True))
    assert model.variable(0).kind is VarKind.INTEGRAL
    assert model.variable(1).kind is VarKind.INTEGRAL


def test_without_normalisation_greater_rows_are_rejected():
    model = make_relaxed_model()
    with pytest.raises(ValueError):
        zi_round(model, [0, 1], RoundingOptions(normalize=False))

    model.flip_to(Relation.LE)
    report = zi_round(model, [0, 1], RoundingOptions(normalize=False))
    assert report.rounded == [0, 1]


def test_preconditions():
    model = make_relaxed_model()
    engine = ZiRound(model)
    with pytest.raises(ValueError):
        engine.apply()

    engine.set_integer_indices([0, 2])
    with pytest.raises(IndexError):
        engine.apply()


def test_listener_receives_report():
    received = []
    model = make_relaxed_model()
    report = zi_round(model, [0, 1], listener=received.append)
    assert received == [report]


def test_apply_is_not_reentrant(monkeypatch):
    model = make_relaxed_model()
    engine = ZiRound(model)
    engine.set_integer_indices([0, 1])
    monkeypatch.setattr(engine, "_run", engine.apply)
    with pytest.raises(RuntimeError):
        engine.apply()


def test_invariant_breach_is_an_internal_fault(monkeypatch):
    model = make_relaxed_model()
    monkeypatch.setattr(ZiRound, "_target", lambda self, j, step, direction: 200.0)
    with pytest.raises(RoundingConsistencyError):
        zi_round(model, [0])
    assert model.value(0) == 1.5


def test_violated_row_does_not_cancel_slack_of_other_variables():
    model = LinearModel()
    model.set_variables(
        [
            BoundedVariable(VarKind.CONTINUOUS, 0.5, 0.0, 10.0),
            BoundedVariable(VarKind.CONTINUOUS, 0.5, 0.0, 10.0),
        ]
    )
    # y <= 0.25 is violated at y = 0.5, giving y a negative upward slack limit.
    model.set_constraints([[1.0, 0.0], [0.0, 1.0]], [0.75, 0.25], ["<=", "<="])
    engine = ZiRound(model)

    assert engine.slack_limit_up(1) == -0.25
    assert engine._slack_totals([0, 1]) == (0.25, 0.0)

    engine.set_integer_indices([0, 1])
    report = engine.apply()
    assert model.value(0) == 0.75
    assert model.value(1) == 0.5
    assert report.sweep_moves[-1] == 0
