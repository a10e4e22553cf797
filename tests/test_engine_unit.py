import json
import platform

import pytest

from rowsolver import engine, settings
from rowsolver.parser import InvalidConstant, MalformedEquation

SYSTEM = ["2x + y - z = 8", "x - y = -3", "-x + 2y + 2z = -11"]
SINGULAR = ["x + y + z = 3", "2x + 2y + 2z = 6", "x = 1"]


def test_solve_system_required_fields_type_and_range_checks() -> None:
    result = engine.solve_system(SYSTEM)

    required_fields = {
        "equation",
        "given",
        "method",
        "steps",
        "final_answer",
        "verification_steps",
        "summary",
        "status",
        "solution",
        "trace",
    }
    assert required_fields.issubset(set(result.keys()))

    summary = result["summary"]
    assert isinstance(summary["runtime_ms"], (int, float)) and summary["runtime_ms"] >= 0
    assert summary["total_steps"] == len(result["steps"])
    assert summary["row_operations"] == 9
    assert summary["validation_status"] == "pass"
    assert "NumPy" in summary["library"]


def test_solution_and_final_answer() -> None:
    result = engine.solve_system(SYSTEM)
    assert result["status"] == "solved"
    assert result["solution"]["x"] == pytest.approx(-1, abs=1e-4)
    assert result["solution"]["y"] == pytest.approx(2, abs=1e-4)
    assert result["solution"]["z"] == pytest.approx(-8, abs=1e-4)
    assert result["final_answer"] == "x = -1\ny = 2\nz = -8"
    assert result["coefficients"][0] == [2.0, 1.0, -1.0, 8.0]


def test_steps_wrap_every_row_operation() -> None:
    result = engine.solve_system(SYSTEM)
    steps = result["steps"]
    assert steps[0]["description"] == "System of equations"
    assert steps[1]["description"] == "Build the augmented matrix"
    assert steps[1]["expression"].splitlines()[0] == "[2, 1, -1 | 8]"
    assert [s["description"] for s in steps[2:-1]] == result["trace"]
    assert steps[-1]["description"] == "Solution"
    assert [s["step_number"] for s in steps] == list(range(1, len(steps) + 1))
    # matrix shown after "Scaled row 1 by 0.5"
    assert steps[2]["expression"].splitlines()[0] == "[1, 0.5, -0.5 | 4]"


def test_verification_steps_present() -> None:
    result = engine.solve_system(SYSTEM)
    assert len(result["verification_steps"]) == 5
    assert result["verification_steps"][-1]["description"] == "All equations verified"


def test_singular_system_is_reported_not_raised() -> None:
    result = engine.solve_system(SINGULAR)
    assert result["status"] == "no_unique_solution"
    assert result["solution"] is None
    assert "No unique solution" in result["final_answer"]
    assert result["verification_steps"] == []
    assert result["summary"]["row_operations"] == len(result["trace"]) == 5
    assert result["steps"][-1]["description"] == "No unique solution"


def test_two_by_two_uses_first_two_variables() -> None:
    result = engine.solve_system(["x + y = 10", "x - y = 2"])
    assert result["solution"] == pytest.approx({"x": 6, "y": 4})
    assert result["given"]["inputs"]["variables"] == "x, y"


def test_custom_variables_and_compact_notation() -> None:
    result = engine.solve_system(
        ["a + b = 3", "a - b = 1"], variables="ab", notation="compact",
    )
    assert result["solution"] == pytest.approx({"a": 2, "b": 1})
    assert result["trace"][0] == "L_2 + -1·L_1 → L_2"


def test_decimals_option() -> None:
    result = engine.solve_system(SYSTEM, decimals=5)
    assert "Scaled row 2 by -0.66667" in result["trace"]
    assert result["final_answer"].splitlines()[0] == "x = -0.99998"


def test_left_constants_option() -> None:
    moved = engine.solve_system(["x + 1 = 3", "y = 1"])
    ignored = engine.solve_system(["x + 1 = 3", "y = 1"], left_constants="ignore")
    assert moved["solution"]["x"] == pytest.approx(2)
    assert ignored["solution"]["x"] == pytest.approx(3)


def test_stored_settings_are_used() -> None:
    settings.save_settings({"notation": "compact", "decimals": 1})
    result = engine.solve_system(SYSTEM)
    assert result["method"]["parameters"]["notation"] == "compact"
    assert result["trace"][0] == "L_1 → 0.5·L_1"



def test_invalid_stored_settings_fall_back_to_defaults(_isolated_settings) -> None:
    _isolated_settings.parent.mkdir(parents=True, exist_ok=True)
    _isolated_settings.write_text(json.dumps({"settings": {"decimals": "2"}}), encoding="utf-8")
    result = engine.solve_system(["x = 1", "y = 1"])
    assert result["solution"] == {"x": 1.0, "y": 1.0}
    assert result["method"]["parameters"]["notation"] == "words"


def test_summary_reports_python_version() -> None:
    summary = engine.solve_system(SYSTEM)["summary"]
    assert summary["python"] == platform.python_version()
    assert summary["python"]

class TestInvalidInput:
    def test_parse_error_names_the_equation(self):
        with pytest.raises(MalformedEquation, match="Error in equation 2: .*exactly one '='"):
            engine.solve_system(["x + y = 1", "x - y", "z = 1"])

    def test_invalid_constant_names_the_equation(self):
        with pytest.raises(InvalidConstant, match="Error in equation 3"):
            engine.solve_system(["x = 1", "y = 2", "z = abc"])

    def test_overflowing_constant_names_the_equation(self):
        with pytest.raises(InvalidConstant, match="Error in equation 1: .*too large"):
            engine.solve_system(["x = 1e400", "y = 1", "z = 1"])

    def test_blank_equation(self):
        with pytest.raises(MalformedEquation, match="Please enter equation 2"):
            engine.solve_system(["x = 1", "   ", "z = 1"])

    def test_no_equations(self):
        with pytest.raises(ValueError, match="at least one equation"):
            engine.solve_system([])

    def test_not_enough_variables(self):
        with pytest.raises(ValueError, match="needs 4 variables"):
            engine.solve_system(["x = 1", "y = 1", "z = 1", "x + y = 2"])

    def test_variable_outside_system_size(self):
        with pytest.raises(ValueError, match="Error in equation 1"):
            engine.solve_system(["x + z = 1", "y = 2"])

    @pytest.mark.parametrize(
        "kwargs",
        [{"notation": "latex"}, {"decimals": -1}, {"left_constants": "keep"}],
    )
    def test_bad_options(self, kwargs):
        with pytest.raises(ValueError):
            engine.solve_system(SYSTEM, **kwargs)
