import math

import pytest

from chernobyl.calculator import (
    MAX_NAME_LENGTH,
    MAX_VARIABLES,
    CalculationError,
    Calculator,
    ErrorCode,
)


@pytest.fixture
def calc():
    return Calculator()


def test_constants(calc):
    assert calc.evaluate("pi").value == pytest.approx(math.pi)
    assert calc.evaluate("e").value == pytest.approx(math.e)
    assert calc.evaluate("dpr*rpd").value == pytest.approx(1.0)


def test_case_insensitive(calc):
    assert calc.evaluate("PI").value == calc.evaluate("pi").value
    assert calc.evaluate("SIN(1)").value == calc.evaluate("sin(1)").value


def test_precedence(calc):
    assert calc.evaluate("2+3*4").value == calc.evaluate("3*4+2").value
    assert calc.evaluate("2+3*4").value == 2 + 3 * 4
    assert calc.evaluate("(2+3)*4").value == (2 + 3) * 4


def test_unary_minus(calc):
    assert calc.evaluate("-5").value == -5
    assert calc.evaluate("+5").value == 5


def test_power(calc):
    assert calc.evaluate("2^10").value == 2 ** 10


def test_power_does_not_chain(calc):
    assert calc.evaluate("2^3^2").value == calc.evaluate("2^3").value


def test_modulo(calc):
    assert calc.evaluate("7%3").value == math.fmod(7, 3)


def test_trailing_input_is_ignored(calc):
    assert calc.evaluate("2 3").value == 2


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("sqrt(16)", math.sqrt(16)),
        ("sqr(9)", math.sqrt(9)),
        ("hypot(3,4)", math.hypot(3, 4)),
        ("rss(5,12)", math.hypot(5, 12)),
        ("deg(pi)", math.degrees(math.pi)),
        ("rad(90)", math.radians(90)),
        ("abs(-2)", abs(-2)),
        ("floor(2.5)", math.floor(2.5)),
        ("ceil(2.5)", math.ceil(2.5)),
        ("ln(e)", math.log(math.e)),
        ("log(100)", math.log10(100)),
        ("cos(0.5)", math.cos(0.5)),
        ("atan(1)", math.atan(1)),
        ("exp(2)", math.exp(2)),
    ],
)
def test_functions(calc, expression, expected):
    assert calc.evaluate(expression).value == pytest.approx(expected)


@pytest.mark.parametrize(
    "expression, code",
    [
        ("1/0", ErrorCode.DIVISION_BY_ZERO),
        ("5%0", ErrorCode.DIVISION_BY_ZERO),
        ("(1+2", ErrorCode.MISSING_PAREN),
        ("()", ErrorCode.MISSING_ARGUMENT),
        ("sin()", ErrorCode.MISSING_ARGUMENT),
        ("foo(1)", ErrorCode.UNKNOWN_FUNCTION),
        ("y+1", ErrorCode.UNKNOWN_VARIABLE),
        ("hypot(1)", ErrorCode.WRONG_ARGUMENT_COUNT),
        ("sin(1,2)", ErrorCode.WRONG_ARGUMENT_COUNT),
        ("", ErrorCode.EMPTY),
        ("   ", ErrorCode.EMPTY),
        ("1 $ 2", ErrorCode.SYNTAX),
        ("*", ErrorCode.SYNTAX),
        ("sqrt(-1)", ErrorCode.NEGATIVE_ROOT),
        ("log(0)", ErrorCode.INVALID_LOG),
        ("ln(-1)", ErrorCode.INVALID_LN),
        ("asin(2)", ErrorCode.NOT_A_NUMBER),
    ],
)
def test_errors(calc, expression, code):
    with pytest.raises(CalculationError) as info:
        calc.evaluate(expression)
    assert info.value.code is code


def test_wrong_argument_count_names_function(calc):
    with pytest.raises(CalculationError) as info:
        calc.evaluate("hypot(1)")
    assert info.value.token == "hypot"


def test_error_position(calc):
    text = "1 $ 2"
    with pytest.raises(CalculationError) as info:
        calc.evaluate(text)
    assert info.value.position == text.index("$")
    assert info.value.token == "$"


def test_assignment_round_trip(calc):
    result = calc.evaluate("x = 4")
    assert result.assigned is True
    assert result.value == 4
    assert calc.get_variable("x") == 4
    assert calc.evaluate("x*x").value == calc.get_variable("x") ** 2
    assert calc.evaluate("x").assigned is False


def test_nested_assignment(calc):
    calc.evaluate("(y=3)+1")
    assert calc.get_variable("y") == 3


def test_empty_assignment_clears(calc):
    calc.evaluate("z = 2")
    result = calc.evaluate("z =")
    assert result.assigned is True
    with pytest.raises(CalculationError) as info:
        calc.get_variable("z")
    assert info.value.code is ErrorCode.UNKNOWN_VARIABLE


def test_variable_shadows_constant(calc):
    calc.set_variable("pi", 3.0)
    assert calc.evaluate("pi").value == 3.0


def test_long_names_are_truncated(calc):
    name = "abcdefghijklmnopq"
    calc.evaluate(f"{name} = 3")
    assert calc.get_variable(name[:MAX_NAME_LENGTH]) == 3


def test_too_many_variables(calc):
    for i in range(MAX_VARIABLES):
        calc.set_variable(f"v{i}", float(i))
    with pytest.raises(CalculationError) as info:
        calc.set_variable("extra", 1.0)
    assert info.value.code is ErrorCode.TOO_MANY_VARIABLES
    calc.set_variable("v0", 5.0)
    assert calc.get_variable("v0") == 5.0
    with pytest.raises(CalculationError) as info:
        calc.evaluate("extra = 1")
    assert info.value.code is ErrorCode.TOO_MANY_VARIABLES


def test_clear_variable_reports_existence(calc):
    calc.set_variable("w", 1.0)
    assert calc.clear_variable("w") is True
    assert calc.clear_variable("w") is False


def test_clear_variables(calc):
    calc.set_variable("a", 1.0)
    calc.set_variable("b", 2.0)
    calc.clear_variables()
    with pytest.raises(CalculationError):
        calc.get_variable("a")
    with pytest.raises(CalculationError):
        calc.get_variable("b")


def test_environment_lookup(calc, monkeypatch):
    monkeypatch.setenv("CHERNOBYL_CALC_VALUE", "2.5")
    assert calc.get_variable("_CHERNOBYL_CALC_VALUE") == 2.5
    monkeypatch.delenv("CHERNOBYL_CALC_VALUE")
    with pytest.raises(CalculationError):
        calc.get_variable("_CHERNOBYL_CALC_VALUE")


def test_error_messages(calc):
    with pytest.raises(CalculationError) as info:
        calc.evaluate("1/0")
    assert info.value.code.message == "Divisao por zero"
    with pytest.raises(CalculationError) as info:
        calc.evaluate("")
    assert info.value.code.message == "Expressao vazia"