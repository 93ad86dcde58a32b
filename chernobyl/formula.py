"""Formula evaluator with user variables, constants and functions.

Grammar::

    expression ::= term [ ("+" | "-") term ]*
    term       ::= factor [ ("*" | "/" | "^") factor ]*
    factor     ::= "(" expression ")" | number | constant | variable
                 | user_function "(" expression ")"
                 | builtin "(" expression ")"

Names are matched case-insensitively by prefix, constants first, then
variables, then user functions, then built-in functions.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from enum import IntEnum

MAX_FORMULA_LENGTH = 1024
MAX_NAME_LENGTH = 255
MAX_VARIABLES = 255
MAX_CONSTANTS = 255
MAX_FUNCTIONS = 256

EPSILON = 1.19e-7
PI = 3.14159265359
E = 2.71828182845


class ErrorCode(IntEnum):
    """Reasons a formula could not be evaluated."""

    DIVISION_BY_ZERO = 0
    EMPTY = 1
    PARENS_MISMATCH = 2
    RIGHT_PAREN = 3
    MAX_LENGTH = 4
    NEGATIVE_FACTORIAL = 5
    NEGATIVE_ROOT = 6
    LOG_ZERO = 7
    LN_EPSILON = 8
    TANGENT_NINETY = 9
    SYNTAX = 10
    PARSER = 11
    OK = 99

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ErrorCode.DIVISION_BY_ZERO: "Divisao por zero",
    ErrorCode.EMPTY: "Expressao vazia",
    ErrorCode.PARENS_MISMATCH: "Os parenteses nao coincidem",
    ErrorCode.RIGHT_PAREN: "Faltou um ')'",
    ErrorCode.MAX_LENGTH: "Comprimento expressões eh maior que o maximo",
    ErrorCode.NEGATIVE_FACTORIAL: "Para calcular o fatorial o numero deve ser maior que 0",
    ErrorCode.NEGATIVE_ROOT: "Impossivel calcular raiz quadrada de numero menores que 0",
    ErrorCode.LOG_ZERO: "Impossivel calcular o Log com valores menores ou iguais a 0",
    ErrorCode.LN_EPSILON: "O valor de LN tem que ser maior que EPSILON",
    ErrorCode.TANGENT_NINETY: "Impossivel calcular a tangente de valores >= 90 graus",
    ErrorCode.SYNTAX: "Erro de sintaxe",
    ErrorCode.PARSER: "Erro do analisador de expressao",
    ErrorCode.OK: "OK",
}


class FormulaError(Exception):
    """A formula or a table operation failed; ``code`` tells why."""

    def __init__(self, code: ErrorCode, detail: str | None = None) -> None:
        super().__init__(code.message if detail is None else f"{code.message}: {detail}")
        self.code = code


UserFunction = Callable[[float], float]


def factorial(value: int) -> float:
    """Product 1..value as a float; values of 1 or less are returned as is."""
    value = int(value)
    if value <= 1:
        return float(value)
    result = 1.0
    for k in range(2, value + 1):
        result *= k
    return result


def _real(func: Callable[[float], float]) -> Callable[[float], float]:
    def call(x: float) -> float:
        try:
            return float(func(x))
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    return call


def _finite_only(func: Callable[[float], int]) -> Callable[[float], float]:
    def call(x: float) -> float:
        return x if not math.isfinite(x) else float(func(x))

    return call


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent.is_integer() and int(exponent) % 2:
            return -math.inf
        return math.inf
    except ValueError:
        return math.inf if base == 0 else math.nan


def _round_half_away(x: float) -> int:
    whole = math.trunc(x)
    if abs(x - whole) >= 0.5:
        whole += 1 if x > 0 else -1
    return whole


def _tan(x: float) -> float:
    if _real(math.cos)(x) <= EPSILON:
        raise FormulaError(ErrorCode.TANGENT_NINETY)
    return _real(math.tan)(x)


def _ln(x: float) -> float:
    if x <= EPSILON:
        raise FormulaError(ErrorCode.LN_EPSILON)
    return math.log(x) / math.log(10)


def _log(x: float) -> float:
    if x <= 0:
        raise FormulaError(ErrorCode.LOG_ZERO)
    return math.log(x)


def _sqrt(x: float) -> float:
    if x < 0:
        raise FormulaError(ErrorCode.NEGATIVE_ROOT)
    return math.sqrt(x)


_BUILTINS: dict[str, UserFunction] = {
    "ARCTAN": _real(math.atan),
    "COS": _real(math.cos),
    "SIN": _real(math.sin),
    "TAN": _tan,
    "ABS": abs,
    "EXP": _real(math.exp),
    "LN": _ln,
    "LOG": _log,
    "SQRT": _sqrt,
    "SQR": lambda x: _power(x, 2),
    "INT": _finite_only(math.trunc),
    "ROUND": _finite_only(_round_half_away),
    "FLOOR": _finite_only(math.floor),
    "CEILING": _finite_only(math.ceil),
    "ARCSIN": lambda x: PI / 2 if x == 1 else _real(math.asin)(x),
    "ARCCOS": lambda x: 0.0 if x == 1 else _real(math.acos)(x),
    "SIGN": lambda x: 1.0 if x > 0 else -1.0,
}

_NUMERIC = frozenset("0123456789.")


def _is_letter(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalpha())


def _atof(token: str) -> float:
    whole, _, rest = token.partition(".")
    fraction = rest.partition(".")[0]
    if not whole and not fraction:
        return 0.0
    return float(f"{whole}.{fraction}")


def _prefix_match(text: str, pos: int, key: str, name: str) -> bool:
    return text[pos:pos + len(name)].lower() == key


class _Evaluator:
    """Recursive-descent evaluation over prepared formula text."""

    def __init__(self, parser: FormulaParser, text: str) -> None:
        self.parser = parser
        self.text = text
        self.pos = 0

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def expect_close(self, code: ErrorCode) -> None:
        if self.peek() != ")":
            raise FormulaError(code)
        self.pos += 1

    def expression(self) -> float:
        value = self.term()
        while (op := self.peek()) in ("+", "-"):
            self.pos += 1
            rhs = self.term()
            value = value + rhs if op == "+" else value - rhs
        if self.peek() not in ("", ")", "="):
            raise FormulaError(ErrorCode.SYNTAX)
        return value

    def term(self) -> float:
        value = self.factor()
        while (op := self.peek()) in ("*", "/", "^"):
            self.pos += 1
            rhs = self.factor()
            if op == "*":
                value *= rhs
            elif op == "^":
                value = _power(value, rhs)
            else:
                if abs(rhs) <= EPSILON:
                    raise FormulaError(ErrorCode.DIVISION_BY_ZERO)
                value /= rhs
        return value

    def factor(self) -> float:
        c = self.peek()
        if c == "(":
            self.pos += 1
            value = self.expression()
            self.expect_close(ErrorCode.PARENS_MISMATCH)
            return value
        if c in _NUMERIC:
            start = self.pos
            while self.peek() in _NUMERIC and self.peek():
                self.pos += 1
            return _atof(self.text[start:self.pos])
        if not _is_letter(c):
            raise FormulaError(ErrorCode.SYNTAX)
        for table in (self.parser._constants, self.parser._variables):
            for key, (name, value) in table.items():
                if _prefix_match(self.text, self.pos, key, name):
                    self.pos += len(name)
                    return value
        for key, (name, func) in self.parser._functions.items():
            if self._call_start(key, name):
                return self._apply(func)
        for name, func in _BUILTINS.items():
            if self._call_start(name.lower(), name):
                return self._apply(func)
        raise FormulaError(ErrorCode.SYNTAX)

    def _call_start(self, key: str, name: str) -> bool:
        if _prefix_match(self.text, self.pos, key, name) and self.peek(len(name)) == "(":
            self.pos += len(name) + 1
            return True
        return False

    def _apply(self, func: UserFunction) -> float:
        value = float(func(self.expression()))
        self.expect_close(ErrorCode.RIGHT_PAREN)
        return value


class FormulaParser:
    """Evaluates formulas against tables of variables, constants and functions."""

    def __init__(self) -> None:
        self._constants: dict[str, tuple[str, float]] = {}
        self._variables: dict[str, tuple[str, float]] = {}
        self._functions: dict[str, tuple[str, UserFunction]] = {}
        self._system_constants_added = False

    def add_variable(self, name: str, value: float) -> None:
        """Create a variable, or overwrite it if it exists."""
        name = name[:MAX_NAME_LENGTH]
        key = name.lower()
        if key in self._variables:
            self._variables[key] = (self._variables[key][0], value)
            return
        if len(self._variables) >= MAX_VARIABLES:
            raise FormulaError(ErrorCode.PARSER, "too many variables")
        self._variables[key] = (name, value)

    def set_variable(self, name: str, value: float) -> None:
        """Change an existing variable; raise KeyError if it is unknown."""
        stored, _ = self._entry(name)
        self._variables[name.lower()] = (stored, value)

    def get_variable(self, name: str) -> float:
        """Return a variable's value; raise KeyError if it is unknown."""
        return self._entry(name)[1]

    def increment(self, name: str, value: float) -> None:
        """Add ``value`` to an existing variable."""
        stored, current = self._entry(name)
        self._variables[name.lower()] = (stored, current + value)

    def decrement(self, name: str, value: float) -> None:
        """Subtract ``value`` from an existing variable."""
        stored, current = self._entry(name)
        self._variables[name.lower()] = (stored, current - value)

    def add_constant(self, name: str, value: float) -> bool:
        """Add a constant; return False if one of that name already exists."""
        name = name[:MAX_NAME_LENGTH]
        key = name.lower()
        if key in self._constants:
            return False
        if len(self._constants) >= MAX_CONSTANTS:
            raise FormulaError(ErrorCode.PARSER, "too many constants")
        self._constants[key] = (name, value)
        return True

    def register_function(self, name: str, func: UserFunction) -> bool:
        """Register a one-argument function; names must start with a letter or '_'."""
        if not name or not _is_letter(name[0]):
            return False
        key = name.lower()
        if key in self._functions:
            raise FormulaError(ErrorCode.PARSER, f"function {name!r} already registered")
        if len(self._functions) >= MAX_FUNCTIONS:
            raise FormulaError(ErrorCode.PARSER, "too many functions")
        self._functions[key] = (name, func)
        return True

    def evaluate(self, formula: str) -> float:
        """Evaluate ``formula``; raise FormulaError on failure."""
        if not formula:
            raise FormulaError(ErrorCode.EMPTY)
        if len(formula) >= MAX_FORMULA_LENGTH:
            raise FormulaError(ErrorCode.MAX_LENGTH)
        if not formula.replace(" ", "").replace("\t", ""):
            raise FormulaError(ErrorCode.EMPTY)
        if formula.count("(") != formula.count(")"):
            raise FormulaError(ErrorCode.PARENS_MISMATCH)
        text = "".join(c for c in formula if c > " ")
        if text[:1] in ("+", "-") and text:
            text = "0" + text
        text = text.replace("(-", "(0-").replace("(+", "(0+")
        self._add_system_constants()
        return _Evaluator(self, text).expression()

    def _entry(self, name: str) -> tuple[str, float]:
        try:
            return self._variables[name.lower()]
        except KeyError:
            raise KeyError(f'Variavel "{name}" nao localizada!') from None

    def _add_system_constants(self) -> None:
        if self._system_constants_added:
            return
        self.add_constant("PI", PI)
        self.add_constant("E", E)
        self._system_constants_added = True