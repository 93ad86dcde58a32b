"""Expression calculator with variables, assignments and built-in functions."""

from __future__ import annotations

import math
import os
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import NoReturn

MAX_VARIABLES = 50
MAX_NAME_LENGTH = 15


class ErrorCode(IntEnum):
    """Result codes of a calculation."""

    OK = 0
    SYNTAX = 1
    MISSING_PAREN = 2
    DIVISION_BY_ZERO = 3
    UNKNOWN_VARIABLE = 4
    TOO_MANY_VARIABLES = 5
    UNKNOWN_FUNCTION = 6
    WRONG_ARGUMENT_COUNT = 7
    MISSING_ARGUMENT = 8
    EMPTY = 9
    NEGATIVE_ROOT = 10
    INVALID_LOG = 11
    INVALID_LN = 12
    NOT_A_NUMBER = 13

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ErrorCode.OK: "OK",
    ErrorCode.SYNTAX: "Erro se sintaxe",
    ErrorCode.MISSING_PAREN: "Falta parentese",
    ErrorCode.DIVISION_BY_ZERO: "Divisao por zero",
    ErrorCode.UNKNOWN_VARIABLE: "Variavel desconhecida",
    ErrorCode.TOO_MANY_VARIABLES: "Numero maximo de variaveis excedido",
    ErrorCode.UNKNOWN_FUNCTION: "Funcao nao reconhecida",
    ErrorCode.WRONG_ARGUMENT_COUNT: "Numero incorreto de argumentos para a funcao",
    ErrorCode.MISSING_ARGUMENT: "Esta faltando argumentos",
    ErrorCode.EMPTY: "Expressao vazia",
    ErrorCode.NEGATIVE_ROOT: "x não pode ser negativo para raiz quadrada",
    ErrorCode.INVALID_LOG: "x não pode ser menor ou igual à 0 para log10",
    ErrorCode.INVALID_LN: "x não pode ser menor ou igual à 0 para ln",
    ErrorCode.NOT_A_NUMBER: "Nan",
}


class CalculationError(Exception):
    """A calculation failed; carries the code, offending token and position."""

    def __init__(self, code: ErrorCode, token: str = "", position: int = 0) -> None:
        super().__init__(f"{code.message} (token {token!r}, position {position})")
        self.code = code
        self.token = token
        self.position = position


@dataclass(frozen=True)
class Evaluation:
    """The value of an expression and whether it was a top-level assignment."""

    value: float
    assigned: bool


class _DomainError(Exception):
    def __init__(self, code: ErrorCode) -> None:
        super().__init__(code.message)
        self.code = code


class _Kind(Enum):
    NONE = 0
    VAR = 1
    DEL = 2
    NUM = 3


_DEGREES_PER_RADIAN = 180.0 / math.pi
_RADIANS_PER_DEGREE = math.pi / 180.0

_CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
    "dpr": _DEGREES_PER_RADIAN,
    "rpd": _RADIANS_PER_DEGREE,
}

_DELIMITERS = frozenset("+-*/%^(),=")
_NUMERIC = frozenset("0123456789.")
_WHITE = frozenset(" \t")
_FLOAT_PREFIX = re.compile(r"[ \t\n]*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group().strip()) if match else 0.0


def _real(func: Callable[..., float]) -> Callable[..., float]:
    def call(*args: float) -> float:
        try:
            return float(func(*args))
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    return call


def _rounding(func: Callable[[float], int]) -> Callable[[float], float]:
    def call(x: float) -> float:
        return x if not math.isfinite(x) else float(func(x))

    return call


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent.is_integer() and int(exponent) % 2:
            return -math.inf
        return math.inf
    except ValueError:
        return math.inf if base == 0 else math.nan


def _sqrt(x: float) -> float:
    if x < 0:
        raise _DomainError(ErrorCode.NEGATIVE_ROOT)
    return math.sqrt(x)


def _log10(x: float) -> float:
    if x <= 0:
        raise _DomainError(ErrorCode.INVALID_LOG)
    return math.log10(x) if math.isfinite(x) else x


def _ln(x: float) -> float:
    if x <= 0:
        raise _DomainError(ErrorCode.INVALID_LN)
    return math.log(x) if math.isfinite(x) else x


_FUNCTIONS: dict[str, tuple[int, Callable[..., float]]] = {
    "sin": (1, _real(math.sin)),
    "cos": (1, _real(math.cos)),
    "tan": (1, _real(math.tan)),
    "asin": (1, _real(math.asin)),
    "acos": (1, _real(math.acos)),
    "atan": (1, _real(math.atan)),
    "exp": (1, _real(math.exp)),
    "ln": (1, _ln),
    "log": (1, _log10),
    "sqrt": (1, _sqrt),
    "sqr": (1, _sqrt),
    "floor": (1, _rounding(math.floor)),
    "ceil": (1, _rounding(math.ceil)),
    "abs": (1, abs),
    "hypot": (2, math.hypot),
    "rss": (2, math.hypot),
    "deg": (1, lambda x: x * _DEGREES_PER_RADIAN),
    "rad": (1, lambda x: x * _RADIANS_PER_DEGREE),
}


class _Evaluator:
    """Recursive-descent evaluation of one expression."""

    def __init__(self, calculator: Calculator, text: str) -> None:
        self.calculator = calculator
        self.text = text.lower()
        self.pos = 0
        self.token = ""
        self.kind = _Kind.NONE

    def fail(self, code: ErrorCode, token: str | None = None) -> NoReturn:
        raise CalculationError(code, self.token if token is None else token, self.pos - 1)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_white(self) -> None:
        while self.peek() in _WHITE and self.peek():
            self.pos += 1

    def take_while(self, accept: Callable[[str], bool]) -> str:
        start = self.pos
        while self.peek() and accept(self.peek()):
            self.pos += 1
        return self.text[start:self.pos]

    def scan(self) -> None:
        self.kind = _Kind.NONE
        self.skip_white()
        c = self.peek()
        if not c:
            self.token = ""
        elif c in _DELIMITERS:
            self.kind = _Kind.DEL
            self.token = c
            self.pos += 1
        elif c in _NUMERIC:
            self.kind = _Kind.NUM
            self.token = self.take_while(lambda ch: ch in _NUMERIC)
        elif c.isascii() and c.isalpha():
            self.kind = _Kind.VAR
            word = self.take_while(lambda ch: ch.isascii() and ch.isalpha())
            self.token = word[:MAX_NAME_LENGTH]
        else:
            self.pos += 1
            self.token = c
            self.fail(ErrorCode.SYNTAX)
        self.skip_white()

    def assignment(self) -> tuple[float, bool]:
        if self.kind is _Kind.VAR and self.peek() == "=":
            name = self.token
            self.scan()
            self.scan()
            if not self.token:
                self.calculator.clear_variable(name)
                return 0.0, True
            value = self.additive()
            if not self.calculator._store(name, value):
                self.fail(ErrorCode.TOO_MANY_VARIABLES)
            return value, True
        return self.additive(), False

    def additive(self) -> float:
        value = self.term()
        while self.token in ("+", "-"):
            operator = self.token
            self.scan()
            rhs = self.term()
            value = value + rhs if operator == "+" else value - rhs
        return value

    def term(self) -> float:
        value = self.power()
        while self.token in ("*", "/", "%"):
            operator = self.token
            self.scan()
            rhs = self.power()
            if operator == "*":
                value *= rhs
                continue
            if rhs == 0:
                self.fail(ErrorCode.DIVISION_BY_ZERO)
            if operator == "/":
                value /= rhs
            else:
                value = _real(math.fmod)(value, rhs)
        return value

    def power(self) -> float:
        value = self.unary()
        if self.token == "^":
            self.scan()
            value = _pow(value, self.unary())
        return value

    def unary(self) -> float:
        sign = ""
        if self.token in ("+", "-"):
            sign = self.token
            self.scan()
        value = self.primary()
        return -value if sign == "-" else value

    def primary(self) -> float:
        if self.token == "(":
            self.scan()
            if self.token == ")":
                self.fail(ErrorCode.MISSING_ARGUMENT)
            value, _ = self.assignment()
            if self.token != ")":
                self.fail(ErrorCode.MISSING_PAREN)
            self.scan()
            return value
        if self.kind is _Kind.NUM:
            value = _atof(self.token)
            self.scan()
            return value
        if self.kind is _Kind.VAR:
            if self.peek() == "(":
                return self.call()
            found = self.calculator._lookup(self.token)
            if found is None:
                self.fail(ErrorCode.UNKNOWN_VARIABLE)
            self.scan()
            return found
        self.fail(ErrorCode.SYNTAX)

    def call(self) -> float:
        name = self.token
        entry = _FUNCTIONS.get(name)
        if entry is None:
            self.fail(ErrorCode.UNKNOWN_FUNCTION)
        arity, func = entry
        self.scan()
        args: list[float] = []
        while True:
            self.scan()
            if self.token in (")", ","):
                self.fail(ErrorCode.MISSING_ARGUMENT)
            value, _ = self.assignment()
            args.append(value)
            if len(args) >= 4 or self.token != ",":
                break
        self.scan()
        if len(args) != arity:
            self.fail(ErrorCode.WRONG_ARGUMENT_COUNT, token=name)
        try:
            return func(*args)
        except _DomainError as exc:
            self.fail(exc.code)


class Calculator:
    """Evaluates expressions against a table of up to fifty variables."""

    def __init__(self) -> None:
        self._variables: dict[str, float] = {}

    def evaluate(self, expression: str) -> Evaluation:
        """Evaluate ``expression``; raise CalculationError on failure."""
        evaluator = _Evaluator(self, expression)
        evaluator.scan()
        if not evaluator.token:
            evaluator.fail(ErrorCode.EMPTY)
        value, assigned = evaluator.assignment()
        if math.isnan(value):
            evaluator.fail(ErrorCode.NOT_A_NUMBER)
        return Evaluation(value, assigned)

    def set_variable(self, name: str, value: float) -> None:
        """Create or overwrite a variable."""
        if not self._store(name, value):
            raise CalculationError(ErrorCode.TOO_MANY_VARIABLES, name)

    def get_variable(self, name: str) -> float:
        """Look up a variable, constant, or ``_NAME`` environment value."""
        value = self._lookup(name)
        if value is None:
            raise CalculationError(ErrorCode.UNKNOWN_VARIABLE, name)
        return value

    def clear_variable(self, name: str) -> bool:
        """Remove a variable; return whether it existed."""
        return self._variables.pop(name, None) is not None

    def clear_variables(self) -> None:
        """Remove every variable."""
        self._variables.clear()

    def _store(self, name: str, value: float) -> bool:
        name = name[:MAX_NAME_LENGTH]
        if name not in self._variables and len(self._variables) >= MAX_VARIABLES:
            return False
        self._variables[name] = value
        return True

    def _lookup(self, name: str) -> float | None:
        if name.startswith("_"):
            raw = os.environ.get(name[1:])
            return None if raw is None else _atof(raw)
        if name in self._variables:
            return self._variables[name]
        return _CONSTANTS.get(name)