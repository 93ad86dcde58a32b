"""Tokenizer for expressions and insertion of implicit operators."""

from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Iterable, Sequence

SAMPLE_EXPRESSION = "(-x(2+29x)+2x)/(x(2+2))"

_TWO_CHAR_OPERATORS = frozenset(
    "== != <= >= >> << && || += -= *= /= ++ -- []".split()
)
_IDENTIFIER = re.compile(r"[A-Za-z_]+")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")
_NUMBER = re.compile(r"[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?")


class LexError(ValueError):
    """Raised when a quoted literal is not closed."""

    def __init__(self, quote: str) -> None:
        super().__init__(f"Faltou as aspas ({quote})")
        self.quote = quote


def _is_letter(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _is_digit(c: str) -> bool:
    return c.isascii() and c.isdigit()


def tokenize(line: str) -> list[str]:
    """Split ``line`` into lexemes; ``#`` and ``//`` start a comment."""
    tokens: list[str] = []
    pos = 0
    end = len(line)
    while pos < end:
        c = line[pos]
        if ord(c) <= ord(" "):
            pos += 1
            continue
        if c == "#" or line.startswith("//", pos):
            break
        start = pos
        if _is_letter(c) or c == "_":
            pos = _IDENTIFIER.match(line, pos).end()
        elif _is_digit(c):
            if line.startswith(("0x", "0X"), pos):
                match = _HEX.match(line, pos)
                pos = match.end() if match else pos + 1
            else:
                pos = _NUMBER.match(line, pos).end()
        elif c in "\"'":
            pos += 1
            while pos < end and line[pos] != c:
                if line[pos] == "\\":
                    pos += 1
                pos += 1
            if pos >= end:
                raise LexError(c)
            tokens.append(line[start:pos])
            pos += 1
            continue
        else:
            pos += 2 if line[pos:pos + 2] in _TWO_CHAR_OPERATORS else 1
        tokens.append(line[start:pos])
    return tokens


def insert_implicit_operators(tokens: Iterable[str]) -> str:
    """Join tokens, adding ``*`` for juxtaposition and ``^`` after a name."""
    parts: list[str] = []
    previous = ""
    for token in tokens:
        head = token[:1]
        before = previous[:1]
        if (_is_letter(head) and _is_digit(before)) or (
            _is_letter(before) and head == "("
        ):
            parts.append("*")
        elif _is_digit(head) and _is_letter(before):
            parts.append("^")
        parts.append(token)
        previous = token
    return "".join(parts)


def main(argv: Sequence[str] | None = None) -> int:
    """Print each expression with its implicit operators made explicit."""
    parser = argparse.ArgumentParser(
        description="Make implicit multiplication and powers explicit."
    )
    parser.add_argument("expressions", nargs="*", default=[SAMPLE_EXPRESSION])
    parser.add_argument(
        "-l", "--lexemes", action="store_true", help="print each lexeme"
    )
    args = parser.parse_args(argv)
    for expression in args.expressions:
        try:
            tokens = tokenize(expression)
        except LexError as exc:
            print(exc, file=sys.stderr)
            return 1
        if args.lexemes:
            for number, token in enumerate(tokens, start=1):
                print(f"[{number:3d}]: {token}")
        print(insert_implicit_operators(tokens))
    return 0


if __name__ == "__main__":
    sys.exit(main())