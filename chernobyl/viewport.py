"""Window sizing: letterboxed viewport and command-line size options."""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field

IDEAL_RATIO = 16.0 / 9.0
DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 540
RATIO_TOLERANCE = 0.01

_log = logging.getLogger(__name__)
_DIGITS = frozenset("0123456789")


def _round(x: float) -> int:
    """Round half away from zero."""
    return int(math.floor(x + 0.5)) if x >= 0 else -int(math.floor(-x + 0.5))


def _parse_number(text: str) -> int:
    if not text or any(c not in _DIGITS for c in text):
        return 0
    return int(text)


def _parse_pair(text: str) -> tuple[int, int]:
    width, sep, height = text.partition("x") if "x" in text.lower() else (text, "", "")
    if not sep:
        lower = text.lower()
        if "x" in lower:
            index = lower.index("x")
            width, height = text[:index], text[index + 1:]
    else:
        index = text.lower().index("x")
        width, height = text[:index], text[index + 1:]
    if any(c not in _DIGITS for c in width) or any(c not in _DIGITS for c in height):
        return 0, 0
    return (int(width) if width else 0), (int(height) if height else 0)


def parse_size_args(argv: Sequence[str] | None = None) -> tuple[int, int]:
    """Read ``-w=N``, ``-h=N`` and ``-s=WxH``; return (width, height), 0 if unset."""
    if argv is None:
        argv = sys.argv[1:]
    width = height = 0
    for arg in argv:
        if len(arg) < 3 or arg[0] != "-" or arg[2] != "=":
            continue
        option, value = arg[1].lower(), arg[3:]
        if option == "w":
            n = _parse_number(value)
            if n > 0:
                width = n
        elif option == "h":
            n = _parse_number(value)
            if n > 0:
                height = n
        elif option == "s":
            m, n = _parse_pair(value)
            if m > 0 and n > 0:
                width, height = m, n
    return width, height


def initial_window_size(width: int, height: int, ratio: float = IDEAL_RATIO) -> tuple[int, int]:
    """Fill in a missing dimension from the ratio, or use the default size."""
    if width <= 0:
        if height <= 0:
            return DEFAULT_WIDTH, DEFAULT_HEIGHT
        return _round(height * ratio), height
    if height <= 0:
        return width, _round(width / ratio)
    return width, height


@dataclass
class Viewport:
    """A window and the largest area of the ideal ratio centred in it."""

    full_width: int
    full_height: int
    ideal_ratio: float = IDEAL_RATIO
    width: int = field(init=False, default=0)
    height: int = field(init=False, default=0)
    offset_x: int = field(init=False, default=0)
    offset_y: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.fit()

    def fit(self) -> None:
        """Recompute the letterboxed area for the current window size."""
        ratio = self.full_width / self.full_height
        if ratio > self.ideal_ratio + RATIO_TOLERANCE:
            self.width = _round(self.full_height * self.ideal_ratio)
            self.height = self.full_height
            self.offset_x = (self.full_width - self.width) // 2
            self.offset_y = 0
        elif ratio < self.ideal_ratio - RATIO_TOLERANCE:
            self.width = self.full_width
            self.height = _round(self.full_width / self.ideal_ratio)
            self.offset_x = 0
            self.offset_y = (self.full_height - self.height) // 2
        else:
            self.width = self.full_width
            self.height = self.full_height
            self.offset_x = self.offset_y = 0
        _log.debug(
            "janela: %dx%d (%dx%d)", self.full_width, self.full_height, self.width, self.height
        )

    def px(self, x: float) -> int:
        """Convert a fraction of the viewport width to a pixel column."""
        return int(x * self.width + self.offset_x)

    def py(self, y: float) -> int:
        """Convert a fraction of the viewport height to a pixel row."""
        return int(y * self.height + self.offset_y)

    def ix(self, x: int) -> float:
        """Convert a pixel column to a fraction of the viewport width."""
        return (x - self.offset_x) / self.width

    def iy(self, y: int) -> float:
        """Convert a pixel row to a fraction of the viewport height."""
        return (y - self.offset_y) / self.height