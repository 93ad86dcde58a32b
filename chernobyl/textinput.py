"""Keyboard state and a one-line text box with caret and selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

MAX_TEXT_LENGTH = 1023
CARET_BLINK_RATE = 1.5


class CharType(Enum):
    """Classes of characters the text box accepts; words are runs of one class."""

    INVALID = auto()
    NUMBER = auto()
    ALPHA = auto()
    TOKEN = auto()
    SPACE = auto()


class Key(Enum):
    """Keys the input handling distinguishes."""

    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    BACKSPACE = auto()
    DELETE = auto()
    ESCAPE = auto()
    A = auto()
    OTHER = auto()


class EventKind(Enum):
    """Kinds of keyboard events."""

    KEY_DOWN = auto()
    KEY_UP = auto()
    KEY_CHAR = auto()


_TOKENS = frozenset(".,/*()+-^")


def char_type(c: str) -> CharType:
    """Classify a single character."""
    if len(c) != 1:
        return CharType.INVALID
    if "0" <= c <= "9":
        return CharType.NUMBER
    if "A" <= c <= "Z" or "a" <= c <= "z":
        return CharType.ALPHA
    if c in _TOKENS:
        return CharType.TOKEN
    if c == " ":
        return CharType.SPACE
    return CharType.INVALID


@dataclass
class KeyState:
    """Per-frame state of one key."""

    press: bool = False
    hold: bool = False
    release: bool = False
    repeat: bool = False

    def reset(self) -> None:
        """Clear the one-frame flags; ``hold`` persists."""
        self.press = False
        self.release = False
        self.repeat = False


@dataclass
class InputState:
    """Navigation keys plus an editable line of text."""

    up: KeyState = field(default_factory=KeyState)
    down: KeyState = field(default_factory=KeyState)
    left: KeyState = field(default_factory=KeyState)
    right: KeyState = field(default_factory=KeyState)
    enter: KeyState = field(default_factory=KeyState)
    backspace: KeyState = field(default_factory=KeyState)
    text: str = ""
    capture_text: bool = False
    capture_finish: bool = False
    text_update: bool = False
    caret_pos: int = 0
    selection_start: int | None = None
    selection_end: int = 0
    caret_blink: float = 0.0
    exit_requested: bool = False

    def _key_states(self) -> dict[Key, KeyState]:
        return {
            Key.UP: self.up,
            Key.DOWN: self.down,
            Key.LEFT: self.left,
            Key.RIGHT: self.right,
            Key.ENTER: self.enter,
            Key.BACKSPACE: self.backspace,
        }

    def update(self, delta: float) -> None:
        """End a frame: clear one-frame flags and advance the caret blink."""
        for state in self._key_states().values():
            state.reset()
        self.capture_finish = False
        self.text_update = False
        self.exit_requested = False
        self.caret_blink += delta * CARET_BLINK_RATE
        if self.caret_blink >= 1:
            self.caret_blink -= 1

    def key_press(self, kind: EventKind, key: Key) -> None:
        """Record a key event outside text editing."""
        if key is Key.ESCAPE:
            self.exit_requested = True
            return
        if self.capture_text:
            if kind is EventKind.KEY_DOWN and key is Key.ENTER:
                self.capture_text = False
                self.capture_finish = True
                self.enter.press = True
                self.enter.hold = True
            return
        state = self._key_states().get(key)
        if state is None:
            return
        if kind is EventKind.KEY_DOWN:
            state.press = True
            state.hold = True
        elif kind is EventKind.KEY_CHAR:
            state.repeat = True
        else:
            state.release = True
            state.hold = False

    def key_char(self, key: Key, char: str = "", ctrl: bool = False, shift: bool = False) -> None:
        """Apply a typed character or an editing key to the text."""
        self.caret_blink = 0.0
        if key is Key.LEFT:
            self._move_left(ctrl, shift)
        elif key is Key.RIGHT:
            self._move_right(ctrl, shift)
        elif key is Key.BACKSPACE:
            self._backspace(ctrl)
        elif key is Key.DELETE:
            self._delete(ctrl)
        elif key is Key.A and ctrl:
            if self.text:
                self.selection_start = 0
                self.selection_end = self.caret_pos = len(self.text)
        elif len(self.text) < MAX_TEXT_LENGTH:
            self._insert(char)

    def _move_left(self, ctrl: bool, shift: bool) -> None:
        prev = self.caret_pos
        if self.caret_pos > 0:
            if ctrl:
                kind = char_type(self.text[self.caret_pos - 1])
                self.caret_pos -= 1
                while self.caret_pos > 0 and char_type(self.text[self.caret_pos - 1]) == kind:
                    self.caret_pos -= 1
            else:
                self.caret_pos -= 1
        if not shift:
            self.selection_start = None
            return
        caret = self.caret_pos
        start = self.selection_start
        if prev == caret:
            pass
        elif start is None:
            self.selection_start = caret
            self.selection_end = prev
        elif prev > start and caret <= start:
            self.selection_end = start
            self.selection_start = caret
        elif caret >= start:
            self.selection_end = caret
        else:
            self.selection_start = caret
        if self.selection_start == self.selection_end:
            self.selection_start = None

    def _move_right(self, ctrl: bool, shift: bool) -> None:
        prev = self.caret_pos
        length = len(self.text)
        if self.caret_pos < length:
            if ctrl:
                kind = char_type(self.text[self.caret_pos])
                self.caret_pos += 1
                while self.caret_pos < length and char_type(self.text[self.caret_pos]) == kind:
                    self.caret_pos += 1
            else:
                self.caret_pos += 1
        if not shift:
            self.selection_start = None
            return
        caret = self.caret_pos
        if prev == caret:
            pass
        elif self.selection_start is None:
            self.selection_start = prev
            self.selection_end = caret
        elif prev < self.selection_end and caret >= self.selection_end:
            self.selection_start = self.selection_end
            self.selection_end = caret
        elif caret <= self.selection_end:
            self.selection_start = caret
        else:
            self.selection_end = caret
        if self.selection_start == self.selection_end:
            self.selection_start = None

    def _delete_selection(self) -> None:
        assert self.selection_start is not None
        start = min(self.selection_start, self.selection_end)
        end = max(self.selection_start, self.selection_end)
        self.text = self.text[:start] + self.text[end:]
        self.caret_pos = start
        self.selection_start = None

    def _backspace(self, ctrl: bool) -> None:
        if self.selection_start is None and ctrl and self.caret_pos > 0:
            start = self.caret_pos
            kind = char_type(self.text[start - 1])
            start -= 1
            while start > 0 and char_type(self.text[start - 1]) == kind:
                start -= 1
            self.selection_start = start
            self.selection_end = self.caret_pos
        if self.selection_start is not None:
            self._delete_selection()
            self.text_update = True
        elif self.caret_pos > 0:
            self.caret_pos -= 1
            self.text = self.text[:self.caret_pos] + self.text[self.caret_pos + 1:]
            self.text_update = True

    def _delete(self, ctrl: bool) -> None:
        length = len(self.text)
        if self.selection_start is None and ctrl and self.caret_pos < length:
            end = self.caret_pos
            kind = char_type(self.text[end])
            end += 1
            while end < length and char_type(self.text[end]) == kind:
                end += 1
            self.selection_start = self.caret_pos
            self.selection_end = end
        if self.selection_start is not None:
            self._delete_selection()
            self.text_update = True
        elif self.caret_pos < length:
            self.text = self.text[:self.caret_pos] + self.text[self.caret_pos + 1:]
            self.text_update = True

    def _insert(self, char: str) -> None:
        if char_type(char) is CharType.INVALID:
            return
        if self.selection_start is not None:
            self._delete_selection()
        if char == ",":
            char = "."
        self.text = self.text[:self.caret_pos] + char + self.text[self.caret_pos:]
        self.caret_pos += 1
        self.text_update = True