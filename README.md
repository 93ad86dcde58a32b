# chernobyl

The core logic of a small puzzle game. The player types a mathematical function
and the game plots it across a tile map. This package holds everything except
the drawing. It has no third-party dependencies.

| Module | Contents |
| --- | --- |
| `chernobyl.easing` | `lerp`, `inv_lerp`, `ease`, `ease_in`, `ease_out`, `clamp`, `clamp01` |
| `chernobyl.lexer` | `tokenize`, `insert_implicit_operators`, `LexError`, and the `main` command |
| `chernobyl.calculator` | `Calculator`, `Evaluation`, `CalculationError`, `ErrorCode` |
| `chernobyl.formula` | `FormulaParser`, `FormulaError`, `ErrorCode`, `factorial` |
| `chernobyl.collision` | tile-map and box collision: `Vec2`, `Entity`, `TileBounds`, `EdgeProbes`, `Box` and helper functions |
| `chernobyl.textinput` | `InputState`, `KeyState`, `Key`, `EventKind`, `CharType`, `char_type` |
| `chernobyl.viewport` | `Viewport`, `parse_size_args`, `initial_window_size` |
| `chernobyl.scenes` | `Game`, `SceneId`, `Scene`, `MenuScene`, `SettingsScene`, `LevelScene` |

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Easing

```python
from chernobyl.easing import lerp, ease, clamp01

lerp(0.0, 10.0, 0.5)   # 5.0
lerp(0.0, 10.0, 2.0)   # 10.0, because t is clamped to [0, 1]
ease(0.5)              # 0.5 (smoothstep)
clamp01(-3.0)          # 0.0
```

## Calculator

`Calculator.evaluate` returns an `Evaluation` with the `value` and an `assigned`
flag. The flag is true when the expression was a top-level assignment such as
`x = 10`. Writing `x =` with nothing after it removes the variable.

```python
from chernobyl.calculator import Calculator, CalculationError

calc = Calculator()
calc.evaluate("hypot(3, 4)").value      # 5.0
calc.evaluate("r = 2").assigned         # True
calc.evaluate("pi * r ^ 2").value
try:
    calc.evaluate("1 / 0")
except CalculationError as err:
    err.code                            # ErrorCode.DIVISION_BY_ZERO
```

- Input is lower-cased before it is evaluated.
- The built-in constants are `pi`, `e`, `dpr` and `rpd`.
- A name starting with `_` is read from the environment variable that has the
  rest of the name.
- The table holds at most 50 variables.
- `set_variable`, `get_variable`, `clear_variable` and `clear_variables` manage
  the variables directly.
- `CalculationError` carries `code`, `token` and `position`.

## Formula parser

The game uses this parser to plot what the player types.

```python
from chernobyl.formula import FormulaParser, FormulaError

parser = FormulaParser()
parser.add_variable("x", 0.0)
parser.register_function("double", lambda v: v * 2)

parser.set_variable("x", 3.0)
parser.evaluate("double(x) + sqrt(16)")   # 10.0
```

Names are matched case-insensitively, by prefix, in this order:

1. constants (`PI` and `E` are added on the first evaluation);
2. variables;
3. user functions;
4. built-in functions (`ARCTAN`, `COS`, `SIN`, `TAN`, `ABS`, `EXP`, `LN`,
   `LOG`, `SQRT`, `SQR`, `INT`, `ROUND`, `FLOOR`, `CEILING`, `ARCSIN`, `ARCCOS`,
   `SIGN`).

Because constants are checked first, a formula beginning `exp(` reads the
constant `E` and then fails with a syntax error.

`LN` returns the base-10 logarithm and `LOG` returns the natural logarithm.

`evaluate` raises `FormulaError` for a formula that is empty, 1024 characters or
longer, badly parenthesised, or otherwise invalid. It also raises it for
division by (near) zero and for out-of-domain function arguments. The error's
`code` is a `chernobyl.formula.ErrorCode`.

`set_variable`, `get_variable`, `increment` and `decrement` raise `KeyError` for
an unknown variable.

## Tokenizer

```python
from chernobyl.lexer import tokenize, insert_implicit_operators

insert_implicit_operators(tokenize("(-x(2+29x)+2x)/(x(2+2))"))
# '(-x*(2+29*x)+2*x)/(x*(2+2))'
```

`insert_implicit_operators` adds `*` in two places: between a number and a
following name, and between a name and a following `(`. It adds `^` between a
name and a following number, so `x2` becomes `x^2`.

`tokenize` stops at `#` or `//`. It raises `LexError` for an unclosed quoted
literal.

## Command line

```
chernobyl-lexer
chernobyl-lexer --lexemes "3x + y2"
```

The command prints each expression with its implicit operators made explicit.
With no arguments it uses the sample expression `(-x(2+29x)+2x)/(x(2+2))`.
`-l` / `--lexemes` also prints each numbered lexeme. If an expression has an
unclosed quote, the command prints the error and exits with status 1.

## Game logic

- **`collision`** covers two things:
  - Tiles: it snaps a position to the tile grid (`tile_bounds`) and works out
    which tiles to probe (`edge_probes`, `corner_probes`).
    `resolve_tile_collision` zeroes speed into solid tiles. `touches_solid`
    tests tiles.
  - Boxes: `speed_from_keys` turns held arrow keys into a speed, and
    `block_motion` stops a moving `Box` against an obstacle.
- **`textinput`**: `InputState` records key events with `key_press` and edits a
  one-line text with `key_char`. Editing supports caret movement, Ctrl word
  jumps, Shift selection, Backspace/Delete and Ctrl+A. Call `update(delta)` at
  the end of each frame.
- **`viewport`**: `Viewport` fits a 16:9 area into a window with letterboxes,
  and converts between fractions of that area and pixels. `parse_size_args`
  reads `-w=N`, `-h=N` and `-s=WxH`.
- **`scenes`**: `Game` owns an `InputState`, a `FormulaParser` and the current
  scene. It fades between scenes with `load_scene` and `exit`. Call
  `Game.update()` once per frame; it returns `False` when the game should close.
  `fade_alpha()` gives the overlay opacity. `LevelScene.calculate_points` samples
  the typed formula along the level into `function_cache`.

## What this package does not do

Nothing here opens a window, draws, loads images or fonts, or reads the real
keyboard. The scenes and `Game` hold only state and per-frame logic. To play
the game you need a front end that sends key events to `InputState`, calls
`Game.update()` once per frame, and draws the state. The only command provided
is `chernobyl-lexer`.