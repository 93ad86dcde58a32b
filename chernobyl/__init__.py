"""Core logic of a function-plotting puzzle game: parsers, collision, input, viewport and scenes."""

__version__ = "0.1.0"

__all__ = [
    "calculator",
    "collision",
    "easing",
    "formula",
    "lexer",
    "scenes",
    "textinput",
    "viewport",
]