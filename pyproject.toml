[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chernobyl"
version = "0.1.0"
description = "Core of a function-plotting puzzle game: expression parsers, tile collision, text input and scene logic"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "game",
    "expression-parser",
    "calculator",
    "lexer",
    "tilemap",
    "collision",
    "easing",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chernobyl-lexer = "chernobyl.lexer:main"

[tool.hatch.build.targets.wheel]
packages = ["chernobyl"]

[tool.hatch.build.targets.sdist]
include = ["chernobyl", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
