"""Scenes of the game (menu, settings, level) and the transitions between them."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum, auto

from .easing import ease, lerp
from .formula import ErrorCode, FormulaError, FormulaParser
from .textinput import InputState

FPS = 60.0
TRANSITION_SPEED = 2.5
FADE_STRETCH = 1.125

MAP_WIDTH = 32
MAP_HEIGHT = 18
CACHE_MAX = 1024
FUNCTION_GAP = 1.0 / 8.0
ZERO_HEIGHT_SPEED = 3.0
PULSE_SPEED = 10.0

# 0 is open floor, 1 a wall, 2 a goal tile; rows are MAP_WIDTH tiles wide.
LEVEL_TILEMAP: tuple[int, ...] = (
    1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 1, 1, 1, 1, 0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1,
    1, 0, 0, 2, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 2, 2, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1,
)


class SceneId(Enum):
    """The scenes the game can switch between."""

    MENU = auto()
    SETTINGS = auto()
    LEVEL = auto()


class Scene(ABC):
    """A screen of the game; it reads input from and drives the owning game."""

    show_letterbox = True

    def __init__(self, game: Game) -> None:
        self.game = game

    @abstractmethod
    def update(self) -> None:
        """Advance the scene by one frame."""


class MenuScene(Scene):
    """Title menu with three entries: play, settings, quit."""

    ENTRIES = ("jogar", "configurações", "sair")

    def __init__(self, game: Game) -> None:
        super().__init__(game)
        self.selection = 0

    def update(self) -> None:
        """Move the selection and act on enter."""
        game = self.game
        if game.tempo > 0:
            return
        keys = game.input
        if keys.up.repeat and self.selection > 0:
            self.selection -= 1
        if keys.down.repeat and self.selection < len(self.ENTRIES) - 1:
            self.selection += 1
        if keys.enter.press:
            if self.selection == 0:
                game.load_scene(SceneId.LEVEL)
            elif self.selection == 1:
                game.load_scene(SceneId.SETTINGS)
            else:
                game.exit()


class SettingsScene(Scene):
    """Settings screen; the up key makes the picture pulse."""

    def __init__(self, game: Game) -> None:
        super().__init__(game)
        self.pulse = 1.0

    def update(self) -> None:
        """Return to the menu on enter and animate the pulse."""
        game = self.game
        step = game.delta * PULSE_SPEED
        if game.tempo > 0:
            self.pulse = lerp(self.pulse, 1.0, step)
            return
        if game.input.enter.press:
            game.load_scene(SceneId.MENU)
        up = game.input.up
        if up.press:
            self.pulse = 1.3
        elif up.release:
            self.pulse = 1.5
        elif up.hold:
            self.pulse = lerp(self.pulse, 1.1, step)
        else:
            self.pulse = lerp(self.pulse, 1.0, step)


class LevelScene(Scene):
    """A level: the player types f(x) and the graph is sampled from the base point."""

    def __init__(self, game: Game) -> None:
        super().__init__(game)
        self.tilemap = LEVEL_TILEMAP
        self.function_gap = FUNCTION_GAP
        self.function_cache: list[float] = []
        self.function_start = 0.0
        self.function_end = 0.0
        self.base_x = 0
        self.base_y = 0
        self.zero_height = 0.0
        self.zero_height_prev = 0.0
        self.zero_height_tempo = 0.0
        self.error: ErrorCode | None = None
        self.textbox_bottom = True
        self.set_base(3, 8)
        self.show_textbox()
        keys = game.input
        keys.text = ""
        keys.capture_finish = False
        keys.caret_pos = 0
        keys.selection_start = None

    def calculate_points(self) -> None:
        """Evaluate the typed formula at x = 0 and sample it along the level."""
        parser = self.game.parser
        text = self.game.input.text
        parser.set_variable("x", 0)
        try:
            value = parser.evaluate(text)
        except FormulaError as exc:
            self.error = None if exc.code is ErrorCode.EMPTY else exc.code
            return
        self.error = None
        self.zero_height_prev = lerp(
            self.zero_height, self.zero_height_prev, self.zero_height_tempo ** 2
        )
        self.zero_height = value
        self.zero_height_tempo = 1.0
        cache: list[float] = []
        p = self.function_start
        while len(cache) < CACHE_MAX and p <= self.function_end:
            parser.set_variable("x", p)
            cache.append(self._sample(text))
            p += self.function_gap
        self.function_cache = cache

    def _sample(self, text: str) -> float:
        try:
            return self.game.parser.evaluate(text)
        except FormulaError:
            return math.nan

    def set_base(self, x: int, y: int) -> None:
        """Place the graph origin at tile (x, y) and set the sampled x range."""
        self.base_x = x
        self.base_y = y
        self.function_start = float(-x) if x < 0 else 0.0
        self.function_end = float(MAP_WIDTH - x)

    def show_textbox(self) -> None:
        """Start text capture, moving the box away from the base point."""
        self.game.input.capture_text = True
        if self.textbox_bottom:
            if self.base_y >= MAP_HEIGHT - 5:
                self.textbox_bottom = False
        elif self.base_y <= 4:
            self.textbox_bottom = True

    def hide_textbox(self) -> None:
        """Stop text capture."""
        self.game.input.capture_text = False

    def update(self) -> None:
        """Handle the textbox keys, recompute the graph and animate the origin."""
        game = self.game
        if game.tempo > 0:
            return
        keys = game.input
        if keys.backspace.press:
            game.load_scene(SceneId.MENU)
        if keys.enter.press and not keys.capture_text and not keys.capture_finish:
            self.show_textbox()
        if keys.capture_finish:
            self.hide_textbox()
        if keys.text_update:
            self.calculate_points()
        if self.zero_height_tempo > 0:
            self.zero_height_tempo = max(
                0.0, self.zero_height_tempo - game.delta * ZERO_HEIGHT_SPEED
            )


_SCENES: dict[SceneId, type[Scene]] = {
    SceneId.MENU: MenuScene,
    SceneId.SETTINGS: SettingsScene,
    SceneId.LEVEL: LevelScene,
}


class Game:
    """Current scene, fade transitions, input and the formula parser."""

    def __init__(self, delta: float = 1.0 / FPS) -> None:
        self.delta = delta
        self.input = InputState()
        self.parser = FormulaParser()
        self.parser.add_variable("x", 0)
        self.tempo = 0.0
        self.next_scene = SceneId.MENU
        self.exit_request = False
        self.scene_id = SceneId.MENU
        self.scene: Scene = self.select_scene(SceneId.MENU)
        self.tempo = -1.0

    def load_scene(self, scene_id: SceneId) -> None:
        """Begin a fade to ``scene_id``; ignored while a transition runs."""
        if self.tempo != 0:
            return
        self.next_scene = scene_id
        self.tempo = 1.0

    def select_scene(self, scene_id: SceneId) -> Scene:
        """Make a fresh scene of ``scene_id`` current and return it."""
        try:
            factory = _SCENES[scene_id]
        except KeyError:
            raise ValueError(f"unknown scene {scene_id!r}") from None
        self.scene_id = scene_id
        self.scene = factory(self)
        return self.scene

    def force_load(self, scene_id: SceneId) -> Scene:
        """Replace the current scene at once, without a transition."""
        return self.select_scene(scene_id)

    def exit(self) -> None:
        """Begin a fade out that ends the game; ignored while a transition runs."""
        if self.tempo != 0:
            return
        self.exit_request = True
        self.tempo = 1.0

    def update(self) -> bool:
        """Run one frame; return False once the game should close."""
        if self.input.exit_requested:
            self.exit()
        scene_loaded = False
        if self.tempo > 0:
            self.tempo -= self.delta * TRANSITION_SPEED
            if self.tempo <= 0:
                self.tempo -= 1
                if self.exit_request:
                    return False
                self.force_load(self.next_scene)
                scene_loaded = True
        elif self.tempo < 0:
            self.tempo = min(0.0, self.tempo + self.delta * TRANSITION_SPEED)
        if not scene_loaded:
            self.scene.update()
        self.input.update(self.delta)
        return True

    def fade_alpha(self) -> float:
        """Opacity of the black fade overlay for the current transition."""
        if self.tempo > 0:
            return ease((1 - self.tempo) * FADE_STRETCH)
        if self.tempo < 0:
            return ease(-self.tempo * FADE_STRETCH)
        return 0.0