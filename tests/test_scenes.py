import math

import pytest

from chernobyl.formula import ErrorCode
from chernobyl.scenes import (
    CACHE_MAX,
    LEVEL_TILEMAP,
    MAP_HEIGHT,
    MAP_WIDTH,
    Game,
    LevelScene,
    MenuScene,
    SceneId,
    SettingsScene,
)
from chernobyl.textinput import EventKind, Key


def settled_game() -> Game:
    game = Game()
    game.tempo = 0.0
    return game


def run_until(game: Game, predicate, limit: int = 200) -> bool:
    for _ in range(limit):
        if predicate():
            return True
        if not game.update():
            return False
    return predicate()


def test_game_starts_on_menu_fading_in():
    game = Game()
    assert isinstance(game.scene, MenuScene)
    assert game.scene_id is SceneId.MENU
    assert game.tempo == -1.0
    assert game.fade_alpha() == 1.0


def test_fade_in_reaches_zero():
    game = Game()
    assert run_until(game, lambda: game.tempo == 0.0)
    assert game.fade_alpha() == 0.0
    assert isinstance(game.scene, MenuScene)


def test_load_scene_ignored_during_transition():
    game = Game()
    game.load_scene(SceneId.LEVEL)
    assert game.tempo == -1.0
    assert game.next_scene is SceneId.MENU


def test_load_scene_starts_transition():
    game = settled_game()
    game.load_scene(SceneId.SETTINGS)
    assert game.tempo == 1.0
    assert game.next_scene is SceneId.SETTINGS


def test_fade_alpha_in_range_during_fade_out():
    game = settled_game()
    game.load_scene(SceneId.SETTINGS)
    game.update()
    assert 0.0 < game.fade_alpha() < 1.0


def test_menu_selection_moves_with_repeat():
    game = settled_game()
    game.input.down.repeat = True
    game.update()
    assert game.scene.selection == 1
    game.input.up.repeat = True
    game.update()
    assert game.scene.selection == 0
    game.input.up.repeat = True
    game.update()
    assert game.scene.selection == 0


def test_menu_selection_stops_at_last():
    game = settled_game()
    for _ in range(5):
        game.input.down.repeat = True
        game.update()
    assert game.scene.selection == 2


def test_menu_enter_goes_to_level():
    game = settled_game()
    game.input.enter.press = True
    game.update()
    assert game.next_scene is SceneId.LEVEL
    assert run_until(game, lambda: isinstance(game.scene, LevelScene))
    assert game.scene_id is SceneId.LEVEL
    assert game.tempo < 0


def test_menu_enter_on_settings():
    game = settled_game()
    game.scene.selection = 1
    game.input.enter.press = True
    game.update()
    assert game.next_scene is SceneId.SETTINGS
    assert run_until(game, lambda: isinstance(game.scene, SettingsScene))


def test_menu_quit_closes_game():
    game = settled_game()
    game.scene.selection = 2
    game.input.enter.press = True
    assert game.update() is True
    assert game.exit_request
    results = [game.update() for _ in range(100)]
    assert False in results


def test_exit_ignored_during_transition():
    game = Game()
    game.exit()
    assert not game.exit_request


def test_select_scene_rejects_unknown():
    game = Game()
    with pytest.raises(ValueError):
        game.select_scene("nowhere")


def test_force_load_replaces_scene_without_transition():
    game = settled_game()
    scene = game.force_load(SceneId.SETTINGS)
    assert game.scene is scene
    assert isinstance(scene, SettingsScene)
    assert game.tempo == 0.0


def test_settings_pulse_on_press_and_release():
    game = settled_game()
    game.force_load(SceneId.SETTINGS)
    game.input.up.press = True
    game.update()
    assert game.scene.pulse == 1.3
    game.input.up.release = True
    game.update()
    assert game.scene.pulse == 1.5


def test_settings_pulse_decays_toward_one():
    game = settled_game()
    game.force_load(SceneId.SETTINGS)
    game.scene.pulse = 1.5
    previous = game.scene.pulse
    for _ in range(10):
        game.update()
        assert 1.0 <= game.scene.pulse < previous
        previous = game.scene.pulse


def test_settings_enter_returns_to_menu():
    game = settled_game()
    game.force_load(SceneId.SETTINGS)
    game.input.enter.press = True
    game.update()
    assert game.next_scene is SceneId.MENU
    assert game.tempo == 1.0


def test_level_tilemap_matches_function_range():
    assert len(LEVEL_TILEMAP) == MAP_WIDTH * MAP_HEIGHT
    assert set(LEVEL_TILEMAP) == {0, 1, 2}
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    level.set_base(0, 0)
    assert level.function_start == 0.0
    assert level.function_end == MAP_WIDTH


def test_level_start_state():
    game = settled_game()
    game.input.text = "old"
    level = game.force_load(SceneId.LEVEL)
    assert game.input.text == ""
    assert game.input.capture_text
    assert (level.base_x, level.base_y) == (3, 8)
    assert level.function_start == 0.0
    assert level.function_end == MAP_WIDTH - 3
    assert level.textbox_bottom


def test_set_base_negative_x():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    level.set_base(-2, 5)
    assert level.function_start == 2.0
    assert level.function_end == MAP_WIDTH + 2


def test_calculate_points_samples_identity():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    game.input.text = "x"
    level.calculate_points()
    assert level.error is None
    assert level.zero_height == 0.0
    assert len(level.function_cache) <= CACHE_MAX
    assert level.function_cache[0] == level.function_start
    for i, value in enumerate(level.function_cache):
        assert value == pytest.approx(level.function_start + i * level.function_gap)
    assert level.function_cache[-1] <= level.function_end


def test_calculate_points_sets_zero_height():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    game.input.text = "x+2"
    level.calculate_points()
    assert level.zero_height == 2.0
    assert level.zero_height_tempo == 1.0


def test_calculate_points_reports_error():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    game.input.text = "sqrt(0-1)"
    level.calculate_points()
    assert level.error is ErrorCode.NEGATIVE_ROOT


def test_calculate_points_empty_text_hides_error():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    level.error = ErrorCode.SYNTAX
    game.input.text = ""
    level.calculate_points()
    assert level.error is None


def test_calculate_points_failed_samples_are_nan():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    level.set_base(-2, 8)
    game.input.text = "sqrt(2-x)"
    level.calculate_points()
    assert level.error is None
    assert not math.isnan(level.function_cache[0])
    assert math.isnan(level.function_cache[-1])


def test_level_update_recalculates_on_text_update():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    game.input.key_char(Key.OTHER, "x")
    assert game.input.text_update
    game.update()
    assert level.function_cache
    assert level.zero_height_tempo < 1.0


def test_textbox_moves_away_from_base():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    level.set_base(3, MAP_HEIGHT - 2)
    level.show_textbox()
    assert not level.textbox_bottom
    level.set_base(3, 2)
    level.show_textbox()
    assert level.textbox_bottom


def test_level_hide_and_show_textbox_via_keys():
    game = settled_game()
    level = game.force_load(SceneId.LEVEL)
    game.input.key_press(EventKind.KEY_DOWN, Key.ENTER)
    assert game.input.capture_finish
    game.update()
    assert not game.input.capture_text
    game.input.key_press(EventKind.KEY_DOWN, Key.ENTER)
    game.update()
    assert game.input.capture_text
    assert level is game.scene


def test_level_backspace_returns_to_menu():
    game = settled_game()
    game.force_load(SceneId.LEVEL)
    level = game.scene
    level.hide_textbox()
    game.input.key_press(EventKind.KEY_DOWN, Key.BACKSPACE)
    game.update()
    assert game.next_scene is SceneId.MENU
    assert run_until(game, lambda: isinstance(game.scene, MenuScene))