from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")

from still_water.app import (BreathingScreen, EnvironmentScreen, StillWaterApp, apply_args,
                             parse_args)
from still_water.breathing import BreathingSession
from still_water.config import DEFAULT_CONFIG
from still_water.icon import create_icon


# ─── Command line ────────────────────────────────────────────
def test_parse_args_defaults():
    args = parse_args([])
    assert (args.screen, args.pattern, args.environment, args.test) == (None, None, None, False)


def test_parse_args_accepts_known_values():
    args = parse_args(["--screen", "environment", "--pattern", "Box Breathing",
                       "--environment", "ocean", "--test"])
    assert args.screen == "environment"
    assert args.pattern == "Box Breathing"
    assert args.environment == "ocean"
    assert args.test is True


@pytest.mark.parametrize("argv", [
    ["--screen", "journal"],
    ["--pattern", "Square Breathing"],
    ["--environment", "moon"],
])
def test_parse_args_rejects_unknown_values(argv, capsys):
    with pytest.raises(SystemExit):
        parse_args(argv)
    assert "invalid choice" in capsys.readouterr().err


def test_flags_override_config():
    config = dict(DEFAULT_CONFIG)
    args = parse_args(["--screen", "environment", "--pattern", "Calming Breath",
                       "--environment", "night"])
    merged = apply_args(config, args)
    assert merged["start_screen"] == "environment"
    assert merged["breathing_pattern"] == "Calming Breath"
    assert merged["environment"] == "night"


def test_omitted_flags_keep_config():
    config = dict(DEFAULT_CONFIG, start_screen="environment", environment="forest")
    merged = apply_args(dict(config), parse_args(["--pattern", "Equal Breathing"]))
    assert merged["start_screen"] == "environment"
    assert merged["environment"] == "forest"
    assert merged["breathing_pattern"] == "Equal Breathing"
    assert {k: v for k, v in merged.items() if k != "breathing_pattern"} == \
        {k: v for k, v in config.items() if k != "breathing_pattern"}


# ─── Tray paused state ───────────────────────────────────────
class FakeTray:
    def __init__(self):
        self.icon = None
        self.title = None


def same_image(a, b):
    return a.size == b.size and a.tobytes() == b.tobytes()


@pytest.fixture
def app():
    """App shell without a Tk root, backed by screens that never schedule."""
    app = object.__new__(StillWaterApp)
    app.tray = FakeTray()

    breathing = object.__new__(BreathingScreen)
    breathing.app = app
    breathing.session = BreathingSession()
    breathing._refresh = breathing._schedule = breathing._cancel = lambda: None

    environment = object.__new__(EnvironmentScreen)
    environment.app = app
    environment.playing = False
    environment._update_play_btn = environment._schedule = environment._cancel = lambda: None

    app.screens = {"breathing": breathing, "environment": environment}
    return app


def test_idle_app_shows_paused_icon(app):
    assert app.paused
    app._update_tray_icon()
    assert app.tray.title == "Still Water (PAUSED)"
    assert same_image(app.tray.icon, create_icon(64, paused=True))


def test_breathing_session_drives_tray_icon(app):
    screen = app.screens["breathing"]
    screen.start()
    assert not app.paused
    assert app.tray.title == "Still Water"
    assert same_image(app.tray.icon, create_icon(64))

    screen.pause()
    assert app.tray.title == "Still Water (PAUSED)"
    assert same_image(app.tray.icon, create_icon(64, paused=True))

    screen.resume()
    assert app.tray.title == "Still Water"

    screen.reset()
    assert app.tray.title == "Still Water (PAUSED)"


def test_environment_playback_drives_tray_icon(app):
    screen = app.screens["environment"]
    screen.toggle_play()
    assert screen.playing
    assert app.tray.title == "Still Water"
    screen.toggle_play()
    assert app.tray.title == "Still Water (PAUSED)"


def test_either_screen_running_is_not_paused(app):
    app.screens["environment"].playing = True
    app.screens["breathing"].pause()
    assert not app.paused
    assert app.tray.title == "Still Water"


def test_update_without_tray_is_noop(app):
    app.tray = None
    app.screens["breathing"].start()
    assert app.tray is None
