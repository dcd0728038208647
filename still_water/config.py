"""Settings file: defaults, load with validation, save."""
from __future__ import annotations

import json
import os
from typing import Any

from still_water.breathing import BREATHING_PATTERNS
from still_water.particles import ENVIRONMENTS

CONFIG_FILE = os.path.join(os.path.expanduser("~"), "still_water_config.json")

THEME_NAMES = ("dark", "light", "nord")
SCREENS = ("breathing", "environment")

DEFAULT_CONFIG = {
    "theme": "nord",                          # dark, light, nord
    "start_screen": "breathing",              # Screen shown on launch
    "breathing_pattern": BREATHING_PATTERNS[0].name,
    "environment": ENVIRONMENTS[0].id,
    "tick_ms": 100,                           # Breathing clock period
    "frame_ms": 16,                           # Particle frame period (~60fps)
    "canvas_width": 800,
    "canvas_height": 400,
    "autoplay": False,                        # Start particles when the screen opens
    "show_tray": True,                        # System tray icon (needs pystray)
    "always_on_top": False,
}

def load_config(path: str = CONFIG_FILE) -> dict[str, Any]:
    """Load config from file, falling back to defaults for missing/invalid values."""
    cfg = json.loads(json.dumps(DEFAULT_CONFIG))
    if os.path.exists(path):
        try:
            with open(path, encoding="utf-8") as f:
                user_cfg = json.load(f)
            if isinstance(user_cfg, dict):
                cfg.update(user_cfg)
        except (json.JSONDecodeError, OSError) as e:
            print(f"  [!] Config load error: {e}. Using defaults.")

    # Validate numeric fields
    for key, min_val in [
        ("tick_ms", 10),
        ("frame_ms", 1),
        ("canvas_width", 100),
        ("canvas_height", 100),
    ]:
        val = cfg.get(key)
        if isinstance(val, bool) or not isinstance(val, (int, float)) or val < min_val:
            cfg[key] = DEFAULT_CONFIG[key]

    # Validate choices
    for key, allowed in [
        ("theme", THEME_NAMES),
        ("start_screen", SCREENS),
        ("breathing_pattern", [p.name for p in BREATHING_PATTERNS]),
        ("environment", [e.id for e in ENVIRONMENTS]),
    ]:
        if cfg.get(key) not in allowed:
            cfg[key] = DEFAULT_CONFIG[key]

    for key in ("autoplay", "show_tray", "always_on_top"):
        if not isinstance(cfg.get(key), bool):
            cfg[key] = DEFAULT_CONFIG[key]

    return cfg

def save_config(cfg: dict[str, Any], path: str = CONFIG_FILE) -> None:
    """Save config to file."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cfg, f, indent=2)
    except OSError as e:
        print(f"  [!] Config save error: {e}")
