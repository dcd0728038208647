#!/usr/bin/env python3
"""
Still Water — Guided Breathing & Calm Environments
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Desktop companion with two screens:
  - Guided breathing (4-7-8, box, equal and calming patterns)
  - Immersive environments: animated rain, snow, leaves, sparkles,
    bubbles and fireflies over a soft color backdrop

Usage:
    python -m still_water
    python -m still_water --screen environment --environment ocean
    python -m still_water --test   (breathing clock runs 4x faster)
"""
from __future__ import annotations
import sys, platform
import argparse

# ─── tkinter check ────────────────────────────────────────────
try:
    import tkinter as tk
    from tkinter import ttk
except ImportError:
    _s = platform.system()
    print("Error: tkinter is required.")
    if _s == "Darwin":
        print("  brew install python-tk@3.12  (or use python.org installer)")
    elif _s == "Linux":
        print("  sudo apt install python3-tk")
    sys.exit(1)

import threading
from typing import Any, Callable, Optional

from PIL import Image, ImageFilter, ImageTk

from still_water import __version__
from still_water.breathing import (BREATHING_PATTERNS, TICK_SECONDS, BreathingSession,
                                   Phase, get_pattern)
from still_water.config import SCREENS, load_config, save_config
from still_water.icon import create_icon
from still_water.particles import ENVIRONMENTS, Bounds, ParticleField, get_environment
from still_water.surfaces import (ImageSurface, backdrop, draw_rings, hex_to_rgb,
                                  rings_core_radius)

# ─── Platform ────────────────────────────────────────────────
IS_MAC = platform.system() == "Darwin"
IS_WIN = platform.system() == "Windows"
FONT = "Helvetica Neue" if IS_MAC else "Segoe UI" if IS_WIN else "DejaVu Sans"

TEST_SPEEDUP = 4  # --test: seconds of breathing per real second

# ─── Themes ──────────────────────────────────────────────────
THEMES = {
    "dark": {
        "bg": "#111827", "card": "#1e293b", "accent": "#0ea5e9",
        "btn_pri": "#1d4ed8", "btn_sec": "#334155",
        "text": "#f1f5f9", "text_dim": "#94a3b8", "ok": "#22c55e",
    },
    "light": {
        "bg": "#f8fafc", "card": "#ffffff", "accent": "#0284c7",
        "btn_pri": "#2563eb", "btn_sec": "#e2e8f0",
        "text": "#1e293b", "text_dim": "#475569", "ok": "#16a34a",
    },
    "nord": {
        "bg": "#2e3440", "card": "#3b4252", "accent": "#88c0d0",
        "btn_pri": "#5e81ac", "btn_sec": "#4c566a",
        "text": "#eceff4", "text_dim": "#d8dee9", "ok": "#a3be8c",
    },
}

C_BG = C_CARD = C_ACCENT = C_BTN_PRI = C_BTN_SEC = C_TEXT = C_TEXT_DIM = C_OK = ""

def apply_theme(theme_name: str) -> None:
    """Apply a theme by updating global color constants."""
    global C_BG, C_CARD, C_ACCENT, C_BTN_PRI, C_BTN_SEC, C_TEXT, C_TEXT_DIM, C_OK
    theme = THEMES.get(theme_name, THEMES["dark"])
    C_BG = theme["bg"];         C_CARD = theme["card"];       C_ACCENT = theme["accent"]
    C_BTN_PRI = theme["btn_pri"]; C_BTN_SEC = theme["btn_sec"]
    C_TEXT = theme["text"];     C_TEXT_DIM = theme["text_dim"]; C_OK = theme["ok"]

apply_theme("nord")


def _btn(p: tk.Widget, text: str, bg: str, cmd: Callable, bold: bool = False) -> tk.Button:
    wt = "bold" if bold else "normal"
    return tk.Button(p, text=text, font=(FONT, 10, wt), bg=bg, fg=C_TEXT,
                     activebackground=C_ACCENT, relief="flat", padx=18, pady=5,
                     cursor="hand2", command=cmd)


# ━━━ Breathing Screen ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class BreathingScreen:
    """Pattern picker, ring animation and controls for one BreathingSession."""

    CANVAS_SIZE = 300

    def __init__(self, app: "StillWaterApp", parent: tk.Frame):
        self.app = app
        self.session = BreathingSession(get_pattern(app.config["breathing_pattern"]))
        self._tick_id = None
        self._photo = None
        self._delta = TICK_SECONDS * (TEST_SPEEDUP if app.test_mode else 1)

        self.frame = tk.Frame(parent, bg=C_BG)

        # Pattern selection
        tk.Label(self.frame, text="Select Breathing Pattern", font=(FONT, 12, "bold"),
                 fg=C_TEXT, bg=C_BG).pack(pady=(16, 6))
        row = tk.Frame(self.frame, bg=C_BG);  row.pack()
        self._pattern_btns = {}
        for pattern in BREATHING_PATTERNS:
            b = tk.Button(row, text=f"{pattern.name}\n{pattern.label}\n{pattern.cycles} cycles",
                          font=(FONT, 9), fg=C_TEXT, relief="flat", padx=10, pady=6,
                          cursor="hand2", justify="left",
                          command=lambda p=pattern: self.select_pattern(p.name))
            b.pack(side="left", padx=4)
            self._pattern_btns[pattern.name] = b

        # Rings
        sz = self.CANVAS_SIZE
        self.canvas = tk.Canvas(self.frame, width=sz, height=sz, bg=C_BG, highlightthickness=0)
        self.canvas.pack(pady=12)
        self._img_id = self.canvas.create_image(sz // 2, sz // 2, anchor="center")
        self._phase_id = self.canvas.create_text(sz // 2, sz // 2 - 12, text="",
                                                 font=(FONT, 16, "bold"), fill="#ffffff")
        self._count_id = self.canvas.create_text(sz // 2, sz // 2 + 16, text="",
                                                 font=(FONT, 12), fill="#ffffff")

        self.progress = ttk.Progressbar(self.frame, length=260, maximum=100, mode="determinate")
        self.progress.pack(pady=(4, 2))
        info = tk.Frame(self.frame, bg=C_BG);  info.pack()
        self.cycle_lbl = tk.Label(info, font=(FONT, 10), fg=C_TEXT_DIM, bg=C_BG)
        self.cycle_lbl.pack(side="left", padx=10)
        self.clock_lbl = tk.Label(info, font=(FONT, 10), fg=C_TEXT_DIM, bg=C_BG)
        self.clock_lbl.pack(side="left", padx=10)

        # Controls
        self.controls = tk.Frame(self.frame, bg=C_BG);  self.controls.pack(pady=12)
        self.start_btn = _btn(self.controls, "▶  Start Exercise", C_BTN_PRI, self.start, bold=True)
        self.pause_btn = _btn(self.controls, "⏸  Pause", C_BTN_SEC, self.pause)
        self.resume_btn = _btn(self.controls, "▶  Resume", C_BTN_PRI, self.resume, bold=True)
        self.reset_btn = _btn(self.controls, "↺  Reset", C_BTN_SEC, self.reset)

        self.done_lbl = tk.Label(self.frame, font=(FONT, 10), fg=C_OK, bg=C_BG, wraplength=420,
                                 text="Great job! You've completed your breathing exercise.\n"
                                      "Take a moment to notice how you feel.")
        self.howto_lbl = tk.Label(self.frame, font=(FONT, 9), fg=C_TEXT_DIM, bg=C_BG,
                                  justify="left")
        self.howto_lbl.pack(side="bottom", pady=(0, 12))

        self._refresh()

    # ─── Lifecycle ───────────────────────────────────────────
    def show(self) -> None:
        self.frame.pack(fill="both", expand=True)
        self._refresh()
        if self.session.running:
            self._schedule()

    def hide(self) -> None:
        self._cancel()
        self.frame.pack_forget()

    def _schedule(self) -> None:
        self._cancel()
        self._tick_id = self.frame.after(int(self.app.config["tick_ms"]), self._on_tick)

    def _cancel(self) -> None:
        if self._tick_id:
            try:
                self.frame.after_cancel(self._tick_id)
            except tk.TclError:
                pass
            self._tick_id = None

    def _on_tick(self) -> None:
        self._tick_id = None
        self.session.tick(self._delta)
        self._refresh()
        if self.session.running:
            self._schedule()
        elif self.session.is_complete:
            print(f"  [OK] {self.session.pattern.name} complete "
                  f"({self.session.pattern.cycles} cycles, {self.session.clock_text})")
            self.app._update_tray_icon()

    # ─── Actions ─────────────────────────────────────────────
    def select_pattern(self, name: str) -> None:
        self._cancel()
        self.session.select_pattern(get_pattern(name))
        self.app.remember("breathing_pattern", name)
        self._refresh()
        self.app._update_tray_icon()

    def start(self) -> None:
        self.session.start()
        self._refresh()
        self._schedule()
        self.app._update_tray_icon()

    def pause(self) -> None:
        self.session.pause()
        self._cancel()
        self._refresh()
        self.app._update_tray_icon()

    def resume(self) -> None:
        self.session.resume()
        self._refresh()
        if self.session.running:
            self._schedule()
        self.app._update_tray_icon()

    def reset(self) -> None:
        self._cancel()
        self.session.reset()
        self._refresh()
        self.app._update_tray_icon()

    # ─── Drawing ─────────────────────────────────────────────
    def _draw_rings(self) -> None:
        """Render rings at 2x, soften, downsample (same path for every frame)."""
        scale = 2
        sz = self.CANVAS_SIZE
        img_w = img_h = sz * scale
        core_r = rings_core_radius(img_w, img_h, self.session.circle_scale, pad=8 * scale)
        img = draw_rings(img_w, img_h, core_r, hex_to_rgb(C_BG))
        img = img.filter(ImageFilter.GaussianBlur(radius=1.0))
        img = img.resize((sz, sz), Image.LANCZOS)
        try:
            self._photo = ImageTk.PhotoImage(img)
            self.canvas.itemconfig(self._img_id, image=self._photo)
        except tk.TclError:
            pass

    def _refresh(self) -> None:
        s = self.session
        for name, b in self._pattern_btns.items():
            b.configure(bg=C_BTN_PRI if name == s.pattern.name else C_CARD)

        self._draw_rings()
        self.canvas.itemconfig(self._phase_id, text=s.phase_text)
        countdown = f"{s.seconds_left}s" if s.phase in (Phase.INHALE, Phase.HOLD, Phase.EXHALE) else ""
        self.canvas.itemconfig(self._count_id, text=countdown)
        self.progress["value"] = s.progress
        self.cycle_lbl.configure(text=s.cycle_label)
        self.clock_lbl.configure(text=s.clock_text)

        for b in (self.start_btn, self.pause_btn, self.resume_btn, self.reset_btn):
            b.pack_forget()
        if not s.running and s.phase is Phase.READY:
            self.start_btn.pack(side="left", padx=6)
        if s.running:
            self.pause_btn.pack(side="left", padx=6)
        if s.is_paused:
            self.resume_btn.pack(side="left", padx=6)
        self.reset_btn.pack(side="left", padx=6)

        if s.is_complete:
            self.done_lbl.pack(pady=(0, 8), before=self.howto_lbl)
        else:
            self.done_lbl.pack_forget()

        p = s.pattern
        lines = [f"Inhale: breathe in slowly through your nose for {p.inhale:g} seconds"]
        if p.hold > 0:
            lines.append(f"Hold: hold your breath gently for {p.hold:g} seconds")
        lines.append(f"Exhale: breathe out slowly through your mouth for {p.exhale:g} seconds")
        self.howto_lbl.configure(text="\n".join(lines))


# ━━━ Environment Screen ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class EnvironmentScreen:
    """Environment picker and the animated particle canvas."""

    def __init__(self, app: "StillWaterApp", parent: tk.Frame):
        self.app = app
        self.field = ParticleField()
        self.playing = bool(app.config["autoplay"])
        self.fullscreen = False
        self._frame_id = None
        self._photo = None
        self._backdrop = None
        self.surface: Optional[ImageSurface] = None

        self.frame = tk.Frame(parent, bg=C_BG)

        tk.Label(self.frame, text="Immersive Environments", font=(FONT, 12, "bold"),
                 fg=C_TEXT, bg=C_BG).pack(pady=(16, 6))
        grid = tk.Frame(self.frame, bg=C_BG);  grid.pack()
        self._env_btns = {}
        for i, env in enumerate(ENVIRONMENTS):
            b = tk.Button(grid, text=env.name, font=(FONT, 9), fg=C_TEXT, relief="flat",
                          width=16, pady=4, cursor="hand2",
                          command=lambda e=env: self.select_environment(e.id))
            b.grid(row=i // 4, column=i % 4, padx=4, pady=3)
            self._env_btns[env.id] = b

        w, h = int(app.config["canvas_width"]), int(app.config["canvas_height"])
        self.canvas = tk.Canvas(self.frame, width=w, height=h, bg=C_CARD, highlightthickness=0)
        self.canvas.pack(pady=12, fill="both", expand=True)
        self._img_id = self.canvas.create_image(0, 0, anchor="nw")
        self._name_id = self.canvas.create_text(w // 2, h // 2 - 14, text="",
                                                font=(FONT, 20, "bold"), fill="#ffffff")
        self._desc_id = self.canvas.create_text(w // 2, h // 2 + 18, text="",
                                                font=(FONT, 12), fill="#ffffff")
        self.canvas.bind("<Configure>", self._on_resize)

        controls = tk.Frame(self.frame, bg=C_BG);  controls.pack(pady=(0, 12))
        self.play_btn = _btn(controls, "", C_BTN_PRI, self.toggle_play, bold=True)
        self.play_btn.pack(side="left", padx=6)
        _btn(controls, "⛶  Fullscreen", C_BTN_SEC, self.toggle_fullscreen).pack(side="left", padx=6)

        self._bounds = Bounds(w, h)
        self._load(get_environment(app.config["environment"]))

    # ─── Lifecycle ───────────────────────────────────────────
    def show(self) -> None:
        self.frame.pack(fill="both", expand=True)
        self._draw()
        if self.playing:
            self._schedule()

    def hide(self) -> None:
        self._cancel()
        if self.fullscreen:
            self.toggle_fullscreen()
        self.frame.pack_forget()

    def _schedule(self) -> None:
        self._cancel()
        self._frame_id = self.frame.after(int(self.app.config["frame_ms"]), self._on_frame)

    def _cancel(self) -> None:
        if self._frame_id:
            try:
                self.frame.after_cancel(self._frame_id)
            except tk.TclError:
                pass
            self._frame_id = None

    def _on_frame(self) -> None:
        self._frame_id = None
        self.field.advance(self._bounds)
        self._draw()
        if self.playing:
            self._schedule()

    # ─── Actions ─────────────────────────────────────────────
    def select_environment(self, env_id: str) -> None:
        self._load(get_environment(env_id))
        self.app.remember("environment", env_id)
        self._draw()

    def toggle_play(self) -> None:
        self.playing = not self.playing
        self._update_play_btn()
        if self.playing:
            self._schedule()
        else:
            self._cancel()
        self.app._update_tray_icon()

    def toggle_fullscreen(self) -> None:
        self.fullscreen = not self.fullscreen
        try:
            self.app.root.attributes("-fullscreen", self.fullscreen)
        except tk.TclError:
            self.fullscreen = False

    # ─── Drawing ─────────────────────────────────────────────
    def _load(self, env) -> None:
        self.field.initialize(env, self._bounds)
        self._rebuild_surface()
        for env_id, b in self._env_btns.items():
            b.configure(bg=C_BTN_PRI if env_id == env.id else C_CARD)
        self.canvas.itemconfig(self._name_id, text=env.name)
        self.canvas.itemconfig(self._desc_id, text=env.description)
        self._update_play_btn()

    def _rebuild_surface(self) -> None:
        env = self.field.environment
        w, h = int(self._bounds.width), int(self._bounds.height)
        self._backdrop = backdrop(w, h, env.primary_color, env.secondary_color, C_CARD)
        self.surface = ImageSurface(w, h, self._backdrop)

    def _on_resize(self, event) -> None:
        if event.width < 2 or event.height < 2:
            return
        if (event.width, event.height) == (self._bounds.width, self._bounds.height):
            return
        self._bounds = Bounds(event.width, event.height)
        self._rebuild_surface()
        self.canvas.coords(self._name_id, event.width // 2, event.height // 2 - 14)
        self.canvas.coords(self._desc_id, event.width // 2, event.height // 2 + 18)
        self._draw()

    def _draw(self) -> None:
        if self.surface is None:
            return
        self.field.render(self.surface)
        try:
            self._photo = ImageTk.PhotoImage(self.surface.composite())
            self.canvas.itemconfig(self._img_id, image=self._photo)
        except tk.TclError:
            pass

    def _update_play_btn(self) -> None:
        self.play_btn.configure(text="⏸  Pause" if self.playing else "▶  Play")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class StillWaterApp:

    def __init__(self, config: dict[str, Any], test_mode: bool = False):
        self.config = config
        self.test_mode = test_mode
        apply_theme(self.config.get("theme", "nord"))

        self.root = tk.Tk()
        self.root.title("Still Water")
        self.root.configure(bg=C_BG)
        self.root.minsize(720, 640)
        self.root.protocol("WM_DELETE_WINDOW", self._quit)
        if self.config.get("always_on_top", False):
            try:
                self.root.attributes("-topmost", True)
            except tk.TclError:
                pass
        self._icon_photo = ImageTk.PhotoImage(create_icon(64))
        self.root.iconphoto(True, self._icon_photo)
        self.root.bind("<F11>", lambda e: self._toggle_fullscreen())
        self.root.bind("<Escape>", lambda e: self._leave_fullscreen())

        # Navigation bar
        nav = tk.Frame(self.root, bg=C_CARD);  nav.pack(fill="x")
        tk.Label(nav, text="Still Water", font=(FONT, 13, "bold"), fg=C_TEXT,
                 bg=C_CARD, padx=14, pady=8).pack(side="left")
        self._nav_btns = {}
        for key, title in (("breathing", "Breathing"), ("environment", "Environments")):
            b = tk.Button(nav, text=title, font=(FONT, 10), fg=C_TEXT, relief="flat",
                          padx=14, pady=4, cursor="hand2",
                          command=lambda k=key: self.show_screen(k))
            b.pack(side="left", padx=2, pady=6)
            self._nav_btns[key] = b

        self.tray = None
        body = tk.Frame(self.root, bg=C_BG);  body.pack(fill="both", expand=True)
        self.screens = {
            "breathing": BreathingScreen(self, body),
            "environment": EnvironmentScreen(self, body),
        }
        self.current: Optional[str] = None

        if self.config.get("show_tray", True):
            threading.Thread(target=self._run_tray, daemon=True).start()

        self._print_banner()
        self.show_screen(self.config.get("start_screen", "breathing"))

    def run(self) -> None:
        self.root.mainloop()

    # ━━━ Screens ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def show_screen(self, key: str) -> None:
        if key not in self.screens:
            key = "breathing"
        if key == self.current:
            return
        if self.current:
            self.screens[self.current].hide()
        self.current = key
        for k, b in self._nav_btns.items():
            b.configure(bg=C_BTN_PRI if k == key else C_CARD)
        self.screens[key].show()

    def remember(self, key: str, value: Any) -> None:
        """Persist a UI selection."""
        if self.config.get(key) != value:
            self.config[key] = value
            save_config(self.config)

    def _toggle_fullscreen(self) -> None:
        if self.current == "environment":
            self.screens["environment"].toggle_fullscreen()

    def _leave_fullscreen(self) -> None:
        env = self.screens["environment"]
        if env.fullscreen:
            env.toggle_fullscreen()

    # ━━━ Paused State ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    @property
    def paused(self) -> bool:
        """True when neither the breathing clock nor the environment is moving."""
        screens = getattr(self, "screens", None)
        if not screens:
            return True
        return not (screens["breathing"].session.running or screens["environment"].playing)

    def _update_tray_icon(self) -> None:
        """Update tray icon to reflect paused state."""
        if self.tray is None:
            return
        paused = self.paused
        try:
            self.tray.icon = create_icon(64, paused)
            self.tray.title = "Still Water (PAUSED)" if paused else "Still Water"
        except Exception:
            pass

    def _print_banner(self) -> None:
        print(f"\n  Still Water {__version__}")
        print(f"  Pattern:     {self.config['breathing_pattern']}")
        print(f"  Environment: {get_environment(self.config['environment']).name}")
        if self.test_mode:
            print(f"  [!] TEST MODE: breathing clock runs {TEST_SPEEDUP}x faster")
        print()

    # ━━━ System Tray ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _run_tray(self) -> None:
        try:
            import pystray
        except ImportError:
            print("  [!] pystray not available; running without a tray icon.")
            return

        def later(fn: Callable, *args) -> Callable:
            return lambda icon, item: self.root.after(0, fn, *args)

        menu = pystray.Menu(
            pystray.MenuItem("Open", later(self._raise), default=True, visible=False),
            pystray.MenuItem("🫁  Breathing", later(self._open_screen, "breathing")),
            pystray.MenuItem("🌧  Environments", later(self._open_screen, "environment")),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Quit", later(self._quit)),
        )
        paused = self.paused
        title = "Still Water (PAUSED)" if paused else "Still Water"
        self.tray = pystray.Icon("still_water", create_icon(64, paused), title, menu)
        self.tray.run()

    def _raise(self) -> None:
        try:
            self.root.deiconify()
            self.root.lift()
            self.root.focus_force()
        except tk.TclError:
            pass

    def _open_screen(self, key: str) -> None:
        self._raise()
        self.show_screen(key)

    def _quit(self) -> None:
        for screen in self.screens.values():
            screen.hide()
        save_config(self.config)
        if self.tray is not None:
            self.tray.stop()
        self.root.after(0, self.root.quit)


# ─── Entry Point ─────────────────────────────────────────────
def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Still Water breathing & calm environments")
    parser.add_argument("--screen", choices=SCREENS, help="Screen to open first")
    parser.add_argument("--pattern", choices=[p.name for p in BREATHING_PATTERNS],
                        help="Breathing pattern to preselect")
    parser.add_argument("--environment", choices=[e.id for e in ENVIRONMENTS],
                        help="Environment to preselect")
    parser.add_argument("--test", action="store_true",
                        help=f"Run the breathing clock {TEST_SPEEDUP}x faster")
    return parser.parse_args(argv)

def apply_args(config: dict, args: argparse.Namespace) -> dict:
    """Let command-line choices override the saved config."""
    if args.screen:
        config["start_screen"] = args.screen
    if args.pattern:
        config["breathing_pattern"] = args.pattern
    if args.environment:
        config["environment"] = args.environment
    return config

def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    config = apply_args(load_config(), args)
    StillWaterApp(config, test_mode=args.test).run()


if __name__ == "__main__":
    main()
