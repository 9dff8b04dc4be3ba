from __future__ import annotations

import json
import logging
import os
from typing import Dict, Optional

from .config import Settings
from .constants import MONSTER_RADIUS, PLAYER_RADIUS
from .engine.loop import EngineConfig, GameEngine
from .input import InputAggregator
from .session import GameSession

logger = logging.getLogger(__name__)

WINDOW_SIZE = 720

WALL_COLOR = (15, 23, 36)
FLOOR_COLOR = (7, 24, 39)
PLAYER_COLOR = (60, 180, 255)
MONSTER_COLOR = (255, 91, 91)
CAT_COLOR = (255, 194, 77)
PROP_COLOR = (11, 107, 107)
TEXT_COLOR = (230, 230, 230)

# arcade.key attribute -> key name understood by catmaze.input bindings
_ARCADE_KEY_NAMES = {
    "W": "W",
    "A": "A",
    "S": "S",
    "D": "D",
    "UP": "W",
    "DOWN": "S",
    "LEFT": "ArrowLeft",
    "RIGHT": "ArrowRight",
    "LSHIFT": "ShiftLeft",
    "RSHIFT": "ShiftRight",
    "SPACE": "Space",
}


def _arcade_available() -> bool:
    try:
        import arcade  # noqa: F401
        return True
    except Exception:
        return False


def build_session(settings: Settings) -> GameSession:
    session = GameSession(seed=settings.seed)
    session.start(settings.difficulty)
    return session


def run_gui(settings: Settings, max_steps: Optional[int] = None) -> int:
    """Open a top-down Arcade viewer, falling back to headless without Arcade.

    The window is only a consumer: it feeds key state into an
    ``InputAggregator`` and draws ``RenderSnapshot`` objects.
    """
    if not _arcade_available():
        logger.warning("Arcade not available; falling back to headless mode")
        return run_headless(settings, max_steps=max_steps)

    import arcade

    key_names: Dict[int, str] = {
        getattr(arcade.key, attr): name for attr, name in _ARCADE_KEY_NAMES.items() if hasattr(arcade.key, attr)
    }

    class MazeWindow(arcade.Window):
        def __init__(self) -> None:
            super().__init__(WINDOW_SIZE, WINDOW_SIZE, title="catmaze - find the cat")
            arcade.set_background_color(FLOOR_COLOR)
            self.session = build_session(settings)
            self.controls = InputAggregator()
            self.controls.engage()
            self.engine = GameEngine(
                self.session,
                EngineConfig(tick_rate=settings.tick_rate, max_steps=max_steps, stop_on_game_over=False),
                input_provider=self.controls.collect,
            )
            self.engine.start()

        def _to_screen(self, wx: float, wz: float, extent: float, scale: float):
            return (wx + extent / 2) * scale, self.height - (wz + extent / 2) * scale

        def on_draw(self):
            self.clear()
            snap = self.session.snapshot()
            extent = snap.maze_size * snap.cell_size
            if extent <= 0:
                return
            scale = min(self.width, self.height) / extent
            cell_px = snap.cell_size * scale
            transform = self.session.transform

            for x, y in snap.walls:
                wx, wz = transform.cell_to_world(x, y)
                sx, sy = self._to_screen(wx, wz, extent, scale)
                arcade.draw_lrbt_rectangle_filled(
                    sx - cell_px / 2, sx + cell_px / 2, sy - cell_px / 2, sy + cell_px / 2, WALL_COLOR
                )
            for prop in snap.props:
                sx, sy = self._to_screen(prop.x, prop.z, extent, scale)
                arcade.draw_circle_filled(sx, sy, 0.6 * prop.scale * scale, PROP_COLOR)
            if snap.target is not None and snap.target.active:
                sx, sy = self._to_screen(snap.target.position[0], snap.target.position[2], extent, scale)
                arcade.draw_circle_filled(sx, sy, 0.6 * scale, CAT_COLOR)
            for m in snap.monsters:
                sx, sy = self._to_screen(m.position[0], m.position[2], extent, scale)
                arcade.draw_circle_filled(sx, sy, MONSTER_RADIUS * scale, MONSTER_COLOR)
            if snap.player is not None:
                player = self.session.player
                sx, sy = self._to_screen(snap.player.position[0], snap.player.position[2], extent, scale)
                fwd = player.forward_vector()
                arcade.draw_circle_filled(sx, sy, PLAYER_RADIUS * scale, PLAYER_COLOR)
                arcade.draw_line(sx, sy, sx + fwd.x * scale, sy - fwd.z * scale, PLAYER_COLOR, 2)

            arcade.draw_text(
                f"{snap.status.value}  time {int(snap.elapsed)}s  health {snap.health}  (R restart, ESC quit)",
                10,
                10,
                TEXT_COLOR,
                12,
            )

        def on_update(self, delta_time: float):
            if self.engine.running:
                self.engine.update(delta_time)
            else:
                self.close()

        def on_key_press(self, symbol: int, modifiers: int):
            if symbol == arcade.key.ESCAPE:
                self.engine.stop()
                self.close()
            elif symbol == arcade.key.R:
                self.session.start(settings.difficulty)
            elif symbol in key_names:
                self.controls.keyboard.press(key_names[symbol])

        def on_key_release(self, symbol: int, modifiers: int):
            if symbol in key_names:
                self.controls.keyboard.release(key_names[symbol])

    window = MazeWindow()
    try:
        logger.info("Launching Arcade window (%dx%d)", window.width, window.height)
        arcade.run()
        logger.info("Arcade loop finished")
        return 0
    except Exception:
        logger.exception("Unhandled exception in GUI loop; exiting with code 1")
        return 1


def run_headless(settings: Settings, max_steps: Optional[int] = 60) -> int:
    """Run a session without a window and print the final snapshot summary.

    The player receives no input, so this mostly exercises generation and
    monster wandering; useful for smoke tests and CI.
    """
    if max_steps is None:
        # Safety in CI/headless: always bound the loop
        max_steps = 60

    print("catmaze (headless)")
    session = build_session(settings)
    engine = GameEngine(session, EngineConfig(tick_rate=settings.tick_rate, max_steps=max_steps))
    try:
        engine.run()
    except KeyboardInterrupt:
        engine.stop()
        print("Interrupted by user")
        return 130
    except Exception:
        logger.exception("Unhandled exception in headless loop")
        return 1

    snap = session.snapshot()
    summary = {
        "seed": session.seeds.hex,
        "difficulty": snap.difficulty,
        "maze_size": snap.maze_size,
        "monsters": len(snap.monsters),
        "status": snap.status.value,
        "health": snap.health,
    }
    print(json.dumps(summary, sort_keys=True))
    print(f"Loop complete (steps={engine.step})")
    return 0


def run_auto(settings: Settings, max_steps: Optional[int] = None) -> int:
    """Run GUI if available and not overridden, else headless.

    ``CATMAZE_HEADLESS=1`` forces headless mode.
    """
    if os.getenv("CATMAZE_HEADLESS") == "1":
        return run_headless(settings, max_steps=max_steps)
    return run_gui(settings, max_steps=max_steps)
