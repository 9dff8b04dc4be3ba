from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..input import IDLE_INTENT, MoveIntent
from ..session import GameSession

logger = logging.getLogger(__name__)

InputProvider = Callable[[], MoveIntent]


@dataclass
class EngineConfig:
    """Configuration for the headless game loop.

    Attributes:
        tick_rate: Target updates per second. If 0, updates as fast as possible.
        max_steps: If provided, the loop stops after this many updates.
        stop_on_game_over: Stop once the session is won or lost.
    """

    tick_rate: float = 60.0
    max_steps: Optional[int] = None
    stop_on_game_over: bool = True


class GameEngine:
    """Fixed-rate loop that feeds one merged input intent per tick into a session.

    Rendering backends can drive ``update`` themselves (e.g. from Arcade's
    ``on_update``); ``run`` is the blocking loop used in headless mode.
    """

    def __init__(
        self,
        session: GameSession,
        config: Optional[EngineConfig] = None,
        input_provider: Optional[InputProvider] = None,
    ) -> None:
        self.session = session
        self.config = config or EngineConfig()
        self.input_provider: InputProvider = input_provider or (lambda: IDLE_INTENT)
        self._running = False
        self._step = 0
        self._last_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    def start(self) -> None:
        """Start the loop state. Safe to call multiple times."""
        if self._running:
            logger.debug("GameEngine.start() called while already running")
            return
        self._running = True
        self._step = 0
        self._last_time = time.perf_counter()
        logger.info("GameEngine started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.info("GameEngine stopped at step=%s", self._step)

    def update(self, dt: float) -> None:
        """Perform a single tick: read input, advance the session."""
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return
        self.session.step(dt, self.input_provider())
        self._step += 1

        if self.config.stop_on_game_over and self.session.status.terminal:
            logger.info("Session ended with status=%s", self.session.status.value)
            self.stop()
        elif self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()

    def run(self) -> None:
        """Run a blocking loop until stopped, game over, or max_steps reached."""
        self.start()
        target_dt = 0.0
        if self.config.tick_rate and self.config.tick_rate > 0:
            target_dt = 1.0 / float(self.config.tick_rate)

        while self._running:
            now = time.perf_counter()
            if self._last_time is None:
                dt = 0.0
            elif target_dt > 0:
                dt = now - self._last_time
            else:
                # Unthrottled loops simulate at the nominal maximum step.
                dt = self.session.max_dt
            self._last_time = now

            self.update(dt)

            if target_dt > 0:
                remaining = target_dt - (time.perf_counter() - now)
                if remaining > 0:
                    time.sleep(remaining)

        logger.info("Loop complete (steps=%d)", self._step)
