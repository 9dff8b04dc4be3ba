from __future__ import annotations

import logging
import time
from typing import Callable, List, Mapping, Optional

from .agents.monster import Monster, MonsterAI
from .agents.player import Player, PlayerController
from .agents.target import Target
from .config import DifficultyPreset, load_presets, resolve_difficulty
from .constants import MAX_HEALTH, MAX_STEP_SECONDS, PLAYER_GROUND_HEIGHT, TARGET_HEIGHT
from .events import EventBus, SessionEvent
from .exceptions import CatMazeError
from .input import IDLE_INTENT, MoveIntent
from .maze.analysis import exit_reachable
from .maze.generator import MazeGenerator
from .maze.grid import MazeGrid
from .maze.placement import EntityPlacer, Placement
from .rng import GameSeeds, Seed
from .snapshot import MonsterView, PlayerView, PropView, RenderSnapshot, SessionStatus, TargetView
from .world.collision import CollisionField
from .world.geometry import Vec3
from .world.movement import MovementResolver
from .world.transform import WorldTransform

logger = logging.getLogger(__name__)


def clamp_dt(dt: float, max_dt: float = MAX_STEP_SECONDS) -> float:
    """Bound a frame delta so long pauses are never integrated in one step."""
    if dt != dt or dt <= 0.0:  # NaN or non-positive
        return 0.0
    return min(dt, max_dt)


class SimulationClock:
    """Elapsed time since the game started, frozen once the game ends."""

    def __init__(self, time_fn: Callable[[], float] = time.monotonic) -> None:
        self._time_fn = time_fn
        self._started_at: Optional[float] = None
        self._frozen: Optional[float] = None

    def start(self) -> None:
        self._started_at = self._time_fn()
        self._frozen = None

    def stop(self) -> None:
        if self._started_at is not None and self._frozen is None:
            self._frozen = self._time_fn() - self._started_at

    def reset(self) -> None:
        self._started_at = None
        self._frozen = None

    @property
    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        if self._frozen is not None:
            return self._frozen
        return self._time_fn() - self._started_at


class GameSession:
    """Owns all state of one play session: maze, collision field, agents.

    ``start()`` builds a fresh maze and population, replacing anything that
    was there; ``reset()`` tears everything down. ``step()`` advances the
    simulation by one clamped frame and is a no-op unless the session is
    running. Win and loss are terminal: each is published on the event bus
    exactly once per game.
    """

    def __init__(
        self,
        seed: Seed = None,
        presets: Optional[Mapping[str, DifficultyPreset]] = None,
        bus: Optional[EventBus] = None,
        clock: Optional[SimulationClock] = None,
        max_dt: float = MAX_STEP_SECONDS,
    ) -> None:
        self.seeds = GameSeeds.from_seed(seed)
        self.presets = dict(presets) if presets is not None else load_presets()
        self.bus = bus or EventBus()
        self.clock = clock or SimulationClock()
        self.max_dt = max_dt
        self.resolver = MovementResolver()
        self.player_controller = PlayerController(self.resolver)

        self.status = SessionStatus.NOT_STARTED
        self.games_started = 0
        self._clear_world()

    def _clear_world(self) -> None:
        self.difficulty: Optional[DifficultyPreset] = None
        self.grid: Optional[MazeGrid] = None
        self.transform: Optional[WorldTransform] = None
        self.field = CollisionField.empty()
        self.placement: Optional[Placement] = None
        self.player: Optional[Player] = None
        self.target: Optional[Target] = None
        self.monsters: List[Monster] = []
        self.monster_ai: Optional[MonsterAI] = None

    @property
    def running(self) -> bool:
        return self.status is SessionStatus.RUNNING

    @property
    def health(self) -> int:
        return MAX_HEALTH if self.player is not None and self.player.alive else 0

    # ------------------------ Commands ------------------------
    def start(self, difficulty: str) -> None:
        """Generate a maze for ``difficulty``, populate it and start running."""
        preset = resolve_difficulty(difficulty, self.presets)
        game = self.games_started
        self.games_started += 1
        self._clear_world()

        grid = MazeGenerator(self.seeds.stream("maze", game)).generate(preset.maze_size)
        if not exit_reachable(grid):
            logger.warning("Exit opening %s is not connected to the maze", grid.exit)
        transform = WorldTransform(grid.size)
        placement = EntityPlacer(self.seeds.stream("placement", game)).place(
            grid, transform, preset.monster_count
        )

        sx, sz = transform.cell_to_world(*placement.start)
        self.player = Player(position=Vec3(sx, PLAYER_GROUND_HEIGHT, sz))
        if placement.target is not None:
            tx, tz = transform.cell_to_world(*placement.target)
            self.target = Target(position=Vec3(tx, TARGET_HEIGHT, tz))

        self.monster_ai = MonsterAI(self.seeds.stream("monsters", game), self.resolver)
        self.monsters = [
            self.monster_ai.spawn(i, *transform.cell_to_world(x, y))
            for i, (x, y) in enumerate(placement.monster_cells)
        ]

        self.difficulty = preset
        self.grid = grid
        self.transform = transform
        self.field = CollisionField.from_grid(grid, transform)
        self.placement = placement
        self.status = SessionStatus.RUNNING
        self.clock.start()
        logger.info(
            "Game %d started: difficulty=%s size=%d monsters=%d",
            game,
            preset.name,
            grid.size,
            len(self.monsters),
        )
        self.bus.emit(SessionEvent.STARTED, difficulty=preset.name, maze_size=grid.size, monsters=len(self.monsters))

    def reset(self) -> None:
        """Discard the maze and every agent. No-op before the first start."""
        if self.status is SessionStatus.NOT_STARTED and self.grid is None:
            logger.debug("reset() called with nothing to reset; ignored")
            return
        self._clear_world()
        self.status = SessionStatus.NOT_STARTED
        self.clock.reset()
        logger.info("Session reset")
        self.bus.emit(SessionEvent.RESET)

    # ------------------------ Simulation ------------------------
    def step(self, dt: float, intent: MoveIntent = IDLE_INTENT) -> SessionStatus:
        if not self.running:
            logger.debug("step() called while %s; ignored", self.status.value)
            return self.status
        if self.player is None or self.monster_ai is None:
            raise CatMazeError("running session has no player or monster AI")
        dt = clamp_dt(dt, self.max_dt)

        self.player_controller.step(self.player, intent, dt, self.field)

        for monster in self.monsters:
            self.monster_ai.step(monster, dt, self.field)
            if self.monster_ai.touches(monster, self.player):
                self._lose(monster)
                return self.status

        if self.target is not None and self.target.is_reached_by(self.player.position):
            self._win()
        return self.status

    def _lose(self, monster: Monster) -> None:
        if self.status is not SessionStatus.RUNNING:
            return
        if self.player is not None:
            self.player.alive = False
        self.status = SessionStatus.LOST
        self.clock.stop()
        logger.info("Player caught by monster %d after %.1fs", monster.mid, self.clock.elapsed)
        self.bus.emit(SessionEvent.LOST, monster=monster.mid, elapsed=self.clock.elapsed)

    def _win(self) -> None:
        if self.status is not SessionStatus.RUNNING:
            return
        if self.target is not None:
            self.target.active = False
        self.status = SessionStatus.WON
        self.clock.stop()
        logger.info("Cat found after %.1fs", self.clock.elapsed)
        self.bus.emit(SessionEvent.WON, elapsed=self.clock.elapsed)

    # ------------------------ Output ------------------------
    def snapshot(self) -> RenderSnapshot:
        player = None
        if self.player is not None:
            player = PlayerView(self.player.position.as_tuple(), self.player.yaw, self.player.alive)
        target = None
        if self.target is not None:
            target = TargetView(self.target.position.as_tuple(), self.target.active)
        props = ()
        if self.placement is not None:
            props = tuple(PropView(p.x, p.z, p.scale) for p in self.placement.props)
        return RenderSnapshot(
            status=self.status,
            elapsed=self.clock.elapsed,
            health=self.health,
            difficulty=self.difficulty.name if self.difficulty else None,
            maze_size=self.grid.size if self.grid else 0,
            cell_size=self.transform.cell_size if self.transform else 0.0,
            player=player,
            monsters=tuple(MonsterView(m.mid, m.position.as_tuple(), m.heading) for m in self.monsters),
            target=target,
            walls=tuple(self.grid.wall_cells()) if self.grid else (),
            props=props,
        )
