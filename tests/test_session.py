import math

import pytest

from catmaze.agents.monster import Monster
from catmaze.events import SessionEvent
from catmaze.exceptions import CatMazeError, ConfigError
from catmaze.input import MoveIntent
from catmaze.maze.analysis import shortest_path
from catmaze.session import GameSession, SimulationClock, clamp_dt
from catmaze.snapshot import SessionStatus
from catmaze.world.geometry import Vec3


class FakeTime:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def recorder(session):
    events = []
    for name in (SessionEvent.STARTED, SessionEvent.WON, SessionEvent.LOST, SessionEvent.RESET):
        session.bus.subscribe(name, lambda _name=name, **payload: events.append(_name))
    return events


def walk_to(session, cell, max_steps=200):
    """Steer the player to the centre of ``cell`` at walking speed."""
    wx, wz = session.transform.cell_to_world(*cell)
    for _ in range(max_steps):
        if not session.running:
            return
        pos = session.player.position
        dx, dz = wx - pos.x, wz - pos.z
        if math.hypot(dx, dz) <= 0.1:
            return
        session.player.yaw = math.atan2(-dx, -dz)
        session.step(0.05, MoveIntent(forward=1.0, engaged=True))
    raise AssertionError(f"could not reach {cell}")


def test_start_easy_builds_population():
    session = GameSession(seed="easy-run")
    events = recorder(session)
    session.start("easy")

    assert session.status is SessionStatus.RUNNING
    assert session.grid.size == 11
    assert events == [SessionEvent.STARTED]

    sx, sz = session.transform.cell_to_world(1, 1)
    assert session.player.position == Vec3(sx, 1.6, sz)
    assert session.player.alive

    assert session.placement.target == (9, 9)
    tx, tz = session.transform.cell_to_world(9, 9)
    assert (session.target.position.x, session.target.position.z) == (tx, tz)

    cells = session.placement.monster_cells
    assert len(session.monsters) == len(cells)
    assert len(cells) <= 3
    assert len(cells) <= len(session.placement.candidates)
    assert len(set(cells)) == len(cells)
    assert set(cells) <= set(session.placement.candidates)
    for monster, cell in zip(session.monsters, cells):
        mx, mz = session.transform.cell_to_world(*cell)
        assert (monster.position.x, monster.position.z) == (mx, mz)

    assert len(session.field) == len(session.grid.wall_cells())


def test_unknown_difficulty_raises():
    with pytest.raises(ConfigError):
        GameSession(seed=1).start("nightmare")


def test_walking_the_unique_path_wins_exactly_once():
    session = GameSession(seed=7)
    events = recorder(session)
    session.start("easy")
    session.monsters = []

    path = shortest_path(session.grid, session.grid.start, session.placement.target)
    assert path is not None
    for cell in path[1:]:
        walk_to(session, cell)
        if not session.running:
            break

    assert session.status is SessionStatus.WON
    assert events.count(SessionEvent.WON) == 1
    elapsed = session.clock.elapsed
    assert session.target.active is False
    assert session.snapshot().target.active is False

    for _ in range(10):
        assert session.step(0.05, MoveIntent(forward=1.0, engaged=True)) is SessionStatus.WON
    assert events.count(SessionEvent.WON) == 1
    assert session.clock.elapsed == elapsed


@pytest.mark.parametrize("difficulty", ["easy", "hard"])
def test_fresh_game_survives_first_idle_step(difficulty):
    for seed in range(60):
        session = GameSession(seed=seed)
        session.start(difficulty)
        assert session.grid.start not in session.placement.monster_cells
        assert session.step(0.0) is SessionStatus.RUNNING, (seed, difficulty)
        assert session.target.active


def test_monster_contact_loses_exactly_once():
    session = GameSession(seed=3)
    events = recorder(session)
    session.start("easy")
    p = session.player.position
    here = Vec3(p.x, 0.6, p.z)
    session.monsters = [Monster(mid=99, position=here, heading=0.0, speed=0.0)]

    assert session.step(0.016) is SessionStatus.LOST
    assert session.player.alive is False
    assert session.health == 0
    assert events.count(SessionEvent.LOST) == 1

    session.target.position = session.player.position
    for _ in range(5):
        assert session.step(0.016) is SessionStatus.LOST
    assert events.count(SessionEvent.LOST) == 1
    assert SessionEvent.WON not in events
    assert session.snapshot().status is SessionStatus.LOST


def test_large_frame_delta_is_clamped():
    session = GameSession(seed=11)
    session.start("easy")
    session.monsters = []
    before = session.player.position
    session.step(5.0, MoveIntent(forward=1.0, engaged=True))
    moved = before.horizontal_distance(session.player.position)
    assert moved <= 4.0 * 0.05 + 1e-9


def test_clamp_dt():
    assert clamp_dt(1.0) == 0.05
    assert clamp_dt(0.01) == 0.01
    assert clamp_dt(-1.0) == 0.0
    assert clamp_dt(float("nan")) == 0.0


def test_reset_before_start_is_a_no_op():
    session = GameSession(seed=1)
    events = recorder(session)
    session.reset()
    assert events == []
    assert session.status is SessionStatus.NOT_STARTED
    assert session.step(0.05) is SessionStatus.NOT_STARTED


def test_reset_discards_everything():
    session = GameSession(seed=1)
    events = recorder(session)
    session.start("medium")
    session.reset()

    assert events == [SessionEvent.STARTED, SessionEvent.RESET]
    assert session.status is SessionStatus.NOT_STARTED
    assert session.grid is None
    assert session.player is None
    assert session.target is None
    assert session.monsters == []
    assert session.field.is_empty
    assert not session.field.intersects(Vec3(0.0, 0.0, 0.0))

    snap = session.snapshot()
    assert snap.walls == ()
    assert snap.player is None
    assert snap.elapsed == 0.0
    assert snap.health == 0


def test_same_seed_replays_same_games():
    a = GameSession(seed="replay")
    b = GameSession(seed="replay")
    for difficulty in ("easy", "hard"):
        a.start(difficulty)
        b.start(difficulty)
        assert a.grid.signature() == b.grid.signature()
        assert a.placement == b.placement
        assert [(m.heading, m.speed) for m in a.monsters] == [(m.heading, m.speed) for m in b.monsters]
        for _ in range(20):
            a.step(0.05)
            b.step(0.05)
        assert [m.position for m in a.monsters] == [m.position for m in b.monsters]


def test_consecutive_games_differ():
    session = GameSession(seed="twice")
    session.start("medium")
    first = session.grid.signature()
    session.start("medium")
    assert session.grid.signature() != first
    assert session.games_started == 2


def test_clock_runs_and_freezes():
    fake = FakeTime()
    clock = SimulationClock(fake)
    assert clock.elapsed == 0.0
    clock.start()
    fake.now += 3.5
    assert clock.elapsed == pytest.approx(3.5)
    clock.stop()
    fake.now += 10.0
    assert clock.elapsed == pytest.approx(3.5)
    clock.reset()
    assert clock.elapsed == 0.0


def test_snapshot_publishes_render_contract():
    fake = FakeTime()
    session = GameSession(seed=5, clock=SimulationClock(fake))
    session.start("easy")
    fake.now += 2.0
    snap = session.snapshot()

    assert snap.status is SessionStatus.RUNNING
    assert snap.elapsed == pytest.approx(2.0)
    assert snap.health == 100
    assert snap.difficulty == "easy"
    assert snap.maze_size == 11
    assert snap.cell_size == 4.0
    assert snap.player.position == session.player.position.as_tuple()
    assert len(snap.monsters) == len(session.monsters)
    assert snap.target.active is True
    assert set(snap.walls) == set(session.grid.wall_cells())
    assert len(snap.props) == 10

    data = snap.to_dict()
    assert data["status"] == "running"
    assert data["player"]["alive"] is True


def test_step_rejects_running_session_without_player():
    session = GameSession(seed=2)
    session.start("easy")
    session.player = None
    with pytest.raises(CatMazeError):
        session.step(0.016)
