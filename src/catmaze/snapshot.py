"""
Read-only view of a session handed to renderers and HUDs.

Snapshots are frozen value objects built from session state; a renderer can
keep them around or serialize them without being able to reach back into
the simulation.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

Vector = Tuple[float, float, float]
CellRef = Tuple[int, int]


class SessionStatus(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    WON = "won"
    LOST = "lost"

    @property
    def terminal(self) -> bool:
        return self in (SessionStatus.WON, SessionStatus.LOST)


@dataclass(frozen=True)
class PlayerView:
    position: Vector
    yaw: float
    alive: bool


@dataclass(frozen=True)
class MonsterView:
    mid: int
    position: Vector
    heading: float


@dataclass(frozen=True)
class TargetView:
    position: Vector
    active: bool


@dataclass(frozen=True)
class PropView:
    x: float
    z: float
    scale: float


@dataclass(frozen=True)
class RenderSnapshot:
    status: SessionStatus
    elapsed: float
    health: int
    difficulty: Optional[str] = None
    maze_size: int = 0
    cell_size: float = 0.0
    player: Optional[PlayerView] = None
    monsters: Tuple[MonsterView, ...] = ()
    target: Optional[TargetView] = None
    walls: Tuple[CellRef, ...] = ()
    props: Tuple[PropView, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly dict (status as its string value)."""
        data = asdict(self)
        data["status"] = self.status.value
        return data
