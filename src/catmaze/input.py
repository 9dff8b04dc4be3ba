"""
Input aggregation for the simulation.

Devices (keyboard, on-screen joystick, touch/mouse buttons) only record their
current state. Once per tick ``InputAggregator.collect()`` reads every source
and produces a single immutable ``MoveIntent``; the simulation never sees raw
device events.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, Optional, Set

logger = logging.getLogger(__name__)


class InputAction(Enum):
    """Logical actions the player can trigger from a keyboard."""

    MOVE_FORWARD = auto()
    MOVE_BACK = auto()
    STRAFE_LEFT = auto()
    STRAFE_RIGHT = auto()
    TURN_LEFT = auto()
    TURN_RIGHT = auto()
    RUN = auto()
    JUMP = auto()


DEFAULT_BINDINGS: Dict[str, InputAction] = {
    "W": InputAction.MOVE_FORWARD,
    "S": InputAction.MOVE_BACK,
    "A": InputAction.STRAFE_LEFT,
    "D": InputAction.STRAFE_RIGHT,
    "ARROWLEFT": InputAction.TURN_LEFT,
    "ARROWRIGHT": InputAction.TURN_RIGHT,
    "SHIFTLEFT": InputAction.RUN,
    "SHIFTRIGHT": InputAction.RUN,
    "SPACE": InputAction.JUMP,
}


def _clamp(value: float, lo: float = -1.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def _normalize_key(key: str) -> Optional[str]:
    if not isinstance(key, str):
        return None
    k = key.strip()
    if not k:
        return None
    return k.upper()


@dataclass(frozen=True)
class MoveIntent:
    """Merged input for one simulation step.

    Attributes:
        forward: -1..1, positive walks along the facing direction.
        strafe: -1..1, positive walks to the right.
        turn: -1..1, positive turns right.
        run: apply the run multiplier.
        jump: jump requested this step.
        engaged: the player has active control (e.g. pointer captured).
        mobile_active: the on-screen joystick is deflected.
    """

    forward: float = 0.0
    strafe: float = 0.0
    turn: float = 0.0
    run: bool = False
    jump: bool = False
    engaged: bool = False
    mobile_active: bool = False

    @property
    def has_movement(self) -> bool:
        return self.forward != 0.0 or self.strafe != 0.0


IDLE_INTENT = MoveIntent()


class KeyBindings:
    """Rebindable mapping from key names to actions (case-insensitive)."""

    def __init__(self, bindings: Optional[Dict[str, InputAction]] = None) -> None:
        self._bindings: Dict[str, InputAction] = {}
        for key, action in (bindings if bindings is not None else DEFAULT_BINDINGS).items():
            self.bind(key, action)

    def bind(self, key: str, action: InputAction) -> None:
        nk = _normalize_key(key)
        if nk is None:
            logger.warning("Attempted to bind invalid key: %r", key)
            return
        self._bindings[nk] = action

    def unbind(self, key: str) -> None:
        nk = _normalize_key(key)
        if nk is not None:
            self._bindings.pop(nk, None)

    def translate(self, key: str) -> Optional[InputAction]:
        nk = _normalize_key(key)
        if nk is None:
            return None
        return self._bindings.get(nk)

    def actions_for(self, keys: Iterable[str]) -> Set[InputAction]:
        out: Set[InputAction] = set()
        for k in keys:
            action = self.translate(k)
            if action is not None:
                out.add(action)
        return out


@dataclass
class KeyboardState:
    pressed: Set[str] = field(default_factory=set)

    def press(self, key: str) -> None:
        nk = _normalize_key(key)
        if nk is not None:
            self.pressed.add(nk)

    def release(self, key: str) -> None:
        nk = _normalize_key(key)
        if nk is not None:
            self.pressed.discard(nk)

    def clear(self) -> None:
        self.pressed.clear()


@dataclass
class JoystickState:
    """Virtual thumbstick deflection; y > 0 means pushed forward."""

    x: float = 0.0
    y: float = 0.0

    def set(self, x: float, y: float) -> None:
        length = math.hypot(x, y)
        if length > 1.0:
            x, y = x / length, y / length
        self.x, self.y = float(x), float(y)

    def release(self) -> None:
        self.x = self.y = 0.0

    @property
    def active(self) -> bool:
        return self.x != 0.0 or self.y != 0.0


@dataclass
class TouchButtons:
    """On-screen look and jump buttons.

    ``look`` is held state (-1 left, 0, +1 right). A jump press is latched
    until the next tick reads it.
    """

    look: int = 0
    _jump_latched: bool = False

    def press_look(self, direction: int) -> None:
        self.look = int(_clamp(direction))

    def release_look(self) -> None:
        self.look = 0

    def press_jump(self) -> None:
        self._jump_latched = True

    def consume_jump(self) -> bool:
        pressed, self._jump_latched = self._jump_latched, False
        return pressed


class InputAggregator:
    """Reads every input source once per tick and merges them."""

    def __init__(
        self,
        bindings: Optional[KeyBindings] = None,
        keyboard: Optional[KeyboardState] = None,
        joystick: Optional[JoystickState] = None,
        buttons: Optional[TouchButtons] = None,
    ) -> None:
        self.bindings = bindings or KeyBindings()
        self.keyboard = keyboard or KeyboardState()
        self.joystick = joystick or JoystickState()
        self.buttons = buttons or TouchButtons()
        self.engaged = False

    def engage(self) -> None:
        self.engaged = True

    def disengage(self) -> None:
        self.engaged = False

    def collect(self) -> MoveIntent:
        actions = self.bindings.actions_for(self.keyboard.pressed)

        def axis(pos: InputAction, neg: InputAction) -> float:
            return float(pos in actions) - float(neg in actions)

        forward = axis(InputAction.MOVE_FORWARD, InputAction.MOVE_BACK) + self.joystick.y
        strafe = axis(InputAction.STRAFE_RIGHT, InputAction.STRAFE_LEFT) + self.joystick.x
        turn = axis(InputAction.TURN_RIGHT, InputAction.TURN_LEFT) + self.buttons.look
        jump = self.buttons.consume_jump() or InputAction.JUMP in actions

        return MoveIntent(
            forward=_clamp(forward),
            strafe=_clamp(strafe),
            turn=_clamp(turn),
            run=InputAction.RUN in actions,
            jump=jump,
            engaged=self.engaged,
            mobile_active=self.joystick.active,
        )
