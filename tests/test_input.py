import pytest

from catmaze.input import InputAction, InputAggregator, JoystickState, KeyBindings, MoveIntent


def test_keyboard_axes_and_modifiers():
    agg = InputAggregator()
    agg.keyboard.press("w")
    agg.keyboard.press("D")
    agg.keyboard.press("ShiftLeft")
    intent = agg.collect()
    assert intent.forward == 1.0
    assert intent.strafe == 1.0
    assert intent.run is True
    assert intent.jump is False
    assert intent.engaged is False


def test_opposing_keys_cancel():
    agg = InputAggregator()
    agg.keyboard.press("W")
    agg.keyboard.press("S")
    assert agg.collect().forward == 0.0
    agg.keyboard.release("S")
    assert agg.collect().forward == 1.0


def test_joystick_adds_to_keys_and_is_clamped():
    agg = InputAggregator()
    agg.keyboard.press("W")
    agg.joystick.set(0.0, 1.0)
    intent = agg.collect()
    assert intent.forward == 1.0
    assert intent.mobile_active is True
    agg.keyboard.release("W")
    agg.joystick.set(-0.5, 0.0)
    intent = agg.collect()
    assert intent.strafe == -0.5
    agg.joystick.release()
    assert agg.collect().mobile_active is False


def test_joystick_deflection_limited_to_unit_disc():
    stick = JoystickState()
    stick.set(3.0, 4.0)
    assert stick.x == pytest.approx(0.6)
    assert stick.y == pytest.approx(0.8)


def test_turn_merges_arrow_keys_and_look_buttons():
    agg = InputAggregator()
    agg.keyboard.press("ArrowRight")
    agg.buttons.press_look(+1)
    assert agg.collect().turn == 1.0
    agg.buttons.press_look(-1)
    assert agg.collect().turn == 0.0
    agg.keyboard.release("ArrowRight")
    assert agg.collect().turn == -1.0
    agg.buttons.release_look()
    assert agg.collect().turn == 0.0


def test_button_jump_is_consumed_by_one_tick():
    agg = InputAggregator()
    agg.buttons.press_jump()
    assert agg.collect().jump is True
    assert agg.collect().jump is False


def test_space_jump_is_held_state():
    agg = InputAggregator()
    agg.keyboard.press("Space")
    assert agg.collect().jump is True
    assert agg.collect().jump is True


def test_engaged_flag_follows_engage_and_disengage():
    agg = InputAggregator()
    agg.engage()
    assert agg.collect().engaged is True
    agg.disengage()
    assert agg.collect().engaged is False


def test_rebinding_keys():
    bindings = KeyBindings()
    bindings.bind("Up", InputAction.MOVE_FORWARD)
    bindings.unbind("W")
    assert bindings.translate("up") is InputAction.MOVE_FORWARD
    assert bindings.translate("W") is None
    bindings.bind("", InputAction.JUMP)
    assert bindings.translate("") is None

    agg = InputAggregator(bindings=bindings)
    agg.keyboard.press("W")
    assert agg.collect().forward == 0.0
    agg.keyboard.press("UP")
    assert agg.collect().forward == 1.0


def test_default_intent_is_idle():
    intent = MoveIntent()
    assert not intent.has_movement
    assert MoveIntent(strafe=0.3).has_movement
