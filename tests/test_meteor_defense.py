"""Tests for the command line entry point and input mapping."""

import logging

import pygame
import pytest

from meteor_defense import main, read_controls, run_headless
from meteor_simulation import Controls, World


class FakeKeys:
    def __init__(self, *pressed):
        self.pressed = set(pressed)

    def __getitem__(self, key):
        return key in self.pressed


def test_headless_run(caplog):
    with caplog.at_level(logging.INFO):
        assert main(["--headless", "90", "--seed", "3"]) == 0
    assert "simulated 90 ticks" in caplog.text


def test_headless_bad_asset_dir(tmp_path, caplog):
    assert main(["--headless", "1", "--assets", str(tmp_path / "missing")]) == 1
    assert "asset directory not found" in caplog.text


def test_run_headless_returns_world(assets, rng):
    world = run_headless(World(assets, rng), 61)
    assert world.tick == 61
    assert len(world.meteors) == 1


def test_read_controls_keyboard():
    assert read_controls(FakeKeys()) == Controls()
    assert read_controls(FakeKeys(pygame.K_LEFT, pygame.K_SPACE)) == Controls(rotate_left=True, fire=True)
    assert read_controls(FakeKeys(pygame.K_d)) == Controls(rotate_right=True)


def test_read_controls_opposite_keys_cancel():
    assert read_controls(FakeKeys(pygame.K_a, pygame.K_RIGHT)) == Controls()


class FakeJoystick:
    def __init__(self, hat=None, axes=(), buttons=()):
        self.hat = hat
        self.axes = list(axes)
        self.buttons = list(buttons)

    def get_numhats(self):
        return 0 if self.hat is None else 1

    def get_hat(self, index):
        return self.hat

    def get_numaxes(self):
        return len(self.axes)

    def get_axis(self, index):
        return self.axes[index]

    def get_numbuttons(self):
        return len(self.buttons)

    def get_button(self, index):
        return self.buttons[index]


class TestJoystick:

    def test_hat_turns(self):
        assert read_controls(FakeKeys(), FakeJoystick(hat=(-1, 0))) == Controls(rotate_left=True)
        assert read_controls(FakeKeys(), FakeJoystick(hat=(1, 0))) == Controls(rotate_right=True)

    def test_axis_beyond_deadzone_turns(self):
        assert read_controls(FakeKeys(), FakeJoystick(axes=[-0.7])) == Controls(rotate_left=True)
        assert read_controls(FakeKeys(), FakeJoystick(axes=[0.8])) == Controls(rotate_right=True)

    def test_axis_inside_deadzone_ignored(self):
        assert read_controls(FakeKeys(), FakeJoystick(hat=(0, 0), axes=[0.3, 0.0])) == Controls()

    def test_fire_button(self):
        joystick = FakeJoystick(buttons=[False, False, True])
        assert read_controls(FakeKeys(), joystick) == Controls(fire=True)

    def test_other_buttons_do_not_fire(self):
        joystick = FakeJoystick(buttons=[True, True, False, True])
        assert read_controls(FakeKeys(), joystick) == Controls()

    def test_no_inputs_at_all(self):
        assert read_controls(FakeKeys(), FakeJoystick()) == Controls()


class TestTickRate:

    @pytest.mark.parametrize("tps", ["0", "-30", "fast"])
    def test_invalid_tick_rate_rejected(self, tps, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--headless", "1", "--tps", tps])
        assert excinfo.value.code == 2
        assert "--tps" in capsys.readouterr().err

    def test_custom_tick_rate(self, caplog):
        with caplog.at_level(logging.INFO):
            assert main(["--headless", "30", "--tps", "30", "--seed", "1"]) == 0
        assert "30 ticks/s" in caplog.text
