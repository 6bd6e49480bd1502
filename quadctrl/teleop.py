"""Keyboard driven external force on the robot trunk.

Arrow keys push the trunk forwards, backwards and sideways; the space bar
toggles between pulsed and continuous mode. In pulsed mode every key press
applies a fixed force that is released again straight away. In continuous
mode every key press adds to a force that stays applied.
"""

from __future__ import annotations

import enum

FORCE_TOPIC = "/apply_force/trunk"
PULSE_SECONDS = 0.1

FORCE_LIMIT = 220.0

PULSE_FX = 60.0
PULSE_FY = 30.0
STEP_FX = 16.0
STEP_FY = 8.0


class Key(enum.IntEnum):
    """Key codes read from a raw terminal (the last byte of an arrow sequence)."""

    UP = 0x41
    DOWN = 0x42
    RIGHT = 0x43
    LEFT = 0x44
    SPACE = 0x20


class ForceMode(enum.Enum):
    """How a key press acts on the force."""

    PULSED = enum.auto()
    CONTINUOUS = enum.auto()


def _clamp(value):
    return max(-FORCE_LIMIT, min(FORCE_LIMIT, value))


class ForceTeleop:
    """State of the force applied to the trunk, driven by key presses."""

    def __init__(self):
        self.mode = ForceMode.PULSED
        self._fx = 0.0
        self._fy = 0.0
        self._fz = 0.0

    @property
    def force(self):
        """The force currently applied, as ``(fx, fy, fz)``."""
        return (self._fx, self._fy, self._fz)

    def _zero(self):
        self._fx = self._fy = self._fz = 0.0

    def press(self, key):
        """Handle one key and return the forces to publish, in order.

        In pulsed mode the force is followed by a zero force, to be published
        ``PULSE_SECONDS`` later. Keys without a meaning publish nothing.
        """
        try:
            key = Key(key)
        except ValueError:
            return []

        pulsed = self.mode is ForceMode.PULSED
        if key is Key.UP:
            self._fx = PULSE_FX if pulsed else _clamp(self._fx + STEP_FX)
        elif key is Key.DOWN:
            self._fx = -PULSE_FX if pulsed else _clamp(self._fx - STEP_FX)
        elif key is Key.LEFT:
            self._fy = PULSE_FY if pulsed else _clamp(self._fy + STEP_FY)
        elif key is Key.RIGHT:
            self._fy = -PULSE_FY if pulsed else _clamp(self._fy - STEP_FY)
        elif key is Key.SPACE:
            self.mode = ForceMode.CONTINUOUS if pulsed else ForceMode.PULSED
            self._zero()

        published = [self.force]
        if self.mode is ForceMode.PULSED:
            self._zero()
            published.append(self.force)
        return published