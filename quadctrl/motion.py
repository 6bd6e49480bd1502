"""Joint commands, position interpolation and scripted model motion."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

POS_STOP_F = 2.146e9
VEL_STOP_F = 16000.0

PMSM_MODE = 0x0A

STAND_POSITION = (0.0, 0.67, -1.3, -0.0, 0.67, -1.3,
                  0.0, 0.67, -1.3, -0.0, 0.67, -1.3)
STAND_DURATION = 2000

ARM_FORWARD = (0.0, 1.5, -1.0, -0.54, 0.0, 0.0, -1.0)
ARM_FORWARD_DURATION = 1000

# (Kp, Kd) for hip, thigh and calf joints of each leg.
_LEG_GAINS = ((70.0, 3.0), (180.0, 8.0), (300.0, 15.0))


@dataclass
class MotorCommand:
    """Command for one joint motor."""

    mode: int = 0
    q: float = 0.0
    dq: float = 0.0
    kp: float = 0.0
    kd: float = 0.0
    tau: float = 0.0


@dataclass(frozen=True)
class Pose:
    """A position and a unit quaternion ``(x, y, z, w)``."""

    position: tuple
    orientation: tuple


def interpolate(start, target, duration):
    """Yield joint positions moving linearly from ``start`` to ``target``.

    One value is produced for each whole step ``1 .. duration``; the last is
    the target when ``duration`` is a whole number.
    """
    start = np.asarray(start, dtype=float).ravel()
    target = np.asarray(target, dtype=float).ravel()
    if start.shape != target.shape:
        raise ValueError(
            f"start and target differ in length: {start.shape[0]} and {target.shape[0]}"
        )
    for i in range(1, math.floor(duration) + 1):
        percent = i / duration
        yield start * (1 - percent) + target * percent


def leg_init_commands(current_q):
    """Commands for the twelve leg joints that hold them at ``current_q``."""
    current_q = np.asarray(current_q, dtype=float).ravel()
    if current_q.shape != (12,):
        raise ValueError(f"Expected 12 joint positions, got {current_q.shape[0]}")
    return [
        MotorCommand(mode=PMSM_MODE, q=float(q), dq=0.0,
                     kp=_LEG_GAINS[i % 3][0], kd=_LEG_GAINS[i % 3][1], tau=0.0)
        for i, q in enumerate(current_q)
    ]


def arm_init_commands():
    """Initial commands for the six arm joints and the gripper."""
    return [MotorCommand(mode=10, q=0.0, dq=0.0, kp=300.0, kd=5.0, tau=0.0)
            for _ in range(7)]


def quaternion_from_rpy(roll, pitch, yaw):
    """Quaternion ``(x, y, z, w)`` for fixed-axis roll, pitch and yaw angles."""
    cr, sr = math.cos(roll / 2), math.sin(roll / 2)
    cp, sp = math.cos(pitch / 2), math.sin(pitch / 2)
    cy, sy = math.cos(yaw / 2), math.sin(yaw / 2)
    return (
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
        cr * cp * cy + sr * sp * sy,
    )


def circle_pose(time_ms, period=5000.0, radius=1.5):
    """Pose of a model driven round a circle in the world frame at 0.5 m height."""
    angle = 2 * math.pi * time_ms / period
    return Pose(
        position=(radius * math.sin(angle), radius * math.cos(angle), 0.5),
        orientation=quaternion_from_rpy(0.0, 0.0, -angle),
    )