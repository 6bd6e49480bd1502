# quadctrl

Building blocks for controlling a legged robot:

- **`quadctrl.quadprog`**: a dense Goldfarb–Idnani solver for strictly convex
  quadratic programs with equality and inequality constraints
  (`solve_quadprog`), with its Cholesky helpers (`cholesky_decomposition`,
  `cholesky_solve`) and the index-set helpers `seq` and `singleton`.
- **`quadctrl.wave`**: a periodic phase and contact schedule for four legs
  (`WaveGenerator`, `WaveStatus`).
- **`quadctrl.filters`**: a first-order low-pass filter (`LowPassFilter`).
- **`quadctrl.motion`**: joint motor commands (`MotorCommand`), linear joint
  interpolation (`interpolate`), default command sets for twelve leg joints
  and for a six-joint arm with gripper, and a pose that goes round a circle
  (`circle_pose`, `Pose`, `quaternion_from_rpy`).
- **`quadctrl.teleop`**: the state of a key-driven external force on the
  robot trunk (`ForceTeleop`, `Key`, `ForceMode`).
- **`quadctrl.contact`**: averaging foot-contact forces and scaling them for
  drawing (`average_contact_force`, `force_topic`, `scaled_force_line`).

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Solving a quadratic program

`solve_quadprog` minimises `0.5 * x^T G x + g0^T x` subject to
`CE^T x + ce0 = 0` and `CI^T x + ci0 >= 0`, with one constraint per column
of `CE` and `CI`. It returns the minimiser and the optimal value.

```python
import numpy as np
from quadctrl.quadprog import solve_quadprog

G = np.eye(2)
g0 = np.array([-1.0, -1.0])
CE = np.zeros((2, 0))
ce0 = np.zeros(0)
CI = np.array([[-1.0], [-1.0]])   # x0 + x1 <= 1
ci0 = np.array([1.0])

x, value = solve_quadprog(G, g0, CE, ce0, CI, ci0)
# x is (0.5, 0.5), value is -0.75
```

Inputs of inconsistent size raise `ValueError`. A `G` that is not positive
definite, or linearly dependent equality constraints, raise
`QuadProgError`; when no point meets the constraints,
`InfeasibleProblemError` (a subclass of `QuadProgError`) is raised. The
inputs are left unchanged.

## Gait schedule

```python
from quadctrl.wave import WaveGenerator, WaveStatus

trot = WaveGenerator(0.45, 0.5, (0, 0.5, 0.5, 0))
phase, contact = trot.calc_contact_phase(WaveStatus.WAVE_ALL)
```

`contact` holds 1 for a leg in stance and 0 for a leg in swing; `phase`
runs from 0 to 1 through each part. When the status changes, every leg
keeps its previous schedule until the new one agrees with it. The
`t_stance`, `t_swing` and `period` properties give the durations. Time is
read from the `clock` argument, `time.monotonic` by default, so a fake
clock can be passed in. A stance ratio outside (0, 1) or a bias outside
[0, 1] raises `ValueError`.

## Filtering

```python
from quadctrl.filters import LowPassFilter

vx = LowPassFilter(sample_period=0.002, cut_frequency=3.0)
vx.add_value(0.3)
vx.value        # the first sample is taken as it is
vx.clear()      # the next sample is taken as it is again
```

## Motion helpers

```python
from quadctrl.motion import (
    STAND_POSITION, circle_pose, interpolate, leg_init_commands,
)

commands = leg_init_commands([0.0] * 12)   # Kp/Kd per hip, thigh, calf
for q in interpolate([0.0] * 12, STAND_POSITION, 2000):
    ...                                     # 2000 steps ending at the target

pose = circle_pose(1250)                    # radius 1.5, period 5000 ms
```

## External force from keys

```python
from quadctrl.teleop import ForceTeleop, Key

teleop = ForceTeleop()
teleop.press(Key.UP)      # [(60.0, 0.0, 0.0), (0.0, 0.0, 0.0)] in pulsed mode
teleop.press(Key.SPACE)   # switches to continuous mode and zeroes the force
teleop.press(Key.UP)      # [(16.0, 0.0, 0.0)], accumulating up to ±220
```

In pulsed mode the second force is the release, meant to be applied
`PULSE_SECONDS` later. Keys without a meaning return an empty list.

## Contact forces

```python
from quadctrl.contact import average_contact_force, scaled_force_line

force = average_contact_force([[(0.0, 0.0, 40.0)], [(0.0, 0.0, 20.0)]])
start, end = scaled_force_line(force)   # end is force / 20
```

## What this package does not do

It is a library of computations only. It does not talk to a robot or a
simulator, publish or subscribe to any message bus, read a keyboard or a
terminal, or draw anything; `ForceTeleop` takes key codes that the caller
reads, and the contact helpers return numbers for the caller to publish or
draw. It has no leg kinematics, footstep planning or balance controller,
and it installs no command.