"""Periodic contact and phase schedule for the four legs of a gait."""

from __future__ import annotations

import enum
import math
import time

import numpy as np


class WaveStatus(enum.Enum):
    """Which contact schedule the generator follows."""

    STANCE_ALL = enum.auto()
    SWING_ALL = enum.auto()
    WAVE_ALL = enum.auto()


class WaveGenerator:
    """Produces per-leg contact flags and phases for a periodic gait.

    ``bias`` holds each leg's phase offset as a fraction of the period.
    ``clock`` returns the current time in seconds.
    """

    def __init__(self, period, stance_ratio, bias, clock=time.monotonic):
        if not 0 < stance_ratio < 1:
            raise ValueError("The stance_ratio of WaveGenerator should be between (0, 1)")
        bias = np.asarray(bias, dtype=float).ravel()
        if bias.shape != (4,):
            raise ValueError(f"The bias of WaveGenerator needs 4 entries, got {bias.shape}")
        if np.any((bias > 1) | (bias < 0)):
            raise ValueError("The bias of WaveGenerator should be between [0, 1]")
        self._period = float(period)
        self._st_ratio = float(stance_ratio)
        self._bias = bias
        self._clock = clock
        self._start_t = clock()
        self._phase = np.full(4, 0.5)
        self._contact = np.zeros(4, dtype=int)
        self._phase_past = np.full(4, 0.5)
        self._contact_past = np.zeros(4, dtype=int)
        self._switch_status = np.zeros(4, dtype=int)
        self._status_past = WaveStatus.SWING_ALL

    @property
    def t_stance(self):
        """Duration of the stance part of a cycle."""
        return self._period * self._st_ratio

    @property
    def t_swing(self):
        """Duration of the swing part of a cycle."""
        return self._period * (1 - self._st_ratio)

    @property
    def period(self):
        """Duration of one gait cycle."""
        return self._period

    def _calc_wave(self, phase, contact, status):
        if status is WaveStatus.WAVE_ALL:
            pass_t = self._clock() - self._start_t
            for i, bias in enumerate(self._bias):
                normal_t = math.fmod(pass_t + self._period - self._period * bias,
                                     self._period) / self._period
                if normal_t < self._st_ratio:
                    contact[i] = 1
                    phase[i] = normal_t / self._st_ratio
                else:
                    contact[i] = 0
                    phase[i] = (normal_t - self._st_ratio) / (1 - self._st_ratio)
        elif status is WaveStatus.SWING_ALL:
            contact[:] = 0
            phase[:] = 0.5
        elif status is WaveStatus.STANCE_ALL:
            contact[:] = 1
            phase[:] = 0.5

    def calc_contact_phase(self, status):
        """Return ``(phase, contact)`` for the requested status.

        On a change of status each leg keeps its previous schedule until the
        new one agrees with it, so no leg switches contact abruptly.
        """
        self._calc_wave(self._phase, self._contact, status)

        if status is not self._status_past:
            if self._switch_status.sum() == 0:
                self._switch_status[:] = 1
            self._calc_wave(self._phase_past, self._contact_past, self._status_past)
            if status is WaveStatus.STANCE_ALL and self._status_past is WaveStatus.SWING_ALL:
                self._contact_past[:] = 1
            elif status is WaveStatus.SWING_ALL and self._status_past is WaveStatus.STANCE_ALL:
                self._contact_past[:] = 0

        if self._switch_status.sum() != 0:
            same = self._contact == self._contact_past
            self._switch_status[same] = 0
            self._contact[~same] = self._contact_past[~same]
            self._phase[~same] = self._phase_past[~same]
            if self._switch_status.sum() == 0:
                self._status_past = status

        return self._phase.copy(), self._contact.copy()