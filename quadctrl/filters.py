"""First-order low-pass filter."""

from __future__ import annotations

import math


class LowPassFilter:
    """Exponential smoothing tuned by sample period and cut-off frequency."""

    def __init__(self, sample_period, cut_frequency):
        self._weight = 1.0 / (1.0 + 1.0 / (2.0 * math.pi * sample_period * cut_frequency))
        self._started = False
        self._past_value = 0.0

    def add_value(self, value):
        """Feed a new sample; the first sample after a clear is taken as it is."""
        if not self._started:
            self._started = True
            self._past_value = value
        self._past_value = self._weight * value + (1 - self._weight) * self._past_value

    @property
    def value(self):
        """The current filtered value."""
        return self._past_value

    def clear(self):
        """Restart the filter so that the next sample is taken as it is."""
        self._started = False