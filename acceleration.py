"""
Slack Pendulum: Acceleration Samples
====================================
Two-slot ring buffer holding the accelerations at both ends of the current
Verlet interval.
"""

import numpy as np


class AccelerationPair:
    """
    Previous and newest acceleration of the bob.

    Samples live in a fixed (2, 2) array; ``_head`` indexes the newest row.
    ``rotate()`` flips the head, so the newest sample becomes the previous
    one and the next ``newest = ...`` overwrites the oldest row.
    """

    def __init__(self):
        self._samples = np.zeros((2, 2))
        self._head = 1

    def rotate(self):
        """Make the newest sample the previous one."""
        self._head ^= 1

    @property
    def newest(self) -> np.ndarray:
        return self._samples[self._head]

    @newest.setter
    def newest(self, value):
        self._samples[self._head] = value

    @property
    def previous(self) -> np.ndarray:
        return self._samples[self._head ^ 1]

    def mean(self) -> np.ndarray:
        """Average of both samples (trapezoidal rule)."""
        return self._samples.mean(axis=0)

    def copy(self) -> "AccelerationPair":
        other = AccelerationPair()
        other._samples = self._samples.copy()
        other._head = self._head
        return other
