"""
Frame clock for the oscillator host loop.
Tracks the frame delta, a smoothed delta and the time since scene load.
"""

import logging

logger = logging.getLogger(__name__)


class FrameClock:
    """Host time source advanced once per frame."""

    def __init__(self, smoothing: float = 0.2):
        """
        Initialize the clock.

        Args:
            smoothing: Weight of the newest delta in the smoothed delta, in (0, 1].
                       1.0 disables smoothing.
        """
        if not 0.0 < smoothing <= 1.0:
            raise ValueError(f"smoothing must be in (0, 1], got {smoothing}")
        self.smoothing = smoothing
        self.reset()

    def reset(self):
        """Restart the clock as if the scene had just loaded."""
        self.frame_count = 0
        self.delta_time = 0.0
        self.smooth_delta_time = 0.0
        self.time_since_load = 0.0

    def tick(self, delta_time: float) -> float:
        """
        Advance the clock by one frame.

        Args:
            delta_time: Elapsed time of this frame in seconds

        Returns:
            The smoothed delta time for this frame
        """
        if delta_time < 0:
            raise ValueError(f"delta_time must be non-negative, got {delta_time}")

        self.frame_count += 1
        self.delta_time = float(delta_time)
        if self.frame_count == 1:
            self.smooth_delta_time = self.delta_time
        else:
            self.smooth_delta_time += self.smoothing * (self.delta_time - self.smooth_delta_time)
        self.time_since_load += self.delta_time
        return self.smooth_delta_time
