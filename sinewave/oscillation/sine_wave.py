"""
Sine wave oscillator.
Drives the position, rotation or scale of a transform with independent
cosine/sine/cosine waves on the X/Y/Z axes.
"""

import logging
import weakref
import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from sinewave.core.common_types import Vector3D
from sinewave.config.config_schemas import OscillatorConfig, CHANNELS
from sinewave.models.scene_definitions import Transform
from sinewave.utils.geometry_utils import as_vector3
from .channels import CHANNEL_REGISTRY

logger = logging.getLogger(__name__)

# Randomized phase is drawn from [0, RANDOM_PHASE_SCALE * |frequency|)
RANDOM_PHASE_SCALE = 2.0 * 1000.0


@dataclass
class RuntimePhase:
    """
    Mutable per-instance oscillator state.

    Attributes:
        index: Current phase per axis (seconds, or global clock units).
        last_amplitude: Amplitude seen at the last change check.
        last_frequency: Frequency seen at the last change check.
    """
    index: Vector3D = field(default_factory=lambda: np.zeros(3))
    last_amplitude: Vector3D = field(default_factory=lambda: np.zeros(3))
    last_frequency: Vector3D = field(default_factory=lambda: np.zeros(3))


def _axis_contribution(amplitude: float, frequency: float, phase: float,
                       bounce: bool, wave) -> float:
    # zero amplitude or frequency disables the axis entirely
    if amplitude == 0.0 or frequency == 0.0:
        return 0.0
    raw = amplitude * wave(frequency * phase)
    if not bounce:
        return raw
    # rectified: sign follows the authored amplitude
    return abs(raw) if amplitude >= 0 else -abs(raw)


def evaluate_waveform(config: OscillatorConfig,
                      index: Vector3D,
                      base_position: Optional[Vector3D] = None) -> Vector3D:
    """
    Evaluate the oscillator output for a given phase.

    X and Z follow a cosine, Y follows a sine. In uniform mode Y and Z
    copy the final X value instead of being computed.

    Args:
        config: Oscillator settings
        index: Phase per axis
        base_position: Center value; defaults to config.base_position

    Returns:
        Output vector (base value plus per-axis contribution)
    """
    if base_position is None:
        base_position = config.base_position
    pos = as_vector3(base_position, "base_position")
    amplitude = np.asarray(config.amplitude, dtype=float)
    frequency = np.asarray(config.frequency, dtype=float)
    phase = np.asarray(index, dtype=float) + np.asarray(config.phase_offset, dtype=float)
    bounce = config.bounce

    pos[0] += _axis_contribution(amplitude[0], frequency[0], phase[0], bounce[0], np.cos)

    if config.uniform:
        pos[1] = pos[0]
        pos[2] = pos[0]
    else:
        pos[1] += _axis_contribution(amplitude[1], frequency[1], phase[1], bounce[1], np.sin)
        pos[2] += _axis_contribution(amplitude[2], frequency[2], phase[2], bounce[2], np.cos)

    return pos


class SineWave:
    """
    Per-frame oscillator attached to a host transform.

    The oscillator runs in one of two phase modes, fixed by
    config.use_global_clock: independent phase (each axis accumulates the
    frame delta and may be randomized) or global-clock phase (all axes
    follow the clock value passed to advance()).
    """

    def __init__(self,
                 config: OscillatorConfig,
                 host: Transform,
                 target_override: Optional[Transform] = None,
                 rng: Optional[np.random.Generator] = None,
                 name: str = "sine_wave"):
        """
        Initialize the oscillator.

        Args:
            config: Oscillator settings (may be edited live)
            host: Transform of the object the oscillator belongs to
            target_override: Optional transform to drive instead of the host,
                             held by weak reference
            rng: Random source used by randomize()
            name: Name used in log messages
        """
        self.config = config
        self.name = name
        self.host = host
        self.rng = rng if rng is not None else np.random.default_rng()
        self.phase = RuntimePhase()

        self._override_ref = None
        self._warned_dead_override = False
        self.target_override = target_override

        if len(config.affects) > 1:
            logger.warning(f"{name}: driving {config.affects} from one oscillator, "
                           f"every channel receives the same vector")

    @property
    def base_position(self) -> Vector3D:
        """Center value, read from and written to config.base_position."""
        return as_vector3(self.config.base_position, f"{self.name}.base_position")

    @base_position.setter
    def base_position(self, value: Vector3D):
        self.config.base_position = as_vector3(value, f"{self.name}.base_position").tolist()

    @property
    def target_override(self) -> Optional[Transform]:
        if self._override_ref is None:
            return None
        return self._override_ref()

    @target_override.setter
    def target_override(self, transform: Optional[Transform]):
        self._override_ref = weakref.ref(transform) if transform is not None else None
        self._warned_dead_override = False

    @property
    def target(self) -> Transform:
        """Transform written by this oscillator: the override if alive, else the host."""
        if self._override_ref is None:
            return self.host
        override = self._override_ref()
        if override is None:
            if not self._warned_dead_override:
                logger.warning(f"{self.name}: override target no longer exists, driving host instead")
                self._warned_dead_override = True
            return self.host
        return override

    def _enabled_channels(self):
        return [CHANNEL_REGISTRY[channel] for channel in CHANNELS if channel in self.config.affects]

    def start(self):
        """Capture the base value from the target and apply start randomization."""
        if self.config.use_start_value_as_base:
            channels = self._enabled_channels()
            if channels:
                # only the highest priority channel is read
                self.base_position = channels[0].read(self.target, self.config.use_local_space)
                logger.debug(f"{self.name}: base captured from {channels[0].name}: {self.base_position}")

        if self.config.randomize_on_start:
            self.update_if_changed(force=True)

    def randomize(self):
        """Re-draw the phase of every axis, unless the global clock drives it."""
        if self.config.use_global_clock:
            return
        frequency = np.asarray(self.config.frequency, dtype=float)
        upper = np.abs(frequency * RANDOM_PHASE_SCALE)
        self.phase.index = np.array([self.rng.uniform(0.0, high) for high in upper])
        logger.debug(f"{self.name}: randomized phase to {self.phase.index}")

    def update_if_changed(self, force: bool = False) -> bool:
        """
        Randomize if amplitude or frequency changed since the last check.

        The last-seen values are refreshed on every call.

        Args:
            force: Randomize regardless of changes

        Returns:
            True if randomize() was called
        """
        amplitude = np.array(self.config.amplitude, dtype=float)
        frequency = np.array(self.config.frequency, dtype=float)
        changed = (not np.array_equal(amplitude, self.phase.last_amplitude)
                   or not np.array_equal(frequency, self.phase.last_frequency))

        if changed or force:
            self.randomize()

        self.phase.last_amplitude = amplitude
        self.phase.last_frequency = frequency
        return changed or force

    def evaluate(self) -> Vector3D:
        """Output for the current phase, without touching the target."""
        return evaluate_waveform(self.config, self.phase.index)

    def apply(self, value: Vector3D):
        """Write a vector to every enabled channel of the target."""
        target = self.target
        for channel in self._enabled_channels():
            channel.write(target, value, self.config.use_local_space)

    def advance(self,
                delta_time: float,
                global_clock: float = 0.0,
                paused: bool = False) -> Optional[Vector3D]:
        """
        Advance the phase by one frame and write the result to the target.

        Args:
            delta_time: Elapsed frame time
            global_clock: Shared clock value, used in global-clock mode
            paused: Host pause state

        Returns:
            The vector written, or None if the frame was skipped for pause
        """
        if paused and not self.config.ignore_pause:
            return None

        if self.config.use_global_clock:
            self.phase.index = np.full(3, float(global_clock))
        else:
            if self.config.randomize_on_change:
                self.update_if_changed()
            self.phase.index = self.phase.index + float(delta_time)

        pos = self.evaluate()
        self.apply(pos)
        return pos
